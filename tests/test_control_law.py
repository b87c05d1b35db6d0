"""
Unit tests for the feedback laws assembled from K(t), V(t) and P(t).
"""
import numpy as np
import pytest

from optctrl.errors import SingularMatrixError
from optctrl.lqr.control_law import RegulatorLaw, TerminalConstraintLaw, TrackingLaw
from optctrl.lqr.gain import FeedbackGain
from optctrl.models.sampled import SampledMatrixFunction, SampledVectorFunction
from optctrl.models.system import TimeGrid


@pytest.fixture
def grid(make_time_vec):
    t = make_time_vec(0.0, 1.0, 0.1)
    return TimeGrid(t=t, start=0.0, end=1.0, step=0.1)


def _const(grid, value):
    value = np.asarray(value, dtype=float)
    values = np.tile(value, (grid.N,) + (1,) * value.ndim)
    if value.ndim == 1:
        return SampledVectorFunction(grid=grid, values=values)
    return SampledMatrixFunction(grid=grid, values=values)


@pytest.fixture
def gain(grid):
    return FeedbackGain(np.ones((1, 1)), _const(grid, [[3.0]]))


class TestRegulatorAndTracker:
    def test_regulator(self, gain):
        np.testing.assert_allclose(RegulatorLaw(gain)(0.25, np.array([2.0])), [-6.0])

    def test_tracker_adds_feedforward(self, grid, gain):
        law = TrackingLaw(gain, _const(grid, [4.0]))
        np.testing.assert_allclose(law(0.5, np.array([1.0])), [1.0])


class TestTerminalConstraintLaw:
    def test_scalar_integrator_law(self, grid):
        """K = 0, V = 1, P = t - T: u = (target - x) / (T - t)."""
        zero = FeedbackGain(np.ones((1, 1)), _const(grid, [[0.0]]))
        V = _const(grid, [[1.0]])
        P = SampledMatrixFunction(grid=grid, values=(grid.t - grid.end)[:, None, None])
        law = TerminalConstraintLaw(zero, V, P, target=np.array([2.0]))

        t, x = 0.4, np.array([0.5])
        np.testing.assert_allclose(law(t, x), [(2.0 - 0.5) / (1.0 - t)])

    def test_drops_correction_at_end(self, grid, gain):
        V = _const(grid, [[1.0]])
        P = SampledMatrixFunction(grid=grid, values=(grid.t - grid.end)[:, None, None])
        law = TerminalConstraintLaw(gain, V, P, target=np.array([1.0]))
        np.testing.assert_allclose(law(1.0, np.array([2.0])), [-6.0])

    def test_singular_before_end_raises(self, grid, gain):
        law = TerminalConstraintLaw(
            gain, _const(grid, [[1.0]]), _const(grid, [[0.0]]), target=np.array([0.0])
        )
        with pytest.raises(SingularMatrixError):
            law(0.5, np.array([1.0]))
