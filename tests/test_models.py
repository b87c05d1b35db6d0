"""
Unit tests for SystemDescriptor / ControlParameters validation and the
Trajectory container.
"""
import logging

import numpy as np
import pytest

from optctrl import (
    ControlParameters,
    InvalidTimeDomainError,
    ShapeMismatchError,
    SingularMatrixError,
    SystemDescriptor,
    Trajectory,
    UnsupportedControlTypeError,
)
from optctrl.models.sampled import SampledMatrixFunction, SampledVectorFunction
from optctrl.models.system import TimeGrid


def _lqt_system(**overrides):
    kwargs = dict(
        A=np.zeros((2, 2)),
        B=[[0.0], [1.0]],
        C=[[1.0, 0.0]],
        Q=[[1.0]],
        R=[[1.0]],
        P=[[1.0]],
        r=lambda t: [0.0],
    )
    kwargs.update(overrides)
    return SystemDescriptor(**kwargs)


class TestSystemDescriptor:
    def test_dimensions_and_default_D(self):
        sys_ = _lqt_system()
        assert (sys_.n_states, sys_.n_inputs, sys_.n_outputs) == (2, 1, 1)
        np.testing.assert_array_equal(sys_.D, np.zeros((1, 1)))

    def test_scalars_become_matrices(self):
        sys_ = SystemDescriptor(A=0.0, B=1.0, C=1.0, Q=1.0, R=2.0, ST=0.0)
        assert sys_.A.shape == (1, 1)
        sys_.validate("LQR")

    def test_valid_lqt(self):
        assert _lqt_system().validate("LQT") is not None

    def test_reference_default_zero(self):
        sys_ = SystemDescriptor(A=0.0, B=1.0, C=[[1.0], [2.0]], Q=1.0, R=1.0, ST=0.0)
        np.testing.assert_array_equal(sys_.reference(0.3), np.zeros(2))

    def test_reference_wrong_length(self):
        sys_ = _lqt_system(r=lambda t: [1.0, 2.0])
        with pytest.raises(ShapeMismatchError):
            sys_.reference(0.0)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"B": [[1.0]]},
            {"C": [[1.0, 0.0, 0.0]]},
            {"D": np.zeros((2, 1))},
            {"Q": np.eye(2)},
            {"R": np.eye(2)},
            {"P": np.eye(2)},
            {"P": None},
            {"r": None},
        ],
    )
    def test_lqt_shape_mismatch(self, overrides):
        with pytest.raises(ShapeMismatchError):
            _lqt_system(**overrides).validate("LQT")

    def test_lqr_requires_ST(self):
        with pytest.raises(ShapeMismatchError):
            _lqt_system(Q=np.eye(2)).validate("LQR")

    def test_lqr_state_weight(self):
        with pytest.raises(ShapeMismatchError):
            _lqt_system(ST=np.eye(2)).validate("LQR")

    def test_singular_R(self):
        with pytest.raises(SingularMatrixError):
            _lqt_system(R=[[0.0]]).validate("LQT")

    def test_unknown_control_type(self):
        with pytest.raises(UnsupportedControlTypeError):
            _lqt_system().validate("MPC")

    def test_warns_on_non_symmetric_P(self, caplog):
        sys_ = _lqt_system(
            C=np.eye(2), Q=np.eye(2), P=[[1.0, 2.0], [0.0, 1.0]], r=lambda t: [0.0, 0.0]
        )
        with caplog.at_level(logging.WARNING, logger="optctrl"):
            sys_.validate("LQT")
        assert "terminal weight P is not symmetric" in caplog.text

    def test_warns_on_non_symmetric_ST(self, caplog):
        sys_ = _lqt_system(Q=np.eye(2), ST=[[1.0, 0.5], [0.0, 1.0]])
        with caplog.at_level(logging.WARNING, logger="optctrl"):
            sys_.validate("LQR")
        assert "terminal value ST is not symmetric" in caplog.text

    def test_symmetric_weights_do_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="optctrl"):
            _lqt_system().validate("LQT")
        assert not caplog.records

    def test_warns_on_ill_conditioned_R(self, caplog):
        """cond(R) = 1e8 is invertible but above the warning threshold."""
        sys_ = _lqt_system(B=[[1.0, 0.0], [0.0, 1.0]], D=np.zeros((1, 2)), R=np.diag([1.0, 1e-8]))
        with caplog.at_level(logging.WARNING, logger="optctrl"):
            sys_.validate("LQT")
        assert "R ill-conditioned" in caplog.text


class TestControlParameters:
    def _params(self, **overrides):
        kwargs = dict(
            control_type="LQT",
            h=0.1,
            start_time=0.0,
            end_time=1.0,
            time_vec=np.linspace(0.0, 1.0, 11),
            init_state=[0.0, 0.0],
        )
        kwargs.update(overrides)
        return ControlParameters(**kwargs)

    def test_grid(self):
        grid = self._params().grid()
        assert grid.N == 11
        assert grid.step == 0.1
        assert (grid.start, grid.end) == (0.0, 1.0)

    def test_offset_start(self):
        grid = self._params(start_time=2.0, end_time=3.0, time_vec=2.0 + 0.1 * np.arange(11)).grid()
        assert grid.t[0] == 2.0

    def test_single_sample(self):
        grid = self._params(end_time=0.0, time_vec=[0.0]).grid()
        assert grid.N == 1

    @pytest.mark.parametrize(
        "overrides",
        [
            {"h": 0.0},
            {"h": -0.1},
            {"start_time": -0.1, "time_vec": -0.1 + 0.1 * np.arange(12)},
            {"end_time": -1.0},
            {"time_vec": np.linspace(1.0, 0.0, 11)},
            {"time_vec": np.linspace(0.0, 1.0, 12)},
            {"time_vec": np.linspace(0.0, 1.0, 11) + 0.01},
            {"time_vec": np.r_[0.0, 0.15, np.linspace(0.2, 1.0, 9)]},
            {"time_vec": []},
        ],
    )
    def test_invalid_time_domain(self, overrides):
        with pytest.raises(InvalidTimeDomainError):
            self._params(**overrides).grid()

    def test_init_state_length(self):
        with pytest.raises(ShapeMismatchError):
            self._params(init_state=[0.0]).validate(_lqt_system())

    def test_arrays_are_read_only_copies(self):
        t = np.linspace(0.0, 1.0, 11)
        x0 = np.array([1.0, 2.0])
        params = self._params(time_vec=t, init_state=x0)
        t[3] = 99.0
        x0[0] = -1.0
        assert params.time_vec[3] == pytest.approx(0.3)
        assert params.init_state[0] == 1.0
        with pytest.raises(ValueError):
            params.time_vec[0] = 5.0
        with pytest.raises(ValueError):
            params.init_state[0] = 5.0


class TestSampledFunctions:
    def test_alignment_checked(self):
        grid = TimeGrid(t=np.array([0.0, 0.5, 1.0]), start=0.0, end=1.0, step=0.5)
        with pytest.raises(ShapeMismatchError):
            SampledVectorFunction(grid=grid, values=np.zeros((2, 1)))

    def test_rank_checked(self):
        grid = TimeGrid(t=np.array([0.0, 0.5, 1.0]), start=0.0, end=1.0, step=0.5)
        with pytest.raises(ShapeMismatchError):
            SampledMatrixFunction(grid=grid, values=np.zeros((3, 2)))

    def test_samples_are_read_only_copies(self):
        grid = TimeGrid(t=np.array([0.0, 1.0]), start=0.0, end=1.0, step=1.0)
        raw = np.zeros((2, 1))
        V = SampledVectorFunction(grid=grid, values=raw)
        raw[0, 0] = 5.0
        assert V.node(0)[0] == 0.0
        with pytest.raises(ValueError):
            V.values[0, 0] = 1.0


class TestTrajectory:
    def _traj(self):
        return Trajectory(
            method="LQT",
            time=[0.0, 1.0],
            states=np.zeros((2, 2)),
            controls=np.zeros((2, 1)),
            outputs=np.zeros((2, 1)),
            meta={"k": 1},
        )

    def test_immutable(self):
        traj = self._traj()
        with pytest.raises(ValueError):
            traj.states[0, 0] = 1.0
        with pytest.raises(TypeError):
            traj.meta["k"] = 2

    def test_as_tuple(self):
        time, states = self._traj().as_tuple()
        assert time.shape == (2,)
        assert states.shape == (2, 2)

    def test_row_count_checked(self):
        with pytest.raises(ShapeMismatchError):
            Trajectory(
                method="LQR", time=[0.0, 1.0], states=np.zeros((3, 1)),
                controls=np.zeros((2, 1)), outputs=np.zeros((2, 1)),
            )
