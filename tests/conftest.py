import numpy as np
import pytest

from optctrl import ControlParameters, IntegratorOptions, SystemDescriptor


def make_time_vec(start: float, end: float, h: float) -> np.ndarray:
    """Uniform grid start, start+h, ..., end."""
    N = int(round((end - start) / h)) + 1
    return start + h * np.arange(N)


def make_params(control_type, *, end, h, x0, start=0.0, **kwargs) -> ControlParameters:
    return ControlParameters(
        control_type=control_type,
        h=h,
        start_time=start,
        end_time=end,
        time_vec=make_time_vec(start, end, h),
        init_state=x0,
        **kwargs,
    )


@pytest.fixture
def tight_options():
    """Tolerances tight enough for 1e-6 comparisons against closed forms."""
    return IntegratorOptions(rtol=1e-10, atol=1e-12)


@pytest.fixture
def double_integrator():
    A = np.array([[0.0, 1.0], [0.0, 0.0]])
    B = np.array([[0.0], [1.0]])
    return A, B


@pytest.fixture
def scalar_integrator_lqr():
    """x' = u, no running state cost, terminal target x(T) = 2."""
    return SystemDescriptor(
        A=[[0.0]],
        B=[[1.0]],
        C=[[1.0]],
        Q=[[0.0]],
        R=[[1.0]],
        ST=[[0.0]],
        r=lambda t: np.array([2.0]),
    )


@pytest.fixture
def scalar_tracker():
    """x' = u tracking r = 1 with a heavy output weight."""
    return SystemDescriptor(
        A=[[0.0]],
        B=[[1.0]],
        C=[[1.0]],
        Q=[[100.0]],
        R=[[1.0]],
        P=[[0.0]],
        r=lambda t: np.array([1.0]),
    )


@pytest.fixture(name="make_params")
def make_params_fixture():
    return make_params


@pytest.fixture(name="make_time_vec")
def make_time_vec_fixture():
    return make_time_vec
