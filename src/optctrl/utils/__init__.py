from .flatten import flatten, unflatten, unflatten_samples
from .integrate import backward_integrate, integrate_on_grid
from .interpolate import PiecewiseLinearInterpolant
from .linalg import inverse_check_cond, is_symmetric, rinv_bt, symmetrize
from .metrics import output_residual

__all__ = [
    "flatten",
    "unflatten",
    "unflatten_samples",
    "backward_integrate",
    "integrate_on_grid",
    "PiecewiseLinearInterpolant",
    "inverse_check_cond",
    "is_symmetric",
    "rinv_bt",
    "symmetrize",
    "output_residual",
]
