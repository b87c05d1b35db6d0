"""
optctrl: finite-horizon continuous-time LQR / LQT trajectories.

    from optctrl import SystemDescriptor, ControlParameters, solve_optimal_control
    traj = solve_optimal_control(system, params)
    traj.time, traj.states
"""
import logging

from .config import IntegratorOptions
from .errors import (
    IndexOutOfRangeError,
    IntegrationError,
    InvalidTimeDomainError,
    OptimalControlError,
    ShapeMismatchError,
    SingularMatrixError,
    UnsupportedControlTypeError,
)
from .lqr.solver import OptimalControlSolver, Stage, solve_optimal_control
from .models import ControlParameters, SystemDescriptor, Trajectory

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "IntegratorOptions",
    "IndexOutOfRangeError",
    "IntegrationError",
    "InvalidTimeDomainError",
    "OptimalControlError",
    "ShapeMismatchError",
    "SingularMatrixError",
    "UnsupportedControlTypeError",
    "OptimalControlSolver",
    "Stage",
    "solve_optimal_control",
    "ControlParameters",
    "SystemDescriptor",
    "Trajectory",
]
