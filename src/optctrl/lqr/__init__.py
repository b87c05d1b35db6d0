from .control_law import RegulatorLaw, TerminalConstraintLaw, TrackingLaw
from .correction import solve_correction_backward
from .costate import solve_costate_backward, tracking_forcing
from .gain import FeedbackGain
from .riccati import riccati_weights, solve_riccati_backward
from .simulate import simulate_closed_loop
from .solver import OptimalControlSolver, Stage, solve_optimal_control

__all__ = [
    "RegulatorLaw",
    "TerminalConstraintLaw",
    "TrackingLaw",
    "solve_correction_backward",
    "solve_costate_backward",
    "tracking_forcing",
    "FeedbackGain",
    "riccati_weights",
    "solve_riccati_backward",
    "simulate_closed_loop",
    "OptimalControlSolver",
    "Stage",
    "solve_optimal_control",
]
