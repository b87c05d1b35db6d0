from .sampled import SampledFunction, SampledMatrixFunction, SampledVectorFunction
from .system import (
    ControlParameters,
    ControlType,
    Reference,
    SystemDescriptor,
    TimeGrid,
    check_control_type,
)
from .trajectory import Trajectory

__all__ = [
    "SampledFunction",
    "SampledMatrixFunction",
    "SampledVectorFunction",
    "ControlParameters",
    "ControlType",
    "Reference",
    "SystemDescriptor",
    "TimeGrid",
    "check_control_type",
    "Trajectory",
]
