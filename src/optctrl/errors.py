# src/optctrl/errors.py
from __future__ import annotations

import numpy as np


class OptimalControlError(Exception):
    """Base class for every failure raised while solving."""


class ShapeMismatchError(OptimalControlError, ValueError):
    """Matrix/vector dimensions are inconsistent with each other."""


class SingularMatrixError(OptimalControlError, np.linalg.LinAlgError):
    """R, or the terminal correction P(t), cannot be inverted."""


class UnsupportedControlTypeError(OptimalControlError, ValueError):
    pass


class InvalidTimeDomainError(OptimalControlError, ValueError):
    """Time samples are negative, unordered or not aligned to the step h."""


class IndexOutOfRangeError(OptimalControlError, IndexError):
    """A sampled function was queried outside its time span."""


class IntegrationError(OptimalControlError, RuntimeError):
    pass


__all__ = [
    "OptimalControlError",
    "ShapeMismatchError",
    "SingularMatrixError",
    "UnsupportedControlTypeError",
    "InvalidTimeDomainError",
    "IndexOutOfRangeError",
    "IntegrationError",
]
