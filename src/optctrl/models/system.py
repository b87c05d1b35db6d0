# src/optctrl/models/system.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

import numpy as np

from optctrl.config import CONTROL_TYPES, NODE_TOL
from optctrl.errors import (
    InvalidTimeDomainError,
    ShapeMismatchError,
    UnsupportedControlTypeError,
)
from optctrl.utils.linalg import inverse_check_cond, is_symmetric

logger = logging.getLogger(__name__)

ControlType = Literal["LQR", "LQT"]
Reference = Callable[[float], np.ndarray]


def _as_matrix(M, name: str) -> np.ndarray:
    M = np.asarray(M, dtype=float)
    if M.ndim == 0:
        M = M.reshape(1, 1)
    if M.ndim != 2:
        raise ShapeMismatchError(f"{name} must be 2D, got shape {M.shape}")
    return M


def _check_shape(M: np.ndarray, shape, name: str) -> None:
    if M.shape != tuple(shape):
        raise ShapeMismatchError(f"{name} must be {tuple(shape)}, got {M.shape}")


def check_control_type(control_type: str) -> ControlType:
    if control_type not in CONTROL_TYPES:
        raise UnsupportedControlTypeError(
            f"Unsupported control type {control_type!r}. Expected one of {CONTROL_TYPES}."
        )
    return control_type


@dataclass(frozen=True)
class SystemDescriptor:
    """
    Continuous-time LTI plant with quadratic cost:
        x' = A x + B u,   y = C x + D u

    LQT uses Q (p x p), the terminal weight P (p x p) and the reference r(t).
    LQR uses Q (n x n), the terminal Riccati value ST (n x n) and, optionally,
    r to define the terminal target r(end_time) (zero when omitted).
    """
    A: np.ndarray
    B: np.ndarray
    C: np.ndarray
    Q: np.ndarray
    R: np.ndarray
    D: Optional[np.ndarray] = None
    P: Optional[np.ndarray] = None
    r: Optional[Reference] = None
    ST: Optional[np.ndarray] = None

    def __post_init__(self):
        for name in ("A", "B", "C", "Q", "R"):
            object.__setattr__(self, name, _as_matrix(getattr(self, name), name))
        for name in ("D", "P", "ST"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, _as_matrix(value, name))
        if self.D is None:
            object.__setattr__(self, "D", np.zeros((self.C.shape[0], self.B.shape[1])))

    @property
    def n_states(self) -> int:
        return int(self.A.shape[0])

    @property
    def n_inputs(self) -> int:
        return int(self.B.shape[1])

    @property
    def n_outputs(self) -> int:
        return int(self.C.shape[0])

    def reference(self, t: float) -> np.ndarray:
        """r(t) as a (p,) vector; zeros when no reference is given."""
        p = self.n_outputs
        if self.r is None:
            return np.zeros(p)
        rt = np.asarray(self.r(t), dtype=float).reshape(-1)
        if rt.shape != (p,):
            raise ShapeMismatchError(f"r(t) must have shape {(p,)}, got {rt.shape}")
        return rt

    def validate(self, control_type: str) -> "SystemDescriptor":
        control_type = check_control_type(control_type)
        n, m, p = self.n_states, self.n_inputs, self.n_outputs

        _check_shape(self.A, (n, n), "A")
        if self.B.shape[0] != n:
            raise ShapeMismatchError(f"B must have {n} rows, got {self.B.shape}")
        if self.C.shape[1] != n:
            raise ShapeMismatchError(f"C must have {n} columns, got {self.C.shape}")
        _check_shape(self.D, (p, m), "D")
        _check_shape(self.R, (m, m), "R")
        inverse_check_cond(self.R, "R")

        if control_type == "LQT":
            _check_shape(self.Q, (p, p), "Q")
            if self.P is None:
                raise ShapeMismatchError("LQT requires the terminal weight P (p x p)")
            _check_shape(self.P, (p, p), "P")
            if self.r is None:
                raise ShapeMismatchError("LQT requires a reference function r(t)")
            if not is_symmetric(self.P):
                logger.warning("terminal weight P is not symmetric")
        else:
            _check_shape(self.Q, (n, n), "Q")
            if self.ST is None:
                raise ShapeMismatchError("LQR requires the terminal Riccati value ST (n x n)")
            _check_shape(self.ST, (n, n), "ST")
            if not is_symmetric(self.ST):
                logger.warning("terminal value ST is not symmetric")
        return self


@dataclass(frozen=True)
class TimeGrid:
    """Uniform ascending grid t[i] = start + i * step, i = 0..N-1."""
    t: np.ndarray
    start: float
    end: float
    step: float

    @property
    def N(self) -> int:
        return int(self.t.size)


@dataclass(frozen=True)
class ControlParameters:
    control_type: str
    h: float
    start_time: float
    end_time: float
    time_vec: np.ndarray
    init_state: np.ndarray
    terminal_constraint: bool = True  # LQR only

    def __post_init__(self):
        for name in ("time_vec", "init_state"):
            arr = np.array(getattr(self, name), dtype=float).reshape(-1)
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    def grid(self) -> TimeGrid:
        """
        Validate the time domain and return it as a TimeGrid.

        Requires h > 0, 0 <= start_time <= end_time and
        time_vec[i] == start_time + i*h for every sample, ending at end_time.
        """
        h = float(self.h)
        start, end = float(self.start_time), float(self.end_time)
        t = self.time_vec

        if not np.isfinite(h) or h <= 0:
            raise InvalidTimeDomainError(f"h must be > 0, got {self.h}")
        if not (np.isfinite(start) and np.isfinite(end)):
            raise InvalidTimeDomainError("start_time and end_time must be finite")
        if start < 0:
            raise InvalidTimeDomainError(f"start_time must be >= 0, got {start}")
        if end < start:
            raise InvalidTimeDomainError(f"end_time ({end}) must be >= start_time ({start})")
        if t.size == 0:
            raise InvalidTimeDomainError("time_vec must not be empty")
        if np.any(t < 0):
            raise InvalidTimeDomainError("time_vec must be non-negative")
        if np.any(np.diff(t) < 0):
            raise InvalidTimeDomainError("time_vec must be ascending")

        n_expected = int(round((end - start) / h)) + 1
        if t.size != n_expected:
            raise InvalidTimeDomainError(
                f"time_vec must hold {n_expected} samples from {start} to {end} with step {h}, got {t.size}"
            )
        tol = NODE_TOL * max(1.0, abs(end)) + NODE_TOL * h
        nodes = start + h * np.arange(t.size)
        if np.max(np.abs(t - nodes)) > tol or abs(nodes[-1] - end) > tol:
            raise InvalidTimeDomainError(
                "time_vec samples must be start_time + k*h and end at end_time"
            )
        return TimeGrid(t=t.copy(), start=start, end=end, step=h)

    def validate(self, system: SystemDescriptor) -> TimeGrid:
        check_control_type(self.control_type)
        grid = self.grid()
        n = system.n_states
        if self.init_state.shape != (n,):
            raise ShapeMismatchError(f"init_state must have shape {(n,)}, got {self.init_state.shape}")
        return grid


__all__ = [
    "ControlType",
    "Reference",
    "check_control_type",
    "SystemDescriptor",
    "TimeGrid",
    "ControlParameters",
]
