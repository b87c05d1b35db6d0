# src/optctrl/lqr/costate.py
from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np

from optctrl.config import IntegratorOptions
from optctrl.errors import ShapeMismatchError
from optctrl.lqr.gain import FeedbackGain
from optctrl.models.sampled import SampledFunction, SampledMatrixFunction, SampledVectorFunction
from optctrl.utils.integrate import backward_integrate

logger = logging.getLogger(__name__)


def solve_costate_backward(
    A: np.ndarray,
    B: np.ndarray,
    gain: FeedbackGain,
    *,
    terminal: np.ndarray,
    forcing: Optional[Callable[[float], np.ndarray]] = None,
    options: Optional[IntegratorOptions] = None,
) -> SampledFunction:
    """
    Costate of the closed loop A_cl(t) = A - B K(t):
        -dV/dt = A_cl(t)^T V + w(t),   V(T) = terminal

    forcing w(t) is C^T Q r(t) for the tracker and absent for the regulator.
    terminal is a (n,) vector (tracker) or an (n, p) matrix (regulator, C^T);
    the result is a SampledVectorFunction or SampledMatrixFunction accordingly.
    """
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    terminal = np.asarray(terminal, dtype=float)

    n = A.shape[0]
    if terminal.ndim not in (1, 2) or terminal.shape[0] != n:
        raise ShapeMismatchError(f"terminal must be ({n},) or ({n}, p), got {terminal.shape}")

    def costate_ode(t: float, V: np.ndarray) -> np.ndarray:
        A_cl = A - B @ gain(t)
        dV = -(A_cl.T @ V)
        if forcing is not None:
            dV = dV - forcing(t)
        return dV

    V_fwd = backward_integrate(costate_ode, terminal, gain.grid.t, options=options, label="costate")

    if terminal.ndim == 1:
        return SampledVectorFunction(grid=gain.grid, values=V_fwd)
    return SampledMatrixFunction(grid=gain.grid, values=V_fwd)


def tracking_forcing(C: np.ndarray, Q: np.ndarray, reference: Callable[[float], np.ndarray]):
    """t -> C^T Q r(t)"""
    CtQ = np.asarray(C, dtype=float).T @ np.asarray(Q, dtype=float)

    def w(t: float) -> np.ndarray:
        return CtQ @ reference(t)

    return w


__all__ = ["solve_costate_backward", "tracking_forcing"]
