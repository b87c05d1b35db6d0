# src/optctrl/lqr/riccati.py
from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from optctrl.config import IntegratorOptions
from optctrl.errors import ShapeMismatchError
from optctrl.models.sampled import SampledMatrixFunction
from optctrl.models.system import SystemDescriptor, TimeGrid, check_control_type
from optctrl.utils.integrate import backward_integrate
from optctrl.utils.linalg import rinv_bt, symmetrize

logger = logging.getLogger(__name__)


def riccati_weights(system: SystemDescriptor, control_type: str) -> Tuple[np.ndarray, np.ndarray]:
    """
    State weight Phi and terminal value S(T) of the Riccati equation:
        LQT: Phi = C^T Q C,  S(T) = C^T P C
        LQR: Phi = Q,        S(T) = ST
    """
    C = system.C
    if check_control_type(control_type) == "LQT":
        return C.T @ system.Q @ C, C.T @ system.P @ C
    return system.Q, system.ST


def solve_riccati_backward(
    A: np.ndarray,
    B: np.ndarray,
    Phi: np.ndarray,
    R: np.ndarray,
    *,
    terminal: np.ndarray,
    grid: TimeGrid,
    Rinv_BT: Optional[np.ndarray] = None,
    options: Optional[IntegratorOptions] = None,
) -> SampledMatrixFunction:
    """
    Continuous-time finite-horizon Riccati differential equation:
        -dS/dt = A^T S + S A - S B R^{-1} B^T S + Phi
        S(T) = terminal

    Returns S(t) sampled on grid.t (ascending). S(T) is the terminal value
    exactly; interior samples are symmetrized when options.enforce_symmetry.
    """
    options = options or IntegratorOptions()
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    Phi = np.asarray(Phi, dtype=float)
    terminal = np.asarray(terminal, dtype=float)

    n = A.shape[0]
    for name, M in (("A", A), ("Phi", Phi), ("terminal", terminal)):
        if M.shape != (n, n):
            raise ShapeMismatchError(f"{name} must be {(n, n)}, got {M.shape}")

    if Rinv_BT is None:
        Rinv_BT = rinv_bt(B, R)
    BRB = B @ Rinv_BT  # B R^{-1} B^T, (n, n)

    def riccati_ode(_t: float, S: np.ndarray) -> np.ndarray:
        return -(A.T @ S + S @ A - S @ BRB @ S + Phi)

    S_fwd = backward_integrate(riccati_ode, terminal, grid.t, options=options, label="riccati")

    if options.enforce_symmetry:
        S_fwd[:-1] = symmetrize(S_fwd[:-1])

    logger.debug("riccati: S(t0) trace=%.6g", float(np.trace(S_fwd[0])))
    return SampledMatrixFunction(grid=grid, values=S_fwd)


__all__ = ["riccati_weights", "solve_riccati_backward"]
