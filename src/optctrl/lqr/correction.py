# src/optctrl/lqr/correction.py
from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from optctrl.config import IntegratorOptions
from optctrl.errors import ShapeMismatchError
from optctrl.models.sampled import SampledMatrixFunction
from optctrl.utils.integrate import backward_integrate
from optctrl.utils.linalg import symmetrize

logger = logging.getLogger(__name__)


def solve_correction_backward(
    B: np.ndarray,
    Rinv_BT: np.ndarray,
    costate: SampledMatrixFunction,
    *,
    options: Optional[IntegratorOptions] = None,
) -> SampledMatrixFunction:
    """
    Terminal-constraint correction of the fixed-final-state regulator:
        dP/dt = V(t)^T B R^{-1} B^T V(t),   P(T) = 0   (p x p)

    P(t) is negative semidefinite before T and singular at T.
    """
    options = options or IntegratorOptions()
    B = np.asarray(B, dtype=float)
    Rinv_BT = np.asarray(Rinv_BT, dtype=float)
    if costate.values.ndim != 3:
        raise ShapeMismatchError(f"costate must be (N, n, p) samples, got {costate.values.shape}")

    BRB = B @ Rinv_BT
    p = costate.sample_shape[1]

    def correction_ode(t: float, _P: np.ndarray) -> np.ndarray:
        V = costate(t)
        return V.T @ BRB @ V

    P_fwd = backward_integrate(
        correction_ode, np.zeros((p, p)), costate.t, options=options, label="correction"
    )
    if options.enforce_symmetry:
        P_fwd[:-1] = symmetrize(P_fwd[:-1])

    logger.debug("correction: P(t0) diag=%s", np.diag(P_fwd[0]))
    return SampledMatrixFunction(grid=costate.grid, values=P_fwd)


__all__ = ["solve_correction_backward"]
