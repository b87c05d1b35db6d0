# src/optctrl/lqr/control_law.py
from __future__ import annotations

import numpy as np
from scipy import linalg as la

from optctrl.config import COND_LIMIT, NODE_TOL
from optctrl.lqr.gain import FeedbackGain
from optctrl.models.sampled import SampledFunction, SampledMatrixFunction
from optctrl.utils.linalg import inverse_check_cond


class RegulatorLaw:
    """u(t, x) = -K(t) x"""

    def __init__(self, gain: FeedbackGain):
        self.gain = gain

    def __call__(self, t: float, x: np.ndarray) -> np.ndarray:
        return -self.gain(t) @ x


class TrackingLaw:
    """u(t, x) = -K(t) x + R^{-1} B^T V(t)"""

    def __init__(self, gain: FeedbackGain, costate: SampledFunction):
        self.gain = gain
        self.costate = costate

    def __call__(self, t: float, x: np.ndarray) -> np.ndarray:
        return -self.gain(t) @ x + self.gain.Rinv_BT @ self.costate(t)


class TerminalConstraintLaw:
    """
    Fixed-final-state regulator driving C x(T) to `target`:

        u(t, x) = -(K - R^{-1} B^T V P^{-1} V^T) x - R^{-1} B^T V P^{-1} target

    with K, V, P evaluated at t. P(T) = 0, so at the last node (within
    NODE_TOL * h of T) the correction terms are dropped and u = -K(T) x.
    Before that, an ill-conditioned P(t) raises SingularMatrixError.
    """

    def __init__(
        self,
        gain: FeedbackGain,
        costate: SampledMatrixFunction,
        correction: SampledMatrixFunction,
        target: np.ndarray,
        *,
        cond_limit: float = COND_LIMIT,
    ):
        self.gain = gain
        self.costate = costate
        self.correction = correction
        self.target = np.asarray(target, dtype=float).reshape(-1)
        self.cond_limit = cond_limit
        grid = gain.grid
        self._cutoff = grid.end - NODE_TOL * grid.step

    def __call__(self, t: float, x: np.ndarray) -> np.ndarray:
        K = self.gain(t)
        if t >= self._cutoff:
            return -K @ x

        V = self.costate(t)
        P = self.correction(t)
        inverse_check_cond(P, f"P(t={t:.6g})", self.cond_limit)

        RBV = self.gain.Rinv_BT @ V  # (m, p)
        Pinv_Vt = la.solve(P, V.T)  # (p, n)
        Pinv_target = la.solve(P, self.target)  # (p,)
        return -(K - RBV @ Pinv_Vt) @ x - RBV @ Pinv_target


__all__ = ["RegulatorLaw", "TrackingLaw", "TerminalConstraintLaw"]
