# src/optctrl/utils/linalg.py
from __future__ import annotations

import logging

import numpy as np
from scipy import linalg as la

from optctrl.config import COND_LIMIT
from optctrl.errors import ShapeMismatchError, SingularMatrixError

logger = logging.getLogger(__name__)


def inverse_check_cond(M: np.ndarray, name: str = "matrix", cond_limit: float = COND_LIMIT) -> float:
    """
    Check that M is invertible by looking at its condition number
    (largest over smallest singular value).

    Raises SingularMatrixError when cond(M) exceeds cond_limit.
    """
    M = np.asarray(M, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ShapeMismatchError(f"{name} must be square, got {M.shape}")
    c = float(np.linalg.cond(M))
    if not np.isfinite(c) or c > cond_limit:
        raise SingularMatrixError(f"{name} is not invertible (cond ~ {c:.2e})")
    if c > np.sqrt(cond_limit):
        logger.warning("%s ill-conditioned (cond ~ %.2e)", name, c)
    return c


def rinv_bt(B: np.ndarray, R: np.ndarray) -> np.ndarray:
    """R^{-1} B^T via a linear solve, (m, n)."""
    B = np.asarray(B, dtype=float)
    R = np.asarray(R, dtype=float)
    inverse_check_cond(R, "R")
    return la.solve(R, B.T)


def symmetrize(S: np.ndarray) -> np.ndarray:
    """0.5 (S + S^T) over the last two axes."""
    S = np.asarray(S, dtype=float)
    return 0.5 * (S + np.swapaxes(S, -1, -2))


def is_symmetric(M: np.ndarray, atol: float = 1e-10) -> bool:
    M = np.asarray(M, dtype=float)
    return M.ndim == 2 and M.shape[0] == M.shape[1] and bool(np.allclose(M, M.T, atol=atol))


__all__ = ["inverse_check_cond", "rinv_bt", "symmetrize", "is_symmetric"]
