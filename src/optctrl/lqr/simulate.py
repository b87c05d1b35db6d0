# src/optctrl/lqr/simulate.py
from __future__ import annotations

from typing import Callable, Optional, Tuple

import numpy as np

from optctrl.config import IntegratorOptions
from optctrl.errors import ShapeMismatchError
from optctrl.models.system import TimeGrid
from optctrl.utils.integrate import integrate_on_grid

ControlLaw = Callable[[float, np.ndarray], np.ndarray]


def simulate_closed_loop(
    A: np.ndarray,
    B: np.ndarray,
    law: ControlLaw,
    *,
    x0: np.ndarray,
    grid: TimeGrid,
    options: Optional[IntegratorOptions] = None,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    dx/dt = A x + B u(t, x),  x(t0) = x0
    Returns (X, U) with X (N, n) and U (N, m) evaluated on grid.t.
    """
    A = np.asarray(A, dtype=float)
    B = np.asarray(B, dtype=float)
    x0 = np.asarray(x0, dtype=float).reshape(-1)
    if x0.shape != (A.shape[0],):
        raise ShapeMismatchError(f"x0 must have shape {(A.shape[0],)}, got {x0.shape}")

    def ode(t, x):
        return A @ x + B @ law(t, x)

    X = integrate_on_grid(ode, x0, grid.t, options=options, label="forward")
    U = np.vstack([np.asarray(law(t, x), dtype=float).reshape(-1) for t, x in zip(grid.t, X)])
    return X, U


__all__ = ["ControlLaw", "simulate_closed_loop"]
