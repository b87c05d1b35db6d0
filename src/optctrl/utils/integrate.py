# src/optctrl/utils/integrate.py
from __future__ import annotations

import logging
from typing import Callable, Optional

import numpy as np
from scipy.integrate import solve_ivp

from optctrl.config import IntegratorOptions
from optctrl.errors import IntegrationError, InvalidTimeDomainError
from optctrl.utils.flatten import flatten, unflatten, unflatten_samples

logger = logging.getLogger(__name__)


def integrate_on_grid(
    fun: Callable[[float, np.ndarray], np.ndarray],
    y0: np.ndarray,
    t_eval: np.ndarray,
    *,
    options: Optional[IntegratorOptions] = None,
    label: str = "ode",
) -> np.ndarray:
    """
    Integrate y' = fun(t, y) from t_eval[0] to t_eval[-1].

    Parameters
    ----------
    fun:
        right-hand side on flat vectors.
    y0:
        (d,) state at t_eval[0].
    t_eval:
        (N,) ascending sample times.

    Returns
    -------
    Y:
        (N, d) solution, row i at t_eval[i].
    """
    options = options or IntegratorOptions()
    y0 = np.asarray(y0, dtype=float).reshape(-1)
    t_eval = np.asarray(t_eval, dtype=float).reshape(-1)

    if t_eval.size == 0:
        raise InvalidTimeDomainError("t_eval must contain at least one sample")
    if t_eval.size == 1:
        return y0[None, :].copy()

    sol = solve_ivp(
        fun,
        (float(t_eval[0]), float(t_eval[-1])),
        y0,
        t_eval=t_eval,
        **options.solve_ivp_kwargs(),
    )
    if not sol.success:
        raise IntegrationError(f"{label} integration failed: {sol.message}")

    Y = sol.y.T  # (N, d)
    if Y.shape[0] != t_eval.size:
        raise IntegrationError(
            f"{label} integration returned {Y.shape[0]} samples, expected {t_eval.size}"
        )
    if not np.all(np.isfinite(Y)):
        raise IntegrationError(f"{label} integration produced non-finite values")

    logger.debug("%s: %d samples, nfev=%d", label, t_eval.size, sol.nfev)
    return Y


def backward_integrate(
    fun: Callable[[float, np.ndarray], np.ndarray],
    terminal: np.ndarray,
    t_grid: np.ndarray,
    *,
    options: Optional[IntegratorOptions] = None,
    label: str = "backward",
) -> np.ndarray:
    """
    Solve dX/dt = fun(t, X) backward from X(t_grid[-1]) = terminal.

    fun receives forward time t in [t_grid[0], t_grid[-1]] and X in the shape of
    `terminal`. Internally the problem is integrated over tau = -t, from
    -t_grid[-1] to -t_grid[0], with dX/dtau = -fun(-tau, X); the output is then
    reversed so that sample i belongs to t_grid[i]. The last sample is the
    terminal condition itself.

    Returns
    -------
    samples:
        (N, *terminal.shape) array aligned with ascending t_grid.
    """
    terminal = np.asarray(terminal, dtype=float)
    shape = terminal.shape
    t_grid = np.asarray(t_grid, dtype=float).reshape(-1)

    def reversed_fun(tau: float, y: np.ndarray) -> np.ndarray:
        return -flatten(fun(-tau, unflatten(y, shape)))

    tau_grid = -t_grid[::-1]  # ascending, from -end to -start
    Y_back = integrate_on_grid(
        reversed_fun, flatten(terminal), tau_grid, options=options, label=label
    )

    samples = unflatten_samples(Y_back[::-1], shape).copy()
    samples[-1] = terminal
    return samples


__all__ = ["integrate_on_grid", "backward_integrate"]
