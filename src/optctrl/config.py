# src/optctrl/config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

# Integrator defaults (RK45 is the explicit Dormand-Prince pair, as ode45)
DEFAULT_METHOD = "RK45"
DEFAULT_RTOL = 1e-8
DEFAULT_ATOL = 1e-8

# Relative tolerance (in units of h) for snapping a query time onto a node
NODE_TOL = 1e-9

# Matrices with cond() above this are treated as singular
COND_LIMIT = 1e12

CONTROL_TYPES = ("LQR", "LQT")


@dataclass(frozen=True)
class IntegratorOptions:
    """
    Settings forwarded to scipy.integrate.solve_ivp by every stage.

    enforce_symmetry symmetrizes the Riccati samples at interior nodes.
    """
    method: str = DEFAULT_METHOD
    rtol: float = DEFAULT_RTOL
    atol: float = DEFAULT_ATOL
    enforce_symmetry: bool = True

    def __post_init__(self):
        if self.rtol <= 0 or self.atol <= 0:
            raise ValueError(f"rtol and atol must be > 0, got rtol={self.rtol}, atol={self.atol}")

    def solve_ivp_kwargs(self) -> Dict[str, Any]:
        return {"method": self.method, "rtol": self.rtol, "atol": self.atol}


__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_RTOL",
    "DEFAULT_ATOL",
    "NODE_TOL",
    "COND_LIMIT",
    "CONTROL_TYPES",
    "IntegratorOptions",
]
