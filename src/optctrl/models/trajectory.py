# src/optctrl/models/trajectory.py
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

import numpy as np

from optctrl.errors import ShapeMismatchError

Method = Literal["LQR", "LQT"]


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=float)
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class Trajectory:
    """
    Closed-loop result of one solve.

    time:     (N,) identical to the requested time_vec
    states:   (N, n) one row per time sample
    controls: (N, m) u(t_i, x_i)
    outputs:  (N, p) y_i = C x_i + D u_i
    """
    method: Method
    time: np.ndarray
    states: np.ndarray
    controls: np.ndarray
    outputs: np.ndarray
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        time = _frozen(self.time).reshape(-1)
        states = _frozen(self.states)
        controls = _frozen(self.controls)
        outputs = _frozen(self.outputs)

        N = time.size
        for name, arr in (("states", states), ("controls", controls), ("outputs", outputs)):
            if arr.ndim != 2 or arr.shape[0] != N:
                raise ShapeMismatchError(f"{name} must be 2D with shape (N, dim), got {arr.shape}, N={N}")

        object.__setattr__(self, "time", time)
        object.__setattr__(self, "states", states)
        object.__setattr__(self, "controls", controls)
        object.__setattr__(self, "outputs", outputs)
        object.__setattr__(self, "meta", MappingProxyType(dict(self.meta)))

    @property
    def N(self) -> int:
        return int(self.time.size)

    @property
    def final_state(self) -> np.ndarray:
        return self.states[-1].copy()

    def as_tuple(self):
        """(time, states), the classic [Time, States] pair."""
        return self.time, self.states


__all__ = ["Method", "Trajectory"]
