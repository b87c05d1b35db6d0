# src/optctrl/utils/interpolate.py
from __future__ import annotations

import math

import numpy as np

from optctrl.config import NODE_TOL
from optctrl.errors import IndexOutOfRangeError, ShapeMismatchError


class PiecewiseLinearInterpolant:
    """
    Linear interpolation between samples on a uniform grid t_i = start + i*step.

    values has shape (N, ...). A query t maps to s = (t - start) / step and
    blends nodes floor(s) and ceil(s) with weight s - floor(s). Queries within
    `tol` (in units of step) of a node return that node's sample unchanged.
    """

    def __init__(self, values: np.ndarray, start: float, step: float, *, tol: float = NODE_TOL):
        values = np.asarray(values, dtype=float)
        if values.ndim < 1 or values.shape[0] < 1:
            raise ShapeMismatchError(f"values must be (N, ...) with N >= 1, got {values.shape}")
        if not step > 0:
            raise ValueError(f"step must be > 0, got {step}")
        self.values = values
        self.start = float(start)
        self.step = float(step)
        self.tol = float(tol)

    @property
    def num_nodes(self) -> int:
        return int(self.values.shape[0])

    @property
    def end(self) -> float:
        return self.start + (self.num_nodes - 1) * self.step

    def position(self, t: float) -> float:
        """Fractional node index of t, clamped onto [0, N-1] within tolerance."""
        s = (float(t) - self.start) / self.step
        last = self.num_nodes - 1
        if s < -self.tol or s > last + self.tol or not math.isfinite(s):
            raise IndexOutOfRangeError(
                f"t={t} outside sampled span [{self.start}, {self.end}]"
            )
        return min(max(s, 0.0), float(last))

    def node(self, i: int) -> np.ndarray:
        if not 0 <= i < self.num_nodes:
            raise IndexOutOfRangeError(f"node {i} outside [0, {self.num_nodes - 1}]")
        return self.values[i].copy()

    def __call__(self, t: float) -> np.ndarray:
        s = self.position(t)
        nearest = int(round(s))
        if abs(s - nearest) <= self.tol:
            return self.values[nearest].copy()

        lo = int(math.floor(s))
        hi = min(int(math.ceil(s)), self.num_nodes - 1)
        w = s - lo
        return self.values[lo] + (self.values[hi] - self.values[lo]) * w


__all__ = ["PiecewiseLinearInterpolant"]
