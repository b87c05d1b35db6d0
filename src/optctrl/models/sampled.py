# src/optctrl/models/sampled.py
from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from optctrl.errors import ShapeMismatchError
from optctrl.models.system import TimeGrid
from optctrl.utils.interpolate import PiecewiseLinearInterpolant


@dataclass(frozen=True)
class SampledFunction:
    """
    Samples of a time function on a TimeGrid, values[i] taken at grid.t[i].

    Calling the object evaluates the function at any t in [grid.start, grid.end]
    by piecewise-linear interpolation.
    """
    grid: TimeGrid
    values: np.ndarray
    _interp: PiecewiseLinearInterpolant = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        values = np.array(self.values, dtype=float)
        if values.ndim < 1 or values.shape[0] != self.grid.N:
            raise ShapeMismatchError(
                f"values must have {self.grid.N} samples along axis 0, got {values.shape}"
            )
        values.setflags(write=False)
        object.__setattr__(self, "values", values)
        object.__setattr__(
            self, "_interp", PiecewiseLinearInterpolant(values, self.grid.start, self.grid.step)
        )

    @property
    def t(self) -> np.ndarray:
        return self.grid.t

    @property
    def sample_shape(self) -> tuple:
        return tuple(self.values.shape[1:])

    def __len__(self) -> int:
        return int(self.values.shape[0])

    def __call__(self, t: float) -> np.ndarray:
        return self._interp(t)

    def node(self, i: int) -> np.ndarray:
        return self._interp.node(i)

    def terminal(self) -> np.ndarray:
        return self._interp.node(len(self) - 1)


class SampledMatrixFunction(SampledFunction):
    """(N, rows, cols) samples, e.g. S(t), P(t) or the LQR costate V(t)."""

    def __post_init__(self):
        super().__post_init__()
        if self.values.ndim != 3:
            raise ShapeMismatchError(f"matrix samples must be (N, r, c), got {self.values.shape}")


class SampledVectorFunction(SampledFunction):
    """(N, k) samples, e.g. the LQT costate V(t)."""

    def __post_init__(self):
        super().__post_init__()
        if self.values.ndim != 2:
            raise ShapeMismatchError(f"vector samples must be (N, k), got {self.values.shape}")


__all__ = ["SampledFunction", "SampledMatrixFunction", "SampledVectorFunction"]
