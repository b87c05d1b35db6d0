# src/optctrl/lqr/gain.py
from __future__ import annotations

import numpy as np

from optctrl.errors import ShapeMismatchError
from optctrl.models.sampled import SampledMatrixFunction


class FeedbackGain:
    """
    K(t) = R^{-1} B^T S(t), with S(t) linearly interpolated between nodes.

    Exact at nodes; raises IndexOutOfRangeError outside the sampled span.
    """

    def __init__(self, Rinv_BT: np.ndarray, S: SampledMatrixFunction):
        Rinv_BT = np.asarray(Rinv_BT, dtype=float)
        n = S.sample_shape[0]
        if Rinv_BT.ndim != 2 or Rinv_BT.shape[1] != n:
            raise ShapeMismatchError(f"Rinv_BT must be (m, {n}), got {Rinv_BT.shape}")
        self.Rinv_BT = Rinv_BT
        self.S = S

    @property
    def grid(self):
        return self.S.grid

    def __call__(self, t: float) -> np.ndarray:
        return self.Rinv_BT @ self.S(t)

    def at_node(self, i: int) -> np.ndarray:
        return self.Rinv_BT @ self.S.node(i)

    def sampled(self) -> SampledMatrixFunction:
        """K at every node, (N, m, n)."""
        K = np.matmul(self.Rinv_BT[None, :, :], self.S.values)
        return SampledMatrixFunction(grid=self.S.grid, values=K)


__all__ = ["FeedbackGain"]
