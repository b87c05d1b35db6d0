from __future__ import annotations

import numpy as np


def output_residual(C: np.ndarray, x: np.ndarray, target: np.ndarray) -> float:
    """||C x - target||, the miss of a terminal output constraint."""
    y = np.asarray(C, dtype=float) @ np.asarray(x, dtype=float)
    return float(np.linalg.norm(y - np.asarray(target, dtype=float)))


__all__ = ["output_residual"]
