# src/optctrl/utils/flatten.py
"""
Matrix <-> vector conversion for integrator states.

Layout: row-major (C order). Entry (i, j) of an (r, c) matrix is element
i * c + j of the flat vector. Every stage goes through these helpers so the
layout never changes between packing and unpacking.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from optctrl.errors import ShapeMismatchError


def flatten(M: np.ndarray) -> np.ndarray:
    """(r, c) or (k,) array -> (r*c,) / (k,) float vector."""
    return np.asarray(M, dtype=float).reshape(-1)


def unflatten(v: np.ndarray, shape: Optional[Sequence[int]] = None) -> np.ndarray:
    """
    Inverse of `flatten`.

    If shape is None, v must hold a square matrix (length n^2) and (n, n) is
    returned.
    """
    v = np.asarray(v, dtype=float).reshape(-1)
    if shape is None:
        n = math.isqrt(v.size)
        if n * n != v.size:
            raise ShapeMismatchError(f"cannot unflatten length {v.size} into a square matrix")
        shape = (n, n)
    shape = tuple(int(s) for s in shape)
    if int(np.prod(shape)) != v.size:
        raise ShapeMismatchError(f"cannot unflatten length {v.size} into shape {shape}")
    return v.reshape(shape)


def unflatten_samples(Y: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """(N, prod(shape)) integrator output -> (N, *shape)."""
    Y = np.asarray(Y, dtype=float)
    if Y.ndim != 2:
        raise ShapeMismatchError(f"Y must be (N, dim), got {Y.shape}")
    shape = tuple(int(s) for s in shape)
    if int(np.prod(shape)) != Y.shape[1]:
        raise ShapeMismatchError(f"cannot unflatten rows of length {Y.shape[1]} into shape {shape}")
    return Y.reshape((Y.shape[0],) + shape)


__all__ = ["flatten", "unflatten", "unflatten_samples"]
