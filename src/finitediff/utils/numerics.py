"""Numerical utilities."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

__all__ = [
    "tolerance_scale",
    "relative_error",
]


def tolerance_scale(a: ArrayLike, b: ArrayLike) -> NDArray[np.floating]:
    """Returns the elementwise scale ``max(|a|, |b|, 1)``.

    The floor of one turns the relative tolerance into an absolute one for
    entries close to zero.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    return np.maximum(1.0, np.maximum(np.abs(a), np.abs(b)))


def relative_error(a: np.ndarray, b: np.ndarray) -> float:
    """Computes the relative error metric between a and b.

    This metric is defined as the maximum over all components of a and b of
    the absolute difference divided by the maximum of 1.0 and the absolute values of
    a and b. An entry pair passes a comparison with tolerance ``test_eps``
    exactly when its own ratio is at most ``test_eps``.

    Args:
        a: First array-like input.
        b: Second array-like input.

    Returns:
        The relative error metric as a float.
    """
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.size == 0:
        return 0.0
    return float(np.max(np.abs(a - b) / tolerance_scale(a, b)))
