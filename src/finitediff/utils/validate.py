"""Validation utilities for finitediff."""

from __future__ import annotations

import math
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from finitediff.logger import finitediff_logger

__all__ = [
    "as_point",
    "validate_eps",
    "scalar_value",
    "vector_value",
    "matrix_value",
    "warn_if_nonfinite",
]


def as_point(x: ArrayLike) -> NDArray[np.float64]:
    """Returns the evaluation point as a fresh 1D float array.

    Args:
        x: Point at which a derivative is evaluated.

    Returns:
        A copy of ``x`` as a 1D ``float64`` array. The caller's array is never
        shared with the differencing engines.

    Raises:
        ValueError: If ``x`` is empty or not one-dimensional.
    """
    point = np.array(x, dtype=np.float64, copy=True)
    if point.ndim != 1:
        raise ValueError(f"x must be a 1D array; got shape {point.shape}.")
    if point.size == 0:
        raise ValueError("x must be a non-empty 1D array.")
    return point


def validate_eps(eps: Any) -> float:
    """Checks that a finite-difference step size is usable.

    Args:
        eps: The step size.

    Returns:
        ``eps`` as a float.

    Raises:
        ValueError: If ``eps`` is not a finite, strictly positive number.
    """
    try:
        value = float(eps)
    except (TypeError, ValueError) as e:
        raise ValueError(f"eps must be a positive float; got {eps!r}.") from e
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"eps must be a finite positive float; got {eps!r}.")
    return value


def scalar_value(value: Any, *, caller: str) -> float:
    """Converts the output of a scalar-valued target function to a float.

    Args:
        value: The object returned by the target function.
        caller: Name of the public routine, used in the error message.

    Returns:
        The value as a Python float.

    Raises:
        TypeError: If ``value`` holds more than one element.
    """
    arr = np.asarray(value, dtype=float)
    if arr.size != 1:
        raise TypeError(
            f"{caller}() expects a scalar-valued function; "
            f"got output of shape {arr.shape}."
        )
    return float(arr.reshape(()))


def vector_value(value: Any, *, caller: str) -> NDArray[np.float64]:
    """Converts the output of a vector-valued target function to a 1D array.

    Raises:
        TypeError: If the output is not one-dimensional.
    """
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim != 1:
        raise TypeError(
            f"{caller}() expects f: R^n -> R^k with 1D vector output; "
            f"got shape {arr.shape}."
        )
    return arr


def matrix_value(value: Any, *, caller: str) -> NDArray[np.float64]:
    """Converts the output of a tensor-valued target function to its matrix form.

    A vector of length ``p`` is interpreted as a ``p x 1`` matrix.

    Raises:
        TypeError: If the output is a scalar or has more than two dimensions.
    """
    arr = np.asarray(value, dtype=np.float64)
    if arr.ndim == 1:
        return arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise TypeError(
            f"{caller}() expects the function to return the matrix representation "
            f"of its output (1D or 2D); got shape {arr.shape}. "
            "Use finitediff.flatten/unflatten to reshape higher-dimensional outputs."
        )
    return arr


def warn_if_nonfinite(result: NDArray[np.floating], *, caller: str) -> None:
    """Logs a warning if a computed derivative holds NaN or infinite entries."""
    n_bad = int(np.size(result) - np.count_nonzero(np.isfinite(result)))
    if n_bad:
        finitediff_logger.warning(
            "%s: %d non-finite entries in the finite-difference estimate.",
            caller,
            n_bad,
        )
