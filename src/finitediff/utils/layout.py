"""Row-major conversion between matrices and flat vectors.

These helpers let callers wire matrix-valued quantities into the vector-valued
function signature expected by :func:`finitediff.finite_jacobian`.

>>> import numpy as np
>>> from finitediff.utils.layout import flatten, unflatten
>>> X = np.arange(6.0).reshape(3, 2)
>>> flatten(X)
array([0., 1., 2., 3., 4., 5.])
>>> bool((unflatten(flatten(X), 2) == X).all())
True
"""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

__all__ = ["flatten", "unflatten"]


def flatten(matrix: ArrayLike) -> NDArray[np.floating]:
    """Flattens a matrix row by row.

    Element ``(i, j)`` of an ``r x c`` matrix lands at index ``i * c + j``.

    Args:
        matrix: A 2D array-like of shape ``(r, c)``.

    Returns:
        A new 1D array of length ``r * c``.

    Raises:
        ValueError: If ``matrix`` is not two-dimensional.
    """
    arr = np.asarray(matrix)
    if arr.ndim != 2:
        raise ValueError(f"flatten expects a 2D matrix; got shape {arr.shape}.")
    return arr.flatten(order="C")


def unflatten(vector: ArrayLike, dim: int) -> NDArray[np.floating]:
    """Rebuilds a matrix with ``dim`` columns from its row-major flattening.

    Args:
        vector: A 1D array-like whose length is a multiple of ``dim``.
        dim: Number of columns of the resulting matrix.

    Returns:
        A new array of shape ``(len(vector) // dim, dim)``.

    Raises:
        ValueError: If ``vector`` is not 1D, ``dim`` is not a positive integer,
            or the length of ``vector`` is not a multiple of ``dim``.
    """
    arr = np.asarray(vector)
    if arr.ndim != 1:
        raise ValueError(f"unflatten expects a 1D vector; got shape {arr.shape}.")
    if isinstance(dim, bool) or not isinstance(dim, (int, np.integer)) or dim < 1:
        raise ValueError(f"dim must be a positive integer; got {dim!r}.")
    if arr.size % dim != 0:
        raise ValueError(
            f"vector of length {arr.size} cannot be split into rows of {dim} columns."
        )
    return arr.reshape(-1, dim, order="C").copy()
