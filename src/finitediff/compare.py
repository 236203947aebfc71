"""Tolerance checks between reference derivatives and finite-difference estimates.

Two entries ``a`` and ``b`` are considered equal under ``test_eps`` when

    |a - b| <= test_eps * max(|a|, |b|, 1)

so the tolerance is relative for large entries and absolute near zero.

A mismatch is a normal outcome, reported through the boolean return value.
The offending entries are additionally logged at ``DEBUG`` level on
:data:`finitediff.logger.finitediff_logger`, tagged with a caller-supplied
label.

>>> import numpy as np
>>> from finitediff.compare import compare_gradient
>>> compare_gradient(np.array([1.0, 2.0]), np.array([1.0, 2.00001]))
True
>>> compare_gradient(np.array([1.0, 2.0]), np.array([1.0, 2.1]))
False
"""

from __future__ import annotations

import math
from typing import NamedTuple

import numpy as np
from numpy.typing import ArrayLike

from finitediff.logger import finitediff_logger
from finitediff.utils.numerics import tolerance_scale

__all__ = [
    "DEFAULT_TEST_EPS",
    "Mismatch",
    "mismatches",
    "compare_gradient",
    "compare_jacobian",
    "compare_hessian",
]

#: Default tolerance of the comparisons.
DEFAULT_TEST_EPS = 1.0e-4


class Mismatch(NamedTuple):
    """One entry that failed a comparison.

    Attributes:
        index: Position of the entry, ``(i,)`` for vectors, ``(i, j)`` for matrices.
        x: Value in the first array.
        y: Value in the second array.
        abs_diff: ``|x - y|``.
        rel_x: ``|x - y| / |x|`` (``inf`` when ``x == 0``).
        rel_y: ``|x - y| / |y|`` (``inf`` when ``y == 0``).
    """

    index: tuple[int, ...]
    x: float
    y: float
    abs_diff: float
    rel_x: float
    rel_y: float


def mismatches(
    x: ArrayLike,
    y: ArrayLike,
    test_eps: float = DEFAULT_TEST_EPS,
) -> list[Mismatch]:
    """Returns the entries of ``x`` and ``y`` that are not close, worst first.

    Entries are ranked by ``|x - y| / max(|x|, |y|, 1)``. NaN entries never
    compare equal and are ranked first.

    Args:
        x: First array.
        y: Second array, of the same shape as ``x``.
        test_eps: Tolerance of equality.

    Returns:
        A list of :class:`Mismatch` records, empty if all entries are close.

    Raises:
        ValueError: If ``x`` and ``y`` have different shapes.
    """
    a = np.asarray(x, dtype=float)
    b = np.asarray(y, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"shape mismatch: x has shape {a.shape}, y has shape {b.shape}.")

    scale = tolerance_scale(a, b)
    abs_diff = np.abs(a - b)
    with np.errstate(divide="ignore", invalid="ignore"):
        bad = ~(abs_diff <= test_eps * scale)
        score = abs_diff / scale
        rel_x = abs_diff / np.abs(a)
        rel_y = abs_diff / np.abs(b)
    score = np.where(np.isnan(score), np.inf, score)

    found = [
        Mismatch(
            index=tuple(int(k) for k in idx),
            x=float(a[idx]),
            y=float(b[idx]),
            abs_diff=float(abs_diff[idx]),
            rel_x=float(rel_x[idx]),
            rel_y=float(rel_y[idx]),
        )
        for idx in map(tuple, np.argwhere(bad))
    ]
    found.sort(key=lambda m: -float(score[m.index]))
    return found


def compare_gradient(
    x: ArrayLike,
    y: ArrayLike,
    test_eps: float = DEFAULT_TEST_EPS,
    msg: str = "compare_gradient",
) -> bool:
    """Checks whether two gradients are close enough.

    Args:
        x: The first gradient (1D).
        y: The second gradient to compare against (1D).
        test_eps: Tolerance of equality.
        msg: Label prefixed to the debug messages.

    Returns:
        True if every entry pair is close; False otherwise, including when
        the lengths differ.

    Raises:
        ValueError: If either input is not 1D or ``test_eps`` is negative.
    """
    return _compare(x, y, test_eps, msg, ndim=1)


def compare_jacobian(
    x: ArrayLike,
    y: ArrayLike,
    test_eps: float = DEFAULT_TEST_EPS,
    msg: str = "compare_jacobian",
) -> bool:
    """Checks whether two Jacobians are close enough.

    Args:
        x: The first Jacobian (2D).
        y: The second Jacobian to compare against (2D).
        test_eps: Tolerance of equality.
        msg: Label prefixed to the debug messages.

    Returns:
        True if every entry pair is close; False otherwise, including when
        the shapes differ.

    Raises:
        ValueError: If either input is not 2D or ``test_eps`` is negative.
    """
    return _compare(x, y, test_eps, msg, ndim=2)


def compare_hessian(
    x: ArrayLike,
    y: ArrayLike,
    test_eps: float = DEFAULT_TEST_EPS,
    msg: str = "compare_hessian",
) -> bool:
    """Checks whether two Hessians are close enough.

    Same rules as :func:`compare_jacobian`.
    """
    return _compare(x, y, test_eps, msg, ndim=2)


def _compare(
    x: ArrayLike,
    y: ArrayLike,
    test_eps: float,
    msg: str,
    ndim: int,
) -> bool:
    """Shared implementation of the ``compare_*`` functions."""
    a = np.asarray(x, dtype=float)
    b = np.asarray(y, dtype=float)
    if a.ndim != ndim or b.ndim != ndim:
        raise ValueError(
            f"{msg}: expected {ndim}D inputs; got shapes {a.shape} and {b.shape}."
        )
    try:
        tol = float(test_eps)
    except (TypeError, ValueError) as e:
        raise ValueError(f"test_eps must be a non-negative float; got {test_eps!r}.") from e
    if not math.isfinite(tol) or tol < 0:
        raise ValueError(f"test_eps must be a finite non-negative float; got {test_eps!r}.")

    if a.shape != b.shape:
        finitediff_logger.debug(
            "%s shape mismatch: x has shape %s, y has shape %s", msg, a.shape, b.shape
        )
        return False

    found = mismatches(a, b, tol)
    if not found:
        return True

    for m in sorted(found, key=lambda m: m.index):
        finitediff_logger.debug(
            "%s eps=%.3e %s x=%.3e y=%.3e |x-y|=%.3e |x-y|/|x|=%.3e |x-y|/|y|=%.3e",
            msg, tol, _format_index(m.index), m.x, m.y, m.abs_diff, m.rel_x, m.rel_y,
        )
    worst = found[0]
    finitediff_logger.debug(
        "%s %d of %d entries differ; worst at %s (|x-y|=%.3e)",
        msg, len(found), a.size, _format_index(worst.index), worst.abs_diff,
    )
    return False


def _format_index(index: tuple[int, ...]) -> str:
    if len(index) == 1:
        return f"r={index[0]}"
    return f"r={index[0]} c={index[1]}"
