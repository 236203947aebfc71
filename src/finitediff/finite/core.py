"""The perturb-evaluate-restore loop shared by every differencing engine."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from itertools import product
from typing import Any, TypeVar

import numpy as np
from numpy.typing import NDArray

from .stencil import Stencil

__all__ = [
    "stencil_sum",
]

T = TypeVar("T", float, np.ndarray)


def stencil_sum(
    function: Callable[[NDArray[np.float64]], Any],
    x: NDArray[np.float64],
    indices: Sequence[int],
    stencil: Stencil,
    eps: float,
    convert: Callable[[Any], T],
) -> T:
    """Returns one finite-difference estimate for the coordinates in ``indices``.

    For a single index ``i`` this is the first partial derivative with respect
    to ``x[i]``. For two indices ``(i, j)`` it is the mixed second partial,
    obtained by applying the same one-dimensional stencil along both
    coordinates; when ``i == j`` the two offsets add up on the same coordinate.

    The loop runs over every combination of stencil steps, step-ascending.
    Each step perturbs a private working copy of ``x``, evaluates
    ``function`` on a copy of the perturbed point, accumulates the weighted
    value and then restores the perturbed coordinates from ``x``. Between two
    steps the working copy is therefore bit-identical to ``x`` and
    perturbations never compound.

    Args:
        function: The target function.
        x: The unperturbed evaluation point (1D). Not modified.
        indices: Coordinates to perturb (one or two entries).
        stencil: The stencil to apply along every coordinate.
        eps: Step size.
        convert: Turns a raw function value into a float or array and checks
            that it has the shape the caller's contract expects.

    Returns:
        ``sum(prod(outer[c]) * f(x + inner[c] * eps)) / (denominator * eps) ** len(indices)``
        as a float or an array, depending on ``convert``.
    """
    work = x.copy()
    total: Any = 0.0
    for steps in product(range(len(stencil.outer)), repeat=len(indices)):
        weight = 1.0
        for i, s in zip(indices, steps):
            work[i] += stencil.inner[s] * eps
            weight *= stencil.outer[s]
        total = total + weight * convert(function(work.copy()))
        for i in indices:
            work[i] = x[i]
    return total / (stencil.denominator * eps) ** len(indices)
