"""Contains functions used in constructing the Hessian of a scalar-valued function."""

from functools import partial

import numpy as np
from numpy.typing import ArrayLike, NDArray

from finitediff.finite.core import stencil_sum
from finitediff.finite.stencil import AccuracyOrder, Stencil, get_stencil
from finitediff.logger import finitediff_logger
from finitediff.utils.concurrency import parallel_execute, resolve_workers
from finitediff.utils.types import ScalarFunction
from finitediff.utils.validate import (
    as_point,
    scalar_value,
    validate_eps,
    warn_if_nonfinite,
)

__all__ = ["finite_hessian", "DEFAULT_HESSIAN_EPS"]

#: Default step size for second derivatives. Larger than the first-derivative
#: default because the stencil is divided by ``eps**2``.
DEFAULT_HESSIAN_EPS = 1.0e-5


def finite_hessian(
    x: ArrayLike,
    function: ScalarFunction,
    accuracy: AccuracyOrder | int = AccuracyOrder.SECOND,
    eps: float = DEFAULT_HESSIAN_EPS,
    *,
    n_workers: int | None = 1,
) -> NDArray[np.float64]:
    """Returns the Hessian of a scalar-valued function by central differences.

    Only the upper triangle ``i <= j`` is estimated; the lower triangle is
    filled by symmetry. Every entry applies the first-derivative stencil along
    both coordinates, including the diagonal, for a total of
    ``n * (n + 1) / 2 * s**2`` function evaluations.

    Args:
        x: Point at which to compute the Hessian (1D, length ``n``).
        function: Scalar-valued function of a 1D float array.
        accuracy: Accuracy order of the finite differences.
        eps: Finite-difference step size.
        n_workers: Number of threads used to spread the Hessian rows over.

    Returns:
        A symmetric 2D array of shape ``(n, n)``.

    Raises:
        ValueError: If ``accuracy`` is not supported, ``eps`` is not a positive
            float, or ``x`` is empty or not 1D.
        TypeError: If ``function`` does not return a scalar.
    """
    point = as_point(x)
    stencil = get_stencil(accuracy)
    eps = validate_eps(eps)

    n = point.size
    s = len(stencil.outer)
    workers = resolve_workers(n_workers, n)
    finitediff_logger.debug(
        "finite_hessian: n=%d accuracy=%d eps=%.3e evaluations=%d workers=%d",
        n, int(accuracy), eps, n * (n + 1) // 2 * s * s, workers,
    )

    worker = partial(
        _hessian_row,
        function=function,
        point=point,
        stencil=stencil,
        eps=eps,
    )
    rows = parallel_execute(worker, [(i,) for i in range(n)], workers=workers)

    hess = np.zeros((n, n), dtype=np.float64)
    for i, row in enumerate(rows):
        hess[i, i:] = row
        hess[i:, i] = row
    warn_if_nonfinite(hess, caller="finite_hessian")
    return hess


def _hessian_row(
    i: int,
    function: ScalarFunction,
    point: NDArray[np.float64],
    stencil: Stencil,
    eps: float,
) -> NDArray[np.float64]:
    """Returns the upper-triangle entries ``hess[i, i:]``."""
    convert = partial(scalar_value, caller="finite_hessian")
    return np.array(
        [
            stencil_sum(function, point, (i, j), stencil, eps, convert=convert)
            for j in range(i, point.size)
        ],
        dtype=np.float64,
    )
