"""Contains functions used to construct the gradient of scalar-valued functions."""

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

__all__ = ["finite_gradient", "DEFAULT_EPS"]

#: Default step size for first derivatives.
DEFAULT_EPS = 1.0e-8


def finite_gradient(
    x: ArrayLike,
    function: ScalarFunction,
    accuracy: AccuracyOrder | int = AccuracyOrder.SECOND,
    eps: float = DEFAULT_EPS,
    *,
    n_workers: int | None = 1,
) -> NDArray[np.float64]:
    """Returns the gradient of a scalar-valued function by central differences.

    Entry ``i`` is obtained by perturbing ``x[i]`` alone, one stencil step at a
    time, so the function is evaluated exactly ``n * s`` times, where ``s``
    is the stencil length of ``accuracy``.

    Args:
        x: Point at which to compute the gradient (1D, length ``n``).
        function: Scalar-valued function of a 1D float array.
        accuracy: Accuracy order of the finite differences.
        eps: Finite-difference step size.
        n_workers: Number of threads used to spread the coordinates over.
            ``None`` uses the configured default
            (see :func:`finitediff.utils.concurrency.use_workers`).

    Returns:
        A 1D array of length ``n``.

    Raises:
        ValueError: If ``accuracy`` is not supported, ``eps`` is not a positive
            float, or ``x`` is empty or not 1D.
        TypeError: If ``function`` does not return a scalar.
    """
    point = as_point(x)
    stencil = get_stencil(accuracy)
    eps = validate_eps(eps)

    n = point.size
    workers = resolve_workers(n_workers, n)
    finitediff_logger.debug(
        "finite_gradient: n=%d accuracy=%d eps=%.3e evaluations=%d workers=%d",
        n, int(accuracy), eps, n * len(stencil.outer), workers,
    )

    worker = partial(
        _gradient_entry,
        function=function,
        point=point,
        stencil=stencil,
        eps=eps,
    )
    vals = parallel_execute(worker, [(i,) for i in range(n)], workers=workers)

    grad = np.asarray(vals, dtype=np.float64)
    warn_if_nonfinite(grad, caller="finite_gradient")
    return grad


def _gradient_entry(
    i: int,
    function: ScalarFunction,
    point: NDArray[np.float64],
    stencil: Stencil,
    eps: float,
) -> float:
    """Returns the partial derivative of ``function`` with respect to ``point[i]``."""
    return stencil_sum(
        function,
        point,
        (i,),
        stencil,
        eps,
        convert=partial(scalar_value, caller="finite_gradient"),
    )
