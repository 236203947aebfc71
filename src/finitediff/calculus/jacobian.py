"""Contains functions used to construct the Jacobian matrix."""

from collections.abc import Callable
from functools import partial
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from finitediff.finite.core import stencil_sum
from finitediff.finite.stencil import AccuracyOrder, Stencil, get_stencil
from finitediff.logger import finitediff_logger
from finitediff.utils.concurrency import parallel_execute, resolve_workers
from finitediff.utils.types import VectorFunction
from finitediff.utils.validate import (
    as_point,
    matrix_value,
    validate_eps,
    vector_value,
    warn_if_nonfinite,
)

from .gradient import DEFAULT_EPS

__all__ = ["finite_jacobian", "finite_jacobian_tensor"]


def finite_jacobian(
    x: ArrayLike,
    function: VectorFunction,
    accuracy: AccuracyOrder | int = AccuracyOrder.SECOND,
    eps: float = DEFAULT_EPS,
    *,
    n_workers: int | None = 1,
) -> NDArray[np.float64]:
    """Computes the Jacobian of a vector-valued function by central differences.

    Each column in the Jacobian is the derivative with respect to one
    coordinate of ``x``. The function is evaluated once at ``x`` to find the
    output length ``k``, then ``n * s`` times at perturbed points.

    Args:
        x: Point at which to compute the Jacobian (1D, length ``n``).
        function: Function mapping a 1D float array to a 1D array of length ``k``.
        accuracy: Accuracy order of the finite differences.
        eps: Finite-difference step size.
        n_workers: Number of threads used to spread the coordinates over.

    Returns:
        A 2D array of shape ``(k, n)``.

    Raises:
        ValueError: If ``accuracy`` is not supported, ``eps`` is not a positive
            float, or ``x`` is empty or not 1D.
        TypeError: If ``function`` does not return a 1D vector, or changes its
            output length between evaluations.
    """
    point = as_point(x)
    stencil = get_stencil(accuracy)
    eps = validate_eps(eps)

    caller = "finite_jacobian"
    y0 = vector_value(function(point.copy()), caller=caller)
    convert = partial(_checked, expected=y0.shape, to_array=vector_value, caller=caller)

    cols = _derivative_slices(function, point, stencil, eps, convert, n_workers, caller)
    jac = np.column_stack(cols)
    warn_if_nonfinite(jac, caller=caller)
    return jac


def finite_jacobian_tensor(
    x: ArrayLike,
    function: VectorFunction,
    tensor_order: int,
    accuracy: AccuracyOrder | int = AccuracyOrder.SECOND,
    eps: float = DEFAULT_EPS,
    *,
    n_workers: int | None = 1,
) -> NDArray[np.float64]:
    """Computes the Jacobian of a tensor-valued function with explicit tensor order.

    ``function`` returns the ``p x q`` matrix representation of a tensor of
    order ``tensor_order`` (a 1D output of length ``p`` counts as ``p x 1``).
    Let ``D_k`` be the derivative of that matrix with respect to ``x[k]``.
    Following the tensor vectorization of Kim and Eberle, "Dynamic
    Deformables" (2022):

    - even ``tensor_order``: the result has shape ``(p, q * n)`` and
      ``D_k`` fills the column block ``[:, q * k : q * (k + 1)]``;
    - odd ``tensor_order``: the result has shape ``(p * q, n)`` and column
      ``k`` is ``D_k`` flattened column-major.

    Args:
        x: Point at which to compute the Jacobian (1D, length ``n``).
        function: Function mapping a 1D float array to a 1D or 2D array.
        tensor_order: Order of the tensor returned by ``function``.
        accuracy: Accuracy order of the finite differences.
        eps: Finite-difference step size.
        n_workers: Number of threads used to spread the coordinates over.

    Returns:
        The Jacobian in the layout selected by the parity of ``tensor_order``.

    Raises:
        ValueError: If ``tensor_order`` is not a positive integer, or for the
            same reasons as :func:`finite_jacobian`.
        TypeError: If ``function`` returns a scalar or an array with more than
            two dimensions, or changes its output shape between evaluations.
    """
    if (
        isinstance(tensor_order, bool)
        or not isinstance(tensor_order, (int, np.integer))
        or tensor_order < 1
    ):
        raise ValueError(f"tensor_order must be a positive integer; got {tensor_order!r}.")

    point = as_point(x)
    stencil = get_stencil(accuracy)
    eps = validate_eps(eps)

    caller = "finite_jacobian_tensor"
    y0 = matrix_value(function(point.copy()), caller=caller)
    convert = partial(_checked, expected=y0.shape, to_array=matrix_value, caller=caller)

    slices = _derivative_slices(function, point, stencil, eps, convert, n_workers, caller)
    if tensor_order % 2 == 0:
        jac = np.hstack(slices)
    else:
        jac = np.column_stack([s.ravel(order="F") for s in slices])
    warn_if_nonfinite(jac, caller=caller)
    return jac


def _derivative_slices(
    function: VectorFunction,
    point: NDArray[np.float64],
    stencil: Stencil,
    eps: float,
    convert: Callable[[Any], NDArray[np.float64]],
    n_workers: int | None,
    caller: str,
) -> list[NDArray[np.float64]]:
    """Returns the derivative of the function output with respect to each coordinate."""
    n = point.size
    workers = resolve_workers(n_workers, n)
    finitediff_logger.debug(
        "%s: n=%d stencil=%d eps=%.3e evaluations=%d workers=%d",
        caller, n, len(stencil.outer), eps, n * len(stencil.outer) + 1, workers,
    )
    worker = partial(
        stencil_sum,
        function,
        point,
        stencil=stencil,
        eps=eps,
        convert=convert,
    )
    return parallel_execute(worker, [((i,),) for i in range(n)], workers=workers)


def _checked(
    value: Any,
    expected: tuple[int, ...],
    to_array: Callable[..., NDArray[np.float64]],
    caller: str,
) -> NDArray[np.float64]:
    """Converts one function value and checks it kept the shape seen at ``x``."""
    arr = to_array(value, caller=caller)
    if arr.shape != expected:
        raise TypeError(
            f"{caller}() expected function output of shape {expected} "
            f"but got {arr.shape} at a perturbed point."
        )
    return arr
