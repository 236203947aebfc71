"""Provides the CalculusKit class.

A light wrapper around the differencing engines that binds a function, an
evaluation point and an accuracy order, and exposes gradient, Jacobian and
Hessian estimates together with checks against analytic references.

Typical usage examples:

>>> import numpy as np
>>> from finitediff.calculus_kit import CalculusKit
>>>
>>> def sin_function(x):
...     # scalar-valued function: f(x) = sin(x0)
...     return np.sin(x[0])
>>>
>>> def identity_function(x):
...     # vector-valued function: f(x) = x
...     return np.asarray(x, dtype=float)
>>>
>>> calc = CalculusKit(sin_function, x0=np.array([0.5]))
>>> grad = calc.gradient()
>>> hess = calc.hessian()
>>> calc.check_gradient(np.array([np.cos(0.5)]))
True
>>>
>>> jac = CalculusKit(identity_function, x0=np.array([1.0, 2.0])).jacobian()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .calculus import (
    DEFAULT_EPS,
    DEFAULT_HESSIAN_EPS,
    finite_gradient,
    finite_hessian,
    finite_jacobian,
    finite_jacobian_tensor,
)
from .compare import (
    DEFAULT_TEST_EPS,
    compare_gradient,
    compare_hessian,
    compare_jacobian,
)
from .finite.stencil import AccuracyOrder, validate_accuracy


class CalculusKit:
    """Provides access to finite-difference gradient, Jacobian, and Hessian estimates."""

    def __init__(
        self,
        function: Callable[[np.ndarray], float | NDArray[np.floating]],
        x0: Sequence[float] | np.ndarray,
        accuracy: AccuracyOrder | int = AccuracyOrder.SECOND,
    ):
        """Initialise with function, evaluation point and accuracy order.

        Args:
            function: Maps a 1D parameter array to a scalar (for the gradient
                and Hessian) or to an array (for the Jacobian).
            x0: Point at which to evaluate derivatives (shape (n,)).
            accuracy: Accuracy order used by every estimate.

        Raises:
            ValueError: If ``accuracy`` is not supported.
        """
        self.function = function
        self.x0 = np.asarray(x0, dtype=float)
        self.accuracy = validate_accuracy(accuracy)

    def gradient(
        self, *, eps: float = DEFAULT_EPS, n_workers: int | None = 1
    ) -> NDArray[np.floating]:
        """Returns the gradient of a scalar-valued function."""
        return finite_gradient(
            self.x0, self.function, self.accuracy, eps, n_workers=n_workers
        )

    def jacobian(
        self, *, eps: float = DEFAULT_EPS, n_workers: int | None = 1
    ) -> NDArray[np.floating]:
        """Returns the Jacobian of a vector-valued function."""
        return finite_jacobian(
            self.x0, self.function, self.accuracy, eps, n_workers=n_workers
        )

    def jacobian_tensor(
        self,
        tensor_order: int,
        *,
        eps: float = DEFAULT_EPS,
        n_workers: int | None = 1,
    ) -> NDArray[np.floating]:
        """Returns the Jacobian of a tensor-valued function in block layout."""
        return finite_jacobian_tensor(
            self.x0,
            self.function,
            tensor_order,
            self.accuracy,
            eps,
            n_workers=n_workers,
        )

    def hessian(
        self, *, eps: float = DEFAULT_HESSIAN_EPS, n_workers: int | None = 1
    ) -> NDArray[np.floating]:
        """Returns the Hessian of a scalar-valued function."""
        return finite_hessian(
            self.x0, self.function, self.accuracy, eps, n_workers=n_workers
        )

    def check_gradient(
        self,
        reference: ArrayLike,
        *,
        test_eps: float = DEFAULT_TEST_EPS,
        eps: float = DEFAULT_EPS,
    ) -> bool:
        """Returns whether an analytic gradient matches the finite-difference estimate."""
        return compare_gradient(
            reference, self.gradient(eps=eps), test_eps, msg="CalculusKit.check_gradient"
        )

    def check_jacobian(
        self,
        reference: ArrayLike,
        *,
        test_eps: float = DEFAULT_TEST_EPS,
        eps: float = DEFAULT_EPS,
    ) -> bool:
        """Returns whether an analytic Jacobian matches the finite-difference estimate."""
        return compare_jacobian(
            reference, self.jacobian(eps=eps), test_eps, msg="CalculusKit.check_jacobian"
        )

    def check_hessian(
        self,
        reference: ArrayLike,
        *,
        test_eps: float = DEFAULT_TEST_EPS,
        eps: float = DEFAULT_HESSIAN_EPS,
    ) -> bool:
        """Returns whether an analytic Hessian matches the finite-difference estimate."""
        return compare_hessian(
            reference, self.hessian(eps=eps), test_eps, msg="CalculusKit.check_hessian"
        )
