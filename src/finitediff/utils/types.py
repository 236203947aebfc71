"""Shared typing aliases for finitediff."""

from __future__ import annotations

from typing import Protocol, Sequence, TypeAlias

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.float64]

ArrayLike1D: TypeAlias = Sequence[float] | NDArray[np.floating]
ArrayLike2D: TypeAlias = Sequence[Sequence[float]] | NDArray[np.floating]


class ScalarFunction(Protocol):
    """A target function f: R^n -> R, used by the gradient and Hessian."""

    def __call__(self, x: FloatArray, /) -> float: ...


class VectorFunction(Protocol):
    """A target function f: R^n -> R^k (or R^(p x q)), used by the Jacobian."""

    def __call__(self, x: FloatArray, /) -> ArrayLike1D | ArrayLike2D: ...
