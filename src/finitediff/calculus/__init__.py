"""Calculus utilities.

Provides the finite-difference gradient, Jacobian, and Hessian engines.
"""

from .gradient import DEFAULT_EPS, finite_gradient
from .hessian import DEFAULT_HESSIAN_EPS, finite_hessian
from .jacobian import finite_jacobian, finite_jacobian_tensor

__all__ = [
    "finite_gradient",
    "finite_jacobian",
    "finite_jacobian_tensor",
    "finite_hessian",
    "DEFAULT_EPS",
    "DEFAULT_HESSIAN_EPS",
]
