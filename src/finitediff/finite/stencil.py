"""Central-difference stencil tables for the supported accuracy orders.

Each stencil approximates a first derivative as

    f'(x) ~ sum_k outer[k] * f(x + inner[k] * eps) / (denominator * eps)

The coefficients are the standard minimal central-difference weights
(see https://en.wikipedia.org/wiki/Finite_difference_coefficient). They are
looked up, never derived at runtime.
"""

from __future__ import annotations

from enum import IntEnum
from numbers import Integral
from types import MappingProxyType
from typing import Any, NamedTuple

__all__ = [
    "AccuracyOrder",
    "Stencil",
    "STENCILS",
    "get_stencil",
    "validate_accuracy",
    "evaluations_per_coordinate",
]


class AccuracyOrder(IntEnum):
    """Truncation-error order of a central finite-difference stencil.

    The member value is the order itself, so ``AccuracyOrder(4)`` is
    ``AccuracyOrder.FOURTH``.
    """

    SECOND = 2
    FOURTH = 4
    SIXTH = 6
    EIGHTH = 8


class Stencil(NamedTuple):
    """Weights and offsets of one central finite-difference formula.

    Attributes:
        outer: Weights applied to the function values.
        inner: Offsets of the evaluation points, in units of the step size.
        denominator: Common denominator of the weights.
    """

    outer: tuple[float, ...]
    inner: tuple[float, ...]
    denominator: float


#: Read-only mapping from accuracy order to its stencil.
STENCILS = MappingProxyType({
    AccuracyOrder.SECOND: Stencil(
        outer=(1.0, -1.0),
        inner=(1.0, -1.0),
        denominator=2.0,
    ),
    AccuracyOrder.FOURTH: Stencil(
        outer=(1.0, -8.0, 8.0, -1.0),
        inner=(-2.0, -1.0, 1.0, 2.0),
        denominator=12.0,
    ),
    AccuracyOrder.SIXTH: Stencil(
        outer=(-1.0, 9.0, -45.0, 45.0, -9.0, 1.0),
        inner=(-3.0, -2.0, -1.0, 1.0, 2.0, 3.0),
        denominator=60.0,
    ),
    AccuracyOrder.EIGHTH: Stencil(
        outer=(3.0, -32.0, 168.0, -672.0, 672.0, -168.0, 32.0, -3.0),
        inner=(-4.0, -3.0, -2.0, -1.0, 1.0, 2.0, 3.0, 4.0),
        denominator=840.0,
    ),
})


def validate_accuracy(accuracy: Any) -> AccuracyOrder:
    """Returns ``accuracy`` as an :class:`AccuracyOrder`.

    Integers equal to a member value (2, 4, 6 or 8) are accepted as well.

    Args:
        accuracy: The requested accuracy order.

    Returns:
        The matching :class:`AccuracyOrder` member.

    Raises:
        ValueError: If ``accuracy`` is not one of the supported orders.
    """
    if isinstance(accuracy, AccuracyOrder):
        return accuracy
    # bool is an int subclass; True must not select anything
    if isinstance(accuracy, Integral) and not isinstance(accuracy, bool):
        try:
            return AccuracyOrder(accuracy)
        except ValueError:
            pass
    supported = [int(a) for a in AccuracyOrder]
    raise ValueError(
        f"invalid accuracy order {accuracy!r}; must be one of {supported}."
    )


def get_stencil(accuracy: AccuracyOrder | int) -> Stencil:
    """Returns the stencil for the requested accuracy order.

    Args:
        accuracy: The accuracy order of the finite difference.

    Returns:
        The (outer, inner, denominator) stencil triple.

    Raises:
        ValueError: If ``accuracy`` is not one of the supported orders.
    """
    return STENCILS[validate_accuracy(accuracy)]


def evaluations_per_coordinate(accuracy: AccuracyOrder | int) -> int:
    """Returns the number of function evaluations per perturbed coordinate."""
    return len(get_stencil(accuracy).outer)
