"""Unit tests for finitediff.finite.stencil."""

import numpy as np
import pytest

from finitediff.finite.stencil import (
    STENCILS,
    AccuracyOrder,
    Stencil,
    evaluations_per_coordinate,
    get_stencil,
    validate_accuracy,
)

ALL_ORDERS = list(AccuracyOrder)


def test_accuracy_order_members():
    """Tests that exactly the four supported orders exist."""
    assert [int(a) for a in AccuracyOrder] == [2, 4, 6, 8]
    assert AccuracyOrder(4) is AccuracyOrder.FOURTH


@pytest.mark.parametrize(
    "accuracy, outer, inner, denominator",
    [
        (AccuracyOrder.SECOND, (1, -1), (1, -1), 2),
        (AccuracyOrder.FOURTH, (1, -8, 8, -1), (-2, -1, 1, 2), 12),
        (AccuracyOrder.SIXTH, (-1, 9, -45, 45, -9, 1), (-3, -2, -1, 1, 2, 3), 60),
        (
            AccuracyOrder.EIGHTH,
            (3, -32, 168, -672, 672, -168, 32, -3),
            (-4, -3, -2, -1, 1, 2, 3, 4),
            840,
        ),
    ],
)
def test_stencil_tables(accuracy, outer, inner, denominator):
    """Tests the coefficient tables against the standard central differences."""
    stencil = get_stencil(accuracy)
    assert isinstance(stencil, Stencil)
    assert stencil.outer == outer
    assert stencil.inner == inner
    assert stencil.denominator == denominator


@pytest.mark.parametrize("accuracy", ALL_ORDERS)
def test_stencil_shape_invariants(accuracy):
    """Tests that outer and inner have equal, even length matching the order."""
    stencil = get_stencil(accuracy)
    assert len(stencil.outer) == len(stencil.inner)
    assert len(stencil.outer) % 2 == 0
    assert len(stencil.outer) == int(accuracy)
    assert evaluations_per_coordinate(accuracy) == int(accuracy)


@pytest.mark.parametrize("accuracy", ALL_ORDERS)
def test_stencil_moments(accuracy):
    """Tests that each stencil differentiates polynomials up to its order exactly."""
    stencil = get_stencil(accuracy)
    outer = np.asarray(stencil.outer)
    inner = np.asarray(stencil.inner)

    assert np.sum(outer) == pytest.approx(0.0, abs=1e-12)
    assert np.sum(outer * inner) == pytest.approx(stencil.denominator)
    for k in range(2, int(accuracy) + 1):
        assert np.sum(outer * inner**k) == pytest.approx(0.0, abs=1e-9)


def test_integer_orders_are_accepted():
    """Tests that plain integers equal to an order select that order."""
    assert get_stencil(6) is STENCILS[AccuracyOrder.SIXTH]
    assert validate_accuracy(np.int64(8)) is AccuracyOrder.EIGHTH


@pytest.mark.parametrize("bad", [0, 1, 3, 10, -2, 2.0, "second", None, True])
def test_invalid_accuracy_order_raises(bad):
    """Tests that values outside the enumeration fail fast."""
    with pytest.raises(ValueError, match="invalid accuracy order"):
        get_stencil(bad)


def test_tables_are_read_only():
    """Tests that the lookup table cannot be modified at runtime."""
    with pytest.raises(TypeError):
        STENCILS[AccuracyOrder.SECOND] = Stencil((1.0,), (1.0,), 1.0)
