"""Unit tests for finitediff.calculus.jacobian.finite_jacobian_tensor."""

import numpy as np
import pytest

from finitediff.calculus import finite_jacobian, finite_jacobian_tensor
from finitediff.compare import compare_jacobian
from finitediff.finite.stencil import AccuracyOrder
from finitediff.utils.layout import flatten, unflatten

ALL_ORDERS = list(AccuracyOrder)

P = 2
Q = 3


def make_linear_tensor_map(rng, n):
    """Returns (f, slices) with f(x) = sum_k x_k T_k, so df/dx_k = T_k."""
    slices = rng.uniform(-1.0, 1.0, size=(n, P, Q))

    def f(x):
        return np.tensordot(x, slices, axes=1)

    return f, slices


@pytest.mark.parametrize("accuracy", ALL_ORDERS)
@pytest.mark.parametrize("n", [1, 2, 4, 10])
def test_tensor_jacobian_layouts(rng, accuracy, n):
    """Tests column blocks for even tensor orders and column-major columns for odd ones."""
    f, slices = make_linear_tensor_map(rng, n)
    x = rng.uniform(-1.0, 1.0, size=n)

    jac_even = np.zeros((P, Q * n))
    jac_odd = np.zeros((P * Q, n))
    for k in range(n):
        jac_even[:, Q * k:Q * (k + 1)] = slices[k]
        jac_odd[:, k] = slices[k].ravel(order="F")

    fjac_odd = finite_jacobian_tensor(x, f, 3, accuracy)
    assert fjac_odd.shape == (P * Q, n)
    assert compare_jacobian(jac_odd, fjac_odd)

    fjac_even = finite_jacobian_tensor(x, f, 4, accuracy)
    assert fjac_even.shape == (P, Q * n)
    assert compare_jacobian(jac_even, fjac_even)


@pytest.mark.parametrize("tensor_order", [1, 2, 5, 6])
def test_tensor_jacobian_depends_only_on_parity(rng, tensor_order):
    """Tests that tensor orders of equal parity share the layout."""
    f, _ = make_linear_tensor_map(rng, 3)
    x = rng.uniform(-1.0, 1.0, size=3)
    reference = finite_jacobian_tensor(x, f, 4 if tensor_order % 2 == 0 else 3)
    np.testing.assert_array_equal(finite_jacobian_tensor(x, f, tensor_order), reference)


def test_even_layout_of_vector_output_is_plain_jacobian(rng):
    """Tests that a vector output with even tensor order matches finite_jacobian."""
    a = rng.uniform(-1.0, 1.0, size=(4, 3))
    x = rng.uniform(-1.0, 1.0, size=3)

    def f(p):
        return a @ p

    np.testing.assert_array_equal(
        finite_jacobian_tensor(x, f, 2), finite_jacobian(x, f)
    )


def test_odd_layout_matches_flattened_jacobian(rng):
    """Tests the odd layout against the Jacobian of the column-major flattened output."""
    f, _ = make_linear_tensor_map(rng, 3)
    x = rng.uniform(-1.0, 1.0, size=3)

    def f_flat(p):
        return f(p).ravel(order="F")

    assert compare_jacobian(finite_jacobian(x, f_flat), finite_jacobian_tensor(x, f, 1))


def test_row_major_outputs_can_be_wired_through_flatten(rng):
    """Tests that flatten/unflatten bridge matrix outputs and vector functions."""
    f, slices = make_linear_tensor_map(rng, 2)
    x = rng.uniform(-1.0, 1.0, size=2)

    jac = finite_jacobian(x, lambda p: flatten(f(p)))

    assert jac.shape == (P * Q, 2)
    for k in range(2):
        assert compare_jacobian(slices[k], unflatten(jac[:, k], Q))


def test_tensor_jacobian_rejects_three_dimensional_output():
    """Tests that outputs must already be in matrix form."""
    with pytest.raises(TypeError):
        finite_jacobian_tensor(np.ones(2), lambda p: np.ones((2, 2, 2)), 3)


def test_tensor_jacobian_rejects_scalar_output():
    """Tests that scalar outputs have no matrix representation."""
    with pytest.raises(TypeError):
        finite_jacobian_tensor(np.ones(2), lambda p: float(p.sum()), 2)


@pytest.mark.parametrize("tensor_order", [0, -1, 2.0, "3", None, True])
def test_tensor_jacobian_rejects_bad_tensor_order(tensor_order):
    """Tests that tensor_order must be a positive integer."""
    with pytest.raises(ValueError):
        finite_jacobian_tensor(np.ones(2), lambda p: np.outer(p, p), tensor_order)
