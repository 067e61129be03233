import math
import warnings

import numpy as np
import pytest

from sigmoid_net.activation import Sigmoid, sigmoid
from sigmoid_net.errors import DimensionMismatchError


def test_value_at_zero_is_one_half():
    assert Sigmoid.value(0.0) == 0.5
    assert Sigmoid.value(0) == 0.5


def test_value_scalar_returns_float():
    assert isinstance(Sigmoid.value(1.5), float)
    assert isinstance(Sigmoid.derivative(1.5), float)


@pytest.mark.parametrize("x", np.linspace(-30.0, 30.0, 61))
def test_value_strictly_between_zero_and_one(x):
    assert 0.0 < Sigmoid.value(x) < 1.0


def test_value_is_monotonic():
    xs = np.linspace(-20.0, 20.0, 401)
    assert np.all(np.diff(Sigmoid.value(xs)) > 0)


@pytest.mark.parametrize("x", [-8.0, -2.5, -0.1, 0.0, 0.7, 3.0, 9.0])
def test_value_matches_logistic_formula(x):
    assert Sigmoid.value(x) == pytest.approx(1.0 / (1.0 + math.exp(-x)), rel=1e-12)


@pytest.mark.parametrize("x", [-12.0, -3.0, -0.5, 0.0, 0.25, 4.0, 15.0])
def test_derivative_identity(x):
    s = Sigmoid.value(x)
    assert Sigmoid.derivative(x) == pytest.approx(s * (1.0 - s), rel=1e-9, abs=1e-15)


@pytest.mark.parametrize("x", [-5.0, -1.0, 0.0, 2.0, 5.0])
def test_derivative_matches_exponential_form(x):
    expected = math.exp(x) / (1.0 + math.exp(x)) ** 2
    assert Sigmoid.derivative(x) == pytest.approx(expected, rel=1e-12)


def test_derivative_at_zero():
    assert Sigmoid.derivative(0.0) == 0.25


def test_large_inputs_saturate_without_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert Sigmoid.value(1000.0) == 1.0
        assert Sigmoid.value(-1000.0) == 0.0
        assert Sigmoid.derivative(1000.0) == 0.0
        assert Sigmoid.derivative(-1000.0) == 0.0
        out = Sigmoid.value(np.array([-800.0, 800.0]))
    np.testing.assert_array_equal(out, [0.0, 1.0])


def test_vector_value_is_elementwise():
    x = np.array([-3.0, -0.5, 0.0, 1.25, 6.0])
    out = Sigmoid.value(x)
    assert out.shape == x.shape
    for i, xi in enumerate(x):
        assert out[i] == pytest.approx(Sigmoid.value(xi), rel=1e-14)


def test_vector_derivative_is_diagonal_jacobian():
    x = np.array([-2.0, 0.0, 0.5, 3.0])
    jac = Sigmoid.derivative(x)

    assert jac.shape == (4, 4)
    for i, xi in enumerate(x):
        assert jac[i, i] == pytest.approx(Sigmoid.derivative(xi), rel=1e-14)
    off_diagonal = jac - np.diag(np.diag(jac))
    assert np.all(off_diagonal == 0.0)


def test_derivative_vector_matches_jacobian_diagonal():
    x = np.array([-1.5, 0.0, 2.5])
    np.testing.assert_array_equal(Sigmoid.derivative_vector(x), np.diag(Sigmoid.derivative(x)))


def test_empty_vector():
    assert Sigmoid.value(np.array([])).shape == (0,)
    assert Sigmoid.derivative(np.array([])).shape == (0, 0)


def test_jacobian_rejects_matrix_input():
    with pytest.raises(DimensionMismatchError):
        Sigmoid.derivative(np.zeros((2, 2)))


def test_sigmoid_helper():
    x = np.array([-1.0, 0.0, 1.0])
    np.testing.assert_array_equal(sigmoid(x), Sigmoid.value(x))
