"""Finite-difference verification of NetLayer's analytic gradients.

The scalar loss used throughout is L = u · predict(x), whose gradients with
respect to A, b and x are exactly what grad_a, grad_b and grad_x return.
"""
from collections import namedtuple

import numpy as np

from .net_layer import NetLayer, LayerGradients

GradientCheckResult = namedtuple("GradientCheckResult", ["errors", "passed"])


def _loss(weights, bias, x, u):
    return float(np.dot(u, NetLayer.from_parameters(weights, bias).predict(x)))


def _central_difference(f, point, epsilon):
    grad = np.zeros_like(point)
    for idx in np.ndindex(point.shape):
        plus = point.copy()
        minus = point.copy()
        plus[idx] += epsilon
        minus[idx] -= epsilon
        grad[idx] = (f(plus) - f(minus)) / (2.0 * epsilon)
    return grad


def numerical_gradients(layer, x, u, epsilon=1e-6):
    """Central-difference gradients of L = u · layer.predict(x).

    Args:
        layer (NetLayer): Layer whose parameters are perturbed (left untouched)
        x (numpy.ndarray): Input vector of shape (input_size,)
        u (numpy.ndarray): Upstream gradient of shape (output_size,)
        epsilon (float): Perturbation size

    Returns:
        LayerGradients: Numerical estimates of (grad_a, grad_b, grad_x)
    """
    x = layer._check_input(x)
    u = layer._check_upstream(u)
    weights = np.array(layer.weights, dtype=np.float64)
    bias = np.array(layer.bias, dtype=np.float64)

    return LayerGradients(
        grad_a=_central_difference(lambda w: _loss(w, bias, x, u), weights, epsilon),
        grad_b=_central_difference(lambda b: _loss(weights, b, x, u), bias, epsilon),
        grad_x=_central_difference(lambda v: _loss(weights, bias, v, u), x, epsilon),
    )


def relative_error(analytic, numeric):
    """Largest elementwise |a - n| / max(1, |a|, |n|)."""
    analytic = np.asarray(analytic, dtype=np.float64)
    numeric = np.asarray(numeric, dtype=np.float64)
    if analytic.size == 0:
        return 0.0
    scale = np.maximum(1.0, np.maximum(np.abs(analytic), np.abs(numeric)))
    return float(np.max(np.abs(analytic - numeric) / scale))


def check_gradients(layer, x, u, epsilon=1e-6, tolerance=1e-5):
    """Compare the layer's analytic gradients with finite differences.

    Returns:
        GradientCheckResult: ``errors`` maps "grad_a", "grad_b" and "grad_x" to
        their relative error; ``passed`` is True when all are within tolerance.
    """
    analytic = layer.gradients(x, u)
    numeric = numerical_gradients(layer, x, u, epsilon)
    errors = {
        name: relative_error(getattr(analytic, name), getattr(numeric, name))
        for name in LayerGradients._fields
    }
    return GradientCheckResult(errors=errors, passed=all(e <= tolerance for e in errors.values()))
