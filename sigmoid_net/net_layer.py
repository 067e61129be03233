import numbers
from collections import namedtuple

import numpy as np

from .activation import Sigmoid
from .errors import DimensionMismatchError, InvalidArgumentError

LayerGradients = namedtuple("LayerGradients", ["grad_a", "grad_b", "grad_x"])


def _check_layer_size(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidArgumentError(f"{name} must be at least 1, got {value}")
    return int(value)


def _as_vector(name, v, expected_size):
    v = np.asarray(v, dtype=np.float64)
    if v.ndim != 1 or v.shape[0] != expected_size:
        raise DimensionMismatchError(
            f"{name} must be a vector of shape ({expected_size},), got shape {v.shape}"
        )
    return v


class NetLayer:
    """Fully connected layer with sigmoid activation: y = σ(Ax + b).

    A (``weights``) has shape (output_size, input_size) and b (``bias``) has
    shape (output_size,). Both are read-only after construction; updating
    them from the gradients below is left to an external optimizer.

    Backpropagation, with z = Ax + b, D = diag(σ'(z)) and u = dL/dy:

    - dL/dA = D u x^T
    - dL/db = D u
    - dL/dx = (u^T D A)^T

    D is kept as the vector σ'(z), so every product with it is a Hadamard
    product.
    """

    def __init__(self, output_size, input_size, generator):
        """Initialize a layer with random parameters.

        Args:
            output_size (int): Size of the output vector
            input_size (int): Size of the input vector
            generator (RandomGenerator): Source of the initial weights and bias
        """
        output_size = _check_layer_size("output_size", output_size)
        input_size = _check_layer_size("input_size", input_size)
        if generator is None:
            raise InvalidArgumentError("a RandomGenerator must be supplied")

        # Weights are drawn before the bias
        weights = generator.make_matrix(output_size, input_size)
        bias = generator.make_vector(output_size)
        self._set_parameters(weights, bias)

    @classmethod
    def from_parameters(cls, weights, bias):
        """Build a layer from explicit parameters.

        Args:
            weights (array_like): Matrix of shape (output_size, input_size)
            bias (array_like): Vector of shape (output_size,)

        Returns:
            NetLayer: Layer owning copies of the given arrays
        """
        weights = np.asarray(weights, dtype=np.float64)
        bias = np.asarray(bias, dtype=np.float64)
        if weights.ndim != 2 or weights.shape[0] < 1 or weights.shape[1] < 1:
            raise InvalidArgumentError(
                f"weights must be a non-empty matrix, got shape {weights.shape}"
            )
        if bias.ndim != 1 or bias.shape[0] != weights.shape[0]:
            raise InvalidArgumentError(
                f"bias must have shape ({weights.shape[0]},), got shape {bias.shape}"
            )

        layer = cls.__new__(cls)
        layer._set_parameters(weights, bias)
        return layer

    def _set_parameters(self, weights, bias):
        self.weights = np.array(weights, dtype=np.float64)
        self.bias = np.array(bias, dtype=np.float64)
        self.weights.flags.writeable = False
        self.bias.flags.writeable = False
        self.output_size, self.input_size = self.weights.shape

    def _check_input(self, x):
        return _as_vector("x", x, self.input_size)

    def _check_upstream(self, u):
        return _as_vector("u", u, self.output_size)

    def _linear(self, x):
        return np.dot(self.weights, x) + self.bias

    def _delta(self, x, u):
        # D u, with D held as the vector σ'(z)
        return Sigmoid.derivative_vector(self._linear(x)) * u

    def linear(self, x):
        """Affine part of the layer: z = Ax + b.

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)

        Returns:
            numpy.ndarray: Vector of shape (output_size,)
        """
        return self._linear(self._check_input(x))

    def predict(self, x):
        """Forward pass: y = σ(Ax + b).

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)

        Returns:
            numpy.ndarray: Output vector of shape (output_size,)
        """
        return Sigmoid.value(self._linear(self._check_input(x)))

    def grad_a(self, x, u):
        """Gradient of the loss with respect to the weights.

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)
            u (numpy.ndarray): Upstream gradient dL/dy of shape (output_size,)

        Returns:
            numpy.ndarray: Matrix of shape (output_size, input_size)
        """
        x = self._check_input(x)
        u = self._check_upstream(u)
        return np.outer(self._delta(x, u), x)

    def grad_b(self, x, u):
        """Gradient of the loss with respect to the bias.

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)
            u (numpy.ndarray): Upstream gradient dL/dy of shape (output_size,)

        Returns:
            numpy.ndarray: Vector of shape (output_size,)
        """
        x = self._check_input(x)
        u = self._check_upstream(u)
        return self._delta(x, u)

    def grad_x(self, x, u):
        """Gradient of the loss with respect to the input, for the previous layer.

        Args:
            x (numpy.ndarray): Input vector of shape (input_size,)
            u (numpy.ndarray): Upstream gradient dL/dy of shape (output_size,)

        Returns:
            numpy.ndarray: Vector of shape (input_size,)
        """
        x = self._check_input(x)
        u = self._check_upstream(u)
        return np.dot(self.weights.T, self._delta(x, u))

    def gradients(self, x, u):
        """All three gradients, computed from a single forward evaluation.

        Returns:
            LayerGradients: (grad_a, grad_b, grad_x)
        """
        x = self._check_input(x)
        u = self._check_upstream(u)
        delta = self._delta(x, u)
        return LayerGradients(
            grad_a=np.outer(delta, x),
            grad_b=delta,
            grad_x=np.dot(self.weights.T, delta),
        )

    def __repr__(self):
        return f"{type(self).__name__}(output_size={self.output_size}, input_size={self.input_size})"
