import numpy as np

from .errors import DimensionMismatchError


class Sigmoid:
    """Logistic sigmoid activation σ(x) = 1 / (1 + e^(-x)) and its derivative.

    Scalars map to Python floats, vectors map elementwise. Both the value and
    the derivative are evaluated through e^(-|x|), which never overflows, so
    large inputs saturate towards 0 or 1 instead of raising.
    """

    @staticmethod
    def value(x):
        """Sigmoid of a scalar or elementwise sigmoid of a vector.

        Args:
            x (float or numpy.ndarray): Input value(s)

        Returns:
            float or numpy.ndarray: σ(x), with the same shape as x
        """
        x = np.asarray(x, dtype=np.float64)
        e = np.exp(-np.abs(x))
        out = np.where(x >= 0, 1.0 / (1.0 + e), e / (1.0 + e))
        if out.ndim == 0:
            return float(out)
        return out

    @staticmethod
    def derivative_vector(x):
        """Elementwise derivative σ'(x) = e^x / (1 + e^x)^2.

        Args:
            x (float or numpy.ndarray): Input value(s)

        Returns:
            float or numpy.ndarray: σ'(x), with the same shape as x
        """
        x = np.asarray(x, dtype=np.float64)
        # σ' is even, so e^(-|x|) / (1 + e^(-|x|))^2 equals e^x / (1 + e^x)^2
        e = np.exp(-np.abs(x))
        out = e / (1.0 + e) ** 2
        if out.ndim == 0:
            return float(out)
        return out

    @staticmethod
    def derivative(x):
        """Derivative of the sigmoid.

        For a scalar this is σ'(x). For a vector it is the Jacobian of the
        elementwise map: a square diagonal matrix whose entry (i, i) is
        σ'(x[i]) and whose off-diagonal entries are zero.

        Args:
            x (float or numpy.ndarray): Scalar or vector of shape (n,)

        Returns:
            float or numpy.ndarray: σ'(x), or a matrix of shape (n, n)
        """
        x = np.asarray(x, dtype=np.float64)
        if x.ndim == 0:
            return Sigmoid.derivative_vector(x)
        if x.ndim != 1:
            raise DimensionMismatchError(
                f"Sigmoid Jacobian needs a vector, got an array of shape {x.shape}"
            )
        return np.diag(Sigmoid.derivative_vector(x))


def sigmoid(x):
    """Sigmoid activation function."""
    return Sigmoid.value(x)
