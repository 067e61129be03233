import math
import numbers
import threading

import numpy as np

from .errors import InvalidArgumentError

# Seed used when none is given
DEFAULT_SEED = 42

# Standard deviation of the normal distribution parameters are drawn from
DEFAULT_STD = 10.0


def _check_size(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidArgumentError(f"{name} must be non-negative, got {value}")
    return int(value)


class RandomGenerator:
    """Seeded source of normally distributed parameters.

    A single numpy ``Generator`` is both seeded and sampled, so two instances
    built with the same seed and asked for the same sequence of draws return
    identical arrays. Every draw advances the stream.

    Draws are serialized with a lock. When one generator is shared by several
    layers the construction order still decides which values each layer gets.
    """

    def __init__(self, seed=None, std=DEFAULT_STD):
        """Create a generator.

        Args:
            seed (int, optional): Seed of the stream. If None, DEFAULT_SEED is used.
            std (float): Standard deviation of the normal(0, std) distribution
        """
        if seed is None:
            seed = DEFAULT_SEED
        seed = _check_size("seed", seed)
        if isinstance(std, bool) or not isinstance(std, numbers.Real) \
                or not math.isfinite(std) or std <= 0:
            raise InvalidArgumentError(f"std must be a positive finite number, got {std!r}")

        self._seed = seed
        self._std = float(std)
        self._rng = np.random.default_rng(seed)
        self._lock = threading.Lock()

    @property
    def seed(self):
        return self._seed

    @property
    def std(self):
        return self._std

    def make_matrix(self, rows, cols):
        """Draw a matrix of independent normal(0, std) samples.

        Args:
            rows (int): Number of rows
            cols (int): Number of columns

        Returns:
            numpy.ndarray: Matrix of shape (rows, cols)
        """
        rows = _check_size("rows", rows)
        cols = _check_size("cols", cols)
        with self._lock:
            return self._rng.normal(0.0, self._std, size=(rows, cols))

    def make_vector(self, n):
        """Draw a vector of independent normal(0, std) samples.

        Args:
            n (int): Length of the vector

        Returns:
            numpy.ndarray: Vector of shape (n,)
        """
        n = _check_size("n", n)
        with self._lock:
            return self._rng.normal(0.0, self._std, size=n)

    def __repr__(self):
        return f"RandomGenerator(seed={self._seed}, std={self._std})"
