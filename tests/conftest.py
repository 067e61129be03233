import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from sigmoid_net.net_layer import NetLayer
from sigmoid_net.random_generator import RandomGenerator


@pytest.fixture
def generator():
    """Fresh, isolated generator with the default seed."""
    return RandomGenerator()


@pytest.fixture
def unit_generator():
    """Generator drawing from normal(0, 1) so activations stay unsaturated."""
    return RandomGenerator(seed=7, std=1.0)


@pytest.fixture
def zero_z_layer():
    """3x2 layer whose pre-activation is exactly 0 at x = [-2, 3]."""
    weights = [[1.0, 1.0], [0.0, 0.0], [0.5, 0.0]]
    bias = [-1.0, 0.0, 1.0]
    return NetLayer.from_parameters(weights, bias)


@pytest.fixture
def fixture_layer():
    """3x2 layer with literal, moderate parameters."""
    weights = [[0.3, -0.2], [0.1, 0.4], [-0.5, 0.25]]
    bias = [0.1, -0.3, 0.2]
    return NetLayer.from_parameters(weights, bias)


@pytest.fixture
def x():
    return np.array([-2.0, 3.0])


@pytest.fixture
def u():
    return np.array([-1.0, 2.0, 1.0])
