class NetLayerError(ValueError):
    """Base class for errors raised by the sigmoid_net package."""


class DimensionMismatchError(NetLayerError):
    """A vector does not have the length (or rank) the layer expects."""


class InvalidArgumentError(NetLayerError):
    """A size, seed or parameter array is outside its allowed range."""
