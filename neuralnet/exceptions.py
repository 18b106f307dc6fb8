"""
Neural Network Errors

Exceptions raised by the network, the trainers and the data utilities.
"""


class NeuralNetworkError(Exception):
    """Base class for all errors raised by this package."""


class NotReady(NeuralNetworkError, RuntimeError):
    """Raised when an operation requires a built network (or a loaded dataset)."""


class InvalidTopology(NeuralNetworkError, ValueError):
    """Raised for non-positive layer sizes or when building without layers."""


class DimensionMismatch(NeuralNetworkError, ValueError):
    """Raised when a vector or matrix does not have the expected length."""


class StructureMismatch(DimensionMismatch):
    """Raised when two networks that must share a topology do not."""


class UnknownCategory(NeuralNetworkError, ValueError):
    """Raised when a categorical value was not seen while scanning the dataset."""


class InvalidNetworkFile(NeuralNetworkError, ValueError):
    """Raised when a persisted network does not match the expected layout."""


class NoLayers(InvalidTopology, NotReady):
    """Raised when building a network that has no declared layers."""
