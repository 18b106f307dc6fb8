"""
Activation Functions

Scalar activation functions and their derivatives. Both accept plain floats
as well as numpy arrays, and the derivative is always evaluated on the
pre-activation sum.
"""

import numpy as np
from typing import Dict, Type, Union

ArrayOrFloat = Union[float, np.ndarray]


class ActivationFunction:
    """Base class for activation functions."""

    name = 'base'

    def compute(self, x: ArrayOrFloat) -> ArrayOrFloat:
        """Pass the input through the function."""
        raise NotImplementedError

    def derivative(self, x: ArrayOrFloat) -> ArrayOrFloat:
        """Pass the input through the derivative of the function."""
        raise NotImplementedError

    def __call__(self, x: ArrayOrFloat) -> ArrayOrFloat:
        return self.compute(x)

    def __eq__(self, other):
        return type(self) is type(other)

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return f'{type(self).__name__}()'


class Sigmoid(ActivationFunction):
    """Squashes the weighted sum into the range (0, 1)."""

    name = 'sigmoid'

    def compute(self, x):
        # exp(-log(1 + e^-x)) == 1 / (1 + e^-x) without overflowing for large |x|
        return np.exp(-np.logaddexp(0.0, -np.asarray(x, dtype=float)))

    def derivative(self, x):
        s = self.compute(x)
        return s * (1.0 - s)


class HyperbolicTangent(ActivationFunction):
    """Squashes the weighted sum into the range (-1, 1)."""

    name = 'tanh'

    def compute(self, x):
        return np.tanh(x)

    def derivative(self, x):
        t = np.tanh(x)
        return 1.0 - t * t


_ACTIVATIONS: Dict[str, Type[ActivationFunction]] = {
    Sigmoid.name: Sigmoid,
    HyperbolicTangent.name: HyperbolicTangent,
}


def get_activation(name: str) -> ActivationFunction:
    """Get an activation function by name.

    Args:
        name: Name of the activation function. One of:
            - 'sigmoid': Logistic sigmoid.
            - 'tanh': Hyperbolic tangent.

    Returns:
        A new activation function instance.
    """
    try:
        return _ACTIVATIONS[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown activation function: {name}") from None
