"""
Controllers

Turn sensor readings into steering and gas values. A controller either
feeds the sensors through a neural network or holds values set by the
caller, so agents driven by a network and agents driven by a person can be
mixed in one population.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence, Tuple

import numpy as np

from .networks import NeuralNetwork

DEFAULT_TOPOLOGY = (6, 5, 2)


class Controller(ABC):
    """Base class for everything that steers an agent.

    Steering and gas are both in the range [-1.0, 1.0].
    """

    def __init__(self):
        self.steering = 0.0
        self.gas = 0.0

    @abstractmethod
    def update(self, sensor_inputs: Sequence[float]) -> Tuple[float, float]:
        """Update steering and gas from sensor values in the range [0.0, 1.0].

        Returns:
            Tuple of (steering, gas).
        """
        pass


class NeuralNetworkController(Controller):
    """Computes steering and gas by feeding the sensor inputs through a network."""

    def __init__(self, network: Optional[NeuralNetwork] = None):
        """
        Args:
            network: Network with two output neurons. A new, randomized
                6-5-2 network is created if None.
        """
        super().__init__()
        if network is None:
            network = NeuralNetwork()
            for size in DEFAULT_TOPOLOGY:
                network.add_layer(size)
            network.build().reset()
        self.network = network

    @property
    def input_width(self) -> int:
        """Number of sensor values the network expects."""
        return self.network.input_layer.n_neurons

    def update(self, sensor_inputs):
        outputs = self.network.compute(np.asarray(sensor_inputs, dtype=float))
        # Map the (0, 1) outputs onto (-1, 1)
        self.steering = float(2.0 * outputs[0] - 1.0)
        self.gas = float(2.0 * outputs[1] - 1.0)
        return self.steering, self.gas


class UserInputController(Controller):
    """Holds steering and gas values set from outside, e.g. by key input."""

    def set_input(self, steering: Optional[float] = None, gas: Optional[float] = None):
        """Set the steering and/or gas value, clipped to [-1.0, 1.0]."""
        if steering is not None:
            self.steering = float(np.clip(steering, -1.0, 1.0))
        if gas is not None:
            self.gas = float(np.clip(gas, -1.0, 1.0))

    def update(self, sensor_inputs):
        return self.steering, self.gas
