"""
Neural Network Layers

This module contains the layer and neuron containers the network is built from.
A layer stores the state of all its neurons in flat numpy arrays; a Neuron is
a light view onto one row of those arrays.
"""

import numpy as np
from typing import Iterator, List, Optional, Sequence

from .activations import ActivationFunction
from .exceptions import DimensionMismatch


class Neuron:
    """View onto a single neuron of a NeuronLayer.

    Exposes the per-neuron scalar state (``sum`` and ``output``) and the
    outgoing weight vector together with its training accumulators. All
    values live in the owning layer, so writes through the view are visible
    to the layer and vice versa.
    """

    __slots__ = ('layer', 'index')

    def __init__(self, layer: 'NeuronLayer', index: int):
        self.layer = layer
        self.index = index

    @property
    def is_bias(self) -> bool:
        return self.index >= self.layer.n_neurons

    @property
    def output(self) -> float:
        return float(self.layer.outputs[self.index])

    @output.setter
    def output(self, value: float):
        self.layer.outputs[self.index] = value

    @property
    def sum(self) -> float:
        return float(self.layer.sums[self.index])

    @sum.setter
    def sum(self, value: float):
        self.layer.sums[self.index] = value

    @property
    def weights(self) -> np.ndarray:
        return self.layer.weights[self.index]

    @property
    def gradients(self) -> np.ndarray:
        return self.layer.gradients[self.index]

    @property
    def weight_change(self) -> np.ndarray:
        return self.layer.weight_change[self.index]

    def __repr__(self):
        kind = 'bias' if self.is_bias else 'normal'
        return f'<Neuron {kind} index={self.index} output={self.output:.4f}>'


class NeuronLayer:
    """Fully connected layer of neurons sharing one activation function."""

    def __init__(self,
                 activation: ActivationFunction,
                 n_neurons: int,
                 n_weights_per_neuron: int,
                 n_bias_neurons: int,
                 weights: Optional[np.ndarray] = None):
        """Create the neuron arrays for this layer.

        Args:
            activation: Function used to compute the outputs of the neurons.
            n_neurons: Number of normal neurons.
            n_weights_per_neuron: Number of weights going out of each neuron,
                i.e. the number of normal neurons in the next layer.
            n_bias_neurons: Number of bias neurons (constant output 1.0).
            weights: Optional preallocated weight matrix of shape
                (n_neurons + n_bias_neurons, n_weights_per_neuron). The layer
                keeps a reference to it, so it may be a view into a larger
                buffer.
        """
        self.activation = activation
        self.n_neurons = n_neurons
        self.n_bias_neurons = n_bias_neurons
        self.n_weights = n_weights_per_neuron

        shape = (n_neurons + n_bias_neurons, n_weights_per_neuron)
        if weights is None:
            weights = np.zeros(shape)
        elif weights.shape != shape:
            raise DimensionMismatch(
                f"Weight matrix has shape {weights.shape}, expected {shape}"
            )
        self.weights = weights

        # Used for computing
        self.sums = np.zeros(shape[0])
        self.outputs = np.zeros(shape[0])
        self.outputs[n_neurons:] = 1.0

        # Used for training
        self.gradients = np.zeros(shape)
        self.weight_change = np.zeros(shape)

    def __len__(self) -> int:
        return self.n_neurons + self.n_bias_neurons

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self.neurons)

    def __repr__(self):
        return (f'<NeuronLayer neurons={self.n_neurons} bias={self.n_bias_neurons} '
                f'weights={self.n_weights} activation={self.activation!r}>')

    @property
    def neurons(self) -> List[Neuron]:
        """All neurons of this layer, normal neurons first."""
        return [Neuron(self, i) for i in range(len(self))]

    def number_of_normal_neurons(self) -> int:
        return self.n_neurons

    def number_of_bias_neurons(self) -> int:
        return self.n_bias_neurons

    def set_outputs(self, data: Sequence[float]):
        """Set the outputs of the normal neurons.

        Raises:
            DimensionMismatch: If ``data`` does not hold one value per normal neuron.
        """
        data = np.asarray(data, dtype=float).ravel()
        if data.shape[0] != self.n_neurons:
            raise DimensionMismatch(
                f"The number of inputs ({data.shape[0]}) does not match the "
                f"number of neurons ({self.n_neurons}) in this layer"
            )
        self.outputs[:self.n_neurons] = data

    def get_outputs(self) -> np.ndarray:
        """Return a copy of the outputs of the normal neurons."""
        return self.outputs[:self.n_neurons].copy()

    def activate(self, sums: np.ndarray):
        """Store the weighted sums of the normal neurons and apply the activation."""
        self.sums[:self.n_neurons] = sums
        self.outputs[:self.n_neurons] = self.activation.compute(sums)

    def reset_gradients(self):
        """Reset all training accumulators to zero."""
        self.gradients.fill(0.0)
        self.weight_change.fill(0.0)
