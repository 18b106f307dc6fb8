"""
Neural Network Architecture

This module contains the feed forward neural network. Layers are declared
with add_layer, materialized by build and the weights are randomized by
reset. All weights of a network live in one contiguous buffer; every layer
holds a view into it, ordered layer-major, neuron-major, weight-index-major.
"""

import logging
import numpy as np
from typing import List, Optional, Sequence, Tuple

from .activations import ActivationFunction, Sigmoid
from .exceptions import DimensionMismatch, InvalidTopology, NoLayers, NotReady
from .layers import NeuronLayer

logger = logging.getLogger(__name__)

BIAS_NEURONS = 1
WEIGHT_INIT_RANGE = 2.0


class NeuralNetwork:
    """Feed forward neural network of fully connected layers."""

    def __init__(self, rng: Optional[np.random.Generator] = None):
        """Initialize an empty network.

        Args:
            rng: Random generator used for weight initialization. A fresh,
                unseeded generator is used if None.
        """
        self.rng = rng if rng is not None else np.random.default_rng()
        self.layers: List[NeuronLayer] = []
        self._pending: List[Tuple[int, ActivationFunction]] = []
        self._weights = np.zeros(0)
        self._ready = False

    def __repr__(self):
        sizes = '-'.join(str(n) for n in self.topology) or 'empty'
        return f'<NeuralNetwork topology={sizes} ready={self._ready}>'

    def add_layer(self, size: int, activation: Optional[ActivationFunction] = None) -> 'NeuralNetwork':
        """Add a layer to the network.

        Args:
            size: Number of normal neurons in the layer.
            activation: Activation function of the layer. Sigmoid if None.

        Returns:
            The network itself, to allow chaining.

        Raises:
            InvalidTopology: If ``size`` is not positive or the network is
                already built.
        """
        if self._ready:
            raise InvalidTopology("Layers cannot be added to a built network")
        if int(size) != size or size <= 0:
            raise InvalidTopology(f"Each layer needs a minimum of one neuron, got {size}")
        self._pending.append((int(size), activation or Sigmoid()))
        return self

    def build(self) -> 'NeuralNetwork':
        """Build the network structure as defined through the added layers.

        The output layer gets no bias neuron and no outgoing weights. This
        method has to be called to finalize the network before use.

        Raises:
            NoLayers: If no layers have been added. It is both an
                InvalidTopology and a NotReady error.
        """
        if self._ready:
            return self
        if not self._pending:
            raise NoLayers("No layers have been added to the network")

        shapes = []
        for i, (size, _) in enumerate(self._pending):
            if i < len(self._pending) - 1:
                shapes.append((size + BIAS_NEURONS, self._pending[i + 1][0]))
            else:
                shapes.append((size, 0))

        self._weights = np.zeros(sum(rows * cols for rows, cols in shapes))

        offset = 0
        for i, ((size, activation), (rows, cols)) in enumerate(zip(self._pending, shapes)):
            view = self._weights[offset:offset + rows * cols].reshape(rows, cols)
            n_bias = BIAS_NEURONS if i < len(self._pending) - 1 else 0
            self.layers.append(NeuronLayer(activation, size, cols, n_bias, weights=view))
            offset += rows * cols

        self._ready = True
        logger.debug(f"Built network {self!r} with {self.weight_count} weights")
        return self

    def reset(self) -> 'NeuralNetwork':
        """Randomize the weights and clear the training accumulators.

        Every weight is drawn independently and uniformly from
        [-WEIGHT_INIT_RANGE, WEIGHT_INIT_RANGE].
        """
        self._check_ready("resetting")
        self._weights[:] = self.rng.uniform(-WEIGHT_INIT_RANGE, WEIGHT_INIT_RANGE,
                                            self._weights.shape)
        for layer in self.layers:
            layer.reset_gradients()
        return self

    def compute(self, *input_data) -> np.ndarray:
        """Feed the input through the network and compute a result.

        Accepts either a single sequence or the input values as separate
        arguments, i.e. ``compute([0, 1])`` and ``compute(0, 1)`` are equal.

        Returns:
            The outputs of the output layer's neurons.

        Raises:
            NotReady: If the network has not been built.
            DimensionMismatch: If the number of inputs does not match the
                size of the input layer.
        """
        self._check_ready("computing")
        if len(input_data) == 1 and np.ndim(input_data[0]) > 0:
            input_data = input_data[0]

        inputs = np.asarray(input_data, dtype=float)
        if inputs.ndim != 1 or inputs.shape[0] != self.input_layer.n_neurons:
            raise DimensionMismatch(
                f"Expected {self.input_layer.n_neurons} inputs, got shape {inputs.shape}"
            )

        self.input_layer.set_outputs(inputs)
        for previous, layer in zip(self.layers, self.layers[1:]):
            # The bias neuron's constant output of 1.0 adds its weights as an offset
            layer.activate(previous.outputs @ previous.weights)

        return self.output_layer.get_outputs()

    def is_ready(self) -> bool:
        """The network is ready when layers have been added and it is built."""
        return self._ready

    @property
    def ready(self) -> bool:
        return self._ready

    @property
    def input_layer(self) -> NeuronLayer:
        self._check_ready("accessing layers")
        return self.layers[0]

    @property
    def output_layer(self) -> NeuronLayer:
        self._check_ready("accessing layers")
        return self.layers[-1]

    @property
    def topology(self) -> List[int]:
        """Number of normal neurons per layer."""
        if self._ready:
            return [layer.n_neurons for layer in self.layers]
        return [size for size, _ in self._pending]

    @property
    def activations(self) -> List[ActivationFunction]:
        if self._ready:
            return [layer.activation for layer in self.layers]
        return [activation for _, activation in self._pending]

    @property
    def weight_count(self) -> int:
        return int(self._weights.shape[0])

    def get_dna(self) -> np.ndarray:
        """Return a copy of all weights as one flat array."""
        self._check_ready("reading weights")
        return self._weights.copy()

    def set_dna(self, dna: Sequence[float]):
        """Load a flat weight array produced by get_dna.

        Raises:
            DimensionMismatch: If the array length differs from the weight count.
        """
        self._check_ready("writing weights")
        dna = np.asarray(dna, dtype=float).ravel()
        if dna.shape != self._weights.shape:
            raise DimensionMismatch(
                f"Expected {self.weight_count} weights, got {dna.shape[0]}"
            )
        self._weights[:] = dna

    def clone_structure(self) -> 'NeuralNetwork':
        """Return a new, built network with the same layers and zero weights.

        The clone gets its own generator, seeded from this network's one.
        """
        seed = self.rng.integers(np.iinfo(np.int64).max)
        clone = NeuralNetwork(rng=np.random.default_rng(seed))
        for size, activation in zip(self.topology, self.activations):
            clone.add_layer(size, activation)
        return clone.build()

    def _check_ready(self, action: str):
        if not self._ready:
            raise NotReady(f"Build the network before {action}")
