"""
Neural Network Utilities

This module contains utility functions for encoding data, persisting
networks and inspecting their structure.
"""

import logging
import os
import zipfile
import numpy as np
from typing import List, Optional, Tuple, Union

from .activations import get_activation
from .exceptions import InvalidNetworkFile, NotReady
from .networks import NeuralNetwork

logger = logging.getLogger(__name__)

NETWORK_FILE_EXTENSION = '.npz'


def one_hot_encode(y: np.ndarray, num_classes: Optional[int] = None) -> np.ndarray:
    """Convert class labels to one-hot encoded vectors.

    Args:
        y: Array of class labels (integers).
        num_classes: Number of classes. If None, it's inferred from the data.

    Returns:
        One-hot encoded array of shape (n_samples, num_classes).
    """
    y = np.asarray(y, dtype=int)
    if num_classes is None:
        num_classes = int(np.max(y)) + 1 if y.size else 0

    if y.ndim > 1:
        y = y.ravel()

    one_hot = np.zeros((len(y), num_classes))
    one_hot[np.arange(len(y)), y] = 1
    return one_hot


def scale_to_range(x: Union[float, np.ndarray], low: float, high: float,
                   feature_range: Tuple[float, float] = (0, 1)) -> Union[float, np.ndarray]:
    """Linearly map values from [low, high] into feature_range.

    Values outside [low, high] are mapped outside the range as well. A
    degenerate source range (low == high) maps everything to the lower bound.
    """
    min_val, max_val = feature_range
    span = high - low
    if span == 0:
        return np.zeros_like(np.asarray(x, dtype=float)) + min_val
    return (np.asarray(x, dtype=float) - low) / span * (max_val - min_val) + min_val


def save_network(network: NeuralNetwork, filepath: str):
    """Save the layers and weights of a network to an .npz file.

    The file holds the topology, the activation function names and one
    weight matrix per layer.

    Raises:
        NotReady: If the network has not been built.
    """
    if not network.is_ready():
        raise NotReady("Build the network before saving it")

    arrays = {
        'topology': np.asarray(network.topology, dtype=np.int64),
        'activations': np.asarray([a.name for a in network.activations]),
    }
    for i, layer in enumerate(network.layers):
        arrays[f'layer_{i}'] = layer.weights
    np.savez_compressed(filepath, **arrays)


def load_network(filepath: str) -> NeuralNetwork:
    """Load a network saved with save_network.

    Raises:
        InvalidNetworkFile: If the file does not hold exactly the arrays of a
            network with the declared topology.
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Network file not found: {filepath}")

    try:
        data = np.load(filepath, allow_pickle=False)
        if not hasattr(data, "files"):
            raise ValueError("not an .npz archive")
        with data:
            arrays = {name: data[name] for name in data.files}
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise InvalidNetworkFile(f"Could not read network file {filepath}: {e}") from e

    for key in ('topology', 'activations'):
        if key not in arrays:
            raise InvalidNetworkFile(f"Network file {filepath} is missing '{key}'")

    topology = arrays['topology']
    names = arrays['activations']
    if topology.ndim != 1 or topology.size == 0 or names.shape != topology.shape:
        raise InvalidNetworkFile(f"Network file {filepath} has an invalid layer description")

    network = NeuralNetwork()
    try:
        for size, name in zip(topology.tolist(), names.tolist()):
            network.add_layer(size, get_activation(str(name)))
    except ValueError as e:
        raise InvalidNetworkFile(f"Network file {filepath} has an invalid layer: {e}") from e
    network.build()

    expected = {f'layer_{i}' for i in range(len(network.layers))} | {'topology', 'activations'}
    if set(arrays) != expected:
        raise InvalidNetworkFile(
            f"Network file {filepath} holds arrays {sorted(arrays)}, expected {sorted(expected)}"
        )

    for i, layer in enumerate(network.layers):
        weights = arrays[f'layer_{i}']
        if weights.shape != layer.weights.shape:
            raise InvalidNetworkFile(
                f"Layer {i} in {filepath} has shape {weights.shape}, expected {layer.weights.shape}"
            )
        layer.weights[:] = weights

    return network


def export_network(network: NeuralNetwork, basename: str) -> str:
    """Save a network without overwriting existing files.

    An incrementing counter is appended to the basename, the first name that
    does not exist yet is used.

    Returns:
        The path of the written file.
    """
    counter = 0
    while True:
        filepath = f'{basename}_{counter}{NETWORK_FILE_EXTENSION}'
        if not os.path.exists(filepath):
            break
        counter += 1

    save_network(network, filepath)
    logger.info(f"Network saved to: {filepath}")
    return filepath


def import_network(filepath: str) -> NeuralNetwork:
    """Load a network exported with export_network."""
    network = load_network(filepath)
    logger.info(f"Network loaded from: {filepath}")
    return network


def format_structure(network: NeuralNetwork) -> str:
    """Return the layers of a network with outputs and weights as text."""
    lines: List[str] = []
    for layer_idx, layer in enumerate(network.layers):
        lines.append(f'Layer_{layer_idx}')
        for neuron_idx, neuron in enumerate(layer.neurons):
            lines.append(f'  Neuron_{neuron_idx} - output: {neuron.output}')
            for weight_idx, weight in enumerate(neuron.weights):
                lines.append(f'    Weight_{weight_idx} = {weight}')
    return '\n'.join(lines)


def count_parameters(network: NeuralNetwork) -> int:
    """Count the number of trainable weights, including bias weights."""
    return sum(int(np.prod(layer.weights.shape)) for layer in network.layers)

