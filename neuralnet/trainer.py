"""
Neural Network Trainer

This module contains the supervised training algorithms for the feed forward
network: online/mini-batch backpropagation with momentum and learning rate
decay, and batch resilient propagation. Both read the per-neuron sums and
outputs left behind by a forward pass, so a network must never be trained
or used for inference concurrently.
"""

import dataclasses
import json
import logging
import math
import time
import numpy as np
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from .exceptions import DimensionMismatch, NotReady
from .networks import NeuralNetwork

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, Dict[str, float]], Any]


@dataclass
class TrainingConfig:
    """Configuration for network training."""
    learning_rate: float = 0.3
    momentum: float = 0.7
    decay_rate: float = 0.0
    batch_size: Optional[int] = None  # None uses the trainer's default
    max_attempts: int = 10  # Weight re-initializations for backpropagation
    callback_interval: float = 1.0  # Seconds between progress callbacks

    def to_dict(self) -> Dict[str, Any]:
        return dataclasses.asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrainingConfig':
        """Create a config from a dictionary, rejecting unknown keys."""
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown training config keys: {sorted(unknown)}")
        return cls(**data)

    def save(self, filepath: str):
        """Save the configuration to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'TrainingConfig':
        """Load a configuration from a JSON file."""
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))


@dataclass
class TrainingHistory:
    """Tracks the training error over epochs."""
    train_loss: List[float] = field(default_factory=list)
    attempts: int = 0
    epochs: int = 0
    training_time: float = 0.0
    best_loss: float = float('inf')

    def update(self, loss: float):
        """Record the mean squared error of a finished epoch."""
        self.train_loss.append(float(loss))
        self.epochs += 1
        if loss < self.best_loss:
            self.best_loss = float(loss)

    def to_dict(self) -> Dict[str, Any]:
        """Convert history to dictionary for serialization."""
        return {
            'train_loss': self.train_loss,
            'attempts': self.attempts,
            'epochs': self.epochs,
            'training_time': self.training_time,
            'best_loss': self.best_loss
        }

    def summary(self) -> str:
        last = self.train_loss[-1] if self.train_loss else float('inf')
        return (f"{self.epochs} epochs in {self.attempts} attempt(s), "
                f"{self.training_time:.2f}s - loss: {last:.6f} (best: {self.best_loss:.6f})")

    def save(self, filepath: str):
        """Save training history to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'TrainingHistory':
        """Load training history from a JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        history = cls()
        history.train_loss = data['train_loss']
        history.attempts = data['attempts']
        history.epochs = data['epochs']
        history.training_time = data['training_time']
        history.best_loss = data['best_loss']

        return history


class NetworkTrainer:
    """Base class for supervised trainers working on parallel input/ideal samples."""

    default_batch_size = 1

    def __init__(self, input_data: Sequence[Sequence[float]],
                 ideal_data: Sequence[Sequence[float]],
                 config: Optional[TrainingConfig] = None):
        """Initialize the trainer.

        Args:
            input_data: One row of normalized input values per sample.
            ideal_data: One row of ideal output values per sample.
            config: Training configuration. If None, default config is used.

        Raises:
            DimensionMismatch: If the two matrices differ in row count or are
                not rectangular.
        """
        self.input_data = _as_matrix(input_data, 'input')
        self.ideal_data = _as_matrix(ideal_data, 'ideal')
        if self.input_data.shape[0] != self.ideal_data.shape[0]:
            raise DimensionMismatch(
                f"Got {self.input_data.shape[0]} input samples but "
                f"{self.ideal_data.shape[0]} ideal samples"
            )
        if self.input_data.shape[0] == 0:
            raise ValueError("No training samples provided")

        self.config = config or TrainingConfig()
        self.batch_size = self.default_batch_size
        if self.config.batch_size is not None:
            self.set_batch_size(self.config.batch_size)

        self.mean_squared_error = float('inf')
        self.epoch = 0
        self.history = TrainingHistory()
        self.progress_callback: Optional[ProgressCallback] = None
        self._callback_timer = -math.inf
        self._stop_requested = False

    def train(self, network: NeuralNetwork, accepted_error: float, max_epochs: int,
              batch_size: Optional[int] = None,
              progress_callback: Optional[ProgressCallback] = None) -> NeuralNetwork:
        """Train the network in place on the trainer's dataset.

        Args:
            network: The network to be trained.
            accepted_error: Training completes once the mean squared error
                drops to this value.
            max_epochs: Maximum number of passes over the dataset.
            batch_size: Number of samples to accumulate gradients over before
                the weights are changed. Keeps the current size if None.
            progress_callback: Called as ``callback(epoch, logs)`` between
                epochs, at most once per ``config.callback_interval`` seconds.
                It must not modify the network.

        Returns:
            The trained network.

        Raises:
            NotReady: If the network is not built.
            DimensionMismatch: If the data does not fit the network's input
                or output layer.
        """
        if not network.is_ready():
            raise NotReady("Training failed - network is not ready!")
        self._check_dimensions(network)

        if batch_size is not None:
            self.set_batch_size(batch_size)
        if progress_callback is not None:
            self.progress_callback = progress_callback

        self.history = TrainingHistory()
        self._stop_requested = False
        self._callback_timer = -math.inf

        logger.info(f"Training {network!r} with {type(self).__name__} on "
                    f"{len(self.input_data)} samples (batch size {self.batch_size})")
        start_time = time.time()
        self._train(network, accepted_error, max_epochs)
        self.history.training_time = time.time() - start_time
        logger.info(f"Training finished after {self.history.epochs} epochs in "
                    f"{self.history.training_time:.2f}s - loss: {self.mean_squared_error:.6f}")
        return network

    def _train(self, network: NeuralNetwork, accepted_error: float, max_epochs: int):
        raise NotImplementedError

    def _execute_epoch(self, network: NeuralNetwork) -> float:
        """Run one pass over the dataset and return its mean squared error."""
        raise NotImplementedError

    def _run_epochs(self, network: NeuralNetwork, accepted_error: float, max_epochs: int):
        """Run epochs until the error is accepted, the budget is spent or a stop is requested."""
        self.epoch = 0
        while (self.epoch < max_epochs
               and self.mean_squared_error > accepted_error
               and not self._stop_requested):
            self.mean_squared_error = self._execute_epoch(network)
            self.history.update(self.mean_squared_error)
            self.epoch += 1
            self._handle_progress_callback()

    def _accumulate_gradients(self, network: NeuralNetwork, sample: np.ndarray,
                              ideal: np.ndarray) -> float:
        """Forward a single sample and add its gradients to the layer accumulators.

        Returns:
            The summed squared error over the output units for this sample.
        """
        actual = network.compute(sample)
        error = actual - ideal

        output_layer = network.output_layer
        node_delta = -error * output_layer.activation.derivative(
            output_layer.sums[:output_layer.n_neurons])

        # Walk backwards from the last hidden layer to the input layer
        for layer in reversed(network.layers[:-1]):
            next_delta = node_delta
            layer.gradients += np.outer(layer.outputs, next_delta)
            # Bias neurons have no incoming weights, so only normal neurons get a delta
            n = layer.n_neurons
            node_delta = layer.activation.derivative(layer.sums[:n]) * (layer.weights[:n] @ next_delta)

        return float(error @ error)

    def _handle_progress_callback(self):
        if self.progress_callback is None:
            return
        now = time.monotonic()
        if now >= self._callback_timer + self.config.callback_interval:
            self.progress_callback(self.epoch, {'loss': self.mean_squared_error})
            self._callback_timer = now

    def _check_dimensions(self, network: NeuralNetwork):
        n_inputs = network.input_layer.n_neurons
        n_outputs = network.output_layer.n_neurons
        if self.input_data.shape[1] != n_inputs:
            raise DimensionMismatch(
                f"Samples have {self.input_data.shape[1]} inputs, network expects {n_inputs}"
            )
        if self.ideal_data.shape[1] != n_outputs:
            raise DimensionMismatch(
                f"Ideal samples have {self.ideal_data.shape[1]} values, network has {n_outputs} outputs"
            )

    def set_batch_size(self, size: int):
        """Set the number of samples to accumulate weight changes over."""
        self.batch_size = max(1, int(size))

    def request_stop(self):
        """Ask a running training loop to stop after the current epoch."""
        self._stop_requested = True

    def get_mean_squared_error(self) -> float:
        return self.mean_squared_error

    def get_epoch(self) -> int:
        return self.epoch

    def training_parameters(self) -> Dict[str, Any]:
        """Parameters specific to the training algorithm."""
        return {}

    def result_summary(self) -> str:
        """Return a printable summary of the last training run."""
        batch = '1 (stochastic)' if self.batch_size == 1 else str(self.batch_size)
        lines = [
            '------------- Training Results -------------',
            f'Training samples: {len(self.input_data)}',
            f'Mini-batch size: {batch}',
        ]
        lines.extend(f'{name}: {value}' for name, value in self.training_parameters().items())
        lines.extend([
            f'Epochs: {self.epoch}',
            f'Training time: {self.history.training_time * 1000:.0f} ms',
            f'Mean squared error: {self.mean_squared_error:.12f}',
        ])
        return '\n'.join(lines)


class Backpropagation(NetworkTrainer):
    """Gradient descent with momentum and learning rate decay.

    The weights are changed after every sample (online training) unless a
    larger batch size is set. If the accepted error is not reached within
    the epoch budget, the weights are re-randomized and training starts over,
    at most ``config.max_attempts`` times.
    """

    def __init__(self, input_data, ideal_data,
                 learning_rate: Optional[float] = None,
                 momentum: Optional[float] = None,
                 decay_rate: Optional[float] = None,
                 config: Optional[TrainingConfig] = None):
        """Initialize the trainer.

        Args:
            input_data: One row of normalized input values per sample.
            ideal_data: One row of ideal output values per sample.
            learning_rate: Step size. Lower values learn slower but oscillate less.
            momentum: Fraction of the previous weight change added to the
                next one, helps to escape local minima.
            decay_rate: Learning rate decay per epoch.
            config: Base configuration; explicit arguments override it.
        """
        overrides = {
            name: value for name, value in (
                ('learning_rate', learning_rate),
                ('momentum', momentum),
                ('decay_rate', decay_rate),
            ) if value is not None
        }
        config = dataclasses.replace(config or TrainingConfig(), **overrides)
        super().__init__(input_data, ideal_data, config)
        self.attempts = 0

    @property
    def learning_rate(self) -> float:
        return self.config.learning_rate

    @property
    def momentum(self) -> float:
        return self.config.momentum

    @property
    def decay_rate(self) -> float:
        return self.config.decay_rate

    def _train(self, network, accepted_error, max_epochs):
        self.attempts = 0
        while True:
            self.attempts += 1
            self.history.attempts = self.attempts
            network.reset()
            self.mean_squared_error = float('inf')
            self._run_epochs(network, accepted_error, max_epochs)

            if (self.mean_squared_error <= accepted_error
                    or self.attempts >= self.config.max_attempts
                    or self._stop_requested):
                break
            logger.debug(f"Attempt {self.attempts} ended with loss "
                         f"{self.mean_squared_error:.6f}, re-randomizing weights")

        if self.mean_squared_error > accepted_error and not self._stop_requested:
            logger.warning(f"Accepted error {accepted_error} not reached after "
                           f"{self.attempts} attempts (loss: {self.mean_squared_error:.6f})")

    def _execute_epoch(self, network):
        alpha = self.learning_rate / (1.0 + self.decay_rate * self.epoch)
        n_samples = len(self.input_data)

        squared_error = 0.0
        for idx in range(n_samples):
            squared_error += self._accumulate_gradients(
                network, self.input_data[idx], self.ideal_data[idx])

            if (idx + 1) % self.batch_size == 0 or idx == n_samples - 1:
                self._update_weights(network, alpha)

        return squared_error / self.ideal_data.size

    def _update_weights(self, network: NeuralNetwork, alpha: float):
        for layer in network.layers[:-1]:
            change = alpha * layer.gradients + self.momentum * layer.weight_change
            layer.weight_change[:] = change
            layer.weights += change
            layer.gradients.fill(0.0)

    def training_parameters(self):
        return {
            'Learning rate': self.learning_rate,
            'Decay rate': self.decay_rate,
            'Momentum': self.momentum,
            'Resets': max(0, self.attempts - 1),
        }


class ResilientPropagation(NetworkTrainer):
    """Batch training that adapts a step size per weight from the gradient sign.

    Only the sign of the accumulated gradient and its consistency across
    updates matter, never its magnitude. See
    https://visualstudiomagazine.com/Articles/2015/03/01/Resilient-Back-Propagation.aspx
    """

    ETA_PLUS = 1.2
    ETA_MINUS = 0.5
    DELTA_MAX = 50.0
    DELTA_MIN = 1.0e-6
    INITIAL_DELTA = 0.45

    default_batch_size = None  # Full dataset

    def __init__(self, input_data, ideal_data, config: Optional[TrainingConfig] = None):
        super().__init__(input_data, ideal_data, config)
        if self.batch_size is None:
            self.batch_size = len(self.input_data)
        self.step_sizes: List[np.ndarray] = []
        self.previous_gradients: List[np.ndarray] = []

    def _train(self, network, accepted_error, max_epochs):
        network.reset()
        self.history.attempts = 1
        self.mean_squared_error = float('inf')

        self.step_sizes = [np.full(layer.weights.shape, self.INITIAL_DELTA)
                           for layer in network.layers[:-1]]
        self.previous_gradients = [np.full(layer.weights.shape, self.INITIAL_DELTA)
                                   for layer in network.layers[:-1]]

        self._run_epochs(network, accepted_error, max_epochs)

    def _execute_epoch(self, network):
        n_samples = len(self.input_data)
        squared_error = 0.0

        for batch_start in range(0, n_samples, self.batch_size):
            batch_end = min(n_samples, batch_start + self.batch_size)
            for idx in range(batch_start, batch_end):
                squared_error += self._accumulate_gradients(
                    network, self.input_data[idx], self.ideal_data[idx])
            self._update_weights(network)

        return squared_error / self.ideal_data.size

    def _update_weights(self, network: NeuralNetwork):
        for layer, step, prev_gradient in zip(network.layers[:-1], self.step_sizes,
                                              self.previous_gradients):
            gradient = layer.gradients
            product = gradient * prev_gradient
            same_sign = product > 0.0
            changed_sign = product < 0.0

            new_step = step.copy()
            new_step[same_sign] = np.minimum(step[same_sign] * self.ETA_PLUS, self.DELTA_MAX)
            new_step[changed_sign] = np.maximum(step[changed_sign] * self.ETA_MINUS, self.DELTA_MIN)

            change = np.sign(gradient) * new_step
            # Undo the overshoot of the previous update
            change[changed_sign] = -step[changed_sign]

            layer.weights += change
            layer.weight_change[:] = change

            prev_gradient[:] = np.where(changed_sign, 0.0, gradient)
            step[:] = new_step
            gradient.fill(0.0)


def _as_matrix(data, name: str) -> np.ndarray:
    try:
        matrix = np.asarray(data, dtype=float)
    except ValueError as e:
        raise DimensionMismatch(f"The {name} data is not rectangular: {e}") from e
    if matrix.ndim != 2:
        raise DimensionMismatch(
            f"The {name} data must have one row per sample, got shape {matrix.shape}"
        )
    return matrix
