"""
Neural Network Example

This module demonstrates how to use the neural network components to build,
train, and evaluate feed forward networks: the XOR "hello world" and a
classification run on categorical string samples.
"""

import logging
import numpy as np
import matplotlib.pyplot as plt
from typing import Optional, Sequence, Tuple

from .datautils import AccuracyTester, ClassificationNormalizer, ClassPosition, Dataset
from .networks import NeuralNetwork
from .trainer import Backpropagation, TrainingConfig, TrainingHistory

logger = logging.getLogger(__name__)

XOR_INPUTS = [[0, 0], [1, 0], [0, 1], [1, 1]]
XOR_IDEALS = [[0], [1], [1], [0]]


def xor_example(rng: Optional[np.random.Generator] = None,
                accepted_error: float = 0.001,
                max_epochs: int = 5000) -> Tuple[NeuralNetwork, Backpropagation]:
    """Train a 2-2-1 network to predict the result of a XOR operator."""
    network = NeuralNetwork(rng=rng)
    network.add_layer(2)  # Input layer
    network.add_layer(2)  # Hidden layer
    network.add_layer(1)  # Output layer
    network.build()

    trainer = Backpropagation(XOR_INPUTS, XOR_IDEALS, learning_rate=0.45, momentum=0.9)
    trainer.train(network, accepted_error, max_epochs)
    logger.info(f"\n{trainer.result_summary()}")

    for sample in XOR_INPUTS:
        logger.info(f"{sample[0]},{sample[1]} = {network.compute(sample)[0]:.4f}")

    return network, trainer


def classification_example(rows: Sequence[Sequence[str]],
                           class_position=ClassPosition.LAST,
                           config: Optional[TrainingConfig] = None,
                           accepted_error: float = 1e-6,
                           max_epochs: int = 1000,
                           rng: Optional[np.random.Generator] = None) -> Tuple[NeuralNetwork, float]:
    """Normalize a labelled dataset, train a network on it and test its accuracy.

    The first 80% of the rows are used for training, the rest for testing.

    Returns:
        Tuple of (network, accuracy in percent).
    """
    dataset = Dataset(rows)
    normalizer = ClassificationNormalizer()
    normalizer.add_dataset(dataset.training_samples, class_position)
    logger.info(f"\n{normalizer}")

    n_inputs = normalizer.number_of_attributes
    n_outputs = normalizer.number_of_classes
    n_hidden = max(1, n_inputs * 3 // 2)

    network = NeuralNetwork(rng=rng)
    network.add_layer(n_inputs)   # Input layer
    network.add_layer(n_hidden)   # Hidden layer
    network.add_layer(n_outputs)  # Output layer
    network.build()

    input_data, ideal_data = normalizer.get_normalized_training_data()
    config = config or TrainingConfig(learning_rate=0.6, momentum=0.7)
    trainer = Backpropagation(input_data, ideal_data, config=config)
    trainer.train(network, accepted_error, max_epochs)
    logger.info(f"\n{trainer.result_summary()}")

    tester = AccuracyTester(dataset.test_samples, class_position, normalizer=normalizer)
    accuracy = tester.test_classification(network)
    logger.info(f"\n{tester.test_results()}")

    return network, accuracy


def plot_training_history(history: TrainingHistory, filepath: Optional[str] = None):
    """Plot the mean squared error over the training epochs.

    The figure is saved to ``filepath`` if given, shown otherwise.
    """
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.plot(history.train_loss, label='Training loss')
    ax.set_xlabel('Epoch')
    ax.set_ylabel('Mean squared error')
    ax.set_title('Loss over Training')
    ax.set_yscale('log')
    ax.legend()
    ax.grid(True)
    fig.tight_layout()

    if filepath is not None:
        fig.savefig(filepath)
        plt.close(fig)
    else:
        plt.show()


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    _, trainer = xor_example()
    plot_training_history(trainer.history)


if __name__ == "__main__":
    main()
