"""
Accuracy Tester

Tests the prediction accuracy of a trained network on a set of labelled
string samples. Currently supports classification tasks.
"""

import logging
from typing import List, Optional, Sequence, Union

from sklearn.metrics import accuracy_score, classification_report

from ..exceptions import NotReady
from ..networks import NeuralNetwork
from .normalizer import ClassificationNormalizer, ClassPosition, resolve_class_position

logger = logging.getLogger(__name__)


class AccuracyTester:
    """Counts correct classifications of a network on a test set."""

    def __init__(self, testset: Sequence[Sequence[str]],
                 class_position: Union[ClassPosition, int] = ClassPosition.LAST,
                 normalizer: Optional[ClassificationNormalizer] = None):
        """
        Args:
            testset: Labelled samples.
            class_position: Position of the class label in every sample.
            normalizer: Normalizer fitted on the training data. If None, a
                normalizer is fitted on the test set itself.
        """
        if not testset:
            raise ValueError("Empty testset!")

        self.testset = [list(sample) for sample in testset]
        self.class_position = resolve_class_position(class_position, len(self.testset[0]))

        if normalizer is None:
            normalizer = ClassificationNormalizer()
            normalizer.add_dataset(self.testset, self.class_position)
        self.normalizer = normalizer

        self.expected: List[str] = []
        self.predicted: List[str] = []

    def test_classification(self, network: NeuralNetwork) -> float:
        """Classify every sample of the test set.

        Returns:
            The share of correct classifications in percent.
        """
        if not network.is_ready():
            raise NotReady("Network not ready!")

        self.expected = []
        self.predicted = []
        for sample in self.testset:
            attributes = [v for i, v in enumerate(sample) if i != self.class_position]
            result = network.compute(self.normalizer.normalize_attributes(attributes))
            self.expected.append(sample[self.class_position])
            self.predicted.append(self.normalizer.best_class_match(result))

        accuracy = accuracy_score(self.expected, self.predicted) * 100.0
        logger.info(f"Classified {len(self.testset)} samples with {accuracy:.2f}% accuracy")
        return accuracy

    def test_results(self) -> str:
        """Return a per-class report of the last test run."""
        if not self.predicted:
            raise NotReady("Run test_classification first")
        return classification_report(self.expected, self.predicted, zero_division=0)
