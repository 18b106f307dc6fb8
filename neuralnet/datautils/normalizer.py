"""
Classification Normalizer

Scans a dataset of string samples once, detects which attributes are
continuous and which are categorical, collects the class labels and turns
the samples into numeric input vectors and one-hot ideal vectors for the
network.
"""

import logging
import re
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

from ..exceptions import DimensionMismatch, NotReady, UnknownCategory
from ..utils import one_hot_encode, scale_to_range

logger = logging.getLogger(__name__)

NUMERIC_PATTERN = re.compile(r'[\d\-.]+')


class ClassPosition(Enum):
    """Position of the class label among the sample columns."""
    FIRST = 'first'
    LAST = 'last'


@dataclass
class Attribute:
    """An input attribute, either categorical or continuous."""
    categories: List[str] = field(default_factory=list)
    min_range: float = 0.0
    max_range: float = 0.0
    categorical: bool = True

    @classmethod
    def continuous(cls, min_range: float, max_range: float) -> 'Attribute':
        return cls(min_range=min_range, max_range=max_range, categorical=False)

    def __str__(self):
        if self.categorical:
            return str(self.categories)
        return f'continuous ({self.min_range} - {self.max_range})'


def is_numeric(value: str) -> bool:
    """Check whether a raw value can be treated as a continuous number."""
    if not NUMERIC_PATTERN.fullmatch(value):
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def resolve_class_position(class_position: Union[ClassPosition, int], n_columns: int) -> int:
    """Turn a ClassPosition or column index into a non-negative column index.

    Negative indices count from the end, as for Python sequences.

    Raises:
        DimensionMismatch: If the index is outside the sample.
    """
    if class_position is ClassPosition.FIRST:
        return 0
    if class_position is ClassPosition.LAST:
        return n_columns - 1

    index = int(class_position)
    if index < 0:
        index += n_columns
    if not 0 <= index < n_columns:
        raise DimensionMismatch(
            f"Class position {class_position} is outside samples of {n_columns} elements"
        )
    return index


class ClassificationNormalizer:
    """Normalizes string samples of a classification dataset into numbers."""

    def __init__(self, feature_range: Tuple[float, float] = (0.0, 1.0)):
        """
        Args:
            feature_range: Target range of the normalized attribute values.
        """
        low, high = feature_range
        if not low < high:
            raise ValueError(f"Invalid feature range: {feature_range}")
        self.feature_range = (float(low), float(high))
        self.attributes: List[Attribute] = []
        self.classes: List[str] = []
        self.dataset: Optional[List[List[str]]] = None
        self.class_position = 0

    def add_dataset(self, dataset: Sequence[Sequence[str]],
                    class_position: Union[ClassPosition, int] = ClassPosition.LAST):
        """Add the dataset and detect its attributes and classes.

        Args:
            dataset: Samples of equal length, each holding one class label.
            class_position: Position of the class label in every sample.

        Raises:
            ValueError: If the dataset is empty.
            DimensionMismatch: If the samples differ in length.
        """
        if dataset is None or len(dataset) == 0:
            raise ValueError("Empty dataset!")

        rows = [[str(element) for element in sample] for sample in dataset]
        n_elements = len(rows[0])
        for idx, row in enumerate(rows):
            if len(row) != n_elements:
                raise DimensionMismatch(
                    f"Sample {idx} has {len(row)} elements, expected {n_elements}"
                )

        self.dataset = rows
        self.class_position = resolve_class_position(class_position, n_elements)
        self._detect_attributes_and_classes()
        logger.info(f"Detected {self.number_of_attributes} attributes and "
                    f"{self.number_of_classes} classes in {len(rows)} samples")

    def _detect_attributes_and_classes(self):
        """Scan all samples once and collect categories and continuous ranges."""
        n_elements = len(self.dataset[0])
        distinct: List[List[str]] = [[] for _ in range(n_elements)]
        seen = [set() for _ in range(n_elements)]
        numeric = [True] * n_elements

        for sample in self.dataset:
            for j, element in enumerate(sample):
                if element not in seen[j]:
                    seen[j].add(element)
                    distinct[j].append(element)
                    if numeric[j] and not is_numeric(element):
                        numeric[j] = False

        self.attributes = []
        for i in range(n_elements):
            if i == self.class_position:
                self.classes = distinct[i]
            elif numeric[i]:
                values = [float(v) for v in distinct[i]]
                self.attributes.append(Attribute.continuous(min(values), max(values)))
            else:
                self.attributes.append(Attribute(categories=distinct[i]))

    def get_normalized_training_data(self) -> Tuple[np.ndarray, np.ndarray]:
        """Generate the normalized training set for the network.

        Returns:
            Tuple of (input_data, ideal_data) where ideal_data is one-hot encoded.
        """
        if self.dataset is None:
            raise NotReady("No dataset added!")

        input_data = np.array([self.normalize_attributes(self.strip_class(sample))
                               for sample in self.dataset], dtype=float)
        input_data = input_data.reshape(len(self.dataset), self.number_of_attributes)
        labels = [self.classes.index(sample[self.class_position]) for sample in self.dataset]
        ideal_data = one_hot_encode(np.array(labels), self.number_of_classes)

        return input_data, ideal_data

    def normalize_value(self, attribute: Attribute, value: str) -> float:
        """Normalize a raw categorical or continuous value into the feature range.

        Raises:
            UnknownCategory: If a categorical value was not seen in the dataset.
        """
        if attribute.categorical:
            try:
                index = attribute.categories.index(value)
            except ValueError:
                raise UnknownCategory(
                    f"{value} was not found among the defined categories!"
                ) from None
            return float(scale_to_range(index, 0, len(attribute.categories) - 1, self.feature_range))

        return float(scale_to_range(float(value), attribute.min_range, attribute.max_range,
                                    self.feature_range))

    def normalize_attributes(self, values: Sequence[str]) -> np.ndarray:
        """Create a normalized array from raw attribute values (class label excluded).

        Raises:
            DimensionMismatch: If the number of values differs from the
                number of attributes.
        """
        self._check_dataset()
        if len(values) != len(self.attributes):
            raise DimensionMismatch(
                f"Got {len(values)} values for {len(self.attributes)} attributes"
            )
        return np.array([self.normalize_value(attribute, str(value))
                         for attribute, value in zip(self.attributes, values)])

    def strip_class(self, sample: Sequence[str]) -> List[str]:
        """Return the sample without its class label."""
        return [v for i, v in enumerate(sample) if i != self.class_position]

    def best_class_match(self, outputs: Sequence[float]) -> str:
        """Return the class with the highest network output."""
        self._check_dataset()
        outputs = np.asarray(outputs, dtype=float)[:len(self.classes)]
        return self.classes[int(np.argmax(outputs))]

    def class_match_string(self, outputs: Sequence[float]) -> str:
        """Format every class with its match percentage."""
        self._check_dataset()
        parts = [f'{label}({int(value * 100):2d}%)'
                 for label, value in zip(self.classes, outputs)]
        return ' '.join(parts)

    @property
    def number_of_attributes(self) -> int:
        return len(self.attributes)

    @property
    def number_of_classes(self) -> int:
        return len(self.classes)

    def _check_dataset(self):
        if self.dataset is None:
            raise NotReady("No dataset added!")

    def __str__(self):
        lines = [f'Attr {i}: {attribute}' for i, attribute in enumerate(self.attributes)]
        lines.append(f'Classes: {self.classes}')
        return '\n'.join(lines)
