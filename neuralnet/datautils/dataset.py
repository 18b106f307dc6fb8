"""
Dataset

Loads comma-separated samples from a local file, filters out irrelevant
elements and splits the samples into training and test sets.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from sklearn.model_selection import train_test_split

from ..exceptions import DimensionMismatch

logger = logging.getLogger(__name__)

DELIMITER = ','
TRAINING_SET_PERCENTAGE = 80


def parse_rows(lines: Iterable[str], delimiter: str = DELIMITER) -> List[List[str]]:
    """Split lines into trimmed elements.

    Lines with fewer than two elements are discarded.
    """
    samples = []
    for line in lines:
        elements = [element.strip() for element in line.rstrip('\r\n').split(delimiter)]
        if len(elements) > 1:
            samples.append(elements)
    return samples


def load_dataset(path: Union[str, Path], delimiter: str = DELIMITER) -> List[List[str]]:
    """Read a comma-separated file with one sample per line."""
    with open(path, 'r', encoding='utf-8') as f:
        samples = parse_rows(f, delimiter)
    logger.info(f"Loaded {len(samples)} samples from {path}")
    return samples


class Dataset:
    """A set of string samples with an element filter and a train/test split."""

    def __init__(self, samples: Sequence[Sequence[str]],
                 training_percentage: float = TRAINING_SET_PERCENTAGE,
                 shuffle: bool = False,
                 random_state: Optional[int] = None):
        """
        Args:
            samples: Samples of equal length.
            training_percentage: Share of the samples used for training.
            shuffle: Shuffle before splitting. The first samples are used for
                training otherwise.
            random_state: Seed for the shuffled split.

        Raises:
            ValueError: If the dataset is empty.
            DimensionMismatch: If the samples differ in length.
        """
        if not samples:
            raise ValueError("Dataset is empty!")

        self.n_sample_elements = len(samples[0])
        for idx, sample in enumerate(samples):
            if len(sample) != self.n_sample_elements:
                raise DimensionMismatch(
                    f"Sample {idx} has {len(sample)} elements, expected {self.n_sample_elements}"
                )

        self._samples = np.array(samples, dtype=object)
        self.filter = np.ones(self.n_sample_elements, dtype=bool)
        self.training_percentage = training_percentage
        self.shuffle = shuffle
        self.random_state = random_state

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> 'Dataset':
        """Load the samples of a local comma-separated file."""
        return cls(load_dataset(path), **kwargs)

    def __len__(self) -> int:
        return len(self._samples)

    def set_element_filter(self, *element_filter: bool):
        """Select the sample elements to include.

        Accepts the flags as separate arguments or as a single sequence.

        Raises:
            DimensionMismatch: If the filter length does not match the number
                of sample elements.
        """
        if len(element_filter) == 1 and np.ndim(element_filter[0]) > 0:
            element_filter = element_filter[0]
        mask = np.asarray(element_filter, dtype=bool)
        if mask.shape != (self.n_sample_elements,):
            raise DimensionMismatch(
                f"Filter length({mask.size}) does not match the number of "
                f"elements({self.n_sample_elements})"
            )
        self.filter = mask

    def get_element_filter(self) -> np.ndarray:
        return self.filter.copy()

    @property
    def samples(self) -> List[List[str]]:
        """All samples, filtered."""
        return self._filtered(self._samples)

    @property
    def training_samples(self) -> List[List[str]]:
        """The training part of the split, filtered."""
        return self._split()[0]

    @property
    def test_samples(self) -> List[List[str]]:
        """The test part of the split, filtered."""
        return self._split()[1]

    def _split(self) -> Tuple[List[List[str]], List[List[str]]]:
        n_samples = len(self._samples)
        cut_point = int(n_samples * (self.training_percentage / 100.0))
        if cut_point < 1 or cut_point >= n_samples:
            raise ValueError(
                f"Illegal range! {n_samples} samples cannot be split at {self.training_percentage}%"
            )

        train, test = train_test_split(
            self._samples,
            test_size=n_samples - cut_point,
            shuffle=self.shuffle,
            random_state=self.random_state if self.shuffle else None,
        )
        return self._filtered(train), self._filtered(test)

    def _filtered(self, samples: np.ndarray) -> List[List[str]]:
        return [list(row) for row in samples[:, self.filter]]
