"""
Data Utilities

Loading, normalizing and testing with classification datasets.
"""

from .accuracy import AccuracyTester
from .dataset import Dataset, load_dataset, parse_rows
from .normalizer import Attribute, ClassificationNormalizer, ClassPosition

__all__ = [
    'AccuracyTester',
    'Attribute',
    'ClassificationNormalizer',
    'ClassPosition',
    'Dataset',
    'load_dataset',
    'parse_rows',
]
