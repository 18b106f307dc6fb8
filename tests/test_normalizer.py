import unittest

import numpy as np

from neuralnet.datautils.normalizer import (
    Attribute, ClassificationNormalizer, ClassPosition, is_numeric, resolve_class_position
)
from neuralnet.exceptions import DimensionMismatch, NotReady, UnknownCategory

WEATHER = [
    ['sunny', '30', 'high', 'no'],
    ['rainy', '12', 'high', 'yes'],
    ['cloudy', '21', 'low', 'yes'],
    ['sunny', '25', 'low', 'maybe'],
]


class TestClassificationNormalizer(unittest.TestCase):

    def setUp(self):
        self.normalizer = ClassificationNormalizer()
        self.normalizer.add_dataset(WEATHER)

    def test_detected_attributes(self):
        self.assertEqual(self.normalizer.number_of_attributes, 3)
        self.assertEqual(self.normalizer.number_of_classes, 3)
        self.assertEqual(self.normalizer.classes, ['no', 'yes', 'maybe'])

        outlook, temperature, humidity = self.normalizer.attributes
        self.assertEqual(outlook.categories, ['sunny', 'rainy', 'cloudy'])
        self.assertFalse(temperature.categorical)
        self.assertEqual((temperature.min_range, temperature.max_range), (12.0, 30.0))
        self.assertEqual(humidity.categories, ['high', 'low'])

    def test_categories_span_range(self):
        outlook = self.normalizer.attributes[0]
        values = [self.normalizer.normalize_value(outlook, v) for v in outlook.categories]
        self.assertEqual(values, [0.0, 0.5, 1.0])

    def test_custom_range(self):
        normalizer = ClassificationNormalizer(feature_range=(-1.0, 1.0))
        normalizer.add_dataset(WEATHER)
        outlook, temperature, _ = normalizer.attributes
        self.assertEqual([normalizer.normalize_value(outlook, v) for v in outlook.categories],
                         [-1.0, 0.0, 1.0])
        self.assertEqual(normalizer.normalize_value(temperature, '30'), 1.0)

    def test_continuous(self):
        temperature = self.normalizer.attributes[1]
        self.assertEqual(self.normalizer.normalize_value(temperature, '12'), 0.0)
        self.assertEqual(self.normalizer.normalize_value(temperature, '30'), 1.0)
        self.assertAlmostEqual(self.normalizer.normalize_value(temperature, '21'), 0.5)

    def test_single_value_attributes(self):
        normalizer = ClassificationNormalizer()
        normalizer.add_dataset([['x', '5', 'a'], ['x', '5', 'b']])
        category, constant = normalizer.attributes
        self.assertEqual(normalizer.normalize_value(category, 'x'), 0.0)
        self.assertEqual(normalizer.normalize_value(constant, '5'), 0.0)

    def test_unknown_category(self):
        with self.assertRaises(UnknownCategory):
            self.normalizer.normalize_attributes(['snowy', '20', 'low'])

    def test_training_data(self):
        inputs, ideals = self.normalizer.get_normalized_training_data()
        self.assertEqual(inputs.shape, (4, 3))
        self.assertEqual(ideals.shape, (4, 3))
        np.testing.assert_array_equal(inputs[0], [0.0, 1.0, 0.0])
        np.testing.assert_array_equal(ideals[:, 0], [1, 0, 0, 0])
        np.testing.assert_array_equal(ideals.sum(axis=1), [1, 1, 1, 1])
        self.assertTrue(np.all((inputs >= 0.0) & (inputs <= 1.0)))

    def test_class_first(self):
        rows = [[row[-1]] + row[:-1] for row in WEATHER]
        normalizer = ClassificationNormalizer()
        normalizer.add_dataset(rows, ClassPosition.FIRST)
        self.assertEqual(normalizer.classes, ['no', 'yes', 'maybe'])
        self.assertEqual(normalizer.strip_class(rows[0]), WEATHER[0][:-1])

        inputs, _ = normalizer.get_normalized_training_data()
        expected, _ = self.normalizer.get_normalized_training_data()
        np.testing.assert_array_equal(inputs, expected)

    def test_best_class_match(self):
        self.assertEqual(self.normalizer.best_class_match([0.1, 0.8, 0.3]), 'yes')
        self.assertEqual(self.normalizer.class_match_string([0.1, 0.8, 0.3]),
                         'no(10%) yes(80%) maybe(30%)')

    def test_errors(self):
        normalizer = ClassificationNormalizer()
        with self.assertRaises(NotReady):
            normalizer.get_normalized_training_data()
        with self.assertRaises(ValueError):
            normalizer.add_dataset([])
        with self.assertRaises(DimensionMismatch):
            normalizer.add_dataset([['a', '1', 'x'], ['b', 'y']])
        with self.assertRaises(DimensionMismatch):
            self.normalizer.normalize_attributes(['sunny', '20'])
        with self.assertRaises(ValueError):
            ClassificationNormalizer(feature_range=(1.0, 0.0))

    def test_str(self):
        text = str(self.normalizer)
        self.assertIn('Attr 1: continuous (12.0 - 30.0)', text)
        self.assertIn("Classes: ['no', 'yes', 'maybe']", text)


class TestHelpers(unittest.TestCase):

    def test_is_numeric(self):
        for value in ['1', '-2.5', '0.25', '10.']:
            self.assertTrue(is_numeric(value), value)
        for value in ['a', '1e5', '--', '1-2', '']:
            self.assertFalse(is_numeric(value), value)

    def test_resolve_class_position(self):
        self.assertEqual(resolve_class_position(ClassPosition.FIRST, 4), 0)
        self.assertEqual(resolve_class_position(ClassPosition.LAST, 4), 3)
        self.assertEqual(resolve_class_position(-2, 4), 2)
        with self.assertRaises(DimensionMismatch):
            resolve_class_position(4, 4)

    def test_attribute_str(self):
        self.assertEqual(str(Attribute(categories=['a', 'b'])), "['a', 'b']")
        self.assertEqual(str(Attribute.continuous(0.0, 1.0)), 'continuous (0.0 - 1.0)')


if __name__ == '__main__':
    unittest.main()
