import os
import tempfile
import unittest

import numpy as np

from neuralnet.activations import HyperbolicTangent
from neuralnet.exceptions import InvalidNetworkFile, NotReady
from neuralnet.networks import NeuralNetwork
from neuralnet.utils import (
    count_parameters, export_network, format_structure, import_network, load_network,
    one_hot_encode, save_network, scale_to_range
)


class TestEncoding(unittest.TestCase):

    def test_one_hot_encode(self):
        encoded = one_hot_encode(np.array([0, 2, 1]))
        np.testing.assert_array_equal(encoded, [[1, 0, 0], [0, 0, 1], [0, 1, 0]])
        self.assertEqual(one_hot_encode([1], num_classes=4).shape, (1, 4))

    def test_scale_to_range(self):
        np.testing.assert_allclose(scale_to_range(np.array([2.0, 4.0, 6.0]), 2.0, 6.0),
                                   [0.0, 0.5, 1.0])
        np.testing.assert_allclose(scale_to_range(np.array([2.0, 6.0]), 2.0, 6.0, (-1, 1)),
                                   [-1.0, 1.0])
        self.assertEqual(scale_to_range(3.0, 3.0, 3.0, (0.25, 1.0)), 0.25)


class TestPersistence(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.network = NeuralNetwork(rng=np.random.default_rng(9))
        self.network.add_layer(3).add_layer(4, HyperbolicTangent()).add_layer(2)
        self.network.build().reset()

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name):
        return os.path.join(self.tmpdir.name, name)

    def test_round_trip(self):
        path = self.path('network.npz')
        save_network(self.network, path)
        loaded = load_network(path)

        self.assertEqual(loaded.topology, [3, 4, 2])
        self.assertEqual(loaded.activations, self.network.activations)
        np.testing.assert_array_equal(loaded.get_dna(), self.network.get_dna())
        for inputs in [[0, 0, 0], [0.2, 0.5, 0.9]]:
            np.testing.assert_array_equal(loaded.compute(inputs), self.network.compute(inputs))

    def test_export_does_not_overwrite(self):
        basename = self.path('car')
        first = export_network(self.network, basename)
        second = export_network(self.network, basename)
        self.assertEqual(os.path.basename(first), 'car_0.npz')
        self.assertEqual(os.path.basename(second), 'car_1.npz')
        np.testing.assert_array_equal(import_network(second).get_dna(), self.network.get_dna())

    def test_save_unbuilt_network(self):
        path = self.path('unbuilt.npz')
        with self.assertRaises(NotReady):
            save_network(NeuralNetwork().add_layer(2).add_layer(1), path)
        self.assertFalse(os.path.exists(path))

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_network(self.path('missing.npz'))

    def test_garbage_file(self):
        path = self.path('garbage.npz')
        with open(path, 'wb') as f:
            f.write(b'this is not a network')
        with self.assertRaises(InvalidNetworkFile):
            load_network(path)

    def test_missing_layer(self):
        path = self.path('partial.npz')
        np.savez(path, topology=np.array([3, 4, 2]),
                 activations=np.array(['sigmoid', 'tanh', 'sigmoid']),
                 layer_0=self.network.layers[0].weights)
        with self.assertRaises(InvalidNetworkFile):
            load_network(path)

    def test_wrong_shape(self):
        path = self.path('shape.npz')
        np.savez(path, topology=np.array([3, 4, 2]),
                 activations=np.array(['sigmoid', 'tanh', 'sigmoid']),
                 layer_0=np.zeros((3, 4)),
                 layer_1=self.network.layers[1].weights,
                 layer_2=self.network.layers[2].weights)
        with self.assertRaises(InvalidNetworkFile):
            load_network(path)

    def test_unknown_activation(self):
        path = self.path('activation.npz')
        np.savez(path, topology=np.array([1, 1]), activations=np.array(['relu', 'sigmoid']),
                 layer_0=np.zeros((2, 1)), layer_1=np.zeros((1, 0)))
        with self.assertRaises(InvalidNetworkFile):
            load_network(path)

    def test_format_structure(self):
        text = format_structure(self.network)
        self.assertIn('Layer_0', text)
        self.assertIn('Layer_2', text)
        self.assertEqual(text.count('Neuron_'), 4 + 5 + 2)
        self.assertEqual(text.count('Weight_'), count_parameters(self.network))
        self.assertEqual(count_parameters(self.network), self.network.weight_count)


if __name__ == '__main__':
    unittest.main()
