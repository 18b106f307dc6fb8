import unittest

import numpy as np

from neuralnet.activations import HyperbolicTangent, Sigmoid, get_activation
from neuralnet.layers import NeuronLayer
from neuralnet.exceptions import DimensionMismatch


class TestActivations(unittest.TestCase):

    def test_sigmoid(self):
        sigmoid = Sigmoid()
        self.assertAlmostEqual(sigmoid(0.0), 0.5)
        self.assertAlmostEqual(sigmoid.derivative(0.0), 0.25)

        x = np.linspace(-5, 5, 11)
        np.testing.assert_allclose(sigmoid(x), 1.0 / (1.0 + np.exp(-x)))

    def test_sigmoid_saturation(self):
        sigmoid = Sigmoid()
        with np.errstate(over='raise'):
            values = sigmoid(np.array([-1000.0, 1000.0]))
        np.testing.assert_allclose(values, [0.0, 1.0])

    def test_tanh(self):
        tanh = HyperbolicTangent()
        self.assertAlmostEqual(tanh(0.0), 0.0)
        self.assertAlmostEqual(tanh.derivative(0.0), 1.0)

        x = np.linspace(-3, 3, 7)
        np.testing.assert_allclose(tanh.derivative(x), 1.0 - np.tanh(x) ** 2)

    def test_get_activation(self):
        self.assertIsInstance(get_activation('sigmoid'), Sigmoid)
        self.assertIsInstance(get_activation('TANH'), HyperbolicTangent)
        with self.assertRaises(ValueError):
            get_activation('relu')


class TestNeuronLayer(unittest.TestCase):

    def setUp(self):
        self.layer = NeuronLayer(Sigmoid(), n_neurons=3, n_weights_per_neuron=2, n_bias_neurons=1)

    def test_shapes(self):
        self.assertEqual(len(self.layer), 4)
        self.assertEqual(self.layer.weights.shape, (4, 2))
        self.assertEqual(self.layer.number_of_normal_neurons(), 3)
        self.assertEqual([n.is_bias for n in self.layer], [False, False, False, True])

    def test_set_outputs(self):
        self.layer.set_outputs([0.1, 0.2, 0.3])
        np.testing.assert_array_equal(self.layer.get_outputs(), [0.1, 0.2, 0.3])
        self.assertEqual(self.layer.neurons[3].output, 1.0)

        with self.assertRaises(DimensionMismatch):
            self.layer.set_outputs([0.1, 0.2])

    def test_neuron_view(self):
        neuron = self.layer.neurons[1]
        neuron.weights[:] = [4.0, 5.0]
        np.testing.assert_array_equal(self.layer.weights[1], [4.0, 5.0])

        neuron.output = 0.75
        self.assertEqual(self.layer.outputs[1], 0.75)

    def test_weights_view(self):
        buffer = np.zeros(8)
        layer = NeuronLayer(Sigmoid(), 3, 2, 1, weights=buffer.reshape(4, 2))
        layer.weights[0, 1] = 9.0
        self.assertEqual(buffer[1], 9.0)

        with self.assertRaises(DimensionMismatch):
            NeuronLayer(Sigmoid(), 3, 2, 1, weights=np.zeros((3, 2)))

    def test_activate(self):
        self.layer.activate(np.zeros(3))
        np.testing.assert_array_equal(self.layer.get_outputs(), [0.5, 0.5, 0.5])
        self.assertEqual(self.layer.outputs[3], 1.0)


if __name__ == '__main__':
    unittest.main()
