import os
import tempfile
import unittest

import matplotlib
matplotlib.use('Agg')

import numpy as np

from neuralnet.example import classification_example, plot_training_history, xor_example
from neuralnet.trainer import TrainingHistory


class TestExamples(unittest.TestCase):

    def test_xor_example(self):
        network, trainer = xor_example(rng=np.random.default_rng(0), accepted_error=0.01,
                                       max_epochs=20)
        self.assertEqual(network.topology, [2, 2, 1])
        self.assertGreater(trainer.history.epochs, 0)

    def test_classification_example(self):
        rows = []
        for i in range(10):
            label = 'red' if i % 2 == 0 else 'blue'
            rows.append([label, 'round' if i % 3 else 'square', label])

        network, accuracy = classification_example(rows, accepted_error=0.01, max_epochs=2000,
                                                   rng=np.random.default_rng(4))
        self.assertEqual(network.topology, [2, 3, 2])
        self.assertEqual(accuracy, 100.0)

    def test_plot_training_history(self):
        history = TrainingHistory()
        for loss in [0.5, 0.25, 0.1]:
            history.update(loss)

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'history.png')
            plot_training_history(history, path)
            self.assertTrue(os.path.getsize(path) > 0)


if __name__ == '__main__':
    unittest.main()
