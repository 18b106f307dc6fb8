import unittest

import numpy as np

from neuralnet.exceptions import NotReady, StructureMismatch
from neuralnet.genetics import GeneticAlgorithm
from neuralnet.networks import NeuralNetwork


def build_network(*sizes, seed=1234):
    network = NeuralNetwork(rng=np.random.default_rng(seed))
    for size in sizes:
        network.add_layer(size)
    return network.build().reset()


class TestGeneticAlgorithm(unittest.TestCase):

    def setUp(self):
        self.mother = build_network(4, 5, 3, seed=1)
        self.father = build_network(4, 5, 3, seed=2)

    def test_offspring_length(self):
        ga = GeneticAlgorithm(rng=np.random.default_rng(0))
        for _ in range(20):
            offspring = ga.breed(self.mother, self.father, mutation_probability=50)
            self.assertEqual(offspring.weight_count, self.mother.weight_count)
            self.assertEqual(offspring.topology, self.mother.topology)

    def test_crossover_without_mutation(self):
        mother_dna = self.mother.get_dna()
        father_dna = self.father.get_dna()

        for seed in range(10):
            offspring = GeneticAlgorithm(rng=np.random.default_rng(seed)).breed(
                self.mother, self.father, mutation_probability=0)
            # Same seed, same cut points
            _, (cut1, cut2) = GeneticAlgorithm(rng=np.random.default_rng(seed)).crossover(
                mother_dna, father_dna)

            dna = offspring.get_dna()
            inside = np.zeros(len(dna), dtype=bool)
            inside[cut1 + 1:cut2] = True
            np.testing.assert_array_equal(dna[inside], mother_dna[inside])
            np.testing.assert_array_equal(dna[~inside], father_dna[~inside])

    def test_cut_length(self):
        ga = GeneticAlgorithm(rng=np.random.default_rng(3))
        mother = np.zeros(100)
        father = np.ones(100)
        for _ in range(50):
            dna, (cut1, cut2) = ga.crossover(mother, father)
            self.assertEqual(cut2 - cut1, 30)
            self.assertTrue(0 <= cut1 and cut2 <= 100)
            self.assertEqual(int(np.sum(dna == 0)), 29)

    def test_parents_are_unchanged(self):
        mother_dna = self.mother.get_dna()
        father_dna = self.father.get_dna()
        GeneticAlgorithm(rng=np.random.default_rng(0)).breed(self.mother, self.father, 100)
        np.testing.assert_array_equal(self.mother.get_dna(), mother_dna)
        np.testing.assert_array_equal(self.father.get_dna(), father_dna)

    def test_mutation_swaps_genes(self):
        ga = GeneticAlgorithm(rng=np.random.default_rng(5))
        dna = np.arange(20, dtype=float)
        ga.mutate(dna)
        self.assertEqual(sorted(dna.tolist()), list(range(20)))

    def test_different_layer_count(self):
        other = build_network(4, 5, 5, 3)
        with self.assertRaises(StructureMismatch):
            GeneticAlgorithm().breed(self.mother, other, 0)

    def test_different_layer_sizes(self):
        # Same number of weights, different shapes
        a = build_network(2, 3, 1)
        b = build_network(1, 4, 1)
        self.assertEqual(a.weight_count, 13)
        self.assertEqual(b.weight_count, 13)
        with self.assertRaises(StructureMismatch):
            GeneticAlgorithm().breed(a, b, 0)

    def test_not_ready(self):
        unbuilt = NeuralNetwork().add_layer(4).add_layer(5).add_layer(3)
        with self.assertRaises(NotReady):
            GeneticAlgorithm().breed(self.mother, unbuilt, 0)

    def test_invalid_cut_length(self):
        with self.assertRaises(ValueError):
            GeneticAlgorithm(cut_length_percentage=120)


if __name__ == '__main__':
    unittest.main()
