"""
Genetic Algorithm

Combines the genes (weights) of two networks into an offspring with a new
genetic composition. The weights of a network, flattened layer-major,
neuron-major and weight-index-major, form its DNA. Offspring inherit one
contiguous block from the mother and everything else from the father, which
keeps long correlated runs of genes together.
"""

import logging
import numpy as np
from typing import Optional, Tuple

from .exceptions import NotReady, StructureMismatch
from .networks import NeuralNetwork

logger = logging.getLogger(__name__)

CUT_LENGTH_PERCENTAGE = 30.0


class GeneticAlgorithm:
    """Two-point crossover breeder with swap mutation."""

    def __init__(self, cut_length_percentage: float = CUT_LENGTH_PERCENTAGE,
                 rng: Optional[np.random.Generator] = None):
        """
        Args:
            cut_length_percentage: Share of the DNA inherited from the mother.
            rng: Random generator for cut points and mutation.
        """
        if not 0.0 <= cut_length_percentage <= 100.0:
            raise ValueError(f"Cut length must be a percentage, got {cut_length_percentage}")
        self.cut_length_percentage = cut_length_percentage
        self.rng = rng if rng is not None else np.random.default_rng()

    def breed(self, mother: NeuralNetwork, father: NeuralNetwork,
              mutation_probability: float) -> NeuralNetwork:
        """Create a new offspring network from the DNA of a mother and a father.

        Args:
            mother: Network that donates the crossover block and the topology.
            father: Network that donates the remaining genes.
            mutation_probability: Chance of a swap mutation, in percent.

        Returns:
            A new, built network with the mother's topology.

        Raises:
            NotReady: If either parent is not built.
            StructureMismatch: If the parents have a different internal structure.
        """
        mother_dna = self.get_dna(mother)
        father_dna = self.get_dna(father)

        if mother.topology != father.topology or mother_dna.shape != father_dna.shape:
            raise StructureMismatch(
                f"Breeding failed - networks have different internal structure "
                f"({mother.topology} vs {father.topology})"
            )

        offspring_dna, _ = self.crossover(mother_dna, father_dna)

        if self.rng.random() * 100.0 < mutation_probability:
            self.mutate(offspring_dna)

        return self.create_offspring(mother, offspring_dna)

    def get_dna(self, network: NeuralNetwork) -> np.ndarray:
        """Return the flattened weights of a network."""
        if not network.is_ready():
            raise NotReady("Breeding failed - network is not ready!")
        return network.get_dna()

    def crossover(self, mother_dna: np.ndarray,
                  father_dna: np.ndarray) -> Tuple[np.ndarray, Tuple[int, int]]:
        """Combine two DNA strings with a single randomly placed cut region.

        Genes strictly between the two cut points come from the mother, all
        others (including the cut points themselves) from the father.

        Returns:
            The offspring DNA and the cut points.
        """
        length = len(father_dna)
        cut_length = int(length * (self.cut_length_percentage / 100.0))
        cut_point1 = int(self.rng.random() * (length - cut_length))
        cut_point2 = cut_point1 + cut_length

        offspring_dna = np.array(father_dna, dtype=float)
        offspring_dna[cut_point1 + 1:cut_point2] = mother_dna[cut_point1 + 1:cut_point2]
        return offspring_dna, (cut_point1, cut_point2)

    def mutate(self, dna: np.ndarray):
        """Swap two randomly chosen genes in place."""
        if len(dna) < 2:
            return
        i, j = self.rng.integers(0, len(dna), size=2)
        dna[i], dna[j] = dna[j], dna[i]
        logger.debug(f"Mutated DNA by swapping genes {i} and {j}")

    def create_offspring(self, mother: NeuralNetwork, dna: np.ndarray) -> NeuralNetwork:
        """Build a network with the mother's structure and load the DNA into it."""
        offspring = mother.clone_structure()
        offspring.set_dna(dna)
        return offspring
