"""
Population Breeder

Creates a new generation of networks from how well the current generation
performed. Individuals with a higher fitness have a higher chance of
producing offspring. Chance based breeding keeps the population diverse;
breeding only the elite tends to converge early on local minima. Optionally
the best individual is additionally bred with a random member of the elite
group.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from .genetics import GeneticAlgorithm
from .networks import NeuralNetwork

logger = logging.getLogger(__name__)

MUTATION_PROBABILITY = 20.0
ELITE_GROUP_PERCENTAGE = 10.0
INITIAL_SPEED_REWARD = 100000.0


class SpeedReward:
    """Bonus shared by the individuals that complete a run.

    Every claim halves the remaining reward and returns the new value, so
    earlier finishers get more.
    """

    def __init__(self, initial: float = INITIAL_SPEED_REWARD):
        self.value = float(initial)

    def claim(self) -> float:
        self.value *= 0.5
        return self.value


@dataclass
class Individual:
    """A network together with the fitness it reached."""
    network: NeuralNetwork
    fitness: float = 0.0


@dataclass
class Generation:
    """Result of a breeding step."""
    networks: List[NeuralNetwork]
    reward: SpeedReward = field(default_factory=SpeedReward)
    number: int = 1


class PopulationBreeder:
    """Fitness-proportional breeder built on the genetic algorithm."""

    def __init__(self, mutation_probability: float = MUTATION_PROBABILITY,
                 elite_percentage: float = ELITE_GROUP_PERCENTAGE,
                 rng: Optional[np.random.Generator] = None,
                 genetic_algorithm: Optional[GeneticAlgorithm] = None):
        """
        Args:
            mutation_probability: Chance of a mutation per offspring, in percent.
            elite_percentage: Size of the elite group relative to the number
                of offspring, in percent.
            rng: Random generator for parent selection.
            genetic_algorithm: Breeder for single offspring. Shares ``rng`` if None.
        """
        self.mutation_probability = mutation_probability
        self.elite_percentage = elite_percentage
        self.rng = rng if rng is not None else np.random.default_rng()
        self.genetic_algorithm = genetic_algorithm or GeneticAlgorithm(rng=self.rng)
        self.generation = 1

    def next_generation(self, population: Sequence[Individual], n_offspring: int,
                        elite_breeding: bool = False) -> Generation:
        """Breed a new generation from the current one.

        Args:
            population: The current generation with its fitness values.
            n_offspring: Number of offspring bred by roulette selection.
            elite_breeding: Also breed the best individual with a random
                member of the elite group, adding one more offspring.

        Returns:
            The new generation with a fresh speed reward.
        """
        if not population:
            raise ValueError("Cannot breed an empty population")
        if any(individual.fitness < 0 for individual in population):
            raise ValueError("Fitness values must not be negative")

        # No point in breeding without someone to breed with
        if len(population) == 1:
            return Generation([population[0].network], SpeedReward(), self.generation)

        offspring = []
        for _ in range(n_offspring):
            mother = self._select(population)
            father = self._select([i for i in population if i is not mother])
            offspring.append(self._breed(mother, father))

        if elite_breeding:
            ranked = sorted(population, key=lambda i: i.fitness, reverse=True)
            elite_size = min(len(ranked) - 2, n_offspring * (self.elite_percentage / 100.0))
            father = ranked[1 + int(self.rng.random() * elite_size)]
            offspring.append(self._breed(ranked[0], father))

        self.generation += 1
        logger.info(f"Bred generation {self.generation} with {len(offspring)} offspring")
        return Generation(offspring, SpeedReward(), self.generation)

    def reset_generation_count(self):
        self.generation = 1

    def _select(self, candidates: Sequence[Individual]) -> Individual:
        """Roulette wheel selection, uniform if no candidate has any fitness."""
        fitness = np.array([c.fitness for c in candidates], dtype=float)
        total = fitness.sum()
        if total <= 0.0:
            return candidates[int(self.rng.integers(len(candidates)))]

        fixed_point = self.rng.random() * total
        index = int(np.searchsorted(np.cumsum(fitness), fixed_point, side='right'))
        return candidates[min(index, len(candidates) - 1)]

    def _breed(self, mother: Individual, father: Individual) -> NeuralNetwork:
        return self.genetic_algorithm.breed(mother.network, father.network,
                                            self.mutation_probability)
