"""
tree_evolution/optimizer.py - Genetic algorithm engine over a population of trees

Each generation runs populate -> score -> select -> crossover. Fitness and
random individuals come from caller supplied functions; the optimizer only
knows about trees.
"""
import logging
import random
from typing import Any, Callable, Dict, List, Sequence

import numpy as np

from .sampling import kind_filter, random_position
from .tree import Tree

logger = logging.getLogger(__name__)

# Crossover trials performed per generation
CROSSOVER_TRIALS = 20


def _is_prefix(prefix: Sequence[int], position: Sequence[int]) -> bool:
    return len(prefix) <= len(position) and tuple(position[:len(prefix)]) == tuple(prefix)


class Optimizer:
    """Evolves trees toward higher fitness by selection and subtree crossover

    ``fitness`` must return finite values greater than -1: survival probability is
    ``(score + 1) / (max_score + 1)``.
    """

    def __init__(self, fitness: Callable[[Tree], float],
                 random_individual: Callable[[], Tree],
                 max_population: int = 100,
                 crossover_trials: int = CROSSOVER_TRIALS,
                 kind_matched: bool = False,
                 rng: random.Random = None):
        if max_population < 1:
            raise ValueError(f"max_population must be at least 1, got {max_population}")
        if crossover_trials < 0:
            raise ValueError(f"crossover_trials must be non-negative, got {crossover_trials}")

        self.fitness = fitness
        self.random_individual = random_individual
        self.max_population = max_population
        self.crossover_trials = crossover_trials
        # Only swap subtrees carrying the same kind tag
        self.kind_matched = kind_matched
        self.rng = rng if rng is not None else random.Random()

        self.population: List[Tree] = []
        self.scores = np.zeros(0)
        self.generation = 0

    def reset(self) -> None:
        """Drop the population and scores of any previous run"""
        self.population = []
        self.scores = np.zeros(0)
        self.generation = 0

    def populate(self) -> None:
        """Fill the population up to ``max_population`` with random individuals"""
        added = 0
        while len(self.population) < self.max_population:
            self.population.append(self.random_individual())
            added += 1
        logger.debug("Added %d random individuals, population is %d",
                     added, len(self.population))

    def compute_scores(self) -> np.ndarray:
        """Score every individual from scratch, in population order"""
        self.scores = np.array([float(self.fitness(tree)) for tree in self.population],
                               dtype=float)
        return self.scores

    def _check_scores(self) -> None:
        if len(self.scores) != len(self.population):
            raise ValueError(
                f"Scores are stale: {len(self.scores)} scores for "
                f"{len(self.population)} individuals, call compute_scores() first"
            )

    def natural_selection(self) -> None:
        """Keep each individual with probability (score + 1) / (max_score + 1)

        The pass is repeated until at least one individual survives.
        """
        self._check_scores()
        if not self.population:
            return

        if not np.all(np.isfinite(self.scores)):
            raise ValueError(
                f"Selection requires finite fitness values, got {self.scores.tolist()}"
            )
        max_score = float(np.max(self.scores))
        if max_score + 1 <= 0:
            raise ValueError(
                f"Best score {max_score} is not greater than -1; selection "
                "requires fitness values greater than -1"
            )
        probabilities = (self.scores + 1) / (max_score + 1)

        survivors = []
        attempts = 0
        while not survivors:
            attempts += 1
            survivors = [i for i, probability in enumerate(probabilities)
                         if self.rng.random() < probability]

        if attempts > 1:
            logger.debug("Selection wiped out the population, retried %d times",
                         attempts - 1)
        logger.debug("%d of %d individuals kept", len(survivors), len(self.population))
        self.population = [self.population[i] for i in survivors]
        self.scores = self.scores[survivors]

    def swap_subtrees(self, index1: int, position1: Sequence[int],
                      index2: int, position2: Sequence[int]) -> bool:
        """Exchange the subtrees at the given positions of two individuals

        If one position is a root, the subtree at the other position becomes
        a new individual and a copy of the rooted individual takes its place,
        growing the population by one. Returns whether anything changed.
        """
        tree1 = self.population[index1]
        tree2 = self.population[index2]

        if not position1 and not position2:
            return False

        if not position1:
            self.population.append(tree2.get_subtree(position2).copy())
            tree2.replace(position2, tree1)
            return True

        if not position2:
            self.population.append(tree1.get_subtree(position1).copy())
            tree1.replace(position1, tree2)
            return True

        # Within one tree, a nested swap would address a replaced subtree
        if tree1 is tree2 and (_is_prefix(position1, position2)
                               or _is_prefix(position2, position1)):
            return False

        subtree1 = tree1.get_subtree(position1)
        subtree2 = tree2.get_subtree(position2)
        tree1.replace(position1, subtree2)
        tree2.replace(position2, subtree1)
        return True

    def crossover_trial(self) -> bool:
        """Swap random subtrees between two randomly picked individuals"""
        n = len(self.population)
        index1 = self.rng.randrange(n)
        index2 = self.rng.randrange(n)

        _, position1 = random_position(self.population[index1], rng=self.rng)
        if self.kind_matched:
            kind = self.population[index1].get_subtree(position1).kind
            found, position2 = random_position(self.population[index2],
                                               kind_filter(kind), self.rng)
            if not found:
                return False
        else:
            _, position2 = random_position(self.population[index2], rng=self.rng)

        return self.swap_subtrees(index1, position1, index2, position2)

    def crossover(self) -> int:
        """Run ``crossover_trials`` trials, returning how many changed something"""
        if not self.population:
            return 0
        swaps = sum(1 for _ in range(self.crossover_trials) if self.crossover_trial())
        logger.debug("%d of %d crossover trials swapped subtrees, population is %d",
                     swaps, self.crossover_trials, len(self.population))
        return swaps

    def step(self) -> None:
        """One full generation: populate, score, select, crossover"""
        self.populate()
        self.compute_scores()
        self._log_generation()
        self.natural_selection()
        self.crossover()
        self.generation += 1

    def _log_generation(self) -> None:
        logger.info("Generation %d: best=%.4f mean=%.4f population=%d",
                    self.generation, float(np.max(self.scores)),
                    float(np.mean(self.scores)), len(self.population))

    def get_best(self) -> Tree:
        """Individual with the highest score, the first one on ties"""
        self._check_scores()
        if not self.population:
            raise ValueError("Population is empty")
        return self.population[int(np.argmax(self.scores))]

    def run(self, generations: int = 10) -> Tree:
        """Evolve for a fixed number of generations and return the best individual"""
        if generations < 1:
            raise ValueError(f"generations must be at least 1, got {generations}")
        self.reset()
        for _ in range(generations - 1):
            self.step()
        self.populate()
        self.compute_scores()
        self._log_generation()
        return self.get_best()

    def run_until_fitness(self, threshold: float) -> Tree:
        """Evolve until the best score reaches ``threshold``

        There is no generation limit: an unreachable threshold never returns.
        """
        self.reset()
        self.populate()
        self.compute_scores()
        self._log_generation()
        while float(np.max(self.scores)) < threshold:
            self.natural_selection()
            self.crossover()
            self.generation += 1
            self.populate()
            self.compute_scores()
            self._log_generation()
        return self.get_best()

    def get_stats(self) -> Dict[str, Any]:
        """Get population statistics"""
        if not self.population:
            return {}

        sizes = [tree.size() for tree in self.population]
        depths = [tree.depth() for tree in self.population]
        stats = {
            'generation': self.generation,
            'population_size': len(self.population),
            'size': {
                'min': min(sizes),
                'max': max(sizes),
                'mean': float(np.mean(sizes)),
                'std': float(np.std(sizes))
            },
            'depth': {
                'min': min(depths),
                'max': max(depths),
                'mean': float(np.mean(depths)),
                'std': float(np.std(depths))
            }
        }
        if len(self.scores) == len(self.population):
            stats['fitness'] = {
                'min': float(np.min(self.scores)),
                'max': float(np.max(self.scores)),
                'mean': float(np.mean(self.scores)),
                'std': float(np.std(self.scores))
            }
        return stats
