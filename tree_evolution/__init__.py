"""
tree_evolution - Tree-based evolutionary optimizer

Candidate solutions are ordered trees evolved toward a caller-defined
fitness by fitness-proportional survival and subtree crossover.
"""

__version__ = "0.1.0"
__author__ = "Tree Evolution Project"

from .tree import Tree, Position, OutOfBoundsError
from .sampling import ReservoirSampler, random_position, accept_all, kind_filter
from .optimizer import Optimizer, CROSSOVER_TRIALS

__all__ = [
    'Tree', 'Position', 'OutOfBoundsError',
    'ReservoirSampler', 'random_position', 'accept_all', 'kind_filter',
    'Optimizer', 'CROSSOVER_TRIALS'
]
