"""
tree_evolution/sampling.py - Uniform random node positions by reservoir sampling
"""
import random
from typing import Any, Callable, Optional, Tuple

from .tree import Position, Tree

Predicate = Callable[[Tree], bool]


def accept_all(tree: Tree) -> bool:
    return True


def kind_filter(kind: Any) -> Predicate:
    """Predicate matching nodes tagged with ``kind``"""
    def matches(tree: Tree) -> bool:
        return tree.kind == kind
    return matches


class ReservoirSampler:
    """Reservoir of one over the nodes of a tree

    Used as a visitor for ``Tree.visit``. After the k-th matching node has
    been seen, each match so far is retained with probability 1/k.
    """

    def __init__(self, predicate: Predicate = accept_all, rng: random.Random = None):
        self.predicate = predicate
        self.rng = rng if rng is not None else random.Random()
        self.count = 0
        self.tree = None
        self.position = None

    def __call__(self, tree: Tree, position: Position) -> None:
        if not self.predicate(tree):
            return
        self.count += 1
        if self.rng.random() < 1.0 / self.count:
            self.tree = tree
            self.position = position

    @property
    def found(self) -> bool:
        return self.count > 0


def random_position(tree: Tree, predicate: Optional[Predicate] = None,
                    rng: random.Random = None) -> Tuple[bool, Optional[Position]]:
    """Pick a uniformly random position among nodes satisfying ``predicate``

    Returns ``(found, position)``; ``found`` is False and the position None
    only when no node matches, which cannot happen with the default
    predicate.
    """
    sampler = ReservoirSampler(predicate or accept_all, rng)
    tree.visit(sampler)
    return sampler.found, sampler.position
