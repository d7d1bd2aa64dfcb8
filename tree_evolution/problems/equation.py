"""
tree_evolution/problems/equation.py - Evolve an equation lhs == rhs over x

The root is a boolean ``==`` node comparing two numeric expressions built
from ``x``, ``one`` and ``plus``. A perfect individual has both sides agree
at x=1 and x=2 and its left side equal to 10 at x=3.
"""
import random
from enum import Enum

from ..tree import Tree


class Kind(str, Enum):
    NUMBER = 'number'
    BOOLEAN = 'boolean'


X = 'x'
ONE = 'one'
PLUS = 'plus'
EQUALS = '=='

TARGET_FITNESS = 0.999


def random_expression(depth: int = 0, max_depth: int = 8) -> Tree:
    """Create a random numeric expression"""
    choice = random.random()
    if depth >= max_depth:
        return Tree(X if choice < 0.5 else ONE, Kind.NUMBER)
    if choice < 0.3:
        return Tree(X, Kind.NUMBER)
    elif choice < 0.6:
        tree = Tree(PLUS, Kind.NUMBER)
        tree.add(random_expression(depth + 1, max_depth))
        tree.add(random_expression(depth + 1, max_depth))
        return tree
    else:
        return Tree(ONE, Kind.NUMBER)


def random_individual() -> Tree:
    tree = Tree(EQUALS, Kind.BOOLEAN)
    tree.add(random_expression())
    tree.add(random_expression())
    return tree


def evaluate(tree: Tree, x: float) -> float:
    """Numeric value of an expression; unknown symbols count as 0"""
    symbol = tree.get_node()
    children = tree.get_children()
    if symbol == X:
        return x
    if symbol == ONE:
        return 1.0
    if symbol == PLUS:
        return sum(evaluate(child, x) for child in children)
    if symbol == EQUALS and len(children) == 2:
        # A comparison moved into a numeric slot by crossover
        return 1.0 if evaluate(children[0], x) == evaluate(children[1], x) else 0.0
    return 0.0


def fitness(tree: Tree) -> float:
    children = tree.get_children()
    left = children[0] if len(children) > 0 else tree
    right = children[1] if len(children) > 1 else Tree(None)

    error = (abs(evaluate(left, 1.0) - evaluate(right, 1.0))
             + abs(evaluate(left, 2.0) - evaluate(right, 2.0))
             + abs(evaluate(left, 3.0) - 10.0))
    return 1.0 / (error + 1.0)
