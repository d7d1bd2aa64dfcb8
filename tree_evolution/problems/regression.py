"""
tree_evolution/problems/regression.py - Arithmetic symbolic regression

Expression trees over ``x`` and constants are evaluated on a grid of sample
points with numpy and scored by mean squared error against a target curve.
"""
import random
from enum import Enum

import numpy as np

from ..tree import Tree


class Kind(str, Enum):
    NUMBER = 'number'


VARIABLES = ['x']
BINARY_OPS = ['add', 'sub', 'mul', 'div']

SAMPLES = np.linspace(-1, 1, 21)
TARGET = SAMPLES ** 2 + SAMPLES + 1

TARGET_FITNESS = 0.99


def random_node(depth: int = 0, max_depth: int = 5) -> Tree:
    """Create a random expression tree"""
    if depth >= max_depth or random.random() < 0.3:
        # Terminal node
        if random.random() < 0.7:
            return Tree(random.choice(VARIABLES), Kind.NUMBER)
        return Tree(round(random.uniform(-2, 2), 3), Kind.NUMBER)

    tree = Tree(random.choice(BINARY_OPS), Kind.NUMBER)
    tree.add(random_node(depth + 1, max_depth))
    tree.add(random_node(depth + 1, max_depth))
    return tree


def random_individual() -> Tree:
    return random_node(max_depth=random.randint(2, 5))


def evaluate(tree: Tree, x: np.ndarray) -> np.ndarray:
    """Evaluate the expression at every sample point"""
    symbol = tree.get_node()
    children = tree.get_children()

    if symbol in VARIABLES:
        return x
    if isinstance(symbol, (int, float)):
        return np.full_like(x, symbol, dtype=float)
    if symbol not in BINARY_OPS or len(children) != 2:
        return np.zeros_like(x, dtype=float)

    left = evaluate(children[0], x)
    right = evaluate(children[1], x)
    if symbol == 'add':
        result = left + right
    elif symbol == 'sub':
        result = left - right
    elif symbol == 'mul':
        result = left * right
    else:
        # Protected division
        divisor = np.where(np.abs(right) < 1e-10, 1.0, right)
        result = left / divisor

    # Clip to prevent overflow
    return np.clip(result, -1e6, 1e6)


def fitness(tree: Tree) -> float:
    prediction = evaluate(tree, SAMPLES)
    mse = float(np.mean((prediction - TARGET) ** 2))
    if not np.isfinite(mse):
        return 0.0
    return 1.0 / (1.0 + mse)
