"""
tree_evolution/problems/hello.py - Typed string-construction DSL

Programs build a string from character constants with list-like
primitives:

    nil            the empty string                      (str)
    cons(c, s)     character c prepended to s            (str)
    tl(s)          s without its first character          (str)
    hd(s)          first character of s, '' if empty      (char)
    'H'            a character constant                   (char)

The goal is a program producing ``TARGET``.
"""
import random
from enum import Enum

from ..tree import Tree


class Kind(str, Enum):
    STR = 'str'
    CHAR = 'char'


NIL = 'nil'
CONS = 'cons'
TL = 'tl'
HD = 'hd'
OPERATORS = (NIL, CONS, TL, HD)

TARGET = 'Hello'
TARGET_FITNESS = 0.999

# Penalty for each missing or extra character
LENGTH_PENALTY = 256


def random_char() -> str:
    return chr(random.randint(32, 126))


def random_tree(kind: Kind = Kind.STR, depth: int = 0, max_depth: int = 12) -> Tree:
    """Create a random program producing a value of ``kind``"""
    if kind == Kind.CHAR:
        if depth >= max_depth or random.random() < 0.5:
            return Tree(random_char(), Kind.CHAR)
        return Tree(HD, Kind.CHAR, [random_tree(Kind.STR, depth + 1, max_depth)])

    if depth >= max_depth:
        return Tree(NIL, Kind.STR)
    choice = random.randrange(3)
    if choice == 0:
        return Tree(NIL, Kind.STR)
    elif choice == 1:
        return Tree(CONS, Kind.STR, [random_tree(Kind.CHAR, depth + 1, max_depth),
                                     random_tree(Kind.STR, depth + 1, max_depth)])
    else:
        return Tree(TL, Kind.STR, [random_tree(Kind.STR, depth + 1, max_depth)])


def random_individual() -> Tree:
    return random_tree(Kind.STR)


def evaluate(tree: Tree) -> str:
    """Run a program; characters are strings of length one

    Missing operands read as the empty string so that any tree produced by
    crossover can be evaluated.
    """
    symbol = tree.get_node()
    args = [evaluate(child) for child in tree.get_children()]

    def arg(i):
        return args[i] if i < len(args) else ''

    if symbol == NIL:
        return ''
    if symbol == CONS:
        return arg(0)[:1] + arg(1)
    if symbol == TL:
        return arg(0)[1:]
    if symbol == HD:
        return arg(0)[:1]
    return str(symbol)[:1]


def distance(value: str, target: str = TARGET) -> int:
    common = min(len(value), len(target))
    diff = sum(abs(ord(a) - ord(b)) for a, b in zip(value[:common], target[:common]))
    return diff + LENGTH_PENALTY * abs(len(value) - len(target))


def fitness(tree: Tree) -> float:
    return 1.0 / (distance(evaluate(tree)) + 1.0)
