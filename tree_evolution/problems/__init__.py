"""
tree_evolution/problems - Ready-made representations for the optimizer

Each problem supplies a zero-argument random individual generator and a
fitness function scoring a tree, higher being better.
"""
from collections import namedtuple

from . import equation, hello, regression

Problem = namedtuple('Problem', [
    'name', 'description', 'random_individual', 'fitness', 'target_fitness', 'kind_type'
])

PROBLEMS = {
    'equation': Problem(
        'equation', 'Find lhs == rhs agreeing at x=1,2 with lhs(3) = 10',
        equation.random_individual, equation.fitness,
        equation.TARGET_FITNESS, equation.Kind),
    'regression': Problem(
        'regression', 'Fit x^2 + x + 1 on [-1, 1]',
        regression.random_individual, regression.fitness,
        regression.TARGET_FITNESS, regression.Kind),
    'hello': Problem(
        'hello', f'Build the string {hello.TARGET!r} from list primitives',
        hello.random_individual, hello.fitness,
        hello.TARGET_FITNESS, hello.Kind),
}


def get_problem(name: str) -> Problem:
    """Look up a registered problem by name"""
    try:
        return PROBLEMS[name]
    except KeyError:
        raise ValueError(
            f"Unknown problem: {name} (choose from {', '.join(sorted(PROBLEMS))})"
        ) from None


__all__ = ['Problem', 'PROBLEMS', 'get_problem', 'equation', 'hello', 'regression']
