"""
tests/conftest.py

Shared pytest fixtures for the tree_evolution test suite.

Fixture overview
----------------
Trees
    sample_tree         a(b(d,e),c(f)) with kinds 'op' for inner nodes, 'leaf' for leaves
    leaf                a single node tree

Randomness
    rng                 seeded random.Random for deterministic runs
    scripted_rng        factory for a Random whose random() replays given values
"""

from __future__ import annotations

import random

import pytest

from tree_evolution.tree import Tree


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_sample_tree() -> Tree:
    """
    Build the six node tree used throughout the suite::

            a
           / \\
          b   c
         / \\   \\
        d   e   f

    Pre-order: a b d e c f
    """
    return Tree('a', 'op', [
        Tree('b', 'op', [Tree('d', 'leaf'), Tree('e', 'leaf')]),
        Tree('c', 'op', [Tree('f', 'leaf')]),
    ])


class ScriptedRandom(random.Random):
    """Random whose random() returns a fixed script, then raises"""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)
        self.calls = 0

    def random(self):
        if self.calls >= len(self.values):
            raise AssertionError("ScriptedRandom ran out of values")
        value = self.values[self.calls]
        self.calls += 1
        return value


# ---------------------------------------------------------------------------
# Tree fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_tree() -> Tree:
    return _make_sample_tree()


@pytest.fixture
def leaf() -> Tree:
    return Tree('z', 'leaf')


@pytest.fixture(scope="session")
def make_sample_tree():
    """Factory fixture for fresh copies of the sample tree."""
    return _make_sample_tree


# ---------------------------------------------------------------------------
# Randomness fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def rng() -> random.Random:
    return random.Random(20240611)


@pytest.fixture
def scripted_rng():
    """
    Factory fixture: returns a function building a ScriptedRandom.

    Usage in a test::

        def test_something(scripted_rng):
            rng = scripted_rng([0.5, 0.99])
    """
    return ScriptedRandom
