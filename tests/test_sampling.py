from __future__ import annotations

import random
from collections import Counter

import pytest
from scipy.stats import chisquare

from tree_evolution.sampling import (
    ReservoirSampler,
    accept_all,
    kind_filter,
    random_position,
)
from tree_evolution.tree import Tree


class TestRandomPosition:

    def test_default_predicate_always_finds(self, sample_tree, rng):
        for _ in range(100):
            found, position = random_position(sample_tree, rng=rng)
            assert found is True
            sample_tree.get_subtree(position)

    def test_single_node_tree_yields_root(self, leaf, rng):
        assert random_position(leaf, rng=rng) == (True, ())

    def test_uniform_over_all_nodes(self, sample_tree):
        rng = random.Random(7)
        trials = 6000
        counts = Counter(random_position(sample_tree, rng=rng)[1] for _ in range(trials))
        positions = sample_tree.positions()
        assert set(counts) == set(positions)

        observed = [counts[position] for position in positions]
        _, p_value = chisquare(observed)
        assert p_value > 0.001

    def test_uniform_over_matching_kind(self, sample_tree):
        rng = random.Random(11)
        counts = Counter(random_position(sample_tree, kind_filter('leaf'), rng)[1]
                         for _ in range(3000))
        assert set(counts) == {(0, 0), (0, 1), (1, 0)}
        _, p_value = chisquare(list(counts.values()))
        assert p_value > 0.001

    def test_no_match_is_not_found(self, sample_tree, rng):
        assert random_position(sample_tree, kind_filter('missing'), rng) == (False, None)


class TestReservoirSampler:

    def test_counts_matches(self, sample_tree, rng):
        sampler = ReservoirSampler(kind_filter('op'), rng)
        sample_tree.visit(sampler)
        assert sampler.count == 3
        assert sampler.found
        assert sampler.tree.get_kind() == 'op'
        assert sample_tree.get_subtree(sampler.position) is sampler.tree

    def test_high_draws_keep_first_match(self, sample_tree, scripted_rng):
        # 0.99 < 1/1 only for the first match
        sampler = ReservoirSampler(accept_all, scripted_rng([0.99] * 6))
        sample_tree.visit(sampler)
        assert sampler.position == ()

    def test_zero_draws_keep_last_match(self, sample_tree, scripted_rng):
        rng = scripted_rng([0.0] * 6)
        sampler = ReservoirSampler(accept_all, rng)
        sample_tree.visit(sampler)
        assert sampler.position == (1, 0)
        assert rng.calls == 6

    def test_one_draw_per_match(self, sample_tree, scripted_rng):
        rng = scripted_rng([0.4, 0.4, 0.4])
        sampler = ReservoirSampler(kind_filter('leaf'), rng)
        sample_tree.visit(sampler)
        # k=1 keeps (0, 0), k=2 keeps (0, 1), 0.4 >= 1/3 rejects (1, 0)
        assert rng.calls == 3
        assert sampler.position == (0, 1)

    def test_comparison_is_strict(self, leaf, scripted_rng):
        tree = Tree('r', children=[leaf])
        sampler = ReservoirSampler(accept_all, scripted_rng([0.0, 0.5]))
        tree.visit(sampler)
        assert sampler.position == ()

    def test_defaults_to_private_generator(self, leaf):
        sampler = ReservoirSampler()
        leaf.visit(sampler)
        assert sampler.position == ()


class TestTreeRandomPosition:

    def test_without_kind_returns_pair(self, sample_tree, rng):
        found, position = sample_tree.random_position(rng=rng)
        assert found
        assert position in sample_tree.positions()

    def test_none_kind_matches_untagged_nodes(self, rng):
        tree = Tree('r', 'tagged', [Tree('u'), Tree('t', 'tagged')])
        for _ in range(20):
            assert tree.random_position(None, rng) == (True, (0,))

    def test_none_kind_without_untagged_nodes(self, sample_tree, rng):
        assert sample_tree.random_position(None, rng) == (False, None)

    def test_with_kind_returns_pair(self, sample_tree, rng):
        found, position = sample_tree.random_position('leaf', rng)
        assert found
        assert sample_tree.get_subtree(position).get_kind() == 'leaf'

    def test_with_missing_kind(self, sample_tree, rng):
        assert sample_tree.random_position('nope', rng) == (False, None)


@pytest.mark.parametrize("tree", [Tree('x'), Tree('x', children=[Tree('y')])])
def test_accept_all_matches_everything(tree):
    assert all(accept_all(node) for node in tree.get_all_nodes())
