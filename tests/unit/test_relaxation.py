# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)

"""Unit tests for the force relaxation pass."""

import numpy as np

from conceptweb.config import LayoutConfig
from conceptweb.layout.adjacency import build_adjacency
from conceptweb.layout.spanning_tree import extract_spanning_tree
from conceptweb.layout.relaxation import build_links, relax, jiggle


def _setup(node_ids, links, config):
    edges = [{'source': s, 'target': t} for s, t in links]
    tree = extract_spanning_tree(build_adjacency(node_ids, edges), node_ids[0])
    index = {nid: i for i, nid in enumerate(node_ids)}
    return tree, index, build_links(links, index, tree, config)


class TestBuildLinks:
    """Spring parameters."""

    def test_tree_and_cross_links(self):
        config = LayoutConfig()
        tree, index, links = _setup(['r', 'a', 'b'], [('r', 'a'), ('r', 'b'), ('a', 'b')], config)
        assert len(links) == 3
        assert links.strength[0] == config.tree_link_strength
        assert links.distance[0] == config.tree_link_distance
        assert links.strength[2] == config.cross_link_strength
        # a and b share a ring, so no depth slack
        assert links.distance[2] == config.cross_link_distance

    def test_cross_link_rest_length_grows_with_depth_gap(self):
        config = LayoutConfig()
        ids = ['r', 'a', 'b', 'c']
        pairs = [('r', 'a'), ('a', 'b'), ('b', 'c'), ('r', 'c')]
        tree, index, links = _setup(ids, pairs, config)
        cross = [k for k, (s, t) in enumerate(pairs) if not tree.is_tree_edge(s, t)]
        assert len(cross) == 1
        s, t = pairs[cross[0]]
        gap = abs(tree.depth[s] - tree.depth[t])
        assert links.distance[cross[0]] == config.cross_link_distance + config.cross_link_depth_slack * gap

    def test_bias_favours_low_degree(self):
        config = LayoutConfig()
        _, _, links = _setup(['r', 'a', 'b', 'c'], [('r', 'a'), ('r', 'b'), ('r', 'c')], config)
        # root has degree 3, each leaf degree 1: the leaf end takes 3 / (3 + 1)
        assert np.allclose(links.bias, 0.75)

    def test_empty(self):
        config = LayoutConfig()
        _, _, links = _setup(['r'], [], config)
        assert len(links) == 0


class TestJiggle:

    def test_antisymmetric_and_tiny(self):
        i = np.array([0, 3, 7])
        j = np.array([5, 1, 2])
        a = jiggle(i, j)
        b = jiggle(j, i)
        assert np.allclose(a, -b)
        assert np.all(np.linalg.norm(a, axis=1) < 1e-5)


class TestRelax:
    """The relaxation loop."""

    def test_pinned_node_exactly_at_center(self):
        config = LayoutConfig()
        ids = ['r', 'a', 'b']
        _, _, links = _setup(ids, [('r', 'a'), ('r', 'b')], config)
        start = np.array([[0.0, 0.0], [50.0, 50.0], [60.0, 40.0]])
        targets = np.array([[400.0, 300.0], [400.0, 80.0], [400.0, 520.0]])
        out = relax(start, targets, np.array([0.0, 220.0, 220.0]), links, 0, config)
        assert tuple(out[0]) == (400.0, 300.0)

    def test_does_not_modify_input(self):
        config = LayoutConfig(iterations=10)
        _, _, links = _setup(['r', 'a'], [('r', 'a')], config)
        start = np.array([[400.0, 300.0], [400.0, 100.0]])
        before = start.copy()
        relax(start, start, np.array([0.0, 220.0]), links, 0, config)
        assert np.array_equal(start, before)

    def test_coincident_nodes_stay_finite_and_separate(self):
        """Nodes starting on the same point are split apart."""
        config = LayoutConfig()
        ids = ['r', 'a', 'b', 'c']
        _, _, links = _setup(ids, [('r', 'a'), ('r', 'b'), ('r', 'c')], config)
        start = np.array([[400.0, 300.0]] * 4)
        targets = np.array([[400.0, 300.0], [400.0, 80.0], [590.0, 410.0], [210.0, 410.0]])
        out = relax(start, targets, np.array([0.0, 220.0, 220.0, 220.0]), links, 0, config)
        assert np.all(np.isfinite(out))
        dist = np.linalg.norm(out[1:, None, :] - out[None, 1:, :], axis=2)
        assert dist[np.triu_indices(3, 1)].min() > 50.0

    def test_zero_iterations_returns_start(self):
        config = LayoutConfig(iterations=0)
        _, _, links = _setup(['r', 'a'], [('r', 'a')], config)
        start = np.array([[0.0, 0.0], [123.0, 45.0]])
        out = relax(start, start, np.array([0.0, 220.0]), links, 0, config)
        assert tuple(out[1]) == (123.0, 45.0)
        assert tuple(out[0]) == config.center

    def test_moves_toward_ring(self):
        """A node released far outside its ring ends near the ring radius."""
        config = LayoutConfig()
        _, _, links = _setup(['r', 'a'], [('r', 'a')], config)
        start = np.array([[400.0, 300.0], [1400.0, 300.0]])
        targets = np.array([[400.0, 300.0], [620.0, 300.0]])
        out = relax(start, targets, np.array([0.0, 220.0]), links, 0, config)
        r = np.linalg.norm(out[1] - np.array(config.center))
        assert 150.0 < r < 300.0

    def test_deterministic(self):
        config = LayoutConfig()
        ids = ['r', 'a', 'b']
        _, _, links = _setup(ids, [('r', 'a'), ('a', 'b')], config)
        start = np.array([[400.0, 300.0], [400.0, 300.0], [401.0, 300.0]])
        targets = np.array([[400.0, 300.0], [400.0, 80.0], [400.0, -110.0]])
        radii = np.array([0.0, 220.0, 410.0])
        a = relax(start, targets, radii, links, 0, config)
        b = relax(start, targets, radii, links, 0, config)
        assert np.array_equal(a, b)

    def test_empty(self):
        out = relax(np.zeros((0, 2)), np.zeros((0, 2)), np.zeros(0),
                    build_links([], {}, None, LayoutConfig()), None)
        assert out.shape == (0, 2)
