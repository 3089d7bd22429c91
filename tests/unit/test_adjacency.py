# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)

"""Unit tests for the adjacency builder."""

from conceptweb.layout.adjacency import build_adjacency, valid_links, edge_endpoints


class TestBuildAdjacency:
    """Tests for build_adjacency."""

    def test_undirected_first_seen_order(self):
        """Neighbors appear in edge-list order on both endpoints."""
        edges = [
            {'source': 'r', 'target': 'a'},
            {'source': 'b', 'target': 'r'},
            {'source': 'a', 'target': 'b'},
        ]
        adj = build_adjacency(['r', 'a', 'b'], edges)
        assert adj == {'r': ['a', 'b'], 'a': ['r', 'b'], 'b': ['r', 'a']}

    def test_drops_self_loops_and_unknown_endpoints(self):
        """Self-loops and edges to missing nodes are ignored."""
        edges = [
            {'source': 'r', 'target': 'r'},
            {'source': 'r', 'target': 'ghost'},
            {'source': 'r', 'target': 'a'},
        ]
        adj = build_adjacency(['r', 'a'], edges)
        assert adj == {'r': ['a'], 'a': ['r']}

    def test_parallel_edges_kept(self):
        """Duplicate edges produce duplicate neighbor entries."""
        edges = [{'source': 'r', 'target': 'a'}, {'source': 'a', 'target': 'r'}]
        adj = build_adjacency(['r', 'a'], edges)
        assert adj['r'] == ['a', 'a']

    def test_isolated_nodes_present(self):
        """Every node id gets an entry."""
        adj = build_adjacency(['r', 'z'], [])
        assert adj == {'r': [], 'z': []}

    def test_malformed_edges_ignored(self):
        """Edges without endpoints are skipped, not rejected."""
        edges = [{'source': 'r'}, {}, {'from': 'r', 'to': 'a'}]
        assert valid_links(['r', 'a'], edges) == [('r', 'a')]

    def test_edge_endpoints(self):
        assert edge_endpoints({'source': 'x', 'target': 'y'}) == ('x', 'y')
        assert edge_endpoints({'target': 'y'}) is None
