# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)

"""Shared fixtures for conceptweb tests."""

import os
import sys

import pytest

# Add source directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


def _make_graph(node_ids, links, positions=None):
    """Build a layout graph dict from ids, (source, target) pairs and optional positions."""
    positions = positions or {}
    nodes = []
    for nid in node_ids:
        node = {'id': nid, 'data': {'word': nid}}
        if nid in positions:
            x, y = positions[nid]
            node['position'] = {'x': x, 'y': y}
        nodes.append(node)
    edges = [{'id': f'{s}-{t}', 'source': s, 'target': t} for s, t in links]
    return {'nodes': nodes, 'edges': edges}


@pytest.fixture
def make_graph():
    return _make_graph


@pytest.fixture
def balanced_tree():
    """Root with four children, each with two leaves."""
    node_ids = ['root']
    links = []
    for c in 'abcd':
        node_ids.append(c)
        links.append(('root', c))
        for k in range(2):
            leaf = f'{c}{k}'
            node_ids.append(leaf)
            links.append((c, leaf))
    return node_ids, links
