# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Concept graph layout.

"""
Layout engine for concept graphs.

Pipeline, leaves first:
- Adjacency builder (undirected, tolerant of malformed edges)
- Spanning tree extraction (BFS depth and parent from the root)
- Angular partition (subtree-weighted sectors on depth rings)
- Force relaxation (NumPy, root pinned at the canvas center)
- New sibling placement (cheap placement between full layouts)
"""

from .adjacency import build_adjacency, valid_links
from .spanning_tree import SpanningTree, extract_spanning_tree, snapshot_angles
from .partition import Partition, partition, ring_radius, subtree_weights
from .relaxation import build_links, relax
from .placement import place_new_sibling
from .ring import (
    RingLayoutResult,
    ring_layout,
    ring_layout_detailed,
    organize,
    compute,
    node_position,
)

__all__ = [
    'build_adjacency',
    'valid_links',
    'SpanningTree',
    'extract_spanning_tree',
    'snapshot_angles',
    'Partition',
    'partition',
    'ring_radius',
    'subtree_weights',
    'build_links',
    'relax',
    'place_new_sibling',
    'RingLayoutResult',
    'ring_layout',
    'ring_layout_detailed',
    'organize',
    'compute',
    'node_position',
]
