# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Ring layout: depth rings, weighted sectors, force relaxation.

"""
Ring layout for concept graphs.

The first node is the root and stays at the canvas center. Every other
node targets the ring for its BFS depth, inside an angular sector sized by
its subtree weight; a bounded force relaxation then resolves collisions
and smooths the result.

Usage:
    from conceptweb.layout import ring_layout, organize

    positions = ring_layout({'nodes': nodes, 'edges': edges})
    nodes = organize(nodes, edges)
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional, Any, Mapping

import numpy as np

from ..config import LayoutConfig, DEFAULT_CONFIG
from ..optimize.overlap_removal import enforce_clearance
from ..optimize.crossings import count_crossings
from .adjacency import build_adjacency, valid_links
from .spanning_tree import SpanningTree, extract_spanning_tree, snapshot_angles
from .partition import Partition, partition
from .relaxation import build_links, relax

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RingLayoutResult:
    """Positions plus the tree view and targets they were derived from."""
    positions: Dict[str, Tuple[float, float]]
    tree: Optional[SpanningTree] = None
    partition: Optional[Partition] = None


def node_position(node: Mapping[str, Any]) -> Optional[Tuple[float, float]]:
    """
    Read a node's current position.

    Accepts {'position': {'x', 'y'}}, {'position': (x, y)} or top-level
    'x'/'y' keys. Returns None when absent or not finite.
    """
    pos = node.get('position')
    if pos is None and 'x' in node and 'y' in node:
        pos = (node['x'], node['y'])
    if pos is None:
        return None
    try:
        if isinstance(pos, Mapping):
            x, y = float(pos['x']), float(pos['y'])
        else:
            x, y = (float(v) for v in pos)
    except (KeyError, TypeError, ValueError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return (x, y)


def ring_layout_detailed(
    graph: Dict[str, Any],
    config: Optional[LayoutConfig] = None
) -> RingLayoutResult:
    """
    Compute the ring layout and keep the intermediate tree and targets.

    Args:
        graph: Dictionary with 'nodes' and 'edges' keys.
               nodes: List of dicts with 'id' and optional 'position'
               edges: List of dicts with 'source' and 'target' keys
        config: Layout configuration.

    Returns:
        RingLayoutResult. For an empty graph positions is {} and tree and
        partition are None.
    """
    config = config or DEFAULT_CONFIG
    nodes = graph.get('nodes', [])
    edges = graph.get('edges', [])

    if not nodes:
        return RingLayoutResult(positions={})

    node_ids = list(dict.fromkeys(node['id'] for node in nodes))
    root = node_ids[0]
    current = {node['id']: node_position(node) for node in nodes}

    # Snapshot angles before anything moves.
    origin = current[root] or config.center
    prior = snapshot_angles(current, origin, config.start_angle)
    prior.pop(root, None)

    adjacency = build_adjacency(node_ids, edges)
    tree = extract_spanning_tree(adjacency, root, prior, config.start_angle)
    targets = partition(tree, config)

    if len(node_ids) == 1:
        return RingLayoutResult({root: config.center}, tree, targets)

    index = {nid: i for i, nid in enumerate(node_ids)}
    links = valid_links(node_ids, edges)

    start = np.array([current[nid] or targets.target[nid] for nid in node_ids])
    goal = np.array([targets.target[nid] for nid in node_ids])
    radii = np.array([targets.radius[nid] for nid in node_ids])

    relaxed = relax(
        start, goal, radii,
        build_links(links, index, tree, config),
        pinned=index[root],
        config=config,
    )
    positions = {nid: (float(relaxed[i, 0]), float(relaxed[i, 1]))
                 for nid, i in index.items()}

    positions = enforce_clearance(
        positions, config.min_clearance,
        fixed=[root], max_sweeps=max(config.clearance_sweeps, 2 * len(node_ids)),
    )
    positions[root] = config.center

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Ring layout: %d nodes, %d links, max depth %d, %d orphans, %d crossings",
            len(node_ids), len(links), tree.max_depth, len(tree.orphans),
            count_crossings(positions, links),
        )

    return RingLayoutResult(positions, tree, targets)


def ring_layout(
    graph: Dict[str, Any],
    config: Optional[LayoutConfig] = None
) -> Dict[str, Tuple[float, float]]:
    """
    Compute ring layout for a concept graph.

    Returns:
        Dictionary mapping every input node ID to its (x, y) position.
    """
    return ring_layout_detailed(graph, config).positions


def organize(
    nodes: List[Dict[str, Any]],
    edges: List[Dict[str, Any]],
    config: Optional[LayoutConfig] = None
) -> List[Dict[str, Any]]:
    """
    Lay out a network and return node copies with updated positions.

    The input lists and dicts are not modified; node payloads are shared.
    """
    positions = ring_layout({'nodes': nodes, 'edges': edges}, config)
    organized = []
    for node in nodes:
        x, y = positions[node['id']]
        updated = dict(node)
        updated['position'] = {'x': x, 'y': y}
        organized.append(updated)
    return organized


# Convenience function with options as keyword arguments
def compute(nodes, edges, **options):
    """Compute layout from keyword options (see LayoutConfig fields)."""
    graph = {'nodes': nodes, 'edges': edges}
    return ring_layout(graph, LayoutConfig.from_dict(options))
