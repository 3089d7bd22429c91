# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Subtree-weighted angular partition and ring targets.

"""
Angular partition of the full turn among subtrees.

Each node receives a contiguous angular wedge nested inside its parent's
wedge, sized proportionally to its subtree weight, and sits at the
midpoint of that wedge on the ring for its depth. Nested wedges mean tree
edges never cross on the target positions.
"""

import math
from dataclasses import dataclass
from typing import Dict, Tuple, Optional

from ..config import LayoutConfig, DEFAULT_CONFIG
from .spanning_tree import SpanningTree, TWO_PI, leaf_counts, split_sector


@dataclass(frozen=True)
class Partition:
    """Per-node layout targets derived from a spanning tree."""
    weight: Dict[str, int]
    angle: Dict[str, float]
    sector: Dict[str, Tuple[float, float]]
    radius: Dict[str, float]
    target: Dict[str, Tuple[float, float]]


def subtree_weights(tree: SpanningTree) -> Dict[str, int]:
    """Leaf-equivalent size of every subtree, floored at 1."""
    weight = leaf_counts(tree.order, tree.children)
    for nid in tree.orphans:
        weight[nid] = 1
    return weight


def ring_radius(depth: int, config: LayoutConfig = DEFAULT_CONFIG) -> float:
    """Target distance from the canvas center for a given depth."""
    if depth <= 0:
        return 0.0
    return config.ring_start + (depth - 1) * config.ring_gap


def partition(
    tree: SpanningTree,
    config: Optional[LayoutConfig] = None
) -> Partition:
    """
    Compute angular sectors, ring radii and target positions.

    Args:
        tree: Spanning tree from extract_spanning_tree.
        config: Layout configuration (center, start angle, ring schedule).

    Returns:
        Partition with weight/angle/radius/target per node and the sector
        interval of every connected node.
    """
    config = config or DEFAULT_CONFIG
    cx, cy = config.center
    start = config.start_angle

    weight = subtree_weights(tree)
    sector: Dict[str, Tuple[float, float]] = {tree.root: (start, start + TWO_PI)}
    angle: Dict[str, float] = {tree.root: start}

    # BFS order guarantees a parent's sector exists before its children's.
    for nid in tree.order:
        kids = tree.children.get(nid, ())
        if not kids:
            continue
        lo, hi = sector[nid]
        for kid, lo_kid, hi_kid in split_sector(lo, hi, kids, weight):
            sector[kid] = (lo_kid, hi_kid)
            angle[kid] = (lo_kid + hi_kid) / 2.0

    n_orphans = len(tree.orphans)
    for i, nid in enumerate(tree.orphans):
        angle[nid] = start + TWO_PI * (i + 0.5) / n_orphans

    radius = {nid: ring_radius(d, config) for nid, d in tree.depth.items()}
    target = {
        nid: (cx + radius[nid] * math.cos(angle[nid]),
              cy + radius[nid] * math.sin(angle[nid]))
        for nid in tree.depth
    }
    target[tree.root] = (cx, cy)

    return Partition(
        weight=weight,
        angle=angle,
        sector=sector,
        radius=radius,
        target=target,
    )
