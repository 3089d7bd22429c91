# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# BFS spanning tree rooted at the seed word.

"""
Root-rooted spanning tree extraction.

A concept graph may contain cycles, but ring layout needs tree semantics:
each reachable node gets a depth (BFS distance from root) and exactly one
parent. Edges that are not parent links are cross edges and do not affect
depth or angles.

Sibling order is kept stable across repeated layouts. Siblings keep the
cyclic order of their current angles around the root, and each sibling set
is rotated so its first wedge starts where the previous layout put it. A
small drift across the start ray therefore never reorders a subtree.
"""

import math
from collections import deque
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple, Optional, Set, Mapping, FrozenSet, Sequence

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class SpanningTree:
    """Ephemeral tree view of a graph, recomputed on every layout call."""
    root: str
    depth: Dict[str, int]
    parent: Dict[str, Optional[str]]
    children: Dict[str, List[str]]
    tree_edges: FrozenSet[Tuple[str, str]]
    order: Tuple[str, ...]
    orphans: Tuple[str, ...]

    @property
    def max_depth(self) -> int:
        """Deepest connected depth (orphans excluded)."""
        return max((self.depth[nid] for nid in self.order), default=0)

    def is_tree_edge(self, a: str, b: str) -> bool:
        """True if a-b links a node to its BFS parent (either direction)."""
        return (a, b) in self.tree_edges or (b, a) in self.tree_edges


def normalize_angle(angle: float, start_angle: float) -> float:
    """Map an angle into [start_angle, start_angle + 2*pi)."""
    offset = (angle - start_angle) % TWO_PI
    return start_angle + offset


def angle_offset(angle: float, reference: float) -> float:
    """Signed circular difference angle - reference, in [-pi, pi)."""
    return (angle - reference + math.pi) % TWO_PI - math.pi


def snapshot_angles(
    positions: Mapping[str, Optional[Tuple[float, float]]],
    origin: Tuple[float, float],
    start_angle: float = -math.pi / 2
) -> Dict[str, float]:
    """
    Capture the current angle of every node around `origin`.

    Nodes with no finite position, or lying on the origin, have no angle.
    """
    ox, oy = origin
    angles = {}
    for nid, pos in positions.items():
        if pos is None:
            continue
        x, y = pos
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        dx, dy = x - ox, y - oy
        if math.hypot(dx, dy) < 1e-9:
            continue
        angles[nid] = normalize_angle(math.atan2(dy, dx), start_angle)
    return angles


def leaf_counts(
    order: Sequence[str],
    children: Mapping[str, Sequence[str]]
) -> Dict[str, int]:
    """Leaf-equivalent size of every subtree in `order`, floored at 1."""
    weight: Dict[str, int] = {}
    for nid in reversed(order):
        total = sum(weight[child] for child in children.get(nid, ()))
        weight[nid] = max(1, total)
    return weight


def split_sector(
    lo: float,
    hi: float,
    kids: Sequence[str],
    weight: Mapping[str, int]
) -> List[Tuple[str, float, float]]:
    """Split [lo, hi) into contiguous (kid, start, end) wedges sized by weight."""
    total = sum(weight[k] for k in kids)
    span = hi - lo
    wedges = []
    cursor = lo
    for i, kid in enumerate(kids):
        # Last child closes the interval exactly.
        end = hi if i == len(kids) - 1 else cursor + span * weight[kid] / total
        wedges.append((kid, cursor, end))
        cursor = end
    return wedges


# =============================================================================
# BFS
# =============================================================================

SortKey = Callable[[str, str, int], tuple]


def _bfs(
    adjacency: Mapping[str, List[str]],
    root: str,
    sort_key: SortKey
):
    depth: Dict[str, int] = {root: 0}
    parent: Dict[str, Optional[str]] = {root: None}
    children: Dict[str, List[str]] = {nid: [] for nid in adjacency}
    children.setdefault(root, [])
    order: List[str] = []

    queue = deque([root])
    while queue:
        nid = queue.popleft()
        order.append(nid)

        fresh: List[str] = []
        for neighbor in adjacency.get(nid, ()):
            if neighbor in depth or neighbor in fresh:
                continue
            fresh.append(neighbor)

        discovery = {n: i for i, n in enumerate(fresh)}
        fresh.sort(key=lambda n: sort_key(nid, n, discovery[n]))

        for neighbor in fresh:
            depth[neighbor] = depth[nid] + 1
            parent[neighbor] = nid
            children[nid].append(neighbor)
            queue.append(neighbor)

    return depth, parent, children, order


def _fit_rotation(
    kids: List[str],
    weight: Mapping[str, int],
    prior_angles: Mapping[str, float],
    lo: float,
    hi: float
) -> List[str]:
    """
    Rotate the cyclic order of angled kids to best match their prior angles.

    Each rotation is scored by the squared circular distance between a kid's
    prior angle and the midpoint of the wedge it would receive. Kids without
    an angle stay at the end. Ties keep the unrotated order.
    """
    angled = [k for k in kids if k in prior_angles]
    rest = [k for k in kids if k not in prior_angles]
    if len(angled) < 2:
        return angled + rest

    best = angled + rest
    best_cost = math.inf
    for shift in range(len(angled)):
        candidate = angled[shift:] + angled[:shift] + rest
        cost = sum(
            angle_offset(prior_angles[kid], (start + end) / 2.0) ** 2
            for kid, start, end in split_sector(lo, hi, candidate, weight)
            if kid in prior_angles
        )
        if cost < best_cost - 1e-12:
            best, best_cost = candidate, cost
    return best


def _fit_orders(
    root: str,
    order: Sequence[str],
    children: Mapping[str, List[str]],
    prior_angles: Mapping[str, float],
    start_angle: float
) -> Dict[str, Tuple[str, int]]:
    """Top-down rotation fit; maps each child to (parent, rank)."""
    weight = leaf_counts(order, children)
    sector = {root: (start_angle, start_angle + TWO_PI)}
    rank: Dict[str, Tuple[str, int]] = {}
    for nid in order:
        kids = children.get(nid, [])
        if not kids:
            continue
        lo, hi = sector[nid]
        fitted = _fit_rotation(kids, weight, prior_angles, lo, hi)
        for i, (kid, start, end) in enumerate(split_sector(lo, hi, fitted, weight)):
            sector[kid] = (start, end)
            rank[kid] = (nid, i)
    return rank


def extract_spanning_tree(
    adjacency: Mapping[str, List[str]],
    root: str,
    prior_angles: Optional[Mapping[str, float]] = None,
    start_angle: float = -math.pi / 2
) -> SpanningTree:
    """
    Run BFS from `root` and build the tree view.

    Without prior angles siblings follow edge discovery order. With them,
    a first BFS sorts siblings into the cyclic order of their angles (cut
    opposite their parent, or at the start ray for the root's children),
    each sibling set is rotated to best match the wedges it would receive,
    and a second BFS visits siblings in that fitted order. Siblings without
    an angle follow in discovery order.

    Args:
        adjacency: Undirected adjacency (see build_adjacency). Its key order
            defines the input order used for orphans.
        root: Root node ID.
        prior_angles: Optional angles around the root from snapshot_angles.
        start_angle: Angle where the root's first wedge begins.

    Returns:
        SpanningTree with one depth/parent/children entry per node.
    """
    prior_angles = prior_angles or {}

    def angular_key(parent_id: str, nid: str, index: int) -> tuple:
        if nid not in prior_angles:
            return (1, index)
        reference = prior_angles.get(parent_id) if parent_id != root else None
        if reference is None:
            reference = start_angle + math.pi
        return (0, angle_offset(prior_angles[nid], reference))

    depth, parent, children, order = _bfs(adjacency, root, angular_key)

    if prior_angles:
        rank = _fit_orders(root, order, children, prior_angles, start_angle)

        def fitted_key(parent_id: str, nid: str, index: int) -> tuple:
            placed = rank.get(nid)
            if placed is not None and placed[0] == parent_id:
                return (0, placed[1])
            return (1,) + angular_key(parent_id, nid, index)

        depth, parent, children, order = _bfs(adjacency, root, fitted_key)

    tree_edges: Set[Tuple[str, str]] = {
        (nid, p) for nid, p in parent.items() if p is not None
    }

    # Handle disconnected nodes
    reachable_max = max(depth.values(), default=0)
    orphans = [nid for nid in adjacency if nid not in depth]
    for nid in orphans:
        depth[nid] = reachable_max + 1
        parent[nid] = None

    return SpanningTree(
        root=root,
        depth=depth,
        parent=parent,
        children=children,
        tree_edges=frozenset(tree_edges),
        order=tuple(order),
        orphans=tuple(orphans),
    )
