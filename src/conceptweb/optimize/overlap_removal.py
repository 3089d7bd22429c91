# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Minimum clearance enforcement with SciPy neighbor queries.

"""
Push apart nodes closer than a minimum clearance.

Runs after relaxation so the clearance holds on the returned layout, not
just approximately inside the simulation. Fixed nodes (the root) never
move; the other node of such a pair takes the whole correction.
"""

import logging
import math
from typing import Dict, Tuple, Iterable

import numpy as np
from scipy.spatial import cKDTree

logger = logging.getLogger(__name__)

OVERSHOOT = 1.01
# Smallest correction, as a fraction of the clearance, so jammed chains open up.
MIN_PUSH_FRACTION = 0.02


def _separate(pos: np.ndarray, fixed: np.ndarray, i: int, j: int, clearance: float) -> bool:
    delta = pos[j] - pos[i]
    dist = math.hypot(delta[0], delta[1])
    if dist >= clearance:
        return False
    if fixed[i] and fixed[j]:
        return False
    if dist < 1e-9:
        theta = (min(i, j) * 2.399963 + max(i, j)) % (2.0 * math.pi)
        unit = np.array([math.cos(theta), math.sin(theta)])
    else:
        unit = delta / dist
    push = max((clearance - dist) * OVERSHOOT + 1e-6, clearance * MIN_PUSH_FRACTION)

    if fixed[i]:
        pos[j] += unit * push
    elif fixed[j]:
        pos[i] -= unit * push
    else:
        pos[i] -= unit * (push / 2.0)
        pos[j] += unit * (push / 2.0)
    return True


def enforce_clearance(
    positions: Dict[str, Tuple[float, float]],
    clearance: float,
    fixed: Iterable[str] = (),
    max_sweeps: int = 200
) -> Dict[str, Tuple[float, float]]:
    """
    Separate every pair of nodes closer than `clearance`.

    Args:
        positions: Dictionary mapping node IDs to (x, y) positions.
        clearance: Minimum allowed center-to-center distance.
        fixed: Node IDs that must not move.
        max_sweeps: Maximum number of detect-and-separate sweeps.

    Returns:
        Dictionary mapping node IDs to adjusted (x, y) positions.
    """
    if not positions:
        return {}
    node_ids = list(positions.keys())
    if len(node_ids) < 2 or clearance <= 0:
        return dict(positions)

    pos = np.array([positions[nid] for nid in node_ids], dtype=float)
    fixed_set = set(fixed)
    is_fixed = np.array([nid in fixed_set for nid in node_ids], dtype=bool)

    sweeps = 0
    for sweeps in range(1, max_sweeps + 1):
        pairs = cKDTree(pos).query_pairs(clearance, output_type='ndarray')
        if len(pairs) == 0:
            break
        pairs = pairs[np.lexsort((pairs[:, 1], pairs[:, 0]))]
        moved = False
        for i, j in pairs:
            moved |= _separate(pos, is_fixed, int(i), int(j), clearance)
        if not moved:
            break
    else:
        remaining = sum(
            1 for i, j in cKDTree(pos).query_pairs(clearance, output_type='ndarray')
            if np.hypot(*(pos[j] - pos[i])) < clearance
        )
        if remaining:
            logger.warning("%d node pairs still closer than %.1f after %d sweeps",
                           remaining, clearance, max_sweeps)

    logger.debug("Clearance enforcement finished after %d sweeps", sweeps)
    return {nid: (float(pos[k, 0]), float(pos[k, 1])) for k, nid in enumerate(node_ids)}


def min_pairwise_distance(positions: Dict[str, Tuple[float, float]]) -> float:
    """Smallest distance between two distinct nodes (inf for < 2 nodes)."""
    if len(positions) < 2:
        return float('inf')
    pts = np.array(list(positions.values()), dtype=float)
    dist, _ = cKDTree(pts).query(pts, k=2)
    return float(np.min(dist[:, 1]))
