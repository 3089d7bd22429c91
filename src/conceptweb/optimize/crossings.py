# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Edge crossing detection.

"""
Edge crossing detection for concept graph layouts.

Edges sharing an endpoint are never counted as crossing.
"""

from typing import Dict, List, Tuple, Sequence


def _segments_intersect(
    p1: Sequence[float], p2: Sequence[float],
    p3: Sequence[float], p4: Sequence[float]
) -> bool:
    """Check if line segments p1-p2 and p3-p4 intersect."""
    def ccw(a, b, c):
        return (c[1] - a[1]) * (b[0] - a[0]) > (b[1] - a[1]) * (c[0] - a[0])

    return (ccw(p1, p3, p4) != ccw(p2, p3, p4)) and (ccw(p1, p2, p3) != ccw(p1, p2, p4))


def detect_crossings(
    positions: Dict[str, Tuple[float, float]],
    links: Sequence[Tuple[str, str]]
) -> List[Tuple[int, int]]:
    """
    Detect all edge crossings in the layout.

    Args:
        positions: Dictionary mapping node IDs to (x, y) positions.
        links: (source, target) pairs. Pairs with an endpoint missing from
            `positions` are skipped.

    Returns:
        List of (link_index_1, link_index_2) tuples, indices into `links`.
    """
    segments = [
        (k, src, tgt) for k, (src, tgt) in enumerate(links)
        if src != tgt and src in positions and tgt in positions
    ]

    crossings = []
    m = len(segments)
    for a in range(m):
        k1, s1, t1 = segments[a]
        for b in range(a + 1, m):
            k2, s2, t2 = segments[b]
            # Skip if edges share a vertex
            if s1 in (s2, t2) or t1 in (s2, t2):
                continue
            if _segments_intersect(positions[s1], positions[t1],
                                   positions[s2], positions[t2]):
                crossings.append((k1, k2))

    return crossings


def count_crossings(
    positions: Dict[str, Tuple[float, float]],
    links: Sequence[Tuple[str, str]]
) -> int:
    """Number of crossing link pairs."""
    return len(detect_crossings(positions, links))
