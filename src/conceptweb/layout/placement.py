# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Placement of freshly generated sibling nodes.

"""
Cheap deterministic placement for new child nodes.

Used between full ring layouts so new concepts appear immediately around
their parent. The result is not crossing-free or final.
"""

import math
from typing import Iterable, Tuple, Optional

from ..config import LayoutConfig, DEFAULT_CONFIG


def place_new_sibling(
    parent_position: Tuple[float, float],
    placed_positions: Iterable[Tuple[float, float]],
    index: int,
    total: int,
    config: Optional[LayoutConfig] = None
) -> Tuple[float, float]:
    """
    Place the `index`-th of `total` new children around a parent.

    Candidates sit on a circle of `sibling_radius`, starting straight up
    and stepping by 2*pi / max(total, 3). A single pass then pushes the
    candidate directly away from any placed node closer than
    `sibling_clearance`, by the shortfall plus `sibling_margin`.

    Args:
        parent_position: (x, y) of the parent node.
        placed_positions: Positions already on the canvas, including
            siblings placed earlier in the same batch.
        index: Ordinal of this child within the batch.
        total: Number of children in the batch.
        config: Layout configuration.

    Returns:
        (x, y) for the new node.
    """
    config = config or DEFAULT_CONFIG
    px, py = parent_position

    step = 2.0 * math.pi / max(total, 3)
    angle = config.start_angle + step * index
    x = px + config.sibling_radius * math.cos(angle)
    y = py + config.sibling_radius * math.sin(angle)

    clearance = config.sibling_clearance
    for ox, oy in placed_positions:
        dx = x - ox
        dy = y - oy
        distance = math.hypot(dx, dy)
        if distance >= clearance:
            continue
        if distance < 1e-9:
            # Coincident: push outward along the candidate's own angle.
            dx, dy, distance = math.cos(angle), math.sin(angle), 1.0
            shortfall = clearance
        else:
            shortfall = clearance - distance
        push = shortfall + config.sibling_margin
        x += dx / distance * push
        y += dy / distance * push

    return (x, y)
