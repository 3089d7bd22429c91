# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Layout post-processing passes.

"""
Post-processing passes for ring layouts.

- Clearance enforcement (push apart nodes closer than a minimum distance)
- Crossing detection (count intersecting edge pairs)
"""

from .overlap_removal import enforce_clearance, min_pairwise_distance
from .crossings import detect_crossings, count_crossings

__all__ = [
    'enforce_clearance',
    'min_pairwise_distance',
    'detect_crossings',
    'count_crossings'
]
