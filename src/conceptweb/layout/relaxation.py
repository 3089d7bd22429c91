# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Force relaxation pass with NumPy acceleration.

"""
Bounded force relaxation toward ring/sector targets.

A fixed number of velocity-Verlet style steps combine five forces:

- repulsion between all node pairs
- springs along edges (strong tree links, weak cross links)
- a radial pull toward each node's ring
- a weak positional anchor toward each node's partition target
- collision correction keeping nodes a minimum clearance apart

A global intensity `alpha` starts at 1 and decays toward `alpha_min`.
There is no convergence check: cost is O(iterations * (n^2 + e)).
The root is pinned at the canvas center throughout.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple, Optional, Sequence

import numpy as np

from ..config import LayoutConfig, DEFAULT_CONFIG
from .spanning_tree import SpanningTree

logger = logging.getLogger(__name__)

GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))
JIGGLE = 1e-6


@dataclass(frozen=True)
class LinkSet:
    """Edge springs in index form."""
    source: np.ndarray
    target: np.ndarray
    distance: np.ndarray
    strength: np.ndarray
    bias: np.ndarray

    def __len__(self) -> int:
        return len(self.source)


def build_links(
    pairs: Sequence[Tuple[str, str]],
    index: Dict[str, int],
    tree: SpanningTree,
    config: LayoutConfig = DEFAULT_CONFIG
) -> LinkSet:
    """
    Turn endpoint pairs into springs.

    Tree links get `tree_link_distance`/`tree_link_strength`. Cross links
    get `cross_link_strength` and a rest length that grows by
    `cross_link_depth_slack` per ring of depth difference.
    """
    src: List[int] = []
    tgt: List[int] = []
    dist: List[float] = []
    strength: List[float] = []

    for a, b in pairs:
        src.append(index[a])
        tgt.append(index[b])
        if tree.is_tree_edge(a, b):
            dist.append(config.tree_link_distance)
            strength.append(config.tree_link_strength)
        else:
            gap = abs(tree.depth[a] - tree.depth[b])
            dist.append(config.cross_link_distance + config.cross_link_depth_slack * gap)
            strength.append(config.cross_link_strength)

    source = np.array(src, dtype=int)
    target = np.array(tgt, dtype=int)

    # Lower-degree endpoint moves more, as in d3-force.
    count = np.bincount(np.concatenate([source, target]), minlength=len(index))
    if len(source):
        bias = count[source] / (count[source] + count[target])
    else:
        bias = np.zeros(0)

    return LinkSet(
        source=source,
        target=target,
        distance=np.array(dist, dtype=float),
        strength=np.array(strength, dtype=float),
        bias=bias.astype(float),
    )


def jiggle(i: np.ndarray, j: np.ndarray) -> np.ndarray:
    """
    Deterministic tiny direction for coincident pairs.

    Antisymmetric: jiggle(i, j) == -jiggle(j, i).
    """
    lo = np.minimum(i, j)
    hi = np.maximum(i, j)
    theta = (lo * GOLDEN_ANGLE + hi * 1.0) % (2.0 * math.pi)
    sign = np.where(i < j, 1.0, -1.0)
    return np.stack([np.cos(theta), np.sin(theta)], axis=-1) * (sign * JIGGLE)[..., None]


def _pairwise(points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """diff[i, j] = points[j] - points[i] with coincident pairs jiggled."""
    n = len(points)
    diff = points[np.newaxis, :, :] - points[:, np.newaxis, :]
    d2 = np.sum(diff ** 2, axis=2)
    coincident = d2 < JIGGLE ** 2
    np.fill_diagonal(coincident, False)
    if np.any(coincident):
        ii, jj = np.nonzero(coincident)
        diff[ii, jj] = jiggle(ii, jj)
        d2 = np.sum(diff ** 2, axis=2)
    d2[np.arange(n), np.arange(n)] = np.inf
    return diff, d2


def _apply_charge(pos, vel, alpha, config: LayoutConfig) -> None:
    diff, d2 = _pairwise(pos)
    dmin = config.charge_distance_min
    in_range = d2 < config.charge_distance_max ** 2
    # Inside dmin the magnitude stops growing.
    d2_eff = np.where(d2 < dmin * dmin, dmin * np.sqrt(d2), d2)
    w = np.where(in_range, config.charge * alpha / d2_eff, 0.0)
    vel += np.sum(diff * w[:, :, np.newaxis], axis=1)


def _apply_links(pos, vel, alpha, links: LinkSet) -> None:
    if not len(links):
        return
    nxt = pos + vel
    diff = nxt[links.target] - nxt[links.source]
    d = np.sqrt(np.sum(diff ** 2, axis=1))
    short = d < JIGGLE
    if np.any(short):
        diff[short] = jiggle(links.source[short], links.target[short])
        d[short] = JIGGLE
    k = (d - links.distance) / d * alpha * links.strength
    diff *= k[:, np.newaxis]
    np.subtract.at(vel, links.target, diff * links.bias[:, np.newaxis])
    np.add.at(vel, links.source, diff * (1.0 - links.bias)[:, np.newaxis])


def _apply_radial(pos, vel, alpha, radii, center, config: LayoutConfig) -> None:
    offset = pos - center
    r = np.sqrt(np.sum(offset ** 2, axis=1))
    on_center = r < JIGGLE
    if np.any(on_center):
        idx = np.nonzero(on_center)[0]
        theta = (idx * GOLDEN_ANGLE) % (2.0 * math.pi)
        offset[idx] = np.stack([np.cos(theta), np.sin(theta)], axis=-1) * JIGGLE
        r[idx] = JIGGLE
    k = (radii - r) * config.radial_strength * alpha / r
    vel += offset * k[:, np.newaxis]


def _apply_collision(pos, vel, pinned: Optional[int], config: LayoutConfig) -> None:
    n = len(pos)
    reach = config.min_clearance
    if reach <= 0:
        return
    # share[i, j]: fraction of the pair correction that node i takes.
    share = np.full((n, n), 0.5)
    if pinned is not None:
        share[pinned, :] = 0.0
        share[:, pinned] = 1.0
        share[pinned, pinned] = 0.0

    for _ in range(config.collision_iterations):
        diff, d2 = _pairwise(pos + vel)
        d = np.sqrt(d2)
        overlap = d < reach
        if not np.any(overlap):
            break
        k = np.where(overlap, (reach - d) / np.where(overlap, d, 1.0), 0.0)
        k *= config.collision_strength
        # diff points from i to j, so i moves along -diff.
        vel -= np.sum(diff * (k * share)[:, :, np.newaxis], axis=1)


def relax(
    positions: np.ndarray,
    targets: np.ndarray,
    target_radii: np.ndarray,
    links: LinkSet,
    pinned: Optional[int] = 0,
    config: Optional[LayoutConfig] = None
) -> np.ndarray:
    """
    Run the relaxation and return final positions.

    Args:
        positions: (n, 2) starting positions; not modified.
        targets: (n, 2) partition targets for the positional anchor.
        target_radii: (n,) ring radius per node, measured from the center.
        links: Springs from build_links.
        pinned: Index of the node held at the canvas center (the root),
            or None.
        config: Layout configuration.

    Returns:
        (n, 2) array of relaxed positions. The pinned node is exactly at
        the canvas center.
    """
    config = config or DEFAULT_CONFIG
    pos = np.array(positions, dtype=float).reshape(-1, 2)
    n = len(pos)
    if n == 0:
        return pos

    center = np.array(config.center, dtype=float)
    targets = np.asarray(targets, dtype=float).reshape(-1, 2)
    radii = np.asarray(target_radii, dtype=float)
    vel = np.zeros_like(pos)

    if pinned is not None:
        pos[pinned] = center

    alpha = 1.0
    keep = 1.0 - config.velocity_decay
    for _ in range(config.iterations):
        alpha += (config.alpha_min - alpha) * config.alpha_decay

        _apply_charge(pos, vel, alpha, config)
        _apply_links(pos, vel, alpha, links)
        _apply_radial(pos, vel, alpha, radii, center, config)
        vel += (targets - pos) * (config.anchor_strength * alpha)
        _apply_collision(pos, vel, pinned, config)

        vel *= keep
        if pinned is not None:
            vel[pinned] = 0.0
        pos += vel
        if pinned is not None:
            pos[pinned] = center

    bad = ~np.all(np.isfinite(pos), axis=1)
    if np.any(bad):
        logger.warning("Relaxation produced %d non-finite positions; using targets",
                       int(bad.sum()))
        pos[bad] = targets[bad]

    if pinned is not None:
        pos[pinned] = center

    logger.debug("Relaxed %d nodes, %d links over %d iterations (final alpha %.4f)",
                 n, len(links), config.iterations, alpha)
    return pos
