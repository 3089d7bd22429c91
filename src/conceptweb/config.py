# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Layout configuration.

"""
Layout configuration for the ring layout engine.

All tunables (canvas center, ring schedule, force strengths, iteration
budget, placement constants) live in a single LayoutConfig value that is
passed into every layout call.

Usage:
    from conceptweb.config import LayoutConfig

    config = LayoutConfig(ring_gap=160, iterations=300)
    config = LayoutConfig.from_yaml("layout.yaml")
"""

import logging
import math
from dataclasses import dataclass, fields, asdict, replace
from pathlib import Path
from typing import Dict, Any, Tuple, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class LayoutConfig:
    """Configuration for ring layout, relaxation and sibling placement."""

    # Canvas
    center_x: float = 400.0
    center_y: float = 300.0
    start_angle: float = -math.pi / 2  # straight up in screen coordinates

    # Ring schedule
    ring_start: float = 220.0
    ring_gap: float = 190.0

    # Relaxation budget
    iterations: int = 220
    alpha_min: float = 0.001
    alpha_decay: float = 1.0 - 0.001 ** (1.0 / 300.0)
    velocity_decay: float = 0.4

    # Repulsion (negative charge pushes apart)
    charge: float = -900.0
    charge_distance_min: float = 60.0
    charge_distance_max: float = 700.0

    # Links
    tree_link_distance: float = 190.0
    tree_link_strength: float = 0.5
    cross_link_distance: float = 260.0
    cross_link_depth_slack: float = 120.0
    cross_link_strength: float = 0.06

    # Target pulls
    radial_strength: float = 0.3
    anchor_strength: float = 0.08

    # Collision
    collision_radius: float = 78.0
    collision_strength: float = 1.0
    collision_iterations: int = 2
    clearance_sweeps: int = 200  # floor; large graphs get two sweeps per node

    # New sibling placement
    sibling_radius: float = 180.0
    sibling_clearance: float = 100.0
    sibling_margin: float = 20.0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            # bool is an int subclass but never a valid option value
            if isinstance(value, bool):
                raise ConfigError(f"{f.name} must be a number, got {value!r}")
            if f.type is int and not isinstance(value, int):
                raise ConfigError(f"{f.name} must be an integer, got {value!r}")
            if f.type is float:
                if not isinstance(value, (int, float)):
                    raise ConfigError(f"{f.name} must be a number, got {value!r}")
                if not math.isfinite(value):
                    raise ConfigError(f"{f.name} must be finite, got {value}")

        if self.iterations < 0:
            raise ConfigError(f"iterations must be >= 0, got {self.iterations}")
        if self.collision_iterations < 0:
            raise ConfigError(
                f"collision_iterations must be >= 0, got {self.collision_iterations}"
            )
        if self.clearance_sweeps < 0:
            raise ConfigError(
                f"clearance_sweeps must be >= 0, got {self.clearance_sweeps}"
            )
        if self.ring_start <= 0 or self.ring_gap <= 0:
            raise ConfigError("ring_start and ring_gap must be positive")
        if not 0.0 < self.alpha_decay <= 1.0:
            raise ConfigError(f"alpha_decay must be in (0, 1], got {self.alpha_decay}")
        if not 0.0 <= self.velocity_decay <= 1.0:
            raise ConfigError(
                f"velocity_decay must be in [0, 1], got {self.velocity_decay}"
            )
        if self.charge_distance_min <= 0:
            raise ConfigError("charge_distance_min must be positive")
        if self.charge_distance_max < self.charge_distance_min:
            raise ConfigError("charge_distance_max must be >= charge_distance_min")
        if self.collision_radius < 0 or self.sibling_clearance < 0:
            raise ConfigError("clearance values must be non-negative")

    @property
    def center(self) -> Tuple[float, float]:
        """Canvas center where the root is pinned."""
        return (self.center_x, self.center_y)

    @property
    def min_clearance(self) -> float:
        """Minimum distance between any two node centers in a layout."""
        return 2.0 * self.collision_radius

    def with_overrides(self, **overrides) -> 'LayoutConfig':
        """Return a copy with some fields replaced."""
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'LayoutConfig':
        """Create from a dict of options, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ConfigError(f"Unknown layout options: {', '.join(unknown)}")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'LayoutConfig':
        """
        Load configuration from a YAML file.

        The file may hold the options at top level or under a `layout` key.
        """
        path = Path(path)
        try:
            with open(path, encoding='utf-8') as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Expected a mapping in {path}")
        if 'layout' in raw and isinstance(raw['layout'], dict):
            raw = raw['layout']

        logger.debug("Loaded layout config from %s: %s", path, sorted(raw))
        return cls.from_dict(raw)


DEFAULT_CONFIG = LayoutConfig()
