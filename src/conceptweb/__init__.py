# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# conceptweb: interactively grown concept graphs.

"""
Concept graph layout and word network state.

The layout package places a seed word at the canvas center and arranges
related concepts on depth rings, in sectors sized by subtree weight,
refined by a bounded force relaxation.

The io module provides JSON Lines I/O so layouts can run in a pipe; the
network and store modules hold and persist named word networks.
"""

from . import layout
from . import optimize
from . import io
from .config import LayoutConfig
from .layout import ring_layout, organize, place_new_sibling

__version__ = '0.1.0'

__all__ = [
    'layout',
    'optimize',
    'io',
    'LayoutConfig',
    'ring_layout',
    'organize',
    'place_new_sibling',
]
