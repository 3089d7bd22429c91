# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Command line entry point.

"""
Lay out a concept graph read from JSON Lines.

Usage:
    conceptweb-layout < graph.jsonl > positions.jsonl
    conceptweb-layout --config layout.yaml --input graph.jsonl --verbose
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LayoutConfig
from .errors import ConfigError
from .io import read_all, write_positions, graph_to_layout_input
from .layout import ring_layout

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Compute a ring layout for a concept graph in JSON Lines format'
    )
    parser.add_argument('--input', '-i', type=Path, default=None,
                        help='Input JSON Lines file (default: stdin)')
    parser.add_argument('--output', '-o', type=Path, default=None,
                        help='Output JSON Lines file (default: stdout)')
    parser.add_argument('--config', '-c', type=Path, default=None,
                        help='YAML file with layout options')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config = LayoutConfig.from_yaml(args.config) if args.config else LayoutConfig()
    except (ConfigError, OSError) as e:
        logger.error("Could not load config: %s", e)
        return 2

    try:
        if args.input:
            with open(args.input, encoding='utf-8') as f:
                nodes, edges, positions = read_all(f)
        else:
            nodes, edges, positions = read_all(sys.stdin)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read input: %s", e)
        return 1

    logger.info("Read %d nodes, %d edges", len(nodes), len(edges))
    result = ring_layout(graph_to_layout_input(nodes, edges, positions), config)

    try:
        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                write_positions(result, f)
        else:
            write_positions(result, sys.stdout)
    except OSError as e:
        logger.error("Could not write output: %s", e)
        return 1

    logger.info("Wrote %d positions", len(result))
    return 0


if __name__ == '__main__':
    sys.exit(main())
