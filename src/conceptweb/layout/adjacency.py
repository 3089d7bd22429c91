# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Undirected adjacency for concept graphs.

"""
Adjacency builder shared by the layout passes.

Edges referencing unknown nodes and self-loops are dropped silently;
parallel edges are kept as duplicate neighbor entries.
"""

from typing import Dict, List, Tuple, Optional, Any, Iterable


def edge_endpoints(edge: Dict[str, Any]) -> Optional[Tuple[str, str]]:
    """Return (source, target) of an edge dict, or None if malformed."""
    src = edge.get('source', edge.get('from'))
    tgt = edge.get('target', edge.get('to'))
    if src is None or tgt is None:
        return None
    return src, tgt


def valid_links(
    node_ids: Iterable[str],
    edges: Iterable[Dict[str, Any]]
) -> List[Tuple[str, str]]:
    """Endpoint pairs of edges whose endpoints both exist and differ."""
    known = set(node_ids)
    links = []
    for edge in edges:
        ends = edge_endpoints(edge)
        if ends is None:
            continue
        src, tgt = ends
        if src == tgt or src not in known or tgt not in known:
            continue
        links.append((src, tgt))
    return links


def build_adjacency(
    node_ids: Iterable[str],
    edges: Iterable[Dict[str, Any]]
) -> Dict[str, List[str]]:
    """
    Build an undirected adjacency mapping.

    Args:
        node_ids: Known node IDs. Every ID gets an entry, even if isolated.
        edges: Edge dicts with 'source' and 'target' keys.

    Returns:
        Dictionary mapping node ID to neighbor IDs in first-seen order.
    """
    node_ids = list(node_ids)
    adjacency: Dict[str, List[str]] = {nid: [] for nid in node_ids}

    for src, tgt in valid_links(node_ids, edges):
        adjacency[src].append(tgt)
        adjacency[tgt].append(src)

    return adjacency
