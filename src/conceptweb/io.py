# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# JSON Lines I/O for concept graph objects
#
# Provides streaming I/O for concept graphs using JSON Lines format,
# so layouts can be computed in a pipe.

"""
JSON Lines I/O for concept graph objects.

Each line is one JSON object with a "type" of "node", "edge", "position"
or "graph".

Usage:
    from conceptweb.io import read_all, write_positions

    nodes, edges, _ = read_all(sys.stdin)
    write_positions(positions, sys.stdout)
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import (
    Dict, List, Tuple, Optional, Any, Iterator, TextIO, Union
)

logger = logging.getLogger(__name__)


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class ConceptNode:
    """A concept node. The first node of a graph is its root."""
    id: str
    word: str = ""
    x: Optional[float] = None
    y: Optional[float] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "type": "node",
            "id": self.id,
            "word": self.word,
            "x": self.x,
            "y": self.y,
            "data": self.data
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ConceptNode':
        """Create from JSON dict."""
        return cls(
            id=d["id"],
            word=d.get("word", ""),
            x=d.get("x"),
            y=d.get("y"),
            data=d.get("data", {})
        )

    def to_layout(self) -> Dict[str, Any]:
        """Node dict in the shape the layout engine reads."""
        node = {"id": self.id, "data": dict(self.data, word=self.word)}
        if self.x is not None and self.y is not None:
            node["position"] = {"x": self.x, "y": self.y}
        return node


@dataclass
class ConceptEdge:
    """An edge between two concepts, optionally labelled with the relation."""
    id: str
    source: str
    target: str
    label: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "type": "edge",
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "label": self.label
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ConceptEdge':
        """Create from JSON dict."""
        source = d.get("source", d.get("from"))
        target = d.get("target", d.get("to"))
        return cls(
            id=d.get("id") or f"{source}-{target}",
            source=source,
            target=target,
            label=d.get("label")
        )

    def to_layout(self) -> Dict[str, Any]:
        """Edge dict in the shape the layout engine reads."""
        return {"id": self.id, "source": self.source, "target": self.target}


@dataclass
class NodePosition:
    """A node position."""
    id: str
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "type": "position",
            "id": self.id,
            "x": self.x,
            "y": self.y
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'NodePosition':
        """Create from JSON dict."""
        return cls(id=d["id"], x=d["x"], y=d["y"])


@dataclass
class ConceptGraph:
    """A complete concept graph."""
    id: str
    nodes: List[ConceptNode] = field(default_factory=list)
    edges: List[ConceptEdge] = field(default_factory=list)
    positions: List[NodePosition] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "type": "graph",
            "id": self.id,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "positions": [p.to_dict() for p in self.positions]
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ConceptGraph':
        """Create from JSON dict."""
        return cls(
            id=d.get("id", ""),
            nodes=[ConceptNode.from_dict(n) for n in d.get("nodes", [])],
            edges=[ConceptEdge.from_dict(e) for e in d.get("edges", [])],
            positions=[NodePosition.from_dict(p) for p in d.get("positions", [])]
        )


# Type for any concept graph object
GraphObject = Union[ConceptNode, ConceptEdge, NodePosition, ConceptGraph]

_TYPES = {
    "node": ConceptNode,
    "edge": ConceptEdge,
    "position": NodePosition,
    "graph": ConceptGraph,
}


# ============================================================================
# READERS
# ============================================================================

def read_objects(stream: TextIO = sys.stdin) -> Iterator[GraphObject]:
    """Read typed objects from a JSON Lines stream, skipping bad lines."""
    for lineno, line in enumerate(stream, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed JSON on line %d", lineno)
            continue
        cls = _TYPES.get(obj.get("type")) if isinstance(obj, dict) else None
        if cls is None:
            logger.debug("Skipping line %d with unknown type", lineno)
            continue
        try:
            yield cls.from_dict(obj)
        except KeyError as e:
            logger.warning("Skipping line %d: missing field %s", lineno, e)


def read_all(stream: TextIO = sys.stdin) -> Tuple[
    List[ConceptNode], List[ConceptEdge], List[NodePosition]
]:
    """
    Read all objects, grouped by type.

    Graph objects are flattened into their nodes, edges and positions.
    """
    nodes: List[ConceptNode] = []
    edges: List[ConceptEdge] = []
    positions: List[NodePosition] = []

    for obj in read_objects(stream):
        if isinstance(obj, ConceptNode):
            nodes.append(obj)
        elif isinstance(obj, ConceptEdge):
            edges.append(obj)
        elif isinstance(obj, NodePosition):
            positions.append(obj)
        elif isinstance(obj, ConceptGraph):
            nodes.extend(obj.nodes)
            edges.extend(obj.edges)
            positions.extend(obj.positions)

    return nodes, edges, positions


def read_graph(stream: TextIO = sys.stdin) -> Optional[ConceptGraph]:
    """Read the first complete graph object from stream."""
    for obj in read_objects(stream):
        if isinstance(obj, ConceptGraph):
            return obj
    return None


# ============================================================================
# WRITERS
# ============================================================================

def write_object(obj: GraphObject, stream: TextIO = sys.stdout) -> None:
    """Write an object as one JSON line."""
    print(json.dumps(obj.to_dict(), ensure_ascii=False), file=stream)


def write_positions(
    positions: Dict[str, Tuple[float, float]],
    stream: TextIO = sys.stdout
) -> None:
    """Write positions dict as JSON Lines."""
    for node_id, (x, y) in positions.items():
        write_object(NodePosition(id=node_id, x=x, y=y), stream)


# ============================================================================
# LAYOUT INTEGRATION
# ============================================================================

def graph_to_layout_input(
    nodes: List[ConceptNode],
    edges: List[ConceptEdge],
    positions: Optional[List[NodePosition]] = None
) -> Dict[str, Any]:
    """
    Build the {'nodes', 'edges'} dict the layout engine reads.

    Separate position records override node coordinates.
    """
    override = {p.id: (p.x, p.y) for p in positions or []}
    layout_nodes = []
    for node in nodes:
        entry = node.to_layout()
        if node.id in override:
            x, y = override[node.id]
            entry["position"] = {"x": x, "y": y}
        layout_nodes.append(entry)
    return {
        "nodes": layout_nodes,
        "edges": [e.to_layout() for e in edges],
    }
