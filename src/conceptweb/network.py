# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)
#
# Word network state and operations.

"""
Word networks: named concept graphs grown from a seed word.

The service owns the node/edge lists of every network and calls two
collaborators: an injected ConceptGenerator that proposes related words,
and the ring layout engine. Operations run synchronously, so layout never
races with a pending expansion.

Usage:
    service = WordNetworkService(generator=my_generator)
    root_id = service.add_word("river", (0, 0))
    service.expand_word(root_id, direction="geography")
    service.organize_network()
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional, Any, Callable, Protocol

from .config import LayoutConfig, DEFAULT_CONFIG
from .errors import ConceptGenerationError, NetworkNotFoundError
from .layout import organize, place_new_sibling, node_position

logger = logging.getLogger(__name__)

DEFAULT_NETWORK_NAME = "New network"
FALLBACK_EXPLANATION = "Expand to see related concepts"
NO_EXPLANATION = "No explanation available"
MAX_RELATED_WORDS = 3
EXPLANATION_CONTEXT = 5


# =============================================================================
# COLLABORATORS
# =============================================================================

@dataclass
class RelatedWord:
    """A concept proposed by the generator."""
    word: str
    brief_explanation: str = ""
    relation: Optional[str] = None


class ConceptGenerator(Protocol):
    """External text-generation collaborator."""

    def related_words(
        self,
        word: str,
        background: str,
        existing_words: List[str],
        direction: Optional[str] = None
    ) -> List[RelatedWord]:
        """Propose up to three concepts related to `word`."""
        ...

    def explain(self, word: str, background: str, context: List[str]) -> str:
        """Return a full explanation of `word`."""
        ...


class StateStore(Protocol):
    """Persistence collaborator, see store.JsonStateStore."""

    def save(self, state: 'NetworkState') -> None:
        ...


# =============================================================================
# STATE
# =============================================================================

def _new_id() -> str:
    return uuid.uuid4().hex[:21]


@dataclass
class WordNetwork:
    """A named concept graph. nodes[0] is the root."""
    id: str
    name: str = DEFAULT_NETWORK_NAME
    background: str = ""
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[Dict[str, Any]] = field(default_factory=list)
    created_at: float = 0.0
    updated_at: float = 0.0

    def find_node(self, node_id: str) -> Optional[Dict[str, Any]]:
        return next((n for n in self.nodes if n['id'] == node_id), None)

    def find_word(self, word: str) -> Optional[Dict[str, Any]]:
        return next((n for n in self.nodes if n['data'].get('word') == word), None)

    def has_edge(self, a: str, b: str) -> bool:
        """True if any edge joins a and b, in either direction."""
        return any(
            (e['source'] == a and e['target'] == b) or
            (e['source'] == b and e['target'] == a)
            for e in self.edges
        )

    def words(self) -> List[str]:
        return [n['data'].get('word', '') for n in self.nodes]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "id": self.id,
            "name": self.name,
            "background": self.background,
            "nodes": self.nodes,
            "edges": self.edges,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'WordNetwork':
        """Create from JSON dict."""
        return cls(
            id=d["id"],
            name=d.get("name", DEFAULT_NETWORK_NAME),
            background=d.get("background", ""),
            nodes=list(d.get("nodes", [])),
            edges=list(d.get("edges", [])),
            created_at=d.get("created_at", 0.0),
            updated_at=d.get("updated_at", 0.0),
        )


@dataclass
class NetworkState:
    """All networks plus which one is active."""
    networks: List[WordNetwork] = field(default_factory=list)
    active_network_id: Optional[str] = None

    @classmethod
    def initial(cls, clock: Callable[[], float] = time.time) -> 'NetworkState':
        now = clock()
        return cls(networks=[WordNetwork(id=_new_id(), created_at=now, updated_at=now)])

    @property
    def active_network(self) -> Optional[WordNetwork]:
        """The active network, falling back to the first one."""
        for network in self.networks:
            if network.id == self.active_network_id:
                return network
        return self.networks[0] if self.networks else None

    def get(self, network_id: str) -> WordNetwork:
        for network in self.networks:
            if network.id == network_id:
                return network
        raise NetworkNotFoundError(network_id)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "networks": [n.to_dict() for n in self.networks],
            "active_network_id": self.active_network_id,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'NetworkState':
        """Create from JSON dict."""
        return cls(
            networks=[WordNetwork.from_dict(n) for n in d.get("networks", [])],
            active_network_id=d.get("active_network_id"),
        )


# =============================================================================
# SERVICE
# =============================================================================

class WordNetworkService:
    """Operations on word networks, persisted after every change if a store is given."""

    def __init__(
        self,
        state: Optional[NetworkState] = None,
        generator: Optional[ConceptGenerator] = None,
        config: Optional[LayoutConfig] = None,
        store: Optional[StateStore] = None,
        clock: Callable[[], float] = time.time,
        id_factory: Callable[[], str] = _new_id,
    ):
        self.clock = clock
        self.state = state if state is not None else NetworkState.initial(clock)
        self.generator = generator
        self.config = config or DEFAULT_CONFIG
        self.store = store
        self.id_factory = id_factory

    # -------- internal helpers --------

    def _network(self) -> WordNetwork:
        network = self.state.active_network
        if network is None:
            network = self.create_network(DEFAULT_NETWORK_NAME)
        return network

    def _touch(self, network: WordNetwork) -> None:
        network.updated_at = self.clock()

    def _commit(self) -> None:
        if self.store is not None:
            self.store.save(self.state)

    # -------- words --------

    def add_word(self, word: str, position: Tuple[float, float]) -> str:
        """
        Add a word to the active network and fetch its explanation.

        Returns the existing node's ID if the word is already present. The
        first word of a network goes to the canvas center. A failed
        explanation request keeps the node with a fallback explanation.
        """
        network = self._network()
        self.state.active_network_id = network.id

        existing = network.find_word(word)
        if existing is not None:
            return existing['id']

        context = network.words()[:EXPLANATION_CONTEXT]
        x, y = self.config.center if not network.nodes else position
        node_id = self.id_factory()
        node = {
            'id': node_id,
            'position': {'x': x, 'y': y},
            'data': {
                'word': word,
                'explanation': None,
                'is_loading': True,
                'is_expanded': False,
                'is_new': True,
            },
        }
        network.nodes.append(node)
        self._touch(network)

        explanation = None
        if self.generator is not None:
            try:
                explanation = self.generator.explain(word, network.background, context)
                explanation = explanation or NO_EXPLANATION
            except Exception:
                logger.error("Failed to fetch explanation for %r", word, exc_info=True)
                explanation = FALLBACK_EXPLANATION

        node['data']['explanation'] = explanation
        node['data']['is_loading'] = False
        self._commit()
        return node_id

    def expand_word(self, node_id: str, direction: Optional[str] = None) -> List[str]:
        """
        Generate related concepts for a node and attach them.

        Related words already in the network are linked to the node (once);
        new words become children placed around it. Expanded or loading
        nodes are left alone. On generator failure only the loading flag
        is cleared.

        Returns:
            IDs of the newly created nodes.
        """
        network = self._network()
        node = network.find_node(node_id)
        if node is None or node['data'].get('is_expanded') or node['data'].get('is_loading'):
            return []
        if self.generator is None:
            logger.warning("No concept generator configured; cannot expand %s", node_id)
            return []

        existing_words = network.words()
        node['data']['is_loading'] = True

        try:
            related = self.generator.related_words(
                node['data'].get('word', ''), network.background, existing_words, direction
            )
            if not related:
                raise ConceptGenerationError("No related words generated")
        except Exception:
            logger.error("Failed to expand %s", node_id, exc_info=True)
            node['data']['is_loading'] = False
            self._commit()
            return []

        related = related[:MAX_RELATED_WORDS]
        parent_position = node_position(node) or self.config.center
        placed = [p for p in (node_position(n) for n in network.nodes) if p is not None]

        new_nodes: List[Dict[str, Any]] = []
        new_edges: List[Dict[str, Any]] = []
        for i, item in enumerate(related):
            match = network.find_word(item.word)
            if match is not None:
                if match['id'] == node_id or network.has_edge(node_id, match['id']):
                    continue
                if any(e['target'] == match['id'] for e in new_edges):
                    continue
                new_edges.append({
                    'id': f"{node_id}-{match['id']}",
                    'source': node_id,
                    'target': match['id'],
                    'label': item.relation,
                })
                continue

            if any(n['data']['word'] == item.word for n in new_nodes):
                continue
            x, y = place_new_sibling(parent_position, placed, i, len(related), self.config)
            placed.append((x, y))
            new_id = self.id_factory()
            new_nodes.append({
                'id': new_id,
                'position': {'x': x, 'y': y},
                'data': {
                    'word': item.word,
                    'explanation': item.brief_explanation,
                    'is_loading': False,
                    'is_expanded': False,
                    'is_new': True,
                },
            })
            new_edges.append({
                'id': f"{node_id}-{new_id}",
                'source': node_id,
                'target': new_id,
                'label': item.relation,
            })

        node['data']['is_loading'] = False
        node['data']['is_expanded'] = True
        network.nodes.extend(new_nodes)
        network.edges.extend(new_edges)
        self._touch(network)
        self._commit()

        logger.info("Expanded %r: %d new nodes, %d new edges",
                    node['data'].get('word'), len(new_nodes), len(new_edges))
        return [n['id'] for n in new_nodes]

    def organize_network(self) -> None:
        """Re-run the ring layout on the active network."""
        network = self.state.active_network
        if network is None or not network.nodes:
            return
        network.nodes = organize(network.nodes, network.edges, self.config)
        self._touch(network)
        self._commit()

    def clear_new_flags(self, network_id: Optional[str] = None) -> None:
        """Drop the highlight flag from every node of a network."""
        network = self.state.get(network_id) if network_id else self._network()
        for node in network.nodes:
            node['data']['is_new'] = False
        self._commit()

    # -------- networks --------

    def set_background(self, background: str) -> None:
        network = self._network()
        network.background = background
        self._touch(network)
        self._commit()

    def create_network(self, name: str) -> WordNetwork:
        now = self.clock()
        network = WordNetwork(id=self.id_factory(), name=name,
                              created_at=now, updated_at=now)
        self.state.networks.append(network)
        self.state.active_network_id = network.id
        self._commit()
        return network

    def switch_network(self, network_id: str) -> None:
        self.state.get(network_id)
        self.state.active_network_id = network_id
        self._commit()

    def delete_network(self, network_id: str) -> None:
        """Delete a network; a fresh one is created if none remain."""
        self.state.get(network_id)
        self.state.networks = [n for n in self.state.networks if n.id != network_id]
        if not self.state.networks:
            now = self.clock()
            self.state.networks.append(
                WordNetwork(id=self.id_factory(), created_at=now, updated_at=now)
            )
        if self.state.active_network_id == network_id:
            self.state.active_network_id = self.state.networks[0].id
        self._commit()

    def rename_network(self, network_id: str, name: str) -> None:
        self.state.get(network_id).name = name
        self._commit()
