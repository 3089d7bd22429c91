# SPDX-License-Identifier: MIT OR Apache-2.0
# Copyright (c) 2025 John William Creighton (s243a)

"""Tests for the word network service with a scripted concept generator."""

import itertools

import pytest

from conceptweb.config import LayoutConfig
from conceptweb.errors import NetworkNotFoundError, ConceptGenerationError
from conceptweb.network import (
    WordNetworkService,
    NetworkState,
    RelatedWord,
    FALLBACK_EXPLANATION,
    NO_EXPLANATION,
)
from conceptweb.store import JsonStateStore


class ScriptedGenerator:
    """Returns canned related words and records every call."""

    def __init__(self, related=None, fail_explain=False):
        self.related = related or {}
        self.fail_explain = fail_explain
        self.calls = []

    def related_words(self, word, background, existing_words, direction=None):
        self.calls.append(('related', word, background, list(existing_words), direction))
        outcome = self.related.get(word, [])
        if isinstance(outcome, Exception):
            raise outcome
        return [RelatedWord(w, f'{w} briefly', 'related to') for w in outcome]

    def explain(self, word, background, context):
        self.calls.append(('explain', word, background, list(context)))
        if self.fail_explain:
            raise RuntimeError('service unavailable')
        return f'{word} explained'


def _service(generator=None, store=None):
    counter = itertools.count(1)
    ticks = itertools.count(100)
    return WordNetworkService(
        generator=generator,
        store=store,
        clock=lambda: float(next(ticks)),
        id_factory=lambda: f'id{next(counter)}',
    )


class TestAddWord:

    def test_first_word_at_center(self):
        service = _service(ScriptedGenerator())
        node_id = service.add_word('river', (10.0, 10.0))
        node = service.state.active_network.find_node(node_id)
        assert node['position'] == {'x': 400.0, 'y': 300.0}
        assert node['data']['explanation'] == 'river explained'
        assert node['data']['is_loading'] is False
        assert node['data']['is_new'] is True

    def test_later_word_at_given_position(self):
        service = _service(ScriptedGenerator())
        service.add_word('river', (0.0, 0.0))
        node_id = service.add_word('lake', (50.0, 60.0))
        node = service.state.active_network.find_node(node_id)
        assert node['position'] == {'x': 50.0, 'y': 60.0}

    def test_duplicate_word_returns_existing(self):
        service = _service(ScriptedGenerator())
        first = service.add_word('river', (0.0, 0.0))
        assert service.add_word('river', (99.0, 99.0)) == first
        assert len(service.state.active_network.nodes) == 1

    def test_explanation_context_is_existing_words(self):
        generator = ScriptedGenerator()
        service = _service(generator)
        service.add_word('river', (0.0, 0.0))
        service.add_word('lake', (0.0, 0.0))
        assert generator.calls[-1] == ('explain', 'lake', '', ['river'])

    def test_failed_explanation_uses_fallback(self):
        service = _service(ScriptedGenerator(fail_explain=True))
        node_id = service.add_word('river', (0.0, 0.0))
        node = service.state.active_network.find_node(node_id)
        assert node['data']['explanation'] == FALLBACK_EXPLANATION
        assert node['data']['is_loading'] is False

    def test_empty_explanation(self):
        class Quiet(ScriptedGenerator):
            def explain(self, word, background, context):
                return ''

        service = _service(Quiet())
        node_id = service.add_word('river', (0.0, 0.0))
        node = service.state.active_network.find_node(node_id)
        assert node['data']['explanation'] == NO_EXPLANATION


class TestExpandWord:

    def test_creates_children_around_parent(self):
        generator = ScriptedGenerator({'river': ['stream', 'bank', 'delta']})
        service = _service(generator)
        root = service.add_word('river', (0.0, 0.0))
        new_ids = service.expand_word(root, direction='geography')

        network = service.state.active_network
        assert len(new_ids) == 3
        assert len(network.nodes) == 4
        assert [e['source'] for e in network.edges] == [root] * 3
        assert all(e['label'] == 'related to' for e in network.edges)
        assert network.edges[0]['id'] == f'{root}-{new_ids[0]}'

        first = network.find_node(new_ids[0])
        assert first['position']['x'] == pytest.approx(400.0)
        assert first['position']['y'] == pytest.approx(120.0)
        assert first['data']['explanation'] == 'stream briefly'

        parent = network.find_node(root)
        assert parent['data']['is_expanded'] is True
        assert parent['data']['is_loading'] is False
        assert generator.calls[-1][-1] == 'geography'

    def test_expanded_node_not_expanded_twice(self):
        generator = ScriptedGenerator({'river': ['stream']})
        service = _service(generator)
        root = service.add_word('river', (0.0, 0.0))
        service.expand_word(root)
        assert service.expand_word(root) == []
        assert len(service.state.active_network.nodes) == 2

    def test_existing_words_linked_once(self):
        generator = ScriptedGenerator({
            'river': ['stream', 'bank', 'delta'],
            'stream': ['river', 'bank', 'creek'],
        })
        service = _service(generator)
        root = service.add_word('river', (0.0, 0.0))
        service.expand_word(root)
        stream = service.state.active_network.find_word('stream')['id']
        bank = service.state.active_network.find_word('bank')['id']

        new_ids = service.expand_word(stream)
        network = service.state.active_network
        assert len(new_ids) == 1
        assert network.find_node(new_ids[0])['data']['word'] == 'creek'
        assert network.has_edge(stream, bank)
        assert sum(1 for e in network.edges if {e['source'], e['target']} == {root, stream}) == 1

    def test_at_most_three_related_words(self):
        generator = ScriptedGenerator({'river': ['a', 'b', 'c', 'd', 'e']})
        service = _service(generator)
        root = service.add_word('river', (0.0, 0.0))
        assert len(service.expand_word(root)) == 3

    @pytest.mark.parametrize('outcome', [[], RuntimeError('boom'), ConceptGenerationError('bad')])
    def test_failure_clears_loading(self, outcome):
        service = _service(ScriptedGenerator({'river': outcome}))
        root = service.add_word('river', (0.0, 0.0))
        assert service.expand_word(root) == []
        node = service.state.active_network.find_node(root)
        assert node['data']['is_loading'] is False
        assert node['data']['is_expanded'] is False
        assert len(service.state.active_network.nodes) == 1

    def test_unknown_node_or_no_generator(self):
        service = _service()
        root = service.add_word('river', (0.0, 0.0))
        assert service.expand_word('nope') == []
        assert service.expand_word(root) == []


class TestOrganizeNetwork:

    def test_root_moves_to_center(self):
        generator = ScriptedGenerator({'river': ['stream', 'bank', 'delta']})
        service = _service(generator)
        root = service.add_word('river', (0.0, 0.0))
        service.expand_word(root)
        service.state.active_network.nodes[0]['position'] = {'x': 0.0, 'y': 0.0}

        service.organize_network()
        network = service.state.active_network
        assert network.nodes[0]['position'] == {'x': 400.0, 'y': 300.0}
        assert [n['id'] for n in network.nodes][0] == root
        assert len(network.nodes) == 4

    def test_custom_config_center(self):
        generator = ScriptedGenerator({'river': ['stream']})
        service = WordNetworkService(generator=generator,
                                     config=LayoutConfig(center_x=0.0, center_y=0.0))
        root = service.add_word('river', (5.0, 5.0))
        service.expand_word(root)
        service.organize_network()
        assert service.state.active_network.nodes[0]['position'] == {'x': 0.0, 'y': 0.0}

    def test_clear_new_flags(self):
        service = _service(ScriptedGenerator({'river': ['stream']}))
        root = service.add_word('river', (0.0, 0.0))
        service.expand_word(root)
        service.clear_new_flags()
        assert not any(n['data']['is_new'] for n in service.state.active_network.nodes)


class TestNetworks:

    def test_create_and_switch(self):
        service = _service()
        first = service.state.active_network.id
        second = service.create_network('Second')
        assert service.state.active_network is second
        service.switch_network(first)
        assert service.state.active_network.id == first

    def test_switch_unknown_raises(self):
        service = _service()
        with pytest.raises(NetworkNotFoundError):
            service.switch_network('missing')

    def test_delete_last_creates_fresh(self):
        service = _service()
        only = service.state.active_network.id
        service.delete_network(only)
        assert len(service.state.networks) == 1
        assert service.state.active_network.id != only

    def test_delete_active_falls_back(self):
        service = _service()
        first = service.state.active_network.id
        second = service.create_network('Second').id
        service.delete_network(second)
        assert service.state.active_network_id == first

    def test_rename_and_background(self):
        service = _service()
        network_id = service.state.active_network.id
        service.rename_network(network_id, 'Rivers')
        service.set_background('geography')
        network = service.state.get(network_id)
        assert network.name == 'Rivers'
        assert network.background == 'geography'

    def test_changes_persisted(self, tmp_path):
        store = JsonStateStore(tmp_path / 'state.json')
        service = _service(ScriptedGenerator({'river': ['stream']}), store=store)
        root = service.add_word('river', (0.0, 0.0))
        service.expand_word(root)

        reloaded = store.load()
        assert reloaded == service.state
        assert [n['data']['word'] for n in reloaded.active_network.nodes] == ['river', 'stream']

    def test_state_dict_round_trip(self):
        service = _service(ScriptedGenerator({'river': ['stream']}))
        service.expand_word(service.add_word('river', (0.0, 0.0)))
        assert NetworkState.from_dict(service.state.to_dict()) == service.state
