"""
Unit tests for workspace_state.py and card_renderer.py
"""

import pytest

from card_renderer import Card, build_cards, render_table_preview
from errors import InvalidInput
from table_parser import Item
from workspace_state import WorkspaceState

TEXT = '1 mesa R$ 10,00\n2 cadeira R$ 20,00'


class TestWorkspaceState:
    """Test state transitions driven by user actions."""

    def test_initial_state(self):
        state = WorkspaceState()
        assert not state.logged_in
        assert not state.can_generate
        assert state.cards == []

    def test_session(self):
        state = WorkspaceState()
        state.set_session('ana@example.com', 'tok')
        assert state.logged_in
        state.clear_session()
        assert not state.logged_in
        assert state.token is None

    def test_parse_sets_items_and_hint(self):
        state = WorkspaceState()
        items = state.parse(TEXT)
        assert len(items) == 2
        assert state.can_generate
        assert state.hint == 'Foram identificados 2 item(ns).'

    def test_parse_nothing(self):
        state = WorkspaceState()
        state.parse('sem itens aqui')
        assert not state.can_generate
        assert state.hint == 'Nenhum item identificado. Confira o texto.'

    def test_generate_requires_model(self):
        state = WorkspaceState()
        state.parse(TEXT)
        with pytest.raises(InvalidInput) as exc_info:
            state.generate_cards()
        assert 'Selecione um modelo' in exc_info.value.message
        assert state.cards == []

    def test_generate_cards(self):
        state = WorkspaceState()
        state.parse(TEXT)
        state.select_model('patricia')
        cards = state.generate_cards()
        assert [card.badge for card in cards] == ['ITEM 1', 'ITEM 2']
        assert all(card.model == 'patricia' for card in cards)
        assert state.cards_rendered

    def test_model_change_rerenders(self):
        state = WorkspaceState()
        state.parse(TEXT)
        state.select_model('patricia')
        state.generate_cards()

        state.select_model('wellington')
        assert all(card.model == 'wellington' for card in state.cards)

    def test_model_change_before_render_keeps_grid_empty(self):
        state = WorkspaceState()
        state.parse(TEXT)
        state.select_model('wellington')
        assert state.cards == []

    def test_unknown_model(self):
        with pytest.raises(InvalidInput):
            WorkspaceState().select_model('outro')

    def test_reparse_drops_cards(self):
        state = WorkspaceState()
        state.parse(TEXT)
        state.select_model('wellington')
        state.generate_cards()

        state.parse('9 armário R$ 5,00')
        assert state.cards == []
        assert not state.cards_rendered
        assert state.model == 'wellington'

    def test_clear(self):
        state = WorkspaceState()
        state.parse(TEXT)
        state.clear()
        assert state.items == []
        assert state.hint == ''


class TestCards:
    """Test card view models."""

    def test_card_properties(self):
        card = Card(12, 'R$ 25,50', 'wellington')
        assert card.css_class == 'card model-wellington fallback'
        assert card.model_label == 'Wellington Silva'
        assert card.badge == 'ITEM 12'
        assert card.payload == {'model': 'wellington', 'item': '12', 'valor': 'R$ 25,50'}
        assert card.filename('docx') == 'wellington-item-12.docx'
        assert card.export_url('pdf') == '/api/generate/pdf'

    def test_build_cards_keeps_order(self):
        items = [Item(3, 'R$ 3,00'), Item(1, 'R$ 1,00')]
        assert [card.item_number for card in build_cards(items, 'patricia')] == [3, 1]

    def test_table_preview(self):
        rows = render_table_preview([Item(4, 'R$ 4,00')])
        assert rows == [{'item': 4, 'descricao': '—', 'avaliacao': 'R$ 4,00'}]
