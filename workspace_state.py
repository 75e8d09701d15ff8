#!/usr/bin/env python3
"""
Workspace State
Session and parse state of one workspace, changed only through its actions.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from card_renderer import Card, build_cards
from document_generator import TEMPLATE_PRESETS
from errors import InvalidInput
from table_parser import Item, TableTextParser, parse_summary


@dataclass
class WorkspaceState:
    user: Optional[str] = None
    token: Optional[str] = None
    items: List[Item] = field(default_factory=list)
    model: Optional[str] = None
    cards: List[Card] = field(default_factory=list)
    cards_rendered: bool = False
    hint: str = ''

    # Session

    def set_session(self, email: str, token: Optional[str] = None):
        self.user = email
        self.token = token

    def clear_session(self):
        self.user = None
        self.token = None

    @property
    def logged_in(self) -> bool:
        return self.user is not None

    # Parsing

    def parse(self, raw_text: str) -> List[Item]:
        """Replace the items with a fresh parse; rendered cards are dropped"""
        self.items = TableTextParser().parse(raw_text)
        self.hint = parse_summary(self.items)
        self.cards = []
        self.cards_rendered = False
        return self.items

    def clear(self):
        self.items = []
        self.cards = []
        self.cards_rendered = False
        self.hint = ''

    @property
    def can_generate(self) -> bool:
        return len(self.items) > 0

    # Cards

    def select_model(self, model: str):
        """Choose the template; already rendered cards follow the new model"""
        if model not in TEMPLATE_PRESETS:
            raise InvalidInput(f"Modelo desconhecido: {model}")
        self.model = model
        if self.cards_rendered:
            self.cards = build_cards(self.items, self.model)

    def generate_cards(self) -> List[Card]:
        if not self.model:
            raise InvalidInput('Selecione um modelo da plaquinha e clique novamente em "Gerar plaquinhas".')
        self.cards = build_cards(self.items, self.model)
        self.cards_rendered = True
        return self.cards
