#!/usr/bin/env python3
"""
Card Renderer
View models for the on-screen price tag cards and the parse preview table
"""

from dataclasses import dataclass
from typing import Dict, List

from document_generator import MODEL_LABELS, attachment_filename
from table_parser import Item

CARD_CLASSES = {
    'wellington': 'model-wellington',
    'patricia': 'model-patricia',
}


@dataclass(frozen=True)
class Card:
    item_number: int
    display_value: str
    model: str

    @property
    def css_class(self) -> str:
        return f"card {CARD_CLASSES.get(self.model, '')} fallback".replace('  ', ' ')

    @property
    def model_label(self) -> str:
        return MODEL_LABELS.get(self.model, self.model)

    @property
    def badge(self) -> str:
        return f"ITEM {self.item_number}"

    @property
    def payload(self) -> Dict:
        """Body for /api/generate/docx and /api/generate/pdf"""
        return {'model': self.model, 'item': str(self.item_number), 'valor': self.display_value}

    def export_url(self, fmt: str) -> str:
        return f"/api/generate/{fmt}"

    def filename(self, ext: str) -> str:
        return attachment_filename(self.model, self.item_number, ext)


def build_cards(items: List[Item], model: str) -> List[Card]:
    """One card per item, in item order"""
    return [Card(item.item_number, item.display_value, model) for item in items]


def render_table_preview(items: List[Item]) -> List[Dict]:
    """Rows for the preview table (Item / Descrição / Avaliação)"""
    return [
        {'item': item.item_number, 'descricao': '—', 'avaliacao': item.display_value}
        for item in items
    ]
