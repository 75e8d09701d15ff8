#!/usr/bin/env python3
"""
Table-Text Parser
Extracts (item number, value) rows from a table pasted as free text.

A row is any line that starts with a 1-4 digit item number and contains at
least one "R$ 0,00" amount. When a line carries several amounts (unit price
and total, for example) the last one is used.
"""

import re
from dataclasses import dataclass
from typing import List

from currency_parser import normalize_brl

LINE_SPLIT = re.compile(r'\r\n|\r|\n')
# Digits and the word boundary are ASCII-only ("12ª" still starts item 12);
# whitespace stays Unicode so non-breaking spaces after "R$" match
ITEM_NUMBER = re.compile(r'^\s*([0-9]{1,4})(?![0-9A-Za-z_])')
MONEY = re.compile(r'R\$\s*([0-9.\s]*[0-9],[0-9]{2})')



@dataclass(frozen=True)
class Item:
    item_number: int
    display_value: str

    def to_dict(self):
        return {'item': self.item_number, 'valor': self.display_value}


class TableTextParser:
    """Line-oriented parser for pasted item/value tables"""

    def __init__(self):
        self.skipped_lines = []

    def parse(self, raw_text: str) -> List[Item]:
        """
        Parse pasted text into items, preserving line order

        Args:
            raw_text: Text copied from a spreadsheet, PDF or e-mail

        Returns:
            List of Item, one per qualifying line
        """
        self.skipped_lines = []
        items = []

        lines = [line.strip() for line in LINE_SPLIT.split(raw_text or '')]
        for line in lines:
            if not line:
                continue

            item_match = ITEM_NUMBER.match(line)
            if not item_match:
                self.skipped_lines.append(line)
                continue

            amounts = MONEY.findall(line)
            if not amounts:
                self.skipped_lines.append(line)
                continue

            items.append(Item(
                item_number=int(item_match.group(1)),
                display_value=normalize_brl(amounts[-1]),
            ))

        return items


def parse_text_table(raw_text: str) -> List[Item]:
    """Parse pasted text into a list of Item"""
    return TableTextParser().parse(raw_text)


def parse_summary(items: List[Item]) -> str:
    """Hint shown under the preview after a parse"""
    if items:
        return f"Foram identificados {len(items)} item(ns)."
    return 'Nenhum item identificado. Confira o texto.'
