#!/usr/bin/env python3
"""
Currency Parser
Converts Brazilian Real strings ("R$ 1.234,56") to numbers and back
"""

import math
import re

from errors import InvalidValue

CURRENCY_SYMBOL = 'R$'

# Leading numeric prefix, the way a lenient float parse reads it
_NUMBER_PREFIX = re.compile(r'-?(?:[0-9]+\.?[0-9]*|\.[0-9]+)')


def parse_brl(value) -> float:
    """
    Parse a localized monetary string into a float

    Dots are thousands separators and are dropped; the comma is the decimal
    separator.

    Args:
        value: String such as "R$ 1.234,56" (numbers are accepted too)

    Returns:
        float: The numeric value

    Raises:
        InvalidValue: If no finite number can be read
    """
    cleaned = re.sub(r'[^0-9,.\-]', '', str(value))
    cleaned = cleaned.replace('.', '').replace(',', '.', 1)

    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        raise InvalidValue()

    number = float(match.group(0))
    if not math.isfinite(number):
        raise InvalidValue()
    return number


def format_brl(number: float) -> str:
    """Render a number as "R$ 1.234,56" (pt-BR currency convention)"""
    if not math.isfinite(number):
        raise InvalidValue()

    grouped = f"{abs(number):,.2f}"
    # 1,234.56 -> 1.234,56
    grouped = grouped.replace(',', '_').replace('.', ',').replace('_', '.')

    sign = '-' if round(number, 2) < 0 else ''
    return f"{sign}{CURRENCY_SYMBOL} {grouped}"


def normalize_brl(value: str) -> str:
    """Re-format a monetary string, or return it untouched if it does not parse"""
    try:
        return format_brl(parse_brl(value))
    except InvalidValue:
        return value
