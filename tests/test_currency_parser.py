"""
Unit tests for currency_parser.py
"""

import pytest

from currency_parser import format_brl, normalize_brl, parse_brl
from errors import InvalidValue


class TestParseBrl:
    """Test parsing of localized monetary strings."""

    def test_thousands_and_decimal_separators(self):
        assert parse_brl('R$ 1.234,56') == pytest.approx(1234.56)

    def test_plain_decimal(self):
        assert parse_brl('25,50') == pytest.approx(25.5)

    def test_negative_value(self):
        assert parse_brl('-R$ 3,10') == pytest.approx(-3.1)

    def test_millions(self):
        assert parse_brl('R$ 12.345.678,90') == pytest.approx(12345678.9)

    def test_integer_without_cents(self):
        assert parse_brl('R$ 100') == 100

    def test_empty_string_is_invalid(self):
        with pytest.raises(InvalidValue):
            parse_brl('')

    def test_text_without_digits_is_invalid(self):
        with pytest.raises(InvalidValue):
            parse_brl('R$ abc')


class TestFormatBrl:
    """Test pt-BR currency formatting."""

    def test_format_with_thousands(self):
        assert format_brl(1234.56) == 'R$ 1.234,56'

    def test_format_small_value(self):
        assert format_brl(25.5) == 'R$ 25,50'

    def test_format_zero(self):
        assert format_brl(0) == 'R$ 0,00'

    def test_format_negative(self):
        assert format_brl(-1) == '-R$ 1,00'

    def test_infinite_is_invalid(self):
        with pytest.raises(InvalidValue):
            format_brl(float('inf'))


class TestRoundTrip:
    """parse -> format -> parse keeps the numeric value."""

    @pytest.mark.parametrize('value', [
        'R$ 1.234,56',
        'R$ 0,99',
        '10,00',
        'R$ 1.000.000,01',
        '-R$ 7,25',
    ])
    def test_numeric_round_trip(self, value):
        number = parse_brl(value)
        assert parse_brl(format_brl(number)) == pytest.approx(number)

    def test_normalize_reformats(self):
        assert normalize_brl('1234,5') == 'R$ 1.234,50'

    def test_normalize_keeps_unparseable_input(self):
        assert normalize_brl('sem valor') == 'sem valor'
