"""Tests for display formatting."""

from song_catalog.utils.formatting import (
    format_bool,
    format_currency,
    format_percentage,
    format_text,
)


def test_currency_whole_euros():
    assert format_currency(0) == "0 €"
    assert format_currency(999.5) == "1000 €"
    assert format_currency(1234) == "1234 €"
    assert format_currency(12345) == "12.345 €"
    assert format_currency(1234567) == "1.234.567 €"


def test_currency_missing():
    assert format_currency(None) == "—"


def test_percentage():
    assert format_percentage(40) == "40%"
    assert format_percentage(12.5) == "12,5%"
    assert format_percentage(None) == "—"


def test_bool_and_text():
    assert format_bool(True) == "Sí"
    assert format_bool(False) == "No"
    assert format_text("") == "—"
    assert format_text("Pop") == "Pop"
