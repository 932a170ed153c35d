"""Tests for field input parsing."""

import pytest

from song_catalog.domain.catalog.exceptions import InvalidFieldError
from song_catalog.domain.catalog.models import Song, Status
from song_catalog.utils.parsers import (
    apply_assignments,
    is_numeric_input,
    parse_assignment,
    parse_field_value,
)


@pytest.mark.parametrize("text", ["0", "12", "12.", "12.50"])
def test_numeric_input_accepted(text):
    assert is_numeric_input(text)


@pytest.mark.parametrize("text", ["", "-1", ".5", "1,5", "1e3", "12a", " 12"])
def test_numeric_input_rejected(text):
    assert not is_numeric_input(text)


def test_parse_assignment():
    assert parse_assignment("artist=Rosalía") == ("artist", "Rosalía")
    assert parse_assignment("notes=a=b") == ("notes", "a=b")
    with pytest.raises(InvalidFieldError):
        parse_assignment("artist")


def test_numeric_field_values():
    assert parse_field_value("authorship_percentage", "40") == 40
    assert parse_field_value("authorship_revenue", "12.5") == 12.5
    assert parse_field_value("authorship_revenue", "") is None
    with pytest.raises(InvalidFieldError):
        parse_field_value("authorship_revenue", "-3")


def test_derived_and_unknown_fields_rejected():
    with pytest.raises(InvalidFieldError):
        parse_field_value("total_master_revenue", "10")
    with pytest.raises(InvalidFieldError):
        parse_field_value("id", "X")
    with pytest.raises(InvalidFieldError):
        parse_field_value("favourite_colour", "blue")


def test_status_and_bool_values():
    assert parse_field_value("status", "colocada") is Status.PLACED
    assert parse_field_value("registered", "Sí") is True
    assert parse_field_value("registered", "no") is False
    with pytest.raises(InvalidFieldError):
        parse_field_value("status", "sold")
    with pytest.raises(InvalidFieldError):
        parse_field_value("registered", "maybe")


def test_title_cannot_be_blank():
    with pytest.raises(InvalidFieldError):
        parse_field_value("title", "  ")


def test_blank_text_clears_field():
    assert parse_field_value("notes", "   ") is None


def test_apply_assignments_returns_copy():
    song = Song(id="A1", title="Luna")

    edited = apply_assignments(song, ["style=Pop", "status=Placed", "master_revenue=150"])

    assert edited.style == "Pop"
    assert edited.status is Status.PLACED
    assert edited.master_revenue == 150
    assert song.style is None
