"""
Field input parsing utilities.

Turns ``field=value`` text typed on the command line into validated song
field values. Invalid input is rejected before it reaches a draft.
"""

import re
from dataclasses import replace
from typing import Any, Iterable, Optional, Tuple, Union

from song_catalog.domain.catalog.exceptions import InvalidFieldError
from song_catalog.domain.catalog.models import (
    BOOLEAN_FIELDS,
    DERIVED_FIELDS,
    EDITABLE_FIELDS,
    NUMERIC_FIELDS,
    Song,
    Status,
)

NUMERIC_INPUT = re.compile(r"^\d+(\.\d*)?$")

_TRUE_INPUTS = {"sí", "si", "yes", "y", "true", "1", "x"}
_FALSE_INPUTS = {"no", "n", "false", "0", ""}


def is_numeric_input(text: str) -> bool:
    """Digits with an optional decimal part, e.g. ``12``, ``12.``, ``12.5``."""
    return bool(NUMERIC_INPUT.match(text))


def parse_assignment(text: str) -> Tuple[str, str]:
    """
    Split ``field=value`` into its parts.

    Example:
        'artist=Rosalía' -> ('artist', 'Rosalía')
    """
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise InvalidFieldError(text, "", "expected field=value")
    return name, value.strip()


def parse_numeric_input(field_name: str, text: str) -> Optional[Union[int, float]]:
    """Empty input clears the field; anything not matching NUMERIC_INPUT is rejected."""
    text = text.strip()
    if not text:
        return None
    if not is_numeric_input(text):
        raise InvalidFieldError(field_name, text, "not a number")
    number = float(text)
    return int(number) if number.is_integer() else number


def parse_bool_input(field_name: str, text: str) -> bool:
    token = text.strip().casefold()
    if token in _TRUE_INPUTS:
        return True
    if token in _FALSE_INPUTS:
        return False
    raise InvalidFieldError(field_name, text, "expected yes or no")


def parse_field_value(field_name: str, text: str) -> Any:
    """Validate and convert one field's input text.

    Raises:
        InvalidFieldError: If the field is unknown, read-only, or the value is invalid
    """
    if field_name in DERIVED_FIELDS:
        raise InvalidFieldError(field_name, text, "computed automatically")
    if field_name not in EDITABLE_FIELDS:
        raise InvalidFieldError(field_name, text, "unknown field")

    if field_name in NUMERIC_FIELDS:
        return parse_numeric_input(field_name, text)
    if field_name in BOOLEAN_FIELDS:
        return parse_bool_input(field_name, text)
    if field_name == "status":
        status = Status.parse(text)
        if status is None:
            raise InvalidFieldError(field_name, text, "expected Available or Placed")
        return status
    if field_name == "title":
        if not text.strip():
            raise InvalidFieldError(field_name, text, "title cannot be empty")
        return text.strip()

    return text.strip() or None


def apply_assignments(song: Song, assignments: Iterable[str]) -> Song:
    """Return a copy of song with every ``field=value`` applied."""
    changes = {}
    for assignment in assignments:
        name, value = parse_assignment(assignment)
        changes[name] = parse_field_value(name, value)
    return replace(song, **changes) if changes else song
