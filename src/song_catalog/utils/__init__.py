"""
Cross-cutting utilities for Song Catalog.

Contains:
- formatting: Display formatting for amounts, percentages and flags
- parsers: field=value input parsing and validation
"""

from .formatting import format_bool, format_currency, format_percentage, format_text
from .parsers import (
    apply_assignments,
    is_numeric_input,
    parse_assignment,
    parse_field_value,
)

__all__ = [
    # From formatting
    "format_bool",
    "format_currency",
    "format_percentage",
    "format_text",
    # From parsers
    "apply_assignments",
    "is_numeric_input",
    "parse_assignment",
    "parse_field_value",
]
