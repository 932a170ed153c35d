"""Spreadsheet domain - workbook export and import.

This domain handles:
- The two-sheet workbook layout and header dictionary
- Styled export of the catalog
- Decoding uploaded workbooks back into songs
"""

from .columns import (
    AVAILABLE_COLUMNS,
    AVAILABLE_SHEET,
    HEADER_FIELDS,
    PLACED_COLUMNS,
    PLACED_SHEET,
    header_map,
)
from .exceptions import SpreadsheetDecodeError
from .exporter import build_workbook, default_export_filename, export_workbook
from .importer import decode_rows, decode_workbook, read_workbook

__all__ = [
    # Layout
    "AVAILABLE_COLUMNS",
    "AVAILABLE_SHEET",
    "HEADER_FIELDS",
    "PLACED_COLUMNS",
    "PLACED_SHEET",
    "header_map",
    # Errors
    "SpreadsheetDecodeError",
    # Export
    "build_workbook",
    "default_export_filename",
    "export_workbook",
    # Import
    "decode_rows",
    "decode_workbook",
    "read_workbook",
]
