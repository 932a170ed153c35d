"""
Workbook import for Song Catalog.

Reads a workbook produced by the exporter (sheets "Libres" and "Colocadas")
or a legacy single-sheet catalog, mapping recognized headers to song fields.
The whole file is read before decoding; any failure aborts the import.
"""

import io
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence
from zipfile import BadZipFile

from loguru import logger
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..catalog.models import (
    BOOLEAN_FIELDS,
    NUMERIC_FIELDS,
    Song,
    Status,
    new_song_id,
)
from .columns import (
    AVAILABLE_SHEET,
    MISSING_TITLE,
    PLACED_SHEET,
    TRUE_TOKENS,
    header_map,
)
from .exceptions import SpreadsheetDecodeError


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def parse_bool(value: Any) -> bool:
    """Interpret a registration cell ("Sí", 1, True, ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value == 1
    return str(value).strip().casefold() in TRUE_TOKENS


def parse_number(value: Any) -> Optional[float]:
    """Parse a numeric cell; None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return int(number) if number.is_integer() else number


def parse_text(value: Any) -> Optional[str]:
    """Trimmed text for a cell; None when empty."""
    if isinstance(value, datetime):
        value = value.date() if value.time() == datetime.min.time() else value
    if isinstance(value, (date, datetime)):
        text = value.isoformat()
    elif isinstance(value, float) and value.is_integer():
        text = str(int(value))
    else:
        text = str(value).strip()
    return text or None


def coerce_cell(field_name: str, value: Any) -> Any:
    """Convert a raw cell to the field's type; None means omit the field."""
    if _is_blank(value):
        return None
    if field_name in BOOLEAN_FIELDS:
        return parse_bool(value)
    if field_name in NUMERIC_FIELDS:
        return parse_number(value)
    if field_name == "status":
        status = Status.parse(value)
        if status is None:
            logger.warning(f"Unrecognized status {value!r}, using {Status.AVAILABLE.value}")
        return status
    return parse_text(value)


def decode_rows(rows: Sequence[Sequence[Any]], sheet_name: Optional[str] = None) -> List[Song]:
    """Turn a sheet's rows (header first) into songs.

    Args:
        rows: Cell values, the first row being the header
        sheet_name: Named sheet ("Libres"/"Colocadas") or None for a legacy sheet

    Returns:
        One fresh song per non-blank data row, in row order
    """
    if len(rows) < 2:
        return []

    mapping = header_map(sheet_name)
    headers = ["" if h is None else str(h).strip() for h in rows[0]]
    columns = [(idx, mapping[h]) for idx, h in enumerate(headers) if h in mapping]

    unknown = [h for h in headers if h and h not in mapping]
    if unknown:
        logger.debug(f"Ignoring unrecognized headers in {sheet_name or 'sheet'}: {unknown}")

    songs = []
    for row in rows[1:]:
        if not row or all(_is_blank(cell) for cell in row):
            continue

        values: Dict[str, Any] = {}
        for idx, field_name in columns:
            if idx >= len(row):
                continue
            value = coerce_cell(field_name, row[idx])
            if value is not None:
                values[field_name] = value

        values.setdefault("status", Status.AVAILABLE)
        values.setdefault("title", MISSING_TITLE)
        songs.append(Song(id=new_song_id(), **values))

    return songs


def _select_sheets(sheet_names: List[str]) -> List[tuple]:
    """Pick (actual name, canonical name) pairs to import."""
    by_folded = {name.casefold(): name for name in reversed(sheet_names)}
    available = by_folded.get(AVAILABLE_SHEET.casefold())
    placed = by_folded.get(PLACED_SHEET.casefold())

    if available and placed:
        return [(available, AVAILABLE_SHEET), (placed, PLACED_SHEET)]
    if not sheet_names:
        return []

    # Only the first sheet is read; it keeps its group's headers when named like one
    first = sheet_names[0]
    canonical = next(
        (name for name in (AVAILABLE_SHEET, PLACED_SHEET) if name.casefold() == first.casefold()),
        None,
    )
    return [(first, canonical)]


def decode_workbook(data: bytes) -> List[Song]:
    """
    Decode workbook bytes into songs.

    Raises:
        SpreadsheetDecodeError: If the bytes are not a readable workbook
    """
    try:
        wb = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, OSError, KeyError, ValueError, TypeError) as e:
        raise SpreadsheetDecodeError(f"Could not read workbook: {e}") from e

    try:
        songs: List[Song] = []
        for actual_name, canonical_name in _select_sheets(wb.sheetnames):
            rows = list(wb[actual_name].iter_rows(values_only=True))
            sheet_songs = decode_rows(rows, canonical_name)
            logger.debug(f"Sheet {actual_name!r}: {len(sheet_songs)} songs")
            songs.extend(sheet_songs)
    except (KeyError, ValueError, TypeError) as e:
        raise SpreadsheetDecodeError(f"Could not decode workbook: {e}") from e
    finally:
        wb.close()

    logger.info(f"Decoded {len(songs)} songs from workbook")
    return songs


def read_workbook(path: Path) -> List[Song]:
    """
    Read a workbook file fully into memory and decode it.

    Raises:
        SpreadsheetDecodeError: If the file cannot be read or decoded
    """
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise SpreadsheetDecodeError(f"Could not read {path}: {e}") from e
    return decode_workbook(data)
