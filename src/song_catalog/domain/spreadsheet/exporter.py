"""
Workbook export for Song Catalog.

Writes one sheet per status ("Libres", "Colocadas"), each sorted by title,
with a styled header row. Both sheets are always present, header-only when
a status has no songs.
"""

from datetime import date
from pathlib import Path
from typing import Any, List, Optional, Tuple

from loguru import logger
from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..catalog.models import Song, Status
from ..catalog.reconcile import title_key
from .columns import (
    AVAILABLE_COLUMNS,
    AVAILABLE_SHEET,
    NO_LABEL,
    PLACED_COLUMNS,
    PLACED_SHEET,
    YES_LABEL,
)

COLUMN_WIDTH = 15

# (header fill, row fill) per sheet
SHEET_COLORS = {
    AVAILABLE_SHEET: ("BF9000", "DCE6F1"),
    PLACED_SHEET: ("4472C4", "E2EFDA"),
}

_WHITE_SIDE = Side(style="thin", color="FFFFFF")
_GREY_SIDE = Side(style="thin", color="D0D0D0")
HEADER_BORDER = Border(top=_WHITE_SIDE, bottom=_WHITE_SIDE, left=_WHITE_SIDE, right=_WHITE_SIDE)
ROW_BORDER = Border(top=_GREY_SIDE, bottom=_GREY_SIDE, left=_GREY_SIDE, right=_GREY_SIDE)
HEADER_FONT = Font(color="FFFFFF", bold=True, size=12)
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center")
ROW_ALIGNMENT = Alignment(horizontal="left", vertical="center", wrap_text=True)


def cell_value(song: Song, field_name: str) -> Any:
    """Value written to the sheet for one field (None leaves the cell blank)."""
    value = getattr(song, field_name)
    if field_name == "status":
        return value.label
    if field_name == "registered":
        return YES_LABEL if value else NO_LABEL
    if isinstance(value, str):
        # Control characters such as \x0b are not allowed in sheet XML
        value = ILLEGAL_CHARACTERS_RE.sub("", value)
    if value == "":
        return None
    return value


def _write_sheet(
    ws: Worksheet, songs: List[Song], columns: List[Tuple[str, str]]
) -> None:
    header_color, row_color = SHEET_COLORS[ws.title]
    header_fill = PatternFill(fill_type="solid", fgColor=header_color)
    row_fill = PatternFill(fill_type="solid", fgColor=row_color)

    for col_idx, (header, _) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = COLUMN_WIDTH

        header_cell = ws.cell(row=1, column=col_idx, value=header)
        header_cell.fill = header_fill
        header_cell.font = HEADER_FONT
        header_cell.alignment = HEADER_ALIGNMENT
        header_cell.border = HEADER_BORDER

    for row_idx, song in enumerate(songs, start=2):
        for col_idx, (_, field_name) in enumerate(columns, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=cell_value(song, field_name))
            if isinstance(cell.value, str):
                # Text such as "=)" stays text instead of becoming a formula
                cell.data_type = "s"
            cell.fill = row_fill
            cell.alignment = ROW_ALIGNMENT
            cell.border = ROW_BORDER


def build_workbook(songs: List[Song]) -> Workbook:
    """Build the two-sheet workbook for songs."""
    available = sorted(
        (s for s in songs if s.status is Status.AVAILABLE), key=lambda s: title_key(s.title)
    )
    placed = sorted(
        (s for s in songs if s.status is Status.PLACED), key=lambda s: title_key(s.title)
    )

    wb = Workbook()
    ws_available = wb.active
    ws_available.title = AVAILABLE_SHEET
    _write_sheet(ws_available, available, AVAILABLE_COLUMNS)

    ws_placed = wb.create_sheet(title=PLACED_SHEET)
    _write_sheet(ws_placed, placed, PLACED_COLUMNS)

    return wb


def default_export_filename(prefix: str = "catalogo-bks", day: Optional[date] = None) -> str:
    """Dated workbook name, e.g. catalogo-bks-2025-10-27.xlsx."""
    return f"{prefix}-{(day or date.today()).isoformat()}.xlsx"


def export_workbook(songs: List[Song], output_path: Path) -> Path:
    """
    Export songs to an .xlsx workbook.

    Args:
        songs: Songs to export
        output_path: Where the workbook is written

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = build_workbook(songs)
    wb.save(output_path)

    logger.info(f"Exported {len(songs)} songs to {output_path}")
    return output_path
