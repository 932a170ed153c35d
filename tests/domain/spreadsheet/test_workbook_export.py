"""Tests for workbook export."""

from datetime import date

from openpyxl import load_workbook

from song_catalog.domain.catalog.models import Song, Status
from song_catalog.domain.spreadsheet.columns import AVAILABLE_COLUMNS, PLACED_COLUMNS
from song_catalog.domain.spreadsheet.exporter import (
    build_workbook,
    cell_value,
    default_export_filename,
    export_workbook,
)


def _catalog():
    return [
        Song(id="1", title="zeta", style="Pop", registered=True),
        Song(id="2", title="Alfa"),
        Song(
            id="3",
            title="Sol",
            status=Status.PLACED,
            artist="Rosalía",
            authorship_revenue=400,
            authorship_percentage=40,
            total_authorship_revenue=1000,
            final_producers="Ana",
        ),
    ]


def test_both_sheets_always_present():
    wb = build_workbook([])

    assert wb.sheetnames == ["Libres", "Colocadas"]
    assert [c.value for c in wb["Libres"][1]] == [h for h, _ in AVAILABLE_COLUMNS]
    assert [c.value for c in wb["Colocadas"][1]] == [h for h, _ in PLACED_COLUMNS]
    assert wb["Libres"].max_row == 1


def test_rows_split_by_status_and_sorted_by_title():
    wb = build_workbook(_catalog())

    libres = [row[0] for row in wb["Libres"].iter_rows(min_row=2, values_only=True)]
    colocadas = [row[0] for row in wb["Colocadas"].iter_rows(min_row=2, values_only=True)]

    assert libres == ["Alfa", "zeta"]
    assert colocadas == ["Sol"]


def test_column_counts():
    assert len(AVAILABLE_COLUMNS) == 16
    assert len(PLACED_COLUMNS) == 28


def test_cell_values():
    song = _catalog()[0]

    assert cell_value(song, "status") == "Libre"
    assert cell_value(song, "registered") == "Sí"
    assert cell_value(_catalog()[1], "registered") == "No"
    assert cell_value(song, "lyrics") is None


def test_control_characters_are_stripped():
    song = Song(id="1", title="Luna", lyrics="verso\x0buno", notes="\x01")

    assert cell_value(song, "lyrics") == "versouno"
    assert cell_value(song, "notes") is None

    wb = build_workbook([song])  # Does not raise

    assert wb["Libres"].cell(row=2, column=8).value == "versouno"


def test_leading_equals_written_as_text():
    wb = build_workbook([Song(id="1", title="=Luna", notes="=)")])
    row = wb["Libres"][2]

    assert row[0].value == "=Luna"
    assert row[0].data_type == "s"
    assert row[15].data_type == "s"


def test_header_and_row_styles():
    wb = build_workbook(_catalog())
    libres = wb["Libres"]
    colocadas = wb["Colocadas"]

    header = libres.cell(row=1, column=1)
    assert header.fill.fgColor.rgb.endswith("BF9000")
    assert header.font.bold
    assert header.font.color.rgb.endswith("FFFFFF")
    assert header.alignment.horizontal == "center"

    assert colocadas.cell(row=1, column=1).fill.fgColor.rgb.endswith("4472C4")
    assert libres.cell(row=2, column=1).fill.fgColor.rgb.endswith("DCE6F1")
    assert colocadas.cell(row=2, column=1).fill.fgColor.rgb.endswith("E2EFDA")
    assert libres.cell(row=2, column=1).alignment.wrap_text
    assert libres.column_dimensions["A"].width == 15


def test_export_writes_file(tmp_path):
    path = export_workbook(_catalog(), tmp_path / "sub" / "catalog.xlsx")

    wb = load_workbook(path)
    headers = [c.value for c in wb["Colocadas"][1]]
    row = [c.value for c in wb["Colocadas"][2]]
    values = dict(zip(headers, row))

    assert values["Artista"] == "Rosalía"
    assert values["Total autoría generado (€)"] == 1000
    assert values["Productor/es"] == "Ana"


def test_default_export_filename():
    assert default_export_filename("catalogo-bks", date(2025, 10, 27)) == "catalogo-bks-2025-10-27.xlsx"
