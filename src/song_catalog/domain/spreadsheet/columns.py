"""
Workbook layout shared by export and import.

Headers are human-readable Spanish strings, not stable identifiers, so the
header -> field dictionary below is the contract that keeps export and
import in sync. Aliases cover older hand-made sheets.
"""

from typing import Dict, List, Tuple

from ..catalog.models import Status

AVAILABLE_SHEET = "Libres"
PLACED_SHEET = "Colocadas"

SHEET_STATUS = {
    AVAILABLE_SHEET: Status.AVAILABLE,
    PLACED_SHEET: Status.PLACED,
}

# (header, field) in column order
AVAILABLE_COLUMNS: List[Tuple[str, str]] = [
    ("Título", "title"),
    ("Estado", "status"),
    ("Estilo", "style"),
    ("Cliente objetivo", "target_client"),
    ("Fecha de creación", "created_on"),
    ("Tempo/Key", "tempo_key"),
    ("Duración", "duration"),
    ("Letra", "lyrics"),
    ("¿Registrada?", "registered"),
    ("Editorial", "publisher"),
    ("Contrato edición", "publishing_contract"),
    ("Reparto", "authorship_split"),
    ("Vocalista demo", "demo_vocalist"),
    ("Productor/es", "demo_producers"),
    ("Link MP3 (Dropbox) - Demo", "demo_mp3_link"),
    ("Notas", "notes"),
]

PLACED_COLUMNS: List[Tuple[str, str]] = [
    ("Título", "title"),
    ("Estado", "status"),
    ("Artista", "artist"),
    ("Fecha lanzamiento", "release_date"),
    ("Estilo", "style"),
    ("Fecha de creación", "created_on"),
    ("Tempo/Key", "tempo_key"),
    ("Duración", "duration"),
    ("Letra", "lyrics"),
    ("¿Registrada?", "registered"),
    ("Sociedad gestión", "collecting_society"),
    ("Editoriales", "publishers"),
    ("Reparto", "authorship_split"),
    ("% autoría Manu/editorial", "authorship_percentage"),
    ("Ingresos autoría Manu/editorial (€)", "authorship_revenue"),
    ("Total autoría generado (€)", "total_authorship_revenue"),
    ("Contratos de edición (URLs)", "publishing_contracts"),
    ("Propiedad máster", "master_ownership"),
    ("% royalties máster Manu", "master_royalty_percentage"),
    ("Ingresos máster Manu (€)", "master_revenue"),
    ("Total máster generado (€)", "total_master_revenue"),
    ("Productor/es", "final_producers"),
    ("Contrato producción (URL)", "production_contract"),
    ("Link stems/máster", "stems_master_link"),
    ("ISRC", "isrc"),
    ("ISWC", "iswc"),
    ("Link MP3 (Dropbox)", "master_mp3_link"),
    ("Notas", "notes"),
]

SHEET_COLUMNS = {
    AVAILABLE_SHEET: AVAILABLE_COLUMNS,
    PLACED_SHEET: PLACED_COLUMNS,
}

HEADER_FIELDS: Dict[str, str] = {
    "Título": "title",
    "Estado": "status",
    "Estilo": "style",
    "Fecha de creación": "created_on",
    "Fecha creación": "created_on",
    "Tempo/Key": "tempo_key",
    "Tempo_Key": "tempo_key",
    "Duración": "duration",
    "Letra": "lyrics",
    "¿Registrada?": "registered",
    "Registrada": "registered",
    "Sociedad gestión": "collecting_society",
    "Notas": "notes",
    "Editorial": "publisher",
    "Editoriales": "publishers",
    "Reparto": "authorship_split",
    "Reparto autoría": "authorship_split",
    "Vocalista demo": "demo_vocalist",
    "Productor/es": "demo_producers",
    "Productores demo": "demo_producers",
    "Cliente objetivo": "target_client",
    "Contrato edición": "publishing_contract",
    "Link MP3 (Dropbox) - Demo": "demo_mp3_link",
    "Link MP3 demo": "demo_mp3_link",
    "Link MP3 Demo": "demo_mp3_link",
    "% autoría Manu/editorial": "authorship_percentage",
    "Ingresos autoría Manu/editorial (€)": "authorship_revenue",
    "Total autoría generado (€)": "total_authorship_revenue",
    "Contratos de edición (URLs)": "publishing_contracts",
    "Contratos edición": "publishing_contracts",
    "Artista": "artist",
    "Fecha colocación": "placement_date",
    "Fecha lanzamiento": "release_date",
    "Propiedad máster": "master_ownership",
    "Reparto máster": "master_split",
    "% royalties máster Manu": "master_royalty_percentage",
    "% royalties máster": "master_royalty_percentage",
    "Ingresos máster Manu (€)": "master_revenue",
    "Total máster generado (€)": "total_master_revenue",
    "Productores finales": "final_producers",
    "Contrato producción (URL)": "production_contract",
    "Contrato producción": "production_contract",
    "Link stems/máster": "stems_master_link",
    "Link stems": "stems_master_link",
    "ISRC": "isrc",
    "ISWC": "iswc",
    "Link MP3 (Dropbox)": "master_mp3_link",
    "Link MP3 máster (Dropbox)": "master_mp3_link",
    "Link MP3 máster": "master_mp3_link",
}

# Headers whose meaning changes on the Colocadas sheet
PLACED_HEADER_OVERRIDES: Dict[str, str] = {
    "Productor/es": "final_producers",
}

TRUE_TOKENS = frozenset({"sí", "si", "1", "true", "yes", "x"})
YES_LABEL = "Sí"
NO_LABEL = "No"

MISSING_TITLE = "Untitled"


def header_map(sheet_name: str | None = None) -> Dict[str, str]:
    """Header -> field dictionary for a sheet (None for the legacy single sheet)."""
    if sheet_name is not None and sheet_name.casefold() == PLACED_SHEET.casefold():
        return {**HEADER_FIELDS, **PLACED_HEADER_OVERRIDES}
    return HEADER_FIELDS
