"""Catalog domain - song records, persistence and import reconciliation.

This domain handles:
- Song data model and derived revenue totals
- The record store with dated backups
- Reconciling imported songs with the catalog

The controller lives in ``song_catalog.domain.catalog.controller`` and is not
re-exported here because it depends on the spreadsheet domain.
"""

# Models
from .models import (
    Song,
    Status,
    SortKey,
    SONG_FIELDS,
    EDITABLE_FIELDS,
    NUMERIC_FIELDS,
    BOOLEAN_FIELDS,
    DERIVED_FIELDS,
    PLACEHOLDER_TITLE,
    compute_total,
    new_song,
    new_song_id,
    with_derived_totals,
)

# Persistence
from .store import Backup, RecordStore

# Reconciliation
from .reconcile import (
    ImportPolicy,
    ImportPreview,
    apply_new,
    apply_overwrite,
    apply_policy,
    apply_skip,
    classify,
)

# Errors
from .exceptions import (
    AmbiguousSongIdError,
    BackupNotFoundError,
    CatalogError,
    InvalidFieldError,
    NoPendingImportError,
    SongNotFoundError,
)

__all__ = [
    # Models
    "Song",
    "Status",
    "SortKey",
    "SONG_FIELDS",
    "EDITABLE_FIELDS",
    "NUMERIC_FIELDS",
    "BOOLEAN_FIELDS",
    "DERIVED_FIELDS",
    "PLACEHOLDER_TITLE",
    "compute_total",
    "new_song",
    "new_song_id",
    "with_derived_totals",
    # Persistence
    "Backup",
    "RecordStore",
    # Reconciliation
    "ImportPolicy",
    "ImportPreview",
    "apply_new",
    "apply_overwrite",
    "apply_policy",
    "apply_skip",
    "classify",
    # Errors
    "AmbiguousSongIdError",
    "BackupNotFoundError",
    "CatalogError",
    "InvalidFieldError",
    "NoPendingImportError",
    "SongNotFoundError",
]
