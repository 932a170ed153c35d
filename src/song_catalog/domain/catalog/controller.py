"""
Catalog controller: the operations behind every user action.

Keeps the song list in memory (authoritative for the session) and writes it
through the record store after each change.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..spreadsheet.exporter import export_workbook
from ..spreadsheet.importer import read_workbook
from .exceptions import AmbiguousSongIdError, NoPendingImportError, SongNotFoundError
from .models import Song, SortKey, Status, new_song, with_derived_totals
from .reconcile import (
    ImportPolicy,
    ImportPreview,
    apply_new,
    apply_policy,
    classify,
    title_key,
)
from .store import Backup, RecordStore

MISSING_STYLE = "—"


@dataclass(frozen=True)
class CatalogCounts:
    total: int
    available: int
    placed: int


@dataclass(frozen=True)
class ImportOutcome:
    """Result of an import attempt.

    When ``preview`` is set the batch contains duplicate titles and nothing
    was applied yet; call ``resolve_import`` or ``cancel_import``.
    """

    added: int = 0
    overwritten: int = 0
    skipped: int = 0
    preview: Optional[ImportPreview] = None

    @property
    def applied(self) -> bool:
        return self.preview is None


def sort_songs(songs: List[Song], sort_by: SortKey) -> List[Song]:
    """Order songs for display.

    - TITLE: ascending
    - CREATED: newest ``created_on`` first, missing dates last
    - STYLE: ascending, songs without a style after named styles
    """
    if sort_by is SortKey.CREATED:
        return sorted(songs, key=lambda s: s.created_on or "", reverse=True)
    if sort_by is SortKey.STYLE:
        return sorted(songs, key=lambda s: (s.style or MISSING_STYLE).casefold())
    return sorted(songs, key=lambda s: title_key(s.title))


def filter_songs(songs: List[Song], query: str) -> List[Song]:
    """Songs whose title contains query, ignoring case."""
    needle = query.casefold()
    return [s for s in songs if needle in s.title.casefold()]


class CatalogController:
    """Create, edit, remove, browse, back up, import and export songs."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._songs: List[Song] = store.load()
        self._pending_import: Optional[ImportPreview] = None
        logger.info(f"Catalog loaded: {len(self._songs)} songs")

    @property
    def songs(self) -> List[Song]:
        return list(self._songs)

    @property
    def pending_import(self) -> Optional[ImportPreview]:
        return self._pending_import

    def _commit(self, songs: List[Song]) -> None:
        self._songs = list(songs)
        self.store.save(self._songs)

    # Lookup

    def get(self, song_id: str) -> Song:
        """
        Raises:
            SongNotFoundError: If no song has this id
        """
        for song in self._songs:
            if song.id == song_id:
                return song
        raise SongNotFoundError(song_id)

    def find(self, id_or_prefix: str) -> Song:
        """Find a song by exact id or unique id prefix (case-insensitive).

        Raises:
            SongNotFoundError: If nothing matches
            AmbiguousSongIdError: If the prefix matches several songs
        """
        wanted = id_or_prefix.strip().upper()
        if not wanted:
            raise SongNotFoundError(id_or_prefix)

        for song in self._songs:
            if song.id.upper() == wanted:
                return song

        matches = [s for s in self._songs if s.id.upper().startswith(wanted)]
        if not matches:
            raise SongNotFoundError(id_or_prefix)
        if len(matches) > 1:
            raise AmbiguousSongIdError(id_or_prefix, matches)
        return matches[0]

    # CRUD

    def create(self) -> Song:
        """New unsaved draft (status Available, placeholder title)."""
        return new_song()

    def save(self, song: Song) -> Song:
        """Recompute derived totals and upsert by id (replace, else prepend)."""
        final = with_derived_totals(song)

        songs = list(self._songs)
        for idx, existing in enumerate(songs):
            if existing.id == final.id:
                songs[idx] = final
                logger.info(f"Updated song {final.id} ({final.title!r})")
                break
        else:
            songs.insert(0, final)
            logger.info(f"Created song {final.id} ({final.title!r})")

        self._commit(songs)
        return final

    def remove(self, song_id: str) -> Song:
        """Delete a song immediately.

        Raises:
            SongNotFoundError: If no song has this id
        """
        song = self.get(song_id)
        self._commit([s for s in self._songs if s.id != song_id])
        logger.info(f"Removed song {song_id} ({song.title!r})")
        return song

    def replace_all(self, songs: List[Song]) -> None:
        """Install songs as the whole catalog."""
        self._commit(songs)

    # Browsing

    def filter(self, query: str) -> List[Song]:
        return filter_songs(self._songs, query)

    def sort(self, songs: Optional[List[Song]], by: SortKey) -> List[Song]:
        """Sort songs (the whole catalog when None)."""
        return sort_songs(self._songs if songs is None else songs, by)

    def browse(
        self,
        query: str = "",
        sort_by: Optional[SortKey] = None,
        status: Optional[Status] = None,
    ) -> List[Song]:
        """Filter, sort (stored preference by default) and optionally keep one status."""
        sort_by = sort_by or self.store.load_sort_preference()
        songs = self.sort(self.filter(query), sort_by)
        if status is not None:
            songs = [s for s in songs if s.status is status]
        return songs

    def counts(self) -> CatalogCounts:
        available = sum(1 for s in self._songs if s.status is Status.AVAILABLE)
        return CatalogCounts(
            total=len(self._songs),
            available=available,
            placed=len(self._songs) - available,
        )

    # Backups

    def clear_all(self) -> Optional[str]:
        """Snapshot the catalog to today's backup, then empty it.

        Returns:
            The backup key, or None when the catalog was already empty
        """
        backup_key = None
        if self._songs:
            backup_key = self.store.snapshot_backup(self._songs)
        self._commit([])
        logger.warning(f"Catalog cleared (backup: {backup_key})")
        return backup_key

    def list_backups(self) -> List[Backup]:
        return self.store.list_backups()

    def restore_backup(self, key: str) -> List[Song]:
        """Replace the catalog with a backup's songs.

        Raises:
            BackupNotFoundError: If key is not a stored backup
        """
        songs = self.store.restore_backup(key)
        self._commit(songs)
        logger.info(f"Restored {len(songs)} songs from {key}")
        return songs

    def delete_backup(self, key: str) -> None:
        self.store.delete_backup(key)

    # Import / export

    def import_songs(self, incoming: List[Song]) -> ImportOutcome:
        """Add decoded songs, or hold them for review when titles collide."""
        if not incoming:
            return ImportOutcome()

        preview = classify(self._songs, incoming)
        if preview.has_duplicates:
            self._pending_import = preview
            logger.info(
                f"Import held: {len(incoming)} songs, "
                f"{len(preview.duplicate_titles)} duplicate titles"
            )
            return ImportOutcome(preview=preview)

        self._commit(apply_new(self._songs, incoming))
        logger.info(f"Imported {len(incoming)} songs")
        return ImportOutcome(added=len(incoming))

    def import_workbook(self, path: Path) -> ImportOutcome:
        """Decode a workbook and import its songs.

        Raises:
            SpreadsheetDecodeError: If the file cannot be decoded (nothing is added)
        """
        return self.import_songs(read_workbook(path))

    def resolve_import(self, policy: ImportPolicy) -> ImportOutcome:
        """Apply the held import with the chosen policy.

        Raises:
            NoPendingImportError: If no import is waiting for a decision
        """
        preview = self._pending_import
        if preview is None:
            raise NoPendingImportError("No import is waiting for a decision")

        existing_titles = {title_key(s.title) for s in self._songs}
        matched = [title_key(s.title) for s in preview.incoming if title_key(s.title) in existing_titles]
        fresh = len(preview.incoming) - len(matched)

        self._commit(apply_policy(self._songs, preview.incoming, policy))
        self._pending_import = None

        if policy is ImportPolicy.OVERWRITE_ALL:
            # Only the first incoming row per title is written
            overwritten = len(set(matched))
            outcome = ImportOutcome(
                added=fresh, overwritten=overwritten, skipped=len(matched) - overwritten
            )
        else:
            outcome = ImportOutcome(added=fresh, skipped=len(matched))
        logger.info(f"Import resolved ({policy.value}): {outcome}")
        return outcome

    def cancel_import(self) -> None:
        self._pending_import = None

    def export_workbook(self, output_path: Path) -> Path:
        return export_workbook(self._songs, output_path)
