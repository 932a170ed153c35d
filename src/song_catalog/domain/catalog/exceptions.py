"""Catalog exceptions for error handling."""


class CatalogError(Exception):
    """Base exception for catalog operations."""

    pass


class SongNotFoundError(CatalogError):
    """Raised when no song matches an id (or id prefix)."""

    def __init__(self, song_id: str, message: str = None):
        self.song_id = song_id
        super().__init__(message or f"No song with id {song_id!r}")


class AmbiguousSongIdError(CatalogError):
    """Raised when an id prefix matches more than one song."""

    def __init__(self, prefix: str, matches: list):
        self.prefix = prefix
        self.matches = matches
        super().__init__(f"Id prefix {prefix!r} matches {len(matches)} songs")


class BackupNotFoundError(CatalogError):
    """Raised when a backup key does not exist."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No backup stored under {key!r}")


class NoPendingImportError(CatalogError):
    """Raised when resolving an import that was never held for review."""

    pass


class InvalidFieldError(CatalogError):
    """Raised when user input for a field is rejected."""

    def __init__(self, field_name: str, value: str, reason: str):
        self.field_name = field_name
        self.value = value
        super().__init__(f"Invalid value for {field_name}: {value!r} ({reason})")
