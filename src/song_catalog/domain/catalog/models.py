"""
Catalog domain models.

Contains the song record, its lifecycle status and the derived revenue
totals computed from revenue/percentage pairs.
"""

import math
import secrets
import string
import time
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional

from loguru import logger

PLACEHOLDER_TITLE = "New song"

_BASE36 = string.digits + string.ascii_uppercase


class Status(str, Enum):
    """Lifecycle state of a song."""

    AVAILABLE = "Available"
    PLACED = "Placed"

    @classmethod
    def parse(cls, value: Any) -> Optional["Status"]:
        """Parse a status token, accepting the Spanish sheet labels too.

        Returns None for blank or unrecognized input.
        """
        if isinstance(value, Status):
            return value
        if value is None:
            return None
        token = str(value).strip().casefold()
        return _STATUS_TOKENS.get(token)

    @property
    def label(self) -> str:
        """Localized label used in spreadsheets."""
        return "Libre" if self is Status.AVAILABLE else "Colocada"


_STATUS_TOKENS = {
    "available": Status.AVAILABLE,
    "libre": Status.AVAILABLE,
    "libres": Status.AVAILABLE,
    "placed": Status.PLACED,
    "colocada": Status.PLACED,
    "colocadas": Status.PLACED,
}


class SortKey(str, Enum):
    """Orderings offered by the catalog list."""

    TITLE = "title"
    CREATED = "created"
    STYLE = "style"


@dataclass
class Song:
    """A composition in the catalog.

    One record type carries every field; which ones matter depends on the
    status, but switching status never clears the others.
    """

    id: str
    title: str
    status: Status = Status.AVAILABLE

    # Shared by both statuses
    style: Optional[str] = None
    created_on: Optional[str] = None  # ISO date string, e.g. "2024-05-01"
    tempo_key: Optional[str] = None  # e.g. "100 BPM, A minor"
    duration: Optional[str] = None  # e.g. "3:45"
    lyrics: Optional[str] = None
    registered: bool = False
    authorship_split: Optional[str] = None  # One author per line, "Name 40%"
    notes: Optional[str] = None

    # Available (demo / pitch)
    target_client: Optional[str] = None
    publisher: Optional[str] = None
    publishing_contract: Optional[str] = None
    demo_vocalist: Optional[str] = None
    demo_producers: Optional[str] = None
    demo_mp3_link: Optional[str] = None

    # Placed (rights / royalties / production)
    artist: Optional[str] = None
    placement_date: Optional[str] = None
    release_date: Optional[str] = None
    collecting_society: Optional[str] = None
    publishers: Optional[str] = None
    authorship_percentage: Optional[float] = None
    authorship_revenue: Optional[float] = None
    total_authorship_revenue: Optional[int] = None  # Derived
    publishing_contracts: Optional[str] = None
    master_ownership: Optional[str] = None
    master_split: Optional[str] = None
    master_royalty_percentage: Optional[float] = None
    master_revenue: Optional[float] = None
    total_master_revenue: Optional[int] = None  # Derived
    final_producers: Optional[str] = None
    production_contract: Optional[str] = None
    stems_master_link: Optional[str] = None
    isrc: Optional[str] = None
    iswc: Optional[str] = None
    master_mp3_link: Optional[str] = None

    @property
    def audio_link(self) -> Optional[str]:
        """Preview link for the song's current status."""
        if self.status is Status.PLACED:
            return self.master_mp3_link
        return self.demo_mp3_link

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict, omitting absent fields."""
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["status"] = self.status.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Song":
        """Build a Song from a stored dict.

        Unknown keys are ignored so older or newer payloads still load.

        Raises:
            ValueError: If id or title is missing
        """
        if not data.get("id") or not data.get("title"):
            raise ValueError("Song payload requires 'id' and 'title'")

        kwargs = {k: data[k] for k in SONG_FIELDS if k in data}
        kwargs["status"] = Status.parse(data.get("status")) or Status.AVAILABLE
        kwargs["registered"] = bool(data.get("registered", False))

        unknown = set(data) - set(SONG_FIELDS)
        if unknown:
            logger.debug(f"Ignoring unknown song fields: {sorted(unknown)}")

        return cls(**kwargs)


SONG_FIELDS = tuple(f.name for f in fields(Song))

NUMERIC_FIELDS = frozenset({
    "authorship_percentage",
    "authorship_revenue",
    "total_authorship_revenue",
    "master_royalty_percentage",
    "master_revenue",
    "total_master_revenue",
})

BOOLEAN_FIELDS = frozenset({"registered"})

DERIVED_FIELDS = frozenset({"total_authorship_revenue", "total_master_revenue"})

# Fields a user may edit directly
EDITABLE_FIELDS = tuple(f for f in SONG_FIELDS if f != "id" and f not in DERIVED_FIELDS)


def new_song_id() -> str:
    """Generate an opaque, unique song id (base36 time + random suffix)."""
    millis = int(time.time() * 1000)
    stamp = ""
    while millis:
        millis, rem = divmod(millis, 36)
        stamp = _BASE36[rem] + stamp
    suffix = "".join(secrets.choice(_BASE36) for _ in range(8))
    return stamp + suffix


def new_song() -> Song:
    """Create an unsaved draft with default status and placeholder title."""
    return Song(id=new_song_id(), title=PLACEHOLDER_TITLE, status=Status.AVAILABLE)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from -infinity."""
    return math.floor(value + 0.5)


def compute_total(revenue: Optional[float], percentage: Optional[float]) -> Optional[int]:
    """Total generated from a revenue share and the share's percentage.

    Returns None unless revenue is present and non-zero and percentage > 0.

    Examples:
        >>> compute_total(400, 40)
        1000
        >>> compute_total(400, 0) is None
        True
    """
    if not revenue or percentage is None or percentage <= 0:
        return None
    return round_half_up(revenue / (percentage / 100))


def with_derived_totals(song: Song) -> Song:
    """Return a copy of song with both derived totals recomputed."""
    return replace(
        song,
        total_authorship_revenue=compute_total(
            song.authorship_revenue, song.authorship_percentage
        ),
        total_master_revenue=compute_total(
            song.master_revenue, song.master_royalty_percentage
        ),
    )
