"""
Import reconciliation: decide how imported songs merge into the catalog.

Titles are the natural key, compared case-insensitively. When any imported
title already exists the merge is held for an explicit, all-or-nothing
decision between skipping the duplicates and overwriting them.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Set

from .models import Song


class ImportPolicy(str, Enum):
    """How to treat imported songs whose title already exists."""

    SKIP_DUPLICATES = "skip"
    OVERWRITE_ALL = "overwrite"


@dataclass(frozen=True)
class ImportPreview:
    """Classification of an incoming batch against the catalog."""

    duplicate_titles: Set[str]  # Incoming spelling of each colliding title
    incoming: List[Song]

    @property
    def has_duplicates(self) -> bool:
        return bool(self.duplicate_titles)


def title_key(title: str) -> str:
    """Comparison key for titles."""
    return title.casefold()


def classify(existing: List[Song], incoming: List[Song]) -> ImportPreview:
    """Find incoming songs whose title matches an existing one."""
    existing_titles = {title_key(s.title) for s in existing}
    duplicates = {s.title for s in incoming if title_key(s.title) in existing_titles}
    return ImportPreview(duplicate_titles=duplicates, incoming=list(incoming))


def apply_new(existing: List[Song], incoming: List[Song]) -> List[Song]:
    """Prepend every incoming song (no collisions to resolve)."""
    return list(incoming) + list(existing)


def apply_skip(existing: List[Song], incoming: List[Song]) -> List[Song]:
    """Prepend only incoming songs with an unseen title; keep existing as is."""
    existing_titles = {title_key(s.title) for s in existing}
    fresh = [s for s in incoming if title_key(s.title) not in existing_titles]
    return fresh + list(existing)


def apply_overwrite(existing: List[Song], incoming: List[Song]) -> List[Song]:
    """Replace matching songs in place and prepend the rest.

    When several incoming songs share a title, the first one wins. When
    several existing songs share a title, each takes the incoming data but
    only the first takes the incoming id, so ids stay unique.
    """
    existing_titles = {title_key(s.title) for s in existing}

    replacements: Dict[str, Song] = {}
    fresh = []
    for song in incoming:
        key = title_key(song.title)
        if key in existing_titles:
            replacements.setdefault(key, song)
        else:
            fresh.append(song)

    updated = []
    used: Set[str] = set()
    for song in existing:
        key = title_key(song.title)
        match = replacements.get(key)
        if match is None:
            updated.append(song)
        elif key in used:
            updated.append(replace(match, id=song.id))
        else:
            used.add(key)
            updated.append(match)
    return fresh + updated


def apply_policy(
    existing: List[Song], incoming: List[Song], policy: ImportPolicy
) -> List[Song]:
    """Merge incoming into existing following policy."""
    if policy is ImportPolicy.OVERWRITE_ALL:
        return apply_overwrite(existing, incoming)
    return apply_skip(existing, incoming)
