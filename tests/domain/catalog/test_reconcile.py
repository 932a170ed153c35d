"""Tests for import reconciliation."""

from song_catalog.domain.catalog.models import Song
from song_catalog.domain.catalog.reconcile import (
    ImportPolicy,
    apply_new,
    apply_overwrite,
    apply_policy,
    apply_skip,
    classify,
)


def song(song_id: str, title: str, **kwargs) -> Song:
    return Song(id=song_id, title=title, **kwargs)


def test_classify_case_insensitive_keeps_incoming_spelling():
    existing = [song("E1", "Song A")]
    incoming = [song("I1", "song a"), song("I2", "Song B")]

    preview = classify(existing, incoming)

    assert preview.duplicate_titles == {"song a"}
    assert preview.has_duplicates
    assert preview.incoming == incoming


def test_classify_no_duplicates():
    preview = classify([song("E1", "Song A")], [song("I1", "Song B")])

    assert not preview.has_duplicates


def test_apply_new_prepends():
    result = apply_new([song("E1", "A")], [song("I1", "B"), song("I2", "C")])

    assert [s.id for s in result] == ["I1", "I2", "E1"]


def test_skip_keeps_existing_and_prepends_fresh():
    existing = [song("E1", "Song A", style="Pop")]
    incoming = [song("I1", "song a", style="Rock"), song("I2", "Song B")]

    result = apply_skip(existing, incoming)

    assert [s.id for s in result] == ["I2", "E1"]
    assert result[1].style == "Pop"


def test_overwrite_replaces_in_place_and_prepends_fresh():
    existing = [song("E0", "Other"), song("E1", "Song A", style="Pop")]
    incoming = [song("I1", "song a", style="Rock"), song("I2", "Song B")]

    result = apply_overwrite(existing, incoming)

    assert [s.id for s in result] == ["I2", "E0", "I1"]
    assert result[2].style == "Rock"
    assert result[2].title == "song a"
    assert len(result) == len(existing) + len(incoming) - 1


def test_overwrite_first_incoming_match_wins():
    existing = [song("E1", "Song A")]
    incoming = [song("I1", "SONG A", style="first"), song("I2", "song a", style="second")]

    result = apply_overwrite(existing, incoming)

    assert len(result) == 1
    assert result[0].style == "first"


def test_overwrite_keeps_ids_unique_when_existing_titles_repeat():
    existing = [song("E1", "Song A"), song("E2", "song A")]
    incoming = [song("I1", "Song A", style="Rock")]

    result = apply_overwrite(existing, incoming)

    assert [s.id for s in result] == ["I1", "E2"]
    assert all(s.style == "Rock" for s in result)


def test_apply_policy_dispatch():
    existing = [song("E1", "Song A")]
    incoming = [song("I1", "song a"), song("I2", "Song B")]

    skipped = apply_policy(existing, incoming, ImportPolicy.SKIP_DUPLICATES)
    overwritten = apply_policy(existing, incoming, ImportPolicy.OVERWRITE_ALL)

    assert [s.id for s in skipped] == ["I2", "E1"]
    assert [s.id for s in overwritten] == ["I2", "I1"]
