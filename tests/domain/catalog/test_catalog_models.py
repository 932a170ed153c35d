"""Tests for the song model and derived revenue totals."""

import pytest

from song_catalog.domain.catalog.models import (
    EDITABLE_FIELDS,
    PLACEHOLDER_TITLE,
    Song,
    Status,
    compute_total,
    new_song,
    new_song_id,
    round_half_up,
    with_derived_totals,
)


class TestComputeTotal:
    """Tests for compute_total."""

    def test_revenue_divided_by_share(self):
        assert compute_total(400, 40) == 1000

    def test_rounds_half_up(self):
        assert compute_total(250, 40) == 625
        assert compute_total(1, 80) == 1  # 1.25
        assert compute_total(1.25, 50) == 3  # 2.5

    @pytest.mark.parametrize(
        "revenue,percentage",
        [(None, 40), (0, 40), (400, None), (400, 0), (400, -5)],
    )
    def test_undefined_cases_are_none(self, revenue, percentage):
        assert compute_total(revenue, percentage) is None

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2


class TestWithDerivedTotals:
    def test_both_totals_recomputed(self):
        song = Song(
            id="A1",
            title="Luna",
            status=Status.PLACED,
            authorship_revenue=400,
            authorship_percentage=40,
            master_revenue=150,
            master_royalty_percentage=15,
        )

        result = with_derived_totals(song)

        assert result.total_authorship_revenue == 1000
        assert result.total_master_revenue == 1000

    def test_stale_total_cleared_when_inputs_removed(self):
        song = Song(
            id="A1",
            title="Luna",
            authorship_revenue=None,
            authorship_percentage=40,
            total_authorship_revenue=999,
        )

        assert with_derived_totals(song).total_authorship_revenue is None


class TestStatus:
    @pytest.mark.parametrize(
        "token,expected",
        [
            ("Available", Status.AVAILABLE),
            ("Libre", Status.AVAILABLE),
            ("  libres ", Status.AVAILABLE),
            ("Placed", Status.PLACED),
            ("COLOCADA", Status.PLACED),
            ("Colocadas", Status.PLACED),
        ],
    )
    def test_parse_accepts_both_vocabularies(self, token, expected):
        assert Status.parse(token) is expected

    def test_parse_unknown_is_none(self):
        assert Status.parse("sold") is None
        assert Status.parse(None) is None

    def test_label(self):
        assert Status.AVAILABLE.label == "Libre"
        assert Status.PLACED.label == "Colocada"


class TestSong:
    def test_new_song_is_available_draft(self):
        song = new_song()

        assert song.status is Status.AVAILABLE
        assert song.title == PLACEHOLDER_TITLE
        assert song.registered is False
        assert song.id

    def test_ids_are_unique(self):
        ids = {new_song_id() for _ in range(500)}
        assert len(ids) == 500

    def test_audio_link_depends_on_status(self):
        song = Song(id="A1", title="Luna", demo_mp3_link="demo", master_mp3_link="master")

        assert song.audio_link == "demo"
        song.status = Status.PLACED
        assert song.audio_link == "master"

    def test_to_dict_drops_absent_fields(self):
        data = Song(id="A1", title="Luna", style="Pop").to_dict()

        assert data == {
            "id": "A1",
            "title": "Luna",
            "status": "Available",
            "style": "Pop",
            "registered": False,
        }

    def test_from_dict_accepts_legacy_status_and_ignores_unknown_keys(self):
        song = Song.from_dict({"id": "A1", "title": "Luna", "status": "Colocada", "extra": 1})

        assert song.status is Status.PLACED
        assert song.title == "Luna"

    def test_from_dict_requires_id_and_title(self):
        with pytest.raises(ValueError):
            Song.from_dict({"title": "Luna"})
        with pytest.raises(ValueError):
            Song.from_dict({"id": "A1"})

    def test_id_and_totals_not_editable(self):
        assert "id" not in EDITABLE_FIELDS
        assert "total_authorship_revenue" not in EDITABLE_FIELDS
        assert "title" in EDITABLE_FIELDS
