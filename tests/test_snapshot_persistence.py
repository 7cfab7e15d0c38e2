"""Tests for snapshot persistence - save/load season snapshots to/from JSON."""

import json
from datetime import datetime, timezone

import pytest

from src.rules_engine.season_state import (
    Contestant,
    Episode,
    League,
    LeagueMember,
    Pick,
    SeasonSnapshot,
)
from src.rules_engine.snapshot_persistence import SnapshotPersistence


# ── Helpers ──────────────────────────────────────────────────────────

T0 = datetime(2026, 3, 4, 1, 0, tzinfo=timezone.utc)


def _make_snapshot(completed=True):
    return SeasonSnapshot(
        episodes=[
            Episode(id="ep1", number=1, title="Premiere", air_time=T0,
                    is_complete=completed),
        ],
        contestants=[
            Contestant(id="c1", name="Ann", season=50, tribe="Vatu",
                       is_eliminated=True, eliminated_at_episode=1),
            Contestant(id="c2", name="Bo", season=50),
        ],
        leagues=[League(id="L1", name="Test League", season=50,
                        invite_code="ABC123", host_id="p1")],
        members=[
            LeagueMember(league_id="L1", player_id="p1", username="alice"),
            LeagueMember(league_id="L1", player_id="p2", username="bob",
                         is_eliminated=True, eliminated_at_episode=1),
        ],
        picks=[
            Pick(league_id="L1", player_id="p1", episode_id="ep1",
                 contestant_id="c2", id="pk1", created_at="2026-03-03T20:00:00+00:00"),
            Pick(league_id="L1", player_id="p2", episode_id="ep1",
                 contestant_id="c1"),
        ],
    )


@pytest.fixture
def persistence(tmp_path):
    return SnapshotPersistence(storage_dir=tmp_path / "snapshots")


# ── Save / load ──────────────────────────────────────────────────────

class TestSaveAndLoad:
    def test_creates_storage_dir(self, tmp_path):
        storage = tmp_path / "nested" / "snapshots"
        SnapshotPersistence(storage_dir=storage)
        assert storage.is_dir()

    def test_save_writes_named_file(self, persistence):
        path = persistence.save_snapshot(_make_snapshot(), "week1")
        assert path.name == "snapshot_week1.json"
        data = json.loads(path.read_text())
        assert "saved_at" in data
        assert data["episodes"][0]["air_time"] == T0.isoformat()

    def test_load_restores_equal_snapshot(self, persistence):
        original = _make_snapshot()
        persistence.save_snapshot(original, "week1")
        loaded = persistence.load_snapshot("week1")
        assert loaded == original

    def test_loaded_snapshot_indexes_work(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "week1")
        loaded = persistence.load_snapshot("week1")
        assert loaded.member("L1", "p2").eliminated_at_episode == 1
        assert loaded.episode_by_number(1).air_time == T0
        assert loaded.contestant("c1").tribe == "Vatu"

    def test_missing_snapshot_returns_none(self, persistence):
        assert persistence.load_snapshot("nope") is None

    def test_corrupt_file_returns_none(self, persistence):
        (persistence.storage_dir / "snapshot_bad.json").write_text("{not json")
        assert persistence.load_snapshot("bad") is None

    def test_invalid_records_return_none(self, persistence):
        path = persistence.save_snapshot(_make_snapshot(), "week1")
        data = json.loads(path.read_text())
        data["members"][1]["eliminated_at_episode"] = None
        path.write_text(json.dumps(data))
        assert persistence.load_snapshot("week1") is None

    def test_null_air_time_returns_none(self, persistence):
        path = persistence.save_snapshot(_make_snapshot(), "week1")
        data = json.loads(path.read_text())
        data["episodes"][0]["air_time"] = None
        path.write_text(json.dumps(data))
        assert persistence.load_snapshot("week1") is None

    def test_wrong_top_level_shape_returns_none(self, persistence):
        (persistence.storage_dir / "snapshot_list.json").write_text('["x"]')
        assert persistence.load_snapshot("list") is None

    def test_non_dict_records_return_none(self, persistence):
        path = persistence.save_snapshot(_make_snapshot(), "week1")
        data = json.loads(path.read_text())
        data["picks"] = ["not a pick"]
        path.write_text(json.dumps(data))
        assert persistence.load_snapshot("week1") is None


# ── Latest link ──────────────────────────────────────────────────────

class TestLatest:
    def test_no_latest_before_first_save(self, persistence):
        assert persistence.load_latest() is None

    def test_latest_follows_most_recent_save(self, persistence):
        persistence.save_snapshot(_make_snapshot(completed=False), "before")
        persistence.save_snapshot(_make_snapshot(completed=True), "after")
        latest = persistence.load_latest()
        assert latest.episodes[0].is_complete is True

    def test_latest_is_symlink(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "week1")
        link = persistence.storage_dir / "latest.json"
        assert link.is_symlink()
        assert link.resolve().name == "snapshot_week1.json"


# ── Listing / deleting ───────────────────────────────────────────────

class TestListAndDelete:
    def test_list_summaries(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "week1")
        listing = persistence.list_snapshots()
        assert len(listing) == 1
        assert listing[0]["name"] == "week1"
        assert listing[0]["episodes"] == 1
        assert listing[0]["completed_episodes"] == 1
        assert listing[0]["leagues"] == 1
        assert listing[0]["picks"] == 2

    def test_list_newest_first(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "first")
        persistence.save_snapshot(_make_snapshot(), "second")
        names = [s["name"] for s in persistence.list_snapshots()]
        assert set(names) == {"first", "second"}
        saved = [s["saved_at"] for s in persistence.list_snapshots()]
        assert saved == sorted(saved, reverse=True)

    def test_list_skips_corrupt_files(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "good")
        (persistence.storage_dir / "snapshot_bad.json").write_text("{not json")
        assert [s["name"] for s in persistence.list_snapshots()] == ["good"]

    def test_list_skips_wrongly_shaped_files(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "good")
        (persistence.storage_dir / "snapshot_list.json").write_text('["x"]')
        assert [s["name"] for s in persistence.list_snapshots()] == ["good"]

    def test_delete(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "week1")
        assert persistence.delete_snapshot("week1") is True
        assert persistence.load_snapshot("week1") is None
        assert persistence.delete_snapshot("week1") is False

    def test_delete_latest_removes_link(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "week1")
        persistence.delete_snapshot("week1")
        assert not (persistence.storage_dir / "latest.json").is_symlink()
        assert persistence.load_latest() is None

    def test_delete_older_keeps_link(self, persistence):
        persistence.save_snapshot(_make_snapshot(), "old")
        persistence.save_snapshot(_make_snapshot(), "new")
        persistence.delete_snapshot("old")
        assert persistence.load_latest() is not None
