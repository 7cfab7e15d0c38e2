"""Snapshot persistence - save and load season snapshots to/from JSON files."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from src.rules_engine.config import SNAPSHOTS_DIR
from src.rules_engine.season_state import (
    Contestant,
    Episode,
    League,
    LeagueMember,
    Pick,
    SeasonSnapshot,
)

logger = logging.getLogger(__name__)


class SnapshotPersistence:
    """Handles saving and loading season snapshots to/from JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None):
        self.storage_dir = storage_dir or SNAPSHOTS_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def save_snapshot(self, snapshot: SeasonSnapshot, name: str) -> Path:
        """Save a snapshot as ``snapshot_<name>.json`` and mark it latest.

        Returns:
            Path to the saved file.
        """
        filepath = self.storage_dir / f"snapshot_{name}.json"

        data = self._snapshot_to_dict(snapshot)
        data["saved_at"] = datetime.now(timezone.utc).isoformat()

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        self._update_latest_link(filepath)

        logger.info(
            "Saved snapshot %s (%d episodes, %d members, %d picks) to %s",
            name,
            len(snapshot.episodes),
            len(snapshot.members),
            len(snapshot.picks),
            filepath,
        )
        return filepath

    def load_snapshot(self, name: str) -> Optional[SeasonSnapshot]:
        """Load a saved snapshot.

        Returns:
            SeasonSnapshot if found and readable, None otherwise.
        """
        filepath = self.storage_dir / f"snapshot_{name}.json"

        if not filepath.exists():
            logger.warning("Snapshot file not found: %s", filepath)
            return None

        return self._read(filepath)

    def load_latest(self) -> Optional[SeasonSnapshot]:
        """Load whichever snapshot was saved most recently."""
        latest_link = self.storage_dir / "latest.json"

        if not latest_link.is_symlink():
            return None

        actual_file = latest_link.resolve()
        if not actual_file.exists():
            logger.warning("Latest snapshot link points to missing file: %s", actual_file)
            return None

        return self._read(actual_file)

    def list_snapshots(self) -> List[Dict]:
        """List saved snapshots, most recently saved first."""
        snapshots = []

        for filepath in self.storage_dir.glob("snapshot_*.json"):
            try:
                with open(filepath, "r", encoding="utf-8") as f:
                    data = json.load(f)

                snapshots.append(
                    {
                        "name": filepath.stem[len("snapshot_"):],
                        "saved_at": data.get("saved_at", ""),
                        "episodes": len(data["episodes"]),
                        "completed_episodes": sum(
                            1 for e in data["episodes"] if e.get("is_complete")
                        ),
                        "leagues": len(data.get("leagues", [])),
                        "picks": len(data.get("picks", [])),
                    }
                )
            except (
                json.JSONDecodeError,
                OSError,
                KeyError,
                TypeError,
                AttributeError,
            ) as e:
                logger.warning("Skipping corrupt snapshot file %s: %s", filepath, e)
                continue

        return sorted(snapshots, key=lambda x: x["saved_at"], reverse=True)

    def delete_snapshot(self, name: str) -> bool:
        """Delete a saved snapshot.

        Returns:
            True if deleted, False if not found.
        """
        filepath = self.storage_dir / f"snapshot_{name}.json"

        if not filepath.exists():
            return False

        latest_link = self.storage_dir / "latest.json"
        if latest_link.is_symlink() and latest_link.resolve() == filepath.resolve():
            latest_link.unlink()

        filepath.unlink()
        logger.info("Deleted snapshot %s", name)
        return True

    def _read(self, filepath: Path) -> Optional[SeasonSnapshot]:
        try:
            with open(filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
            snapshot = self._dict_to_snapshot(data)
        except (
            json.JSONDecodeError,
            KeyError,
            ValueError,
            TypeError,
            AttributeError,
        ) as e:
            logger.warning("Corrupt snapshot file %s: %s", filepath, e)
            return None

        logger.info("Loaded snapshot from %s", filepath)
        return snapshot

    def _snapshot_to_dict(self, snapshot: SeasonSnapshot) -> Dict:
        """Convert a snapshot to a JSON-serializable dict."""
        return {
            "episodes": [
                {
                    "id": e.id,
                    "number": e.number,
                    "title": e.title,
                    "air_time": e.air_time.isoformat(),
                    "is_complete": e.is_complete,
                }
                for e in snapshot.episodes
            ],
            "contestants": [
                {
                    "id": c.id,
                    "name": c.name,
                    "season": c.season,
                    "tribe": c.tribe,
                    "is_eliminated": c.is_eliminated,
                    "eliminated_at_episode": c.eliminated_at_episode,
                }
                for c in snapshot.contestants
            ],
            "leagues": [
                {
                    "id": lg.id,
                    "name": lg.name,
                    "season": lg.season,
                    "invite_code": lg.invite_code,
                    "host_id": lg.host_id,
                }
                for lg in snapshot.leagues
            ],
            "members": [
                {
                    "league_id": m.league_id,
                    "player_id": m.player_id,
                    "username": m.username,
                    "is_eliminated": m.is_eliminated,
                    "eliminated_at_episode": m.eliminated_at_episode,
                }
                for m in snapshot.members
            ],
            "picks": [
                {
                    "id": p.id,
                    "league_id": p.league_id,
                    "player_id": p.player_id,
                    "episode_id": p.episode_id,
                    "contestant_id": p.contestant_id,
                    "created_at": p.created_at,
                }
                for p in snapshot.picks
            ],
        }

    def _dict_to_snapshot(self, data: Dict) -> SeasonSnapshot:
        """Reconstruct a snapshot from a dict."""
        episodes = [
            Episode(
                id=ed["id"],
                number=ed["number"],
                title=ed.get("title"),
                air_time=datetime.fromisoformat(ed["air_time"]),
                is_complete=ed.get("is_complete", False),
            )
            for ed in data["episodes"]
        ]

        contestants = [
            Contestant(
                id=cd["id"],
                name=cd["name"],
                season=cd["season"],
                tribe=cd.get("tribe"),
                is_eliminated=cd.get("is_eliminated", False),
                eliminated_at_episode=cd.get("eliminated_at_episode"),
            )
            for cd in data["contestants"]
        ]

        leagues = [
            League(
                id=ld["id"],
                name=ld["name"],
                season=ld["season"],
                invite_code=ld.get("invite_code"),
                host_id=ld.get("host_id"),
            )
            for ld in data.get("leagues", [])
        ]

        members = [
            LeagueMember(
                league_id=md["league_id"],
                player_id=md["player_id"],
                username=md.get("username"),
                is_eliminated=md.get("is_eliminated", False),
                eliminated_at_episode=md.get("eliminated_at_episode"),
            )
            for md in data.get("members", [])
        ]

        picks = [
            Pick(
                id=pd.get("id"),
                league_id=pd["league_id"],
                player_id=pd["player_id"],
                episode_id=pd["episode_id"],
                contestant_id=pd["contestant_id"],
                created_at=pd.get("created_at"),
            )
            for pd in data.get("picks", [])
        ]

        return SeasonSnapshot(
            episodes=episodes,
            contestants=contestants,
            leagues=leagues,
            members=members,
            picks=picks,
        )

    def _update_latest_link(self, filepath: Path):
        """Point ``latest.json`` at the most recently saved snapshot."""
        latest_link = self.storage_dir / "latest.json"

        if latest_link.exists() or latest_link.is_symlink():
            latest_link.unlink()

        latest_link.symlink_to(filepath.name)
