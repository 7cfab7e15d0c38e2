"""Turns ingested table DataFrames into an immutable SeasonSnapshot."""

import logging
import math
from typing import Optional

import pandas as pd

from src.rules_engine.season_state import (
    Contestant,
    Episode,
    League,
    LeagueMember,
    Pick,
    SeasonSnapshot,
)

logger = logging.getLogger(__name__)


def _safe(val, default=None):
    """Return *default* when *val* is NaN/None/pd.NA, else the value."""
    if val is None or val is pd.NA or val is pd.NaT:
        return default
    if isinstance(val, float) and math.isnan(val):
        return default
    return val


def _safe_int(val) -> Optional[int]:
    val = _safe(val)
    return None if val is None else int(val)


def _safe_str(val) -> Optional[str]:
    val = _safe(val)
    return None if val is None else str(val)


class SnapshotTransformer:
    """Builds engine records from the ingester's DataFrames.

    The datastore calls a league member's id ``user_id``; the engine calls
    it ``player_id``.
    """

    def to_snapshot(self, frames: dict[str, pd.DataFrame]) -> SeasonSnapshot:
        """Build a snapshot from the output of ``SnapshotIngester.read_all``.

        Raises:
            ValueError: If a row breaks a record invariant (e.g. an
                eliminated contestant without an elimination episode).
        """
        snapshot = SeasonSnapshot(
            episodes=[self._episode(row) for _, row in frames["episodes"].iterrows()],
            contestants=[
                self._contestant(row) for _, row in frames["contestants"].iterrows()
            ],
            leagues=[self._league(row) for _, row in frames["leagues"].iterrows()],
            members=[self._member(row) for _, row in frames["members"].iterrows()],
            picks=[self._pick(row) for _, row in frames["picks"].iterrows()],
        )
        logger.info(
            "Built snapshot: %d episodes, %d contestants, %d leagues, "
            "%d members, %d picks",
            len(snapshot.episodes),
            len(snapshot.contestants),
            len(snapshot.leagues),
            len(snapshot.members),
            len(snapshot.picks),
        )
        return snapshot

    @staticmethod
    def _episode(row: pd.Series) -> Episode:
        air_time = _safe(row["air_date"])
        if air_time is None:
            raise ValueError(f"Episode {row['id']} has no air_date")
        number = _safe_int(row["number"])
        if number is None:
            raise ValueError(f"Episode {row['id']} has no number")
        return Episode(
            id=str(row["id"]),
            number=number,
            title=_safe_str(row.get("title")),
            air_time=air_time.to_pydatetime(),
            is_complete=bool(row["is_complete"]),
        )

    @staticmethod
    def _contestant(row: pd.Series) -> Contestant:
        return Contestant(
            id=str(row["id"]),
            name=str(row["name"]),
            season=int(row["season"]),
            tribe=_safe_str(row.get("tribe")),
            is_eliminated=bool(row["is_eliminated"]),
            eliminated_at_episode=_safe_int(row["eliminated_at_episode"]),
        )

    @staticmethod
    def _league(row: pd.Series) -> League:
        return League(
            id=str(row["id"]),
            name=str(row["name"]),
            season=int(row["season"]),
            invite_code=_safe_str(row.get("invite_code")),
            host_id=_safe_str(row.get("host_id")),
        )

    @staticmethod
    def _member(row: pd.Series) -> LeagueMember:
        return LeagueMember(
            league_id=str(row["league_id"]),
            player_id=str(row["user_id"]),
            username=_safe_str(row.get("username")),
            is_eliminated=bool(row["is_eliminated"]),
            eliminated_at_episode=_safe_int(row["eliminated_at_episode"]),
        )

    @staticmethod
    def _pick(row: pd.Series) -> Pick:
        return Pick(
            id=_safe_str(row.get("id")),
            league_id=str(row["league_id"]),
            player_id=str(row["user_id"]),
            episode_id=str(row["episode_id"]),
            contestant_id=str(row["contestant_id"]),
            created_at=_safe_str(row.get("created_at")),
        )
