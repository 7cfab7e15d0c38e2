"""Episode close - turns a vote-out into per-league player eliminations."""

import enum
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from src.rules_engine.config import MAX_CONSECUTIVE_MISSES
from src.rules_engine.elimination import cascade_eliminations, has_no_options_left
from src.rules_engine.errors import EpisodeCloseError
from src.rules_engine.lock_time import is_locked
from src.rules_engine.pick_debt import should_auto_eliminate
from src.rules_engine.season_state import (
    Contestant,
    Episode,
    LeagueMember,
    SeasonSnapshot,
)

logger = logging.getLogger(__name__)


class EliminationCause(enum.Enum):
    VOTED_OUT_PICK = "voted_out_pick"
    MISSED_PICKS = "missed_picks"
    NO_OPTIONS_LEFT = "no_options_left"


@dataclass(frozen=True)
class PlayerElimination:
    """One player knocked out of one league when an episode closes."""

    league_id: str
    player_id: str
    episode_number: int
    cause: EliminationCause


@dataclass(frozen=True)
class EpisodeCloseResult:
    """Everything the orchestrator has to write after closing an episode."""

    episode_id: str
    episode_number: int
    voted_out: Tuple[str, ...]
    eliminations: Tuple[PlayerElimination, ...]

    def eliminated_in(self, league_id: str) -> List[str]:
        return [e.player_id for e in self.eliminations if e.league_id == league_id]

    def count_by_cause(self) -> Dict[EliminationCause, int]:
        counts = {cause: 0 for cause in EliminationCause}
        for elimination in self.eliminations:
            counts[elimination.cause] += 1
        return counts


class EpisodeCloser:
    """Evaluates an episode close against one snapshot.

    Triggers run in a fixed order per league: vote cascade, miss threshold,
    no options left. The first trigger that fires decides a player's cause;
    later triggers only see players still active.
    """

    def __init__(
        self,
        snapshot: SeasonSnapshot,
        max_consecutive_misses: int = MAX_CONSECUTIVE_MISSES,
    ):
        self.snapshot = snapshot
        self.max_consecutive_misses = max_consecutive_misses

    def close_episode(
        self,
        episode_id: str,
        voted_out_ids: Iterable[str],
        now: Optional[datetime] = None,
    ) -> EpisodeCloseResult:
        """Compute every player elimination caused by closing an episode.

        Args:
            episode_id: Episode being closed.
            voted_out_ids: Contestants voted out in that episode.
            now: Evaluation time for the lock check (defaults to UTC now).

        Returns:
            The close decision; the snapshot itself is left untouched.

        Raises:
            EpisodeCloseError: If the episode is unknown, already complete,
                still open for picks, or the vote-out list is empty or
                names an unknown or already eliminated contestant.
        """
        episode = self._validate_episode(episode_id, now)
        voted_out = self._validate_voted_out(voted_out_ids)

        remaining = [
            replace(c, is_eliminated=True, eliminated_at_episode=episode.number)
            if c.id in voted_out
            else c
            for c in self.snapshot.contestants
        ]

        eliminations: List[PlayerElimination] = []
        for league_id in self._league_ids():
            eliminations.extend(
                self._close_league(league_id, episode, voted_out, remaining)
            )

        result = EpisodeCloseResult(
            episode_id=episode.id,
            episode_number=episode.number,
            voted_out=voted_out,
            eliminations=tuple(eliminations),
        )

        counts = result.count_by_cause()
        logger.info(
            "Closed episode %d: %d contestant(s) out, %d player(s) eliminated "
            "(vote=%d, misses=%d, no_options=%d)",
            episode.number,
            len(voted_out),
            len(eliminations),
            counts[EliminationCause.VOTED_OUT_PICK],
            counts[EliminationCause.MISSED_PICKS],
            counts[EliminationCause.NO_OPTIONS_LEFT],
        )
        return result

    def _validate_episode(self, episode_id: str, now: Optional[datetime]) -> Episode:
        episode = self.snapshot.episode_by_id(episode_id)
        if episode is None:
            raise EpisodeCloseError(f"Episode {episode_id} not found")
        if episode.is_complete:
            raise EpisodeCloseError(f"Episode {episode.number} is already complete")
        if not is_locked(episode.air_time, now):
            raise EpisodeCloseError(
                f"Cannot close episode {episode.number} before picks lock"
            )
        return episode

    def _validate_voted_out(self, voted_out_ids: Iterable[str]) -> Tuple[str, ...]:
        voted_out = tuple(dict.fromkeys(cid for cid in voted_out_ids if cid))
        if not voted_out:
            raise EpisodeCloseError("Select at least one voted-out contestant")

        for contestant_id in voted_out:
            contestant = self.snapshot.contestant(contestant_id)
            if contestant is None:
                raise EpisodeCloseError(f"Contestant {contestant_id} not found")
            if contestant.is_eliminated:
                raise EpisodeCloseError(
                    f"{contestant.name} is already marked eliminated"
                )
        return voted_out

    def _league_ids(self) -> List[str]:
        ids = {league.id for league in self.snapshot.leagues}
        ids.update(m.league_id for m in self.snapshot.members)
        return sorted(ids)

    def _contestant_pool(
        self, league_id: str, contestants: List[Contestant]
    ) -> List[Contestant]:
        league = self.snapshot.league(league_id)
        if league is None:
            return contestants
        return [c for c in contestants if c.season == league.season]

    def _close_league(
        self,
        league_id: str,
        episode: Episode,
        voted_out: Tuple[str, ...],
        contestants: List[Contestant],
    ) -> List[PlayerElimination]:
        active = {m.player_id for m in self.snapshot.active_members_of(league_id)}
        if not active:
            return []

        league_picks = self.snapshot.picks_of(league_id)
        eliminations: List[PlayerElimination] = []

        def eliminate(player_ids, cause):
            for player_id in sorted(player_ids):
                active.discard(player_id)
                eliminations.append(
                    PlayerElimination(league_id, player_id, episode.number, cause)
                )
                logger.info(
                    "League %s: player %s eliminated at episode %d (%s)",
                    league_id,
                    player_id,
                    episode.number,
                    cause.value,
                )

        # 1. Picked a contestant who was voted out this episode
        voted = cascade_eliminations(voted_out, league_picks, episode.id) & active
        eliminate(voted, EliminationCause.VOTED_OUT_PICK)

        # 2. Missed too many episodes in a row, including this one
        missed = {
            player_id
            for player_id in active
            if should_auto_eliminate(
                [p for p in league_picks if p.player_id == player_id],
                self.snapshot.episodes,
                episode.number + 1,
                self.max_consecutive_misses,
            )
        }
        eliminate(missed, EliminationCause.MISSED_PICKS)

        # 3. Every surviving contestant already used
        pool = self._contestant_pool(league_id, contestants)
        exhausted = {
            player_id
            for player_id in active
            if has_no_options_left(
                [p for p in league_picks if p.player_id == player_id], pool
            )
        }
        eliminate(exhausted, EliminationCause.NO_OPTIONS_LEFT)

        return eliminations


def apply_close(snapshot: SeasonSnapshot, result: EpisodeCloseResult) -> SeasonSnapshot:
    """New snapshot with a close decision applied; the input is not modified."""
    voted_out = set(result.voted_out)
    eliminated = {(e.league_id, e.player_id) for e in result.eliminations}

    episodes = [
        replace(e, is_complete=True) if e.id == result.episode_id else e
        for e in snapshot.episodes
    ]
    contestants = [
        replace(c, is_eliminated=True, eliminated_at_episode=result.episode_number)
        if c.id in voted_out and not c.is_eliminated
        else c
        for c in snapshot.contestants
    ]
    members = [
        _eliminate_member(m, result.episode_number)
        if (m.league_id, m.player_id) in eliminated
        else m
        for m in snapshot.members
    ]
    return replace(
        snapshot, episodes=episodes, contestants=contestants, members=members
    )


def _eliminate_member(member: LeagueMember, episode_number: int) -> LeagueMember:
    if member.is_eliminated:
        return member
    return replace(member, is_eliminated=True, eliminated_at_episode=episode_number)
