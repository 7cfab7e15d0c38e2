"""Pick submission rule enforcement."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from src.rules_engine.elimination import available_contestants
from src.rules_engine.errors import PickSubmissionError
from src.rules_engine.lock_time import is_locked
from src.rules_engine.pick_debt import required_picks
from src.rules_engine.season_state import Pick, SeasonSnapshot

logger = logging.getLogger(__name__)


class PickValidator:
    """Enforces the rules for a player's picks in one episode.

    A re-submission for the same episode replaces the player's earlier picks
    for that episode, so those contestants are not counted as used.
    """

    def __init__(self, snapshot: SeasonSnapshot):
        self.snapshot = snapshot

    def validate_submission(
        self,
        league_id: str,
        player_id: str,
        episode_id: str,
        contestant_ids: Sequence[str],
        now: Optional[datetime] = None,
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate a set of picks for one episode.

        Returns:
            (is_valid, error_message) - (True, None) if valid
        """
        league = self.snapshot.league(league_id)
        if league is None:
            return False, f"League {league_id} not found"

        member = self.snapshot.member(league_id, player_id)
        if member is None:
            return False, f"Player {player_id} is not a member of {league.name}"
        if member.is_eliminated:
            return False, (
                f"Player {player_id} was eliminated at episode "
                f"{member.eliminated_at_episode}"
            )

        episode = self.snapshot.episode_by_id(episode_id)
        if episode is None:
            return False, f"Episode {episode_id} not found"
        if episode.is_complete:
            return False, f"Episode {episode.number} is already complete"
        if is_locked(episode.air_time, now):
            return False, "Picks are locked for this episode"

        if not contestant_ids:
            return False, "Select at least one contestant"
        if len(set(contestant_ids)) != len(contestant_ids):
            return False, "The same contestant was selected more than once"

        history = [
            p
            for p in self.snapshot.picks_of(league_id, player_id)
            if p.episode_id != episode_id
        ]
        used_ids = {p.contestant_id for p in history}

        for contestant_id in contestant_ids:
            contestant = self.snapshot.contestant(contestant_id)
            if contestant is None or contestant.season != league.season:
                return False, f"Contestant {contestant_id} not found"
            if contestant.is_eliminated:
                return False, f"{contestant.name} has already been voted out"
            if contestant_id in used_ids:
                return False, f"You already used {contestant.name} this season"

        owed = required_picks(history, self.snapshot.episodes, episode.number)
        pool = self.snapshot.contestants_for_season(league.season)
        expected = min(owed, len(available_contestants(pool, history)))
        if len(contestant_ids) != expected:
            return False, (
                f"Select exactly {expected} contestant"
                f"{'s' if expected != 1 else ''} "
                f"(got {len(contestant_ids)})"
            )

        return True, None

    def submit(
        self,
        league_id: str,
        player_id: str,
        episode_id: str,
        contestant_ids: Sequence[str],
        now: Optional[datetime] = None,
    ) -> List[Pick]:
        """Validate a submission and build the Pick records to persist.

        Raises:
            PickSubmissionError: If any pick rule is violated.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        is_valid, error_msg = self.validate_submission(
            league_id, player_id, episode_id, contestant_ids, now
        )
        if not is_valid:
            logger.warning(
                "Rejected picks from %s in league %s: %s",
                player_id,
                league_id,
                error_msg,
            )
            raise PickSubmissionError(error_msg)

        picks = [
            Pick(
                league_id=league_id,
                player_id=player_id,
                episode_id=episode_id,
                contestant_id=contestant_id,
                created_at=now.isoformat(),
            )
            for contestant_id in contestant_ids
        ]
        logger.info(
            "Player %s picked %d contestant(s) for episode %s in league %s",
            player_id,
            len(picks),
            episode_id,
            league_id,
        )
        return picks
