"""Vote-based elimination cascade and no-options-left detection."""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from src.rules_engine.season_state import Contestant, Pick


def cascade_eliminations(
    newly_eliminated_contestant_ids: Iterable[str],
    picks_for_episode: Iterable[Pick],
    episode_id: Optional[str] = None,
) -> Set[str]:
    """Players who picked a contestant that was just voted out.

    Args:
        newly_eliminated_contestant_ids: Contestants voted out this episode.
        picks_for_episode: Picks attached to the closing episode, for a
            single league.
        episode_id: If given, picks for any other episode are ignored.

    Returns:
        Distinct player ids to eliminate (empty if nobody picked a loser).
    """
    eliminated = set(newly_eliminated_contestant_ids)
    return {
        pick.player_id
        for pick in picks_for_episode
        if pick.contestant_id in eliminated
        and (episode_id is None or pick.episode_id == episode_id)
    }


def cascade_by_league(
    newly_eliminated_contestant_ids: Iterable[str],
    picks_for_episode: Iterable[Pick],
    episode_id: Optional[str] = None,
) -> Dict[str, Set[str]]:
    """Run the cascade independently for every league present in the picks.

    Leagues only share the contestant pool, so one vote-out can eliminate
    players in any number of leagues.
    """
    picks_by_league: Dict[str, List[Pick]] = defaultdict(list)
    for pick in picks_for_episode:
        picks_by_league[pick.league_id].append(pick)

    eliminated = set(newly_eliminated_contestant_ids)
    result = {}
    for league_id, picks in picks_by_league.items():
        players = cascade_eliminations(eliminated, picks, episode_id)
        if players:
            result[league_id] = players
    return result


def available_contestants(
    contestants: Iterable[Contestant], member_picks: Iterable[Pick]
) -> List[Contestant]:
    """Remaining contestants the player has not used yet this season."""
    used_ids = {p.contestant_id for p in member_picks}
    return [c for c in contestants if not c.is_eliminated and c.id not in used_ids]


def has_no_options_left(
    member_picks: Iterable[Pick], contestants: Iterable[Contestant]
) -> bool:
    """Whether every remaining contestant was already used by the player.

    ``member_picks`` must be the player's whole season history, not just the
    current episode. True when no contestant remains at all.
    """
    return not available_contestants(contestants, member_picks)
