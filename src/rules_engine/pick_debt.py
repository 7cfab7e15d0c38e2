"""Pick debt accrual and miss-based auto-elimination.

A player who skips episodes owes one extra pick for every episode in the
unbroken run of misses immediately before the current one. The same run
length, compared against a threshold, decides miss-based elimination.
"""

import logging
from typing import Iterable

from src.rules_engine.config import MAX_CONSECUTIVE_MISSES
from src.rules_engine.season_state import Episode, Pick

logger = logging.getLogger(__name__)


def consecutive_misses(
    picks: Iterable[Pick],
    episodes: Iterable[Episode],
    current_episode_number: int,
) -> int:
    """Count missed episodes immediately before ``current_episode_number``.

    Args:
        picks: One player's picks (any episodes, any order).
        episodes: The season's episode sequence.
        current_episode_number: Episode being evaluated; it is not itself
            checked.

    Returns:
        Length of the run of pick-less episodes scanning backward from
        ``current_episode_number - 1``, stopping at the first episode with
        at least one pick. Numbers absent from ``episodes`` are skipped.
    """
    picked_episode_ids = {p.episode_id for p in picks}
    episodes_by_number = {e.number: e for e in episodes}

    misses = 0
    for number in range(current_episode_number - 1, 0, -1):
        episode = episodes_by_number.get(number)
        if episode is None:
            logger.debug("No episode numbered %d in snapshot, skipping", number)
            continue
        if episode.id in picked_episode_ids:
            break
        misses += 1

    return misses


def required_picks(
    picks: Iterable[Pick],
    episodes: Iterable[Episode],
    current_episode_number: int,
) -> int:
    """Picks owed this episode: one, plus one per consecutive miss."""
    return 1 + consecutive_misses(picks, episodes, current_episode_number)


def should_auto_eliminate(
    picks: Iterable[Pick],
    episodes: Iterable[Episode],
    current_episode_number: int,
    threshold: int = MAX_CONSECUTIVE_MISSES,
) -> bool:
    """Whether the player's miss streak has reached ``threshold``.

    At episode close, evaluate at ``closed_episode.number + 1`` so the
    just-closed episode counts toward the streak.
    """
    return consecutive_misses(picks, episodes, current_episode_number) >= threshold
