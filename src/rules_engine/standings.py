"""League standings and winner detection."""

from dataclasses import dataclass
from typing import List, Optional

from src.rules_engine.elimination import available_contestants
from src.rules_engine.season_state import LeagueMember, SeasonSnapshot


@dataclass(frozen=True)
class StandingRow:
    """One member's line in the league table."""

    player_id: str
    username: Optional[str]
    is_eliminated: bool
    eliminated_at_episode: Optional[int]
    picks_used: int
    available_contestants: int


def _sort_key(row: StandingRow):
    # Active first by options left (desc), then eliminated, most recent first
    if not row.is_eliminated:
        return (0, -row.available_contestants, row.player_id)
    return (1, -(row.eliminated_at_episode or 0), row.player_id)


def build_standings(snapshot: SeasonSnapshot, league_id: str) -> List[StandingRow]:
    """Build the sorted standings table for a league."""
    league = snapshot.league(league_id)
    pool = (
        snapshot.contestants_for_season(league.season)
        if league is not None
        else list(snapshot.contestants)
    )

    rows = []
    for member in snapshot.members_of(league_id):
        member_picks = snapshot.picks_of(league_id, member.player_id)
        rows.append(
            StandingRow(
                player_id=member.player_id,
                username=member.username,
                is_eliminated=member.is_eliminated,
                eliminated_at_episode=member.eliminated_at_episode,
                picks_used=len(member_picks),
                available_contestants=len(available_contestants(pool, member_picks)),
            )
        )

    return sorted(rows, key=_sort_key)


def find_winner(snapshot: SeasonSnapshot, league_id: str) -> Optional[LeagueMember]:
    """The last player standing, or None while two or more survive (or none do)."""
    active = snapshot.active_members_of(league_id)
    return active[0] if len(active) == 1 else None
