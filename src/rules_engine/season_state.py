"""Season state records - immutable snapshots of one datastore read."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple


def _check_elimination(kind: str, ident: str, is_eliminated: bool, at_episode):
    """Eliminated records carry an episode number, active ones never do."""
    if is_eliminated and at_episode is None:
        raise ValueError(
            f"{kind} {ident} is eliminated but has no eliminated_at_episode"
        )
    if not is_eliminated and at_episode is not None:
        raise ValueError(
            f"{kind} {ident} is active but has eliminated_at_episode={at_episode}"
        )
    if at_episode is not None and at_episode < 1:
        raise ValueError(
            f"{kind} {ident} eliminated_at_episode must be >= 1, got {at_episode}"
        )


@dataclass(frozen=True)
class Episode:
    """A single broadcast episode of the season."""

    id: str
    number: int
    air_time: datetime
    is_complete: bool = False
    title: Optional[str] = None

    def __post_init__(self):
        if self.number < 1:
            raise ValueError(f"Episode number must be >= 1, got {self.number}")
        if self.air_time.tzinfo is None:
            raise ValueError(f"Episode {self.id} air_time must be timezone-aware")


@dataclass(frozen=True)
class Contestant:
    """A cast member players can pick to survive an episode."""

    id: str
    name: str
    season: int
    is_eliminated: bool = False
    eliminated_at_episode: Optional[int] = None
    tribe: Optional[str] = None

    def __post_init__(self):
        _check_elimination(
            "Contestant", self.id, self.is_eliminated, self.eliminated_at_episode
        )


@dataclass(frozen=True)
class LeagueMember:
    """A player's membership (and survival status) in one league."""

    league_id: str
    player_id: str
    is_eliminated: bool = False
    eliminated_at_episode: Optional[int] = None
    username: Optional[str] = None

    def __post_init__(self):
        _check_elimination(
            "Player", self.player_id, self.is_eliminated, self.eliminated_at_episode
        )


@dataclass(frozen=True)
class Pick:
    """A player's pick of one contestant, attached to one episode."""

    league_id: str
    player_id: str
    episode_id: str
    contestant_id: str
    id: Optional[str] = None
    created_at: Optional[str] = None


@dataclass(frozen=True)
class League:
    """A group of players sharing one contestant pool and episode sequence."""

    id: str
    name: str
    season: int
    invite_code: Optional[str] = None
    host_id: Optional[str] = None


def current_episode(episodes: Iterable[Episode]) -> Optional[Episode]:
    """Lowest-numbered episode that is not yet complete (None once the season ends)."""
    pending = [e for e in episodes if not e.is_complete]
    if not pending:
        return None
    return min(pending, key=lambda e: e.number)


@dataclass(frozen=True)
class SeasonSnapshot:
    """One consistent read of every table the engine needs.

    Collections are stored as tuples. Lookup indexes are built once at
    construction, which also validates that no player uses the same
    contestant twice within a league.
    """

    episodes: Tuple[Episode, ...] = ()
    contestants: Tuple[Contestant, ...] = ()
    leagues: Tuple[League, ...] = ()
    members: Tuple[LeagueMember, ...] = ()
    picks: Tuple[Pick, ...] = ()

    _episodes_by_id: Dict[str, Episode] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    _episodes_by_number: Dict[int, Episode] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    _contestants_by_id: Dict[str, Contestant] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        for name in ("episodes", "contestants", "leagues", "members", "picks"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

        for episode in self.episodes:
            if episode.number in self._episodes_by_number:
                raise ValueError(f"Duplicate episode number {episode.number}")
            self._episodes_by_number[episode.number] = episode
            self._episodes_by_id[episode.id] = episode

        for contestant in self.contestants:
            self._contestants_by_id[contestant.id] = contestant

        used = set()
        for pick in self.picks:
            key = (pick.league_id, pick.player_id, pick.contestant_id)
            if key in used:
                raise ValueError(
                    f"Player {pick.player_id} used contestant "
                    f"{pick.contestant_id} more than once in league {pick.league_id}"
                )
            used.add(key)

    def episode_by_id(self, episode_id: str) -> Optional[Episode]:
        return self._episodes_by_id.get(episode_id)

    def episode_by_number(self, number: int) -> Optional[Episode]:
        return self._episodes_by_number.get(number)

    def contestant(self, contestant_id: str) -> Optional[Contestant]:
        return self._contestants_by_id.get(contestant_id)

    def league(self, league_id: str) -> Optional[League]:
        for league in self.leagues:
            if league.id == league_id:
                return league
        return None

    def member(self, league_id: str, player_id: str) -> Optional[LeagueMember]:
        for member in self.members:
            if member.league_id == league_id and member.player_id == player_id:
                return member
        return None

    def members_of(self, league_id: str) -> List[LeagueMember]:
        return [m for m in self.members if m.league_id == league_id]

    def active_members_of(self, league_id: str) -> List[LeagueMember]:
        return [m for m in self.members_of(league_id) if not m.is_eliminated]

    def picks_of(self, league_id: str, player_id: Optional[str] = None) -> List[Pick]:
        """Picks in a league, optionally narrowed to one player."""
        return [
            p
            for p in self.picks
            if p.league_id == league_id
            and (player_id is None or p.player_id == player_id)
        ]

    def contestants_for_season(self, season: int) -> List[Contestant]:
        return [c for c in self.contestants if c.season == season]

    def current_episode(self) -> Optional[Episode]:
        return current_episode(self.episodes)
