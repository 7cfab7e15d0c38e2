"""Data models for the season simulator."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from src.rules_engine.episode_close import PlayerElimination
from src.rules_engine.season_state import SeasonSnapshot


@dataclass
class EpisodeReport:
    """What happened to the league in one simulated episode."""

    episode_number: int
    picked: List[str] = field(default_factory=list)
    missed: List[str] = field(default_factory=list)
    required: Dict[str, int] = field(default_factory=dict)  # player_id -> picks owed
    voted_out: List[str] = field(default_factory=list)  # contestant names
    eliminations: List[PlayerElimination] = field(default_factory=list)


@dataclass
class SimulationReport:
    """Result of simulating several episodes."""

    episodes: List[EpisodeReport]
    final_snapshot: SeasonSnapshot
    winner: Optional[str] = None  # player_id of the last player standing
