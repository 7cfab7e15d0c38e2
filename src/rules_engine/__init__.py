from src.rules_engine.elimination import (
    available_contestants,
    cascade_by_league,
    cascade_eliminations,
    has_no_options_left,
)
from src.rules_engine.episode_close import (
    EliminationCause,
    EpisodeCloser,
    EpisodeCloseResult,
    PlayerElimination,
    apply_close,
)
from src.rules_engine.errors import (
    EpisodeCloseError,
    PickSubmissionError,
    RulesEngineError,
)
from src.rules_engine.lock_time import is_locked, lock_time, time_until_lock
from src.rules_engine.pick_debt import (
    consecutive_misses,
    required_picks,
    should_auto_eliminate,
)
from src.rules_engine.pick_submission import PickValidator
from src.rules_engine.season_state import (
    Contestant,
    Episode,
    League,
    LeagueMember,
    Pick,
    SeasonSnapshot,
    current_episode,
)
from src.rules_engine.snapshot_persistence import SnapshotPersistence
from src.rules_engine.standings import StandingRow, build_standings, find_winner

__all__ = [
    "Contestant",
    "EliminationCause",
    "Episode",
    "EpisodeCloseError",
    "EpisodeCloseResult",
    "EpisodeCloser",
    "League",
    "LeagueMember",
    "Pick",
    "PickSubmissionError",
    "PickValidator",
    "PlayerElimination",
    "RulesEngineError",
    "SeasonSnapshot",
    "SnapshotPersistence",
    "StandingRow",
    "apply_close",
    "available_contestants",
    "build_standings",
    "cascade_by_league",
    "cascade_eliminations",
    "consecutive_misses",
    "current_episode",
    "find_winner",
    "has_no_options_left",
    "is_locked",
    "lock_time",
    "required_picks",
    "should_auto_eliminate",
    "time_until_lock",
]
