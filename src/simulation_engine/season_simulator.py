"""Season simulator - plays bot leagues through episodes using the rules engine.

Usage:
    python -m src.simulation_engine.season_simulator [players] [episodes] [miss_rate] [seed]

Examples:
    python -m src.simulation_engine.season_simulator
    python -m src.simulation_engine.season_simulator 10 5 0.3 42
"""

import logging
import random
import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Iterable, List, Optional

from src.logging_config import setup_logging
from src.rules_engine.config import DEFAULT_SEASON, PICK_LOCK_GRACE
from src.rules_engine.elimination import available_contestants
from src.rules_engine.episode_close import EpisodeCloser, apply_close
from src.rules_engine.pick_debt import required_picks
from src.rules_engine.pick_submission import PickValidator
from src.rules_engine.season_state import (
    Contestant,
    Episode,
    League,
    LeagueMember,
    SeasonSnapshot,
)
from src.rules_engine.snapshot_persistence import SnapshotPersistence
from src.rules_engine.standings import build_standings, find_winner
from src.simulation_engine.config import (
    BOT_NAMES,
    DAYS_BETWEEN_EPISODES,
    DEFAULT_ELIMINATED_PER_EPISODE,
    DEFAULT_EPISODES_TO_SIM,
    DEFAULT_MISS_RATE,
    DEFAULT_PLAYERS,
    DEMO_CONTESTANTS,
    DEMO_EPISODES,
    DEMO_INVITE_CODE,
    DEMO_LEAGUE_ID,
    PICK_LEAD_HOURS,
    TRIBES,
)
from src.simulation_engine.models import EpisodeReport, SimulationReport

logger = logging.getLogger(__name__)


def build_demo_season(
    num_players: int = DEFAULT_PLAYERS,
    num_contestants: int = DEMO_CONTESTANTS,
    num_episodes: int = DEMO_EPISODES,
    season: int = DEFAULT_SEASON,
    first_air_time: Optional[datetime] = None,
) -> SeasonSnapshot:
    """Fresh season: weekly episodes, a full cast and one league of bots."""
    if num_players < 1:
        raise ValueError(f"num_players must be >= 1, got {num_players}")
    if first_air_time is None:
        first_air_time = datetime(2026, 2, 25, 1, 0, tzinfo=timezone.utc)

    episodes = [
        Episode(
            id=f"ep-{n}",
            number=n,
            title=f"Episode {n}",
            air_time=first_air_time + timedelta(days=DAYS_BETWEEN_EPISODES * (n - 1)),
        )
        for n in range(1, num_episodes + 1)
    ]
    contestants = [
        Contestant(
            id=f"c-{i}",
            name=f"Contestant {i}",
            season=season,
            tribe=TRIBES[(i - 1) % len(TRIBES)],
        )
        for i in range(1, num_contestants + 1)
    ]
    league = League(
        id=DEMO_LEAGUE_ID,
        name=f"Season {season} Sim League",
        season=season,
        invite_code=DEMO_INVITE_CODE,
    )
    members = [
        LeagueMember(
            league_id=league.id,
            player_id=f"bot-{i}",
            username=BOT_NAMES[i - 1] if i <= len(BOT_NAMES) else f"Bot {i}",
        )
        for i in range(1, num_players + 1)
    ]
    return SeasonSnapshot(
        episodes=episodes, contestants=contestants, leagues=[league], members=members
    )


class SeasonSimulator:
    """Drives one league through episodes with randomly behaving bots.

    Each week a bot either misses (with probability ``miss_rate``) or submits
    every pick it owes, capped by the contestants it still has available.
    Random contestants are then voted out and the episode is closed.
    """

    def __init__(
        self,
        snapshot: SeasonSnapshot,
        league_id: str = DEMO_LEAGUE_ID,
        miss_rate: float = DEFAULT_MISS_RATE,
        eliminated_per_episode: int = DEFAULT_ELIMINATED_PER_EPISODE,
        seed: Optional[int] = None,
        force_pick_player_ids: Iterable[str] = (),
    ):
        if not 0.0 <= miss_rate <= 1.0:
            raise ValueError(f"miss_rate must be in [0, 1], got {miss_rate}")
        if snapshot.league(league_id) is None:
            raise ValueError(f"League {league_id} not in snapshot")

        self.snapshot = snapshot
        self.league_id = league_id
        self.miss_rate = miss_rate
        self.eliminated_per_episode = eliminated_per_episode
        self.force_pick_player_ids = set(force_pick_player_ids)
        self.rng = random.Random(seed)

    def seed_picks(self, episode: Episode, report: EpisodeReport):
        """Have every active bot pick (or skip) for ``episode``."""
        league = self.snapshot.league(self.league_id)
        pool = self.snapshot.contestants_for_season(league.season)
        validator = PickValidator(self.snapshot)
        submit_at = episode.air_time - timedelta(hours=PICK_LEAD_HOURS)

        new_picks = []
        for member in self.snapshot.active_members_of(self.league_id):
            player_id = member.player_id
            must_pick = player_id in self.force_pick_player_ids
            if not must_pick and self.rng.random() < self.miss_rate:
                report.missed.append(player_id)
                continue

            history = [
                p
                for p in self.snapshot.picks_of(self.league_id, player_id)
                if p.episode_id != episode.id
            ]
            owed = required_picks(history, self.snapshot.episodes, episode.number)
            available = available_contestants(pool, history)
            if not available:
                report.missed.append(player_id)
                continue

            chosen = self.rng.sample(available, min(owed, len(available)))
            new_picks.extend(
                validator.submit(
                    self.league_id,
                    player_id,
                    episode.id,
                    [c.id for c in chosen],
                    now=submit_at,
                )
            )
            report.picked.append(player_id)
            report.required[player_id] = owed

        resubmitted = set(report.picked)
        kept = [
            p
            for p in self.snapshot.picks
            if not (
                p.league_id == self.league_id
                and p.episode_id == episode.id
                and p.player_id in resubmitted
            )
        ]
        self.snapshot = replace(self.snapshot, picks=kept + new_picks)

    def advance(self, episode: Episode, report: EpisodeReport):
        """Vote out random survivors and close ``episode``."""
        league = self.snapshot.league(self.league_id)
        remaining = [
            c
            for c in self.snapshot.contestants_for_season(league.season)
            if not c.is_eliminated
        ]
        voted_out = self.rng.sample(
            remaining, min(self.eliminated_per_episode, len(remaining))
        )
        close_at = episode.air_time + PICK_LOCK_GRACE

        result = EpisodeCloser(self.snapshot).close_episode(
            episode.id, [c.id for c in voted_out], now=close_at
        )
        self.snapshot = apply_close(self.snapshot, result)

        report.voted_out = sorted(c.name for c in voted_out)
        report.eliminations = [
            e for e in result.eliminations if e.league_id == self.league_id
        ]

    def run(self, episodes: int = DEFAULT_EPISODES_TO_SIM) -> SimulationReport:
        """Simulate up to ``episodes`` episodes.

        Stops early when the season runs out of episodes or contestants, or
        when at most one player is left standing.
        """
        reports: List[EpisodeReport] = []

        for _ in range(episodes):
            episode = self.snapshot.current_episode()
            if episode is None:
                logger.info("Season complete, no episodes left to simulate")
                break
            if not any(not c.is_eliminated for c in self.snapshot.contestants):
                logger.info("No contestants left, stopping")
                break
            if len(self.snapshot.active_members_of(self.league_id)) <= 1:
                logger.info("One or fewer players left, stopping")
                break

            report = EpisodeReport(episode_number=episode.number)
            self.seed_picks(episode, report)
            self.advance(episode, report)
            reports.append(report)

            logger.info(
                "Episode %d: %d picked, %d missed, out: %s, eliminated: %d",
                episode.number,
                len(report.picked),
                len(report.missed),
                ", ".join(report.voted_out),
                len(report.eliminations),
            )

        winner = find_winner(self.snapshot, self.league_id)
        return SimulationReport(
            episodes=reports,
            final_snapshot=self.snapshot,
            winner=winner.player_id if winner else None,
        )


if __name__ == "__main__":
    setup_logging()

    players = int(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_PLAYERS
    episodes = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_EPISODES_TO_SIM
    miss_rate = float(sys.argv[3]) if len(sys.argv) > 3 else DEFAULT_MISS_RATE
    seed = int(sys.argv[4]) if len(sys.argv) > 4 else None

    try:
        simulator = SeasonSimulator(
            build_demo_season(num_players=players), miss_rate=miss_rate, seed=seed
        )
        report = simulator.run(episodes)
        path = SnapshotPersistence().save_snapshot(report.final_snapshot, "simulation")
    except Exception:
        logger.exception("Simulation failed")
        sys.exit(1)

    for row in build_standings(report.final_snapshot, DEMO_LEAGUE_ID):
        status = (
            f"out (ep {row.eliminated_at_episode})" if row.is_eliminated else "alive"
        )
        print(
            f"{row.username or row.player_id:<20} {status:<12} "
            f"picks={row.picks_used:<3} options={row.available_contestants}"
        )
    if report.winner:
        print(f"Winner: {report.winner}")
    print(f"Snapshot saved: {path}")
