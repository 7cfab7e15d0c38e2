"""Run the weekly update: close an episode and record the eliminations.

Usage:
    python -m src.data_pipeline.run_weekly <episode_number> <voted_out> [data_dir]

``voted_out`` is a comma-separated list of contestant ids or names.

Examples:
    python -m src.data_pipeline.run_weekly 3 "Coach Wade"
    python -m src.data_pipeline.run_weekly 7 "Q Burdette,Jenna Lewis" /path/to/csvs
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Sequence

from src.data_pipeline.config import PROCESSED_DATA_DIR, RAW_DATA_DIR
from src.data_pipeline.ingestion import SnapshotIngester
from src.data_pipeline.transformation import SnapshotTransformer
from src.logging_config import setup_logging
from src.rules_engine.episode_close import EpisodeCloser, apply_close
from src.rules_engine.errors import EpisodeCloseError
from src.rules_engine.season_state import SeasonSnapshot
from src.rules_engine.snapshot_persistence import SnapshotPersistence

logger = logging.getLogger(__name__)


def resolve_contestants(snapshot: SeasonSnapshot, refs: Sequence[str]) -> List[str]:
    """Map contestant ids or (case-insensitive) names to contestant ids.

    Raises:
        EpisodeCloseError: If a reference matches no contestant, or a name
            matches more than one.
    """
    ids = []
    for ref in refs:
        ref = ref.strip()
        if not ref:
            continue
        if snapshot.contestant(ref) is not None:
            ids.append(ref)
            continue

        matches = [c for c in snapshot.contestants if c.name.lower() == ref.lower()]
        if not matches:
            raise EpisodeCloseError(f"No contestant matches {ref!r}")
        if len(matches) > 1:
            raise EpisodeCloseError(
                f"{ref!r} matches {len(matches)} contestants; use an id instead"
            )
        ids.append(matches[0].id)
    return ids


def run_weekly_update(
    episode_number: int,
    voted_out: Sequence[str],
    data_dir: Optional[Path] = None,
    output_dir: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> Path:
    """Close an episode from CSV exports and write the resulting decisions.

    Args:
        episode_number: Number of the episode being closed.
        voted_out: Contestant ids or names voted out in that episode.
        data_dir: Directory containing the table exports.
            Defaults to ``data/raw``.
        output_dir: Directory for the decision JSON and snapshots.
            Defaults to ``data/processed``.
        now: Evaluation time for the lock check.

    Returns:
        Path to the generated decision file.

    Raises:
        FileNotFoundError: If the data directory doesn't exist.
        EpisodeCloseError: If the episode cannot be closed.
    """
    if data_dir is None:
        data_dir = RAW_DATA_DIR
    if output_dir is None:
        output_dir = PROCESSED_DATA_DIR

    if not data_dir.is_dir():
        raise FileNotFoundError(f"Data directory not found: {data_dir}")

    logger.info("Starting weekly update for episode %d (data: %s)", episode_number, data_dir)

    # 1. Ingest
    logger.info("Step 1/4: Ingesting table exports...")
    frames = SnapshotIngester(data_dir).read_all()

    # 2. Build snapshot
    logger.info("Step 2/4: Building season snapshot...")
    snapshot = SnapshotTransformer().to_snapshot(frames)

    episode = snapshot.episode_by_number(episode_number)
    if episode is None:
        raise EpisodeCloseError(f"Episode {episode_number} not found")

    # 3. Close
    logger.info("Step 3/4: Closing episode %d...", episode_number)
    voted_out_ids = resolve_contestants(snapshot, voted_out)
    result = EpisodeCloser(snapshot).close_episode(episode.id, voted_out_ids, now)

    # 4. Output
    logger.info("Step 4/4: Writing decisions...")
    voted_out_names = sorted(snapshot.contestant(cid).name for cid in result.voted_out)
    by_cause = {cause.value: n for cause, n in result.count_by_cause().items()}

    output_data = {
        "metadata": {
            "version": "1.0",
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "episode_id": result.episode_id,
            "episode_number": result.episode_number,
            "voted_out": voted_out_names,
            "eliminated_players": len(result.eliminations),
            "by_cause": by_cause,
        },
        "contestant_updates": [
            {
                "id": cid,
                "is_eliminated": True,
                "eliminated_at_episode": result.episode_number,
            }
            for cid in result.voted_out
        ],
        "eliminations": [
            {
                "league_id": e.league_id,
                "player_id": e.player_id,
                "eliminated_at_episode": e.episode_number,
                "cause": e.cause.value,
            }
            for e in result.eliminations
        ],
    }

    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / f"weekly_episode_{episode_number}.json"

    with open(output_file, "w") as f:
        json.dump(output_data, f, indent=2)

    # Update latest symlink
    latest_link = output_dir / "weekly_latest.json"
    if latest_link.exists() or latest_link.is_symlink():
        latest_link.unlink()
    latest_link.symlink_to(output_file.name)

    persistence = SnapshotPersistence(storage_dir=output_dir / "snapshots")
    persistence.save_snapshot(apply_close(snapshot, result), f"episode_{episode_number}")

    logger.info("Weekly update complete! Output: %s", output_file)
    logger.info("  Out: %s", ", ".join(voted_out_names))
    logger.info(
        "  Eliminated players: %s",
        ", ".join(f"{k}={v}" for k, v in sorted(by_cause.items())),
    )

    return output_file


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 3:
        print(__doc__)
        sys.exit(2)

    episode_number = int(sys.argv[1])
    voted_out = sys.argv[2].split(",")
    data_dir = Path(sys.argv[3]) if len(sys.argv) > 3 else None

    try:
        output = run_weekly_update(episode_number, voted_out, data_dir)
        print(f"Weekly update complete: {output}")
    except Exception:
        logger.exception("Weekly update failed")
        sys.exit(1)
