"""CSV ingestion for datastore table exports.

Handles the quirks of exported tables:
- Booleans spelled as true/false, t/f or 1/0
- Blank cells for nullable episode numbers
- ISO timestamps with or without a UTC offset
- Blank trailing rows
"""

import logging
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import (
    FALSE_VALUES,
    FILE_PATTERNS,
    REQUIRED_COLUMNS,
    TRUE_VALUES,
)

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when CSV ingestion fails."""


def _parse_bool(value) -> bool:
    """Parse an exported boolean cell ('t' -> True, '' -> False)."""
    if pd.isna(value):
        return False
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in TRUE_VALUES:
        return True
    if s in FALSE_VALUES:
        return False
    raise ValueError(f"Not a boolean value: {value!r}")


class SnapshotIngester:
    """Reads datastore CSV exports into typed pandas DataFrames.

    Every read method returns a DataFrame with:
    - String columns stripped, blank cells as missing values
    - Boolean flags parsed to bool
    - Episode numbers as nullable integers
    - Timestamps parsed to UTC
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _resolve_path(self, file_key: str) -> Path:
        """Build the full file path for a given file key, raising if missing."""
        filepath = self.data_dir / FILE_PATTERNS[file_key]
        if not filepath.exists():
            raise FileNotFoundError(f"Expected file not found: {filepath}")
        return filepath

    def _read(self, file_key: str) -> pd.DataFrame:
        filepath = self._resolve_path(file_key)
        logger.info("Reading %s: %s", file_key, filepath.name)

        df = pd.read_csv(filepath, dtype=str, keep_default_na=False)
        df.columns = [c.strip() for c in df.columns]

        missing = [c for c in REQUIRED_COLUMNS[file_key] if c not in df.columns]
        if missing:
            raise ValueError(f"{filepath.name} is missing columns: {missing}")

        for col in df.columns:
            df[col] = df[col].str.strip()
        df = df.mask(df == "")

        # Blank rows have no value in any required column
        df = df.dropna(how="all", subset=REQUIRED_COLUMNS[file_key])
        return df.reset_index(drop=True)

    def read_episodes(self) -> pd.DataFrame:
        """Columns: id, number, title, air_date, is_complete."""
        df = self._read("episodes")
        df["number"] = pd.to_numeric(df["number"]).astype("Int64")
        df["air_date"] = pd.to_datetime(df["air_date"], utc=True, format="ISO8601")
        df["is_complete"] = df["is_complete"].apply(_parse_bool)
        df = df.sort_values("number").reset_index(drop=True)
        logger.info("Loaded %d episodes", len(df))
        return df

    def read_contestants(self) -> pd.DataFrame:
        """Columns: id, name, season, tribe, is_eliminated, eliminated_at_episode."""
        df = self._read("contestants")
        df["season"] = pd.to_numeric(df["season"]).astype("Int64")
        df["is_eliminated"] = df["is_eliminated"].apply(_parse_bool)
        df["eliminated_at_episode"] = pd.to_numeric(
            df["eliminated_at_episode"]
        ).astype("Int64")
        logger.info(
            "Loaded %d contestants (%d eliminated)",
            len(df),
            int(df["is_eliminated"].sum()),
        )
        return df

    def read_leagues(self) -> pd.DataFrame:
        """Columns: id, name, season, invite_code, host_id."""
        df = self._read("leagues")
        df["season"] = pd.to_numeric(df["season"]).astype("Int64")
        logger.info("Loaded %d leagues", len(df))
        return df

    def read_members(self) -> pd.DataFrame:
        """Columns: league_id, user_id, username, is_eliminated, eliminated_at_episode."""
        df = self._read("members")
        df["is_eliminated"] = df["is_eliminated"].apply(_parse_bool)
        df["eliminated_at_episode"] = pd.to_numeric(
            df["eliminated_at_episode"]
        ).astype("Int64")
        logger.info("Loaded %d league members", len(df))
        return df

    def read_picks(self) -> pd.DataFrame:
        """Columns: id, league_id, user_id, episode_id, contestant_id, created_at."""
        df = self._read("picks")
        logger.info("Loaded %d picks", len(df))
        return df

    def read_all(self) -> dict[str, pd.DataFrame]:
        """Read all five table exports.

        Returns:
            dict with keys: 'episodes', 'contestants', 'leagues', 'members', 'picks'

        Raises:
            IngestionError: if any file cannot be read.
        """
        try:
            return {
                "episodes": self.read_episodes(),
                "contestants": self.read_contestants(),
                "leagues": self.read_leagues(),
                "members": self.read_members(),
                "picks": self.read_picks(),
            }
        except Exception as e:
            raise IngestionError(f"Failed to read CSV files: {e}") from e
