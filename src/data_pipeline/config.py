from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Datastore table exports, one CSV per table
FILE_PATTERNS = {
    "episodes": "episodes.csv",
    "contestants": "contestants.csv",
    "leagues": "leagues.csv",
    "members": "league_members.csv",
    "picks": "picks.csv",
}

# Columns each export must carry (extra columns are ignored)
REQUIRED_COLUMNS = {
    "episodes": ["id", "number", "air_date", "is_complete"],
    "contestants": ["id", "name", "season", "is_eliminated", "eliminated_at_episode"],
    "leagues": ["id", "name", "season"],
    "members": ["league_id", "user_id", "is_eliminated", "eliminated_at_episode"],
    "picks": ["league_id", "user_id", "episode_id", "contestant_id"],
}

# Spellings accepted for boolean columns
TRUE_VALUES = {"true", "t", "1", "yes", "y"}
FALSE_VALUES = {"false", "f", "0", "no", "n", ""}
