from datetime import timedelta
from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Snapshot storage
SNAPSHOTS_DIR = PROJECT_ROOT / "data" / "snapshots"

# Picks lock this long after an episode's scheduled air time
PICK_LOCK_GRACE = timedelta(minutes=10)

# Consecutive missed episodes that eliminate a player
MAX_CONSECUTIVE_MISSES = 3

# Season the contestant pool belongs to
DEFAULT_SEASON = 50

# Logging for the command line tools
LOG_DIR = PROJECT_ROOT / "logs"
LOG_FILE_NAME = "pick_survivor.log"
LOG_LEVEL = "INFO"
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3
