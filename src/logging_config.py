import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from src.rules_engine.config import (
    LOG_BACKUP_COUNT,
    LOG_DIR,
    LOG_FILE_NAME,
    LOG_LEVEL,
    LOG_MAX_BYTES,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_level: str = LOG_LEVEL, log_dir: Optional[Path] = None
) -> Optional[Path]:
    """Attach a rotating file log and a console log to the root logger.

    The file keeps DEBUG detail (skipped episode numbers, every submission);
    the console follows ``log_level``. Calling it again is a no-op; handlers
    attached by anything else (test runners, embedding apps) are left alone.

    Returns:
        Path of the log file, or None if logging was already configured.
    """
    root_logger = logging.getLogger()
    if any(
        isinstance(h, logging.handlers.RotatingFileHandler)
        for h in root_logger.handlers
    ):
        return None

    log_dir = log_dir or LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(logging.DEBUG)

    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
    )
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging to %s (console level=%s)", log_file, log_level
    )
    return log_file
