"""Logging configuration for LifeFlow.

Everything logs through the "lifeflow" logger. LOG_LEVEL sets the threshold
and LOG_TO_FILE=false skips the dated file in LOG_DIR (useful in containers,
where stdout is collected instead).
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import LOG_DIR, LOG_LEVEL, LOG_TO_FILE

LOGGER_NAME = "lifeflow"
FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"


def _resolve_level(level: str) -> int:
    resolved = logging.getLevelName(level)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: str = LOG_LEVEL,
    log_dir: Optional[Path] = LOG_DIR if LOG_TO_FILE else None,
    console: Optional[bool] = None,
) -> logging.Logger:
    """Set up the application logger.

    Args:
        level: Level name such as "DEBUG" or "INFO". Unknown names fall back to INFO.
        log_dir: Directory for the dated log file, or None for no file.
        console: Log to stdout. Defaults to only when attached to a terminal.

    Returns:
        The configured "lifeflow" logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(_resolve_level(level))
    logger.handlers.clear()

    if log_dir is not None:
        log_file = log_dir / f"{datetime.now().strftime('%Y-%m-%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)

    if console is None:
        console = sys.stdout is not None and sys.stdout.isatty()
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%H:%M:%S"))
        logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logging()
