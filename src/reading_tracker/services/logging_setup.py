"""Logging configuration."""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{line} | {message}"


def setup_logger(level: str = "INFO", log_dir: Optional[Path] = None):
    """Configure loguru with a stderr sink and, optionally, a rotating file."""
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=level)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "reading_tracker.log",
            rotation="1 day",
            retention="7 days",
            format=LOG_FORMAT,
            level="DEBUG",
        )

    return logger
