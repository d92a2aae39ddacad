"""Logging configuration for Chronicle reminders.

Pollers tick every few seconds, so APScheduler's per-run INFO lines are
dropped; its warnings (e.g. skipped overlapping ticks) still reach the
Chronicle log file.
"""

import logging
import sys
from datetime import datetime

from config import LOG_DIR, LOG_LEVEL


def setup_logging() -> logging.Logger:
    """Set up logging to a dated file and, when interactive, the console."""
    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)

    logger = logging.getLogger("chronicle")
    logger.setLevel(level)
    logger.handlers.clear()

    log_file = LOG_DIR / f"{datetime.now().strftime('%Y-%m-%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    ))
    logger.addHandler(file_handler)

    handlers = [file_handler]

    if sys.stdout is not None and sys.stdout.isatty():
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)
        handlers.append(console_handler)

    scheduler_logger = logging.getLogger("apscheduler")
    scheduler_logger.setLevel(logging.WARNING)
    scheduler_logger.handlers.clear()
    for handler in handlers:
        scheduler_logger.addHandler(handler)

    return logger


# Global logger instance
logger = setup_logging()
