"""
Logging setup shared by the services and cogs.

Every ``smashboard.*`` logger gets a console handler at the configured level
and, unless ``LOG_TO_FILE`` is off, a per-day file under ``LOG_DIR`` that
always records DEBUG (skipped rows, multi-winner matches, coercions).
"""

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

from smashboard.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def log_file_path(day: Optional[date] = None, log_dir: Optional[str] = None) -> Path:
    """Path of the daily log file, e.g. ``logs/smashboard_20260101.log``."""
    day = day or date.today()
    return Path(log_dir or Config.LOG_DIR) / f'smashboard_{day.strftime("%Y%m%d")}.log'


def setup_logger(name: str) -> logging.Logger:
    """Return ``name``'s logger, attaching handlers on first use only."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    console_level = logging.DEBUG if Config.DEBUG else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if Config.LOG_TO_FILE:
        path = log_file_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        daily = logging.FileHandler(path, encoding='utf-8')
        daily.setLevel(logging.DEBUG)
        daily.setFormatter(formatter)
        logger.addHandler(daily)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(console_level)

    # Handlers are per module; don't double-print through the root logger
    logger.propagate = False
    return logger
