"""
Logging configuration for the Weather Monitor API.

Console output always; rotating log files when LOG_TO_FILE is set. The
format is verbose under DEBUG and pipe-separated otherwise so production
logs stay easy to grep.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from weather_monitor.config import settings

DEBUG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
PRODUCTION_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_BACKUPS = 5

# Libraries that log every request or statement at INFO
NOISY_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore")


def _file_handler(path: Path, level: int, formatter: logging.Formatter) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> logging.Logger:
    """
    Configure the root logger.

    Safe to call more than once; existing root handlers are replaced.

    Returns:
        The root logger
    """
    root = logging.getLogger()
    root.setLevel(settings.LOG_LEVEL)
    root.handlers.clear()

    formatter = logging.Formatter(
        fmt=DEBUG_FORMAT if settings.DEBUG else PRODUCTION_FORMAT,
        datefmt=DATE_FORMAT,
    )

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
    console.setFormatter(formatter)
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        root.addHandler(_file_handler(log_dir / "weather_monitor.log", logging.INFO, formatter))
        root.addHandler(_file_handler(log_dir / "weather_monitor_errors.log", logging.ERROR, formatter))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root.info(
        f"Logging initialized (level={settings.LOG_LEVEL}, debug={settings.DEBUG}, "
        f"files={'on' if settings.LOG_TO_FILE else 'off'})"
    )
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger; pass __name__."""
    return logging.getLogger(name)
