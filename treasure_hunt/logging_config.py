"""Logging setup: console and rotating-file handlers driven by Config."""

from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from pathlib import Path
from typing import Any, Optional

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(parent_file)s:%(lineno)-3d | %(message)s"
DEFAULT_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ShortPathFilter(logging.Filter):
    """Attach `parent_file` = '<parent>/<filename>' to log records."""

    def filter(self, record) -> bool:
        parent = os.path.basename(os.path.dirname(record.pathname))
        filename = os.path.basename(record.pathname)
        record.parent_file = f"{parent}/{filename}"
        return True


def _file_handler(level: int, log_dir: str | Path, log_filename: str | Path, max_bytes: int, backup_count: int) -> dict[str, Any]:
    os.makedirs(log_dir, exist_ok=True)
    return {
        "class": "logging.handlers.RotatingFileHandler",
        "formatter": "default",
        "level": level,
        "filename": os.path.join(log_dir, Path(log_filename).with_suffix(".log")),
        "maxBytes": max_bytes,
        "backupCount": backup_count,
        "encoding": "utf-8",
        "filters": ["short_path"],
    }


def configure_logging(
    *,
    logger_name: str,
    level: int = logging.INFO,
    log_format: str = DEFAULT_LOG_FORMAT,
    datefmt: str = DEFAULT_LOG_DATEFMT,
    log_dir: str | Path = "logs",
    log_filename: Optional[str | Path] = None,
    max_bytes: int = 1 * 1024 * 1024,
    backup_count: int = 5,
    in_terminal: bool = True,
) -> logging.Logger:
    """
    Install root handlers through dictConfig and return the named logger.
    The file handler is only attached when *log_filename* is given.
    """
    handlers: dict[str, dict[str, Any]] = {}
    if in_terminal:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": level,
            "filters": ["short_path"],
        }
    if log_filename:
        handlers["file"] = _file_handler(level, log_dir, log_filename, max_bytes, backup_count)

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"short_path": {"()": ShortPathFilter}},
            "formatters": {"default": {"format": log_format, "datefmt": datefmt}},
            "handlers": handlers,
            "root": {"handlers": list(handlers), "level": level},
        }
    )

    logger = logging.getLogger(logger_name)
    logger.setLevel(level)
    logger.debug(
        "Logging configured: level=%s handlers=%s",
        logging.getLevelName(level),
        ",".join(handlers) or "none",
    )
    return logger


def configure_logging_from_config(config) -> logging.Logger:
    """Configure logging from a Config class (see treasure_hunt.config)."""
    level_name = str(config.LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)

    return configure_logging(
        logger_name="treasure_hunt",
        level=level,
        log_format=config.LOG_FORMAT,
        datefmt=config.LOG_DATEFMT,
        log_dir=config.LOG_DIR,
        log_filename=config.LOG_FILE if config.LOG_TO_FILE else None,
        max_bytes=int(config.LOG_MAX_BYTES),
        backup_count=int(config.LOG_BACKUP_COUNT),
        in_terminal=config.LOG_TO_CONSOLE,
    )


__all__ = ["configure_logging", "configure_logging_from_config", "ShortPathFilter"]
