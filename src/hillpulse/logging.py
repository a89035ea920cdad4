"""
Logging for hillpulse.

The relay normally runs under a process manager that captures stderr, so a
console handler is always attached. Set LOG_FILE (or logging.file in the
config) to also keep a size-rotated log on disk.

Level and file are looked up in this order: explicit argument, environment
(LOG_LEVEL / LOG_FILE), config, built-in default.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any


LOGGER_NAME = "hillpulse"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
ROTATE_BYTES = 5 * 1024 * 1024
ROTATE_BACKUPS = 3

_logger: Optional[logging.Logger] = None


def resolve_level(config: Optional[Dict[str, Any]] = None, log_level: Optional[str] = None) -> int:
    """Numeric log level; unknown names fall back to INFO."""
    section = (config or {}).get("logging", {})
    name = log_level or os.environ.get("LOG_LEVEL") or section.get("level") or "INFO"
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def resolve_log_file(config: Optional[Dict[str, Any]] = None, log_file: Optional[str] = None) -> Optional[str]:
    """Log file path, or None for console-only logging."""
    section = (config or {}).get("logging", {})
    return log_file or os.environ.get("LOG_FILE") or section.get("file") or None


def _rotating_handler(path: str, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        str(target),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )


def setup_logging(
    config: Optional[Dict[str, Any]] = None,
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
    max_bytes: Optional[int] = None,
    backup_count: Optional[int] = None,
) -> logging.Logger:
    """
    (Re)configure the hillpulse logger.

    Calling it again replaces the previous handlers.

    Args:
        config: Loaded configuration (its "logging" section is read)
        log_file: Log file path, overriding env and config
        log_level: Level name, overriding env and config
        max_bytes: Rotation size for the file handler
        backup_count: Rotated files to keep

    Returns:
        The configured "hillpulse" logger
    """
    global _logger

    level = resolve_level(config, log_level)
    path = resolve_log_file(config, log_file)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    handlers = [logging.StreamHandler()]
    if path:
        try:
            handlers.append(_rotating_handler(
                path,
                max_bytes or ROTATE_BYTES,
                ROTATE_BACKUPS if backup_count is None else backup_count,
            ))
        except OSError as e:
            logger.warning("Log file %s unavailable, console only: %s", path, e)

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _logger = logger
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Return the hillpulse logger, or its child `hillpulse.<name>`.

    Works before setup_logging(): the root hillpulse logger then gets a
    plain stderr handler at INFO.
    """
    global _logger

    if _logger is None:
        logger = logging.getLogger(LOGGER_NAME)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
        _logger = logger

    return _logger.getChild(name) if name else _logger
