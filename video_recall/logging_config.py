"""
Logging setup for Video Recall.

Everything logs under the ``video_recall`` namespace. The desktop app calls
``configure_from_settings`` once with the ``logging`` section of the config;
library code and tests just use ``get_logger``. Log files rotate under
~/.video_recall/logs/ unless the config names another file.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAMESPACE = "video_recall"

LOG_DIR = Path.home() / ".video_recall" / "logs"
LOG_FILENAME = "video_recall.log"

MAX_LOG_BYTES = 5 * 1024 * 1024
LOG_BACKUPS = 3

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEBUG_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_logging_initialized = False
_active_log_file: Optional[Path] = None


def get_log_dir() -> Path:
    """Folder holding the active log file, created if necessary."""
    folder = get_log_file_path().parent
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def get_log_file_path() -> Path:
    """The file currently being logged to, or the default location."""
    return _active_log_file or LOG_DIR / LOG_FILENAME


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def _file_handler(path: Path, level: int, debug_mode: bool) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_DEBUG_FORMAT if debug_mode else _FORMAT, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    force: bool = False,
    debug_mode: bool = False,
) -> logging.Logger:
    """
    Configure the ``video_recall`` logger.

    Args:
        level: Log level name; unknown names fall back to INFO
        log_file: Log file path. If None, uses ~/.video_recall/logs/video_recall.log
        console: Also log to stderr
        force: Replace an existing configuration
        debug_mode: Log everything, with line numbers in the file

    Returns:
        The package logger
    """
    global _logging_initialized, _active_log_file

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    if _logging_initialized and not force:
        return package_logger

    log_level = logging.DEBUG if debug_mode else getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(log_level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if console:
        package_logger.addHandler(_console_handler(log_level))

    log_path = Path(log_file).expanduser() if log_file else LOG_DIR / LOG_FILENAME
    package_logger.addHandler(_file_handler(log_path, log_level, debug_mode))

    _active_log_file = log_path
    _logging_initialized = True
    package_logger.debug(f"Logging initialized: level={logging.getLevelName(log_level)}, file={log_path}")
    return package_logger


def configure_from_settings(settings, debug_mode: bool = False) -> logging.Logger:
    """Apply a LoggingConfig section, replacing any earlier setup."""
    return setup_logging(
        level=settings.level,
        log_file=settings.log_file or None,
        console=settings.console,
        force=True,
        debug_mode=debug_mode,
    )


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, setting up defaults on first use."""
    if not _logging_initialized:
        setup_logging()
    return logging.getLogger(name)
