"""
Friendly error messages for Video Recall.

Maps exceptions from the recent-videos core, the OS and the config loader to
a (title, message) pair the window can show. The window wraps its actions
with ``safe_operation`` so anything unexpected reaches the user as a
UserFriendlyError instead of a traceback.
"""

import traceback
from typing import Callable, Tuple
from functools import wraps

import yaml

from .errors import FileReferenceError, StoreError, UnresolvableReferenceError, UnsupportedReferenceError
from .logging_config import get_logger, get_log_file_path

logger = get_logger(__name__)


class UserFriendlyError(Exception):
    """Exception with a user-friendly title and message"""
    def __init__(self, user_message: str, technical_message: str = None,
                 title: str = "Something went wrong", path: str = ""):
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.title = title
        self.path = path
        super().__init__(self.technical_message)


# Error message mappings, most specific types first
ERROR_MESSAGES = {
    # Recent videos
    UnsupportedReferenceError: lambda e: (
        "Cannot remember this file",
        "The video will play, but it can't be added to Recent Videos.\n\n"
        "This can happen if the file is on a removable or network drive, "
        "or if you don't have permission to read it."
    ),
    UnresolvableReferenceError: lambda e: (
        "Video no longer available",
        "This video could not be found. It may have been moved, renamed or deleted.\n\n"
        "It has been removed from Recent Videos."
    ),
    StoreError: lambda e: (
        "Recent videos could not be saved",
        "Your recent videos list couldn't be written to disk. "
        "It will still work until you quit the app."
    ),

    # File errors
    FileNotFoundError: lambda e: (
        "File not found",
        f"The file could not be found. It may have been moved or deleted.\n\n"
        f"Path: {e.filename if getattr(e, 'filename', None) else 'Unknown'}"
    ),
    PermissionError: lambda e: (
        "Permission denied",
        "Unable to access this file. Please check that you have permission "
        "to read this location."
    ),
    IsADirectoryError: lambda e: (
        "Invalid file",
        "Expected a file but got a folder. Please select a video file."
    ),
    MemoryError: lambda e: (
        "Out of memory",
        "Your computer ran out of memory. Try closing other applications."
    ),

    # Playback errors
    "codec": lambda e: (
        "Playback error",
        "This video can't be played. The format may not be supported, "
        "or the file may be corrupted."
    ),

    # Config errors
    yaml.YAMLError: lambda e: (
        "Settings file error",
        "Your settings file could not be read. Default settings will be used.\n\n"
        f"{str(e)[:200]}"
    ),

    # Disk errors
    OSError: lambda e: (
        "Disk error",
        "Unable to read or write files. Please check that the drive "
        "is connected and has free space."
    ),
}


def get_friendly_message(error: Exception) -> Tuple[str, str]:
    """Get user-friendly title and message for an error"""
    error_str = str(error).lower()

    # Check exact type matches first
    for error_type, msg_func in ERROR_MESSAGES.items():
        if isinstance(error_type, type) and isinstance(error, error_type):
            return msg_func(error)

    # Check string matches in error message (case-insensitive)
    for key, msg_func in ERROR_MESSAGES.items():
        if isinstance(key, str) and key.lower() in error_str:
            return msg_func(error)

    return (
        "Something went wrong",
        f"An unexpected error occurred:\n\n{str(error)[:200]}\n\n"
        "Please try again. If the problem persists, check the log file:\n"
        f"{get_log_file_path()}"
    )


def handle_error(error: Exception, context: str = "") -> Tuple[str, str]:
    """Log error and return friendly message"""
    logger.error(f"Error in {context}: {error}")
    logger.debug(traceback.format_exc())

    return get_friendly_message(error)


def error_path(error: Exception) -> str:
    """The file an error is about, or an empty string."""
    if isinstance(error, (FileReferenceError, UserFriendlyError)):
        return error.path
    if isinstance(error, OSError) and error.filename:
        return str(error.filename)
    return ""


def safe_operation(context: str = "operation"):
    """Decorator for safe error handling"""
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except UserFriendlyError:
                raise  # Already friendly, pass through
            except Exception as e:
                title, message = handle_error(e, context)
                raise UserFriendlyError(message, str(e), title=title, path=error_path(e)) from e
        return wrapper
    return decorator
