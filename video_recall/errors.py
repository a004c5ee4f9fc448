"""
Exception taxonomy for the recent-videos subsystem.

None of these are fatal: callers degrade to "remember less" instead of
blocking playback.
"""


class FileReferenceError(Exception):
    """Base class for durable file reference failures."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class UnsupportedReferenceError(FileReferenceError):
    """A durable reference cannot be minted for this path."""


class UnresolvableReferenceError(FileReferenceError):
    """A previously minted reference no longer points to a usable file."""


class StoreError(Exception):
    """Persisted state could not be read or written."""


class SerializationFailedError(StoreError):
    """The recent list could not be encoded or decoded."""
