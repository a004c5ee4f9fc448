"""
Video Recall
============

A small desktop video player that remembers the videos you opened.

Recently watched files are kept as durable file references so they can be
reopened after the app restarts, even if they were renamed in place.
"""

__version__ = "0.1.0"
__author__ = "Video Recall"

# Export key classes for convenience
from .errors import (
    FileReferenceError,
    UnsupportedReferenceError,
    UnresolvableReferenceError,
    StoreError,
    SerializationFailedError,
)
from .file_reference import SecureFileReference, ResolvedReference
from .recent_entry import RecentEntry
from .recent_store import RecentStore
from .stores import KeyValueStore, MemoryStore, JsonFileStore
