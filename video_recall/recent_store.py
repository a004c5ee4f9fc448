"""
Recent videos persistence.

RecentStore is the single source of truth for the recently watched list.
Every mutation loads the persisted list, changes it and writes it back, and
the fresh list is returned to the caller so the UI never keeps a copy of
its own that could drift.
"""

import json
import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from .config import Config
from .errors import SerializationFailedError, StoreError, UnresolvableReferenceError
from .recent_entry import RecentEntry
from .stores import KeyValueStore

logger = logging.getLogger(__name__)


class RecentStore:
    """
    Loads, saves and maintains the recent videos list.

    The list is ordered most recently watched first, holds at most
    ``max_entries`` items and never contains two entries with the same id.
    Entries whose file can no longer be found are dropped when loading.

    Usage:
        recent = RecentStore(JsonFileStore(path))
        entries = recent.add_or_promote(RecentEntry.from_path(video))
    """

    DEFAULT_KEY = "recentVideos"
    MAX_ENTRIES = 10

    def __init__(
        self,
        store: KeyValueStore,
        key: str = DEFAULT_KEY,
        max_entries: int = MAX_ENTRIES,
        remint_stale: bool = True,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._store = store
        self.key = key
        self.max_entries = max_entries
        self.remint_stale = remint_stale
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        # Reentrant: add_or_promote and remove call load/save while holding it
        self._lock = threading.RLock()

    @classmethod
    def from_config(cls, config: Config, store: KeyValueStore) -> "RecentStore":
        return cls(
            store,
            key=config.recent.store_key,
            max_entries=config.recent.max_entries,
            remint_stale=config.recent.remint_stale,
        )

    def load(self) -> List[RecentEntry]:
        """
        Read the persisted list.

        Never raises: unreadable state is logged and treated as an empty list.
        """
        with self._lock:
            try:
                entries = self._decode()
            except StoreError as e:
                logger.error(f"Failed to decode recent videos, starting fresh: {e}")
                return []
            return self._prune(entries)

    def save(self, entries: Sequence[RecentEntry]) -> None:
        """
        Persist the full list, replacing what was stored before.

        Raises:
            SerializationFailedError: if the list cannot be encoded or written.
        """
        with self._lock:
            try:
                payload = json.dumps(
                    [entry.to_dict() for entry in entries], ensure_ascii=False
                ).encode("utf-8")
            except (TypeError, ValueError, AttributeError) as e:
                raise SerializationFailedError(f"Failed to encode recent videos: {e}") from e

            try:
                self._store.set(self.key, payload)
            except StoreError as e:
                raise SerializationFailedError(f"Failed to write recent videos: {e}") from e

            logger.debug(f"Saved {len(entries)} recent videos")

    def add_or_promote(self, entry: RecentEntry) -> List[RecentEntry]:
        """
        Put a video at the top of the list.

        If the list already holds the same item (same id or same file), that
        entry is moved to the front with a fresh timestamp instead of adding
        a duplicate. The list is then capped and persisted. The returned list
        is authoritative even if persisting failed.
        """
        with self._lock:
            entries = self.load()

            index = next((i for i, e in enumerate(entries) if e.matches(entry)), None)
            if index is not None:
                existing = entries.pop(index)
                existing.touch(self._clock())
                entries.insert(0, existing)
                logger.info(f"Promoted recent video '{existing.display_name}'")
            else:
                entries.insert(0, entry)
                logger.info(f"Added recent video '{entry.display_name}'")

            entries = entries[:self.max_entries]
            self._persist(entries)
            return entries

    def remove(self, entries: Sequence[RecentEntry], index: int) -> List[RecentEntry]:
        """Remove the entry at index and persist. Invalid indices are ignored."""
        with self._lock:
            updated = list(entries)
            if not 0 <= index < len(updated):
                logger.debug(f"Ignoring removal of recent video at index {index}")
                return updated

            removed = updated.pop(index)
            self._persist(updated)
            logger.info(f"Removed recent video '{removed.display_name}'")
            return updated

    def clear(self) -> List[RecentEntry]:
        """Forget every recent video."""
        with self._lock:
            try:
                self._store.delete(self.key)
            except StoreError as e:
                logger.error(f"Failed to clear recent videos: {e}")
            else:
                logger.info("Cleared recent videos")
            return []

    def _decode(self) -> List[RecentEntry]:
        raw = self._store.get(self.key)
        if raw is None:
            return []

        try:
            data = json.loads(raw.decode("utf-8"))
            if not isinstance(data, list):
                raise ValueError(f"expected a list, got {type(data).__name__}")
            return [RecentEntry.from_dict(item) for item in data]
        except (UnicodeDecodeError, ValueError, KeyError, TypeError) as e:
            raise SerializationFailedError(f"Invalid recent videos data: {e}") from e

    def _prune(self, entries: List[RecentEntry]) -> List[RecentEntry]:
        kept: List[RecentEntry] = []
        seen_ids = set()

        for entry in entries:
            if entry.id in seen_ids:
                logger.debug(f"Skipping duplicate recent video id {entry.id}")
                continue
            try:
                resolved = entry.file_ref.resolve()
            except UnresolvableReferenceError as e:
                logger.info(f"Dropping recent video '{entry.display_name}': {e}")
                continue

            if resolved.is_stale and self.remint_stale:
                entry = replace(entry, file_ref=entry.file_ref.refreshed(resolved))

            seen_ids.add(entry.id)
            kept.append(entry)

        return kept[:self.max_entries]

    def _persist(self, entries: List[RecentEntry]) -> None:
        try:
            self.save(entries)
        except SerializationFailedError as e:
            # The in-memory list stays authoritative for this session
            logger.error(f"Recent videos were not saved: {e}")
