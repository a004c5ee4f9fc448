"""
Glue between the recent videos list and the player.

The controller owns no list state of its own: after each action it keeps
whatever RecentStore returned, and the window re-renders from ``entries``.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .errors import FileReferenceError, UnresolvableReferenceError, UnsupportedReferenceError
from .recent_entry import RecentEntry
from .recent_store import RecentStore

logger = logging.getLogger(__name__)


class RecentVideosController:
    """
    Opens videos and keeps the recent list in sync.

    ``player`` is any object with ``open_file(path)`` and ``play(rate)``,
    normally ui.player.VideoPlayerWidget.
    """

    def __init__(self, store: RecentStore, player, default_rate: float = 1.0, autoplay: bool = True):
        self.store = store
        self.player = player
        self.default_rate = default_rate
        self.autoplay = autoplay
        self.last_error: Optional[FileReferenceError] = None
        self._entries: List[RecentEntry] = store.load()

    @property
    def entries(self) -> List[RecentEntry]:
        return list(self._entries)

    def refresh(self) -> List[RecentEntry]:
        """Re-read the list from the store."""
        self._entries = self.store.load()
        return self.entries

    def open_path(self, path: Union[str, Path]) -> bool:
        """
        Play a newly picked file and remember it.

        Returns False if the file plays but could not be remembered.
        """
        self.last_error = None
        remembered = True
        try:
            entry = RecentEntry.from_path(path)
        except UnsupportedReferenceError as e:
            logger.error(f"Cannot remember {path}: {e}")
            self.last_error = e
            remembered = False
        else:
            self._entries = self.store.add_or_promote(entry)

        self._start(Path(path))
        return remembered

    def open_recent(self, index: int) -> Optional[Path]:
        """Play the entry at index. Returns the resolved path, or None."""
        self.last_error = None
        if not 0 <= index < len(self._entries):
            return None

        entry = self._entries[index]
        try:
            resolved = entry.file_ref.resolve()
        except UnresolvableReferenceError as e:
            logger.warning(f"Recent video '{entry.display_name}' is no longer available: {e}")
            self.last_error = e
            self.refresh()
            return None

        self._entries = self.store.add_or_promote(entry)
        self._start(resolved.path)
        return resolved.path

    def delete_recent(self, index: int) -> List[RecentEntry]:
        self._entries = self.store.remove(self._entries, index)
        return self.entries

    def clear_recent(self) -> List[RecentEntry]:
        self._entries = self.store.clear()
        return self.entries

    def _start(self, path: Path) -> None:
        logger.info(f"Opening {path}")
        self.player.open_file(str(path))
        if self.autoplay:
            self.player.play(self.default_rate)
