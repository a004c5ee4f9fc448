"""
Recent video entry model.

Defines the RecentEntry dataclass that ties a durable file reference to
its display name and the time it was last watched.
"""

import base64
import binascii
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import UnresolvableReferenceError
from .file_reference import SecureFileReference


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RecentEntry:
    """
    A video in the recent list.

    Attributes:
        file_ref: Durable reference to the video file
        display_name: Name shown in the list (defaults to the file name)
        id: Unique identifier, generated once and never changed
        last_watched: When the video was last opened (UTC)
    """
    file_ref: SecureFileReference
    display_name: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    last_watched: datetime = field(default_factory=_utcnow)

    @classmethod
    def from_path(
        cls,
        path: Union[str, Path],
        name: Optional[str] = None,
        last_watched: Optional[datetime] = None,
    ) -> "RecentEntry":
        """
        Create an entry for a file the user just picked.

        Raises UnsupportedReferenceError if the file cannot be remembered.
        """
        file_ref = SecureFileReference.create(path)
        return cls(
            file_ref=file_ref,
            display_name=name or Path(path).name,
            last_watched=last_watched or _utcnow(),
        )

    def resolved_path(self) -> Optional[Path]:
        """Resolve the reference, or None if the file is gone."""
        try:
            return self.file_ref.resolve().path
        except UnresolvableReferenceError:
            return None

    def matches(self, other: "RecentEntry") -> bool:
        """True if both entries stand for the same recent item (same id or same file)."""
        if self.id == other.id:
            return True
        mine = self.resolved_path()
        return mine is not None and mine == other.resolved_path()

    def touch(self, now: Optional[datetime] = None) -> None:
        """Mark the entry as watched now."""
        self.last_watched = now or _utcnow()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "bookmark_data": base64.b64encode(self.file_ref.bookmark_data).decode("ascii"),
            "name": self.display_name,
            "last_watched_date": self.last_watched.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecentEntry":
        """
        Rebuild an entry from its persisted form.

        Raises ValueError, KeyError or TypeError on malformed data.
        """
        try:
            bookmark = base64.b64decode(data["bookmark_data"], validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid bookmark encoding: {e}") from e

        last_watched = datetime.fromisoformat(data["last_watched_date"])
        if last_watched.tzinfo is None:
            last_watched = last_watched.replace(tzinfo=timezone.utc)

        entry_id = data["id"]
        name = data["name"]
        if not isinstance(entry_id, str) or not entry_id:
            raise ValueError("Entry id must be a non-empty string")
        if not isinstance(name, str):
            raise ValueError("Entry name must be a string")

        return cls(
            file_ref=SecureFileReference(bookmark_data=bookmark),
            display_name=name,
            id=entry_id,
            last_watched=last_watched,
        )
