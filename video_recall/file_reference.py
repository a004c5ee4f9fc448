"""
Durable file references.

A SecureFileReference is an opaque blob of bytes minted from a file the user
just opened. It can be stored, reloaded in a later process and resolved back
to a usable path. Resolution tolerates files that were renamed inside their
folder or replaced in place; those come back flagged as stale.

The bookmark payload records the absolute path together with the file's
identity (device + inode) and its size/mtime at mint time.
"""

import json
import logging
import os
import stat
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Set, Union

from .errors import UnresolvableReferenceError, UnsupportedReferenceError

logger = logging.getLogger(__name__)

BOOKMARK_VERSION = 1

# Paths this process has been granted access to through resolution.
# Grants last for the session unless released explicitly. Guarded by
# _grants_lock; references may be resolved from any thread.
_session_grants: Set[Path] = set()
_grants_lock = threading.Lock()


@dataclass(frozen=True)
class ResolvedReference:
    """Result of resolving a reference: a usable path and the stale flag."""
    path: Path
    is_stale: bool = False


@dataclass(frozen=True)
class SecureFileReference:
    """
    Opaque, serializable pointer to a file.

    Attributes:
        bookmark_data: Raw bookmark bytes. Callers must treat them as opaque.
    """
    bookmark_data: bytes

    @classmethod
    def create(cls, path: Union[str, Path]) -> "SecureFileReference":
        """
        Mint a reference for a file the caller can currently read.

        Raises:
            UnsupportedReferenceError: if the path is missing, not a regular
                file or not readable.
        """
        try:
            resolved = Path(path).expanduser().resolve(strict=True)
            st = resolved.stat()
        except (OSError, RuntimeError) as e:
            raise UnsupportedReferenceError(f"Cannot access {path}: {e}", str(path)) from e

        if not stat.S_ISREG(st.st_mode):
            raise UnsupportedReferenceError(f"Not a regular file: {resolved}", str(resolved))
        if not os.access(resolved, os.R_OK):
            raise UnsupportedReferenceError(f"Permission denied: {resolved}", str(resolved))

        payload = {
            "version": BOOKMARK_VERSION,
            "path": str(resolved),
            "device": st.st_dev,
            "inode": st.st_ino,
            "size": st.st_size,
            "mtime": st.st_mtime,
        }
        data = json.dumps(payload, sort_keys=True).encode("utf-8")
        logger.debug(f"Minted file reference for {resolved}")
        return cls(bookmark_data=data)

    @property
    def recorded_path(self) -> Optional[Path]:
        """Path stored at mint time, without touching the filesystem."""
        try:
            return Path(self._payload()["path"])
        except UnresolvableReferenceError:
            return None

    def resolve(self) -> ResolvedReference:
        """
        Convert the bookmark back into a usable path.

        Grants this process access to the path for the rest of the session.

        Raises:
            UnresolvableReferenceError: if the file cannot be located or read.
        """
        payload = self._payload()
        recorded = Path(payload["path"])

        try:
            st = recorded.stat()
        except (OSError, ValueError):
            st = None

        if st is not None and stat.S_ISREG(st.st_mode):
            return self._grant(recorded, is_stale=not _same_identity(st, payload))

        moved = _locate_moved(recorded.parent, payload)
        if moved is not None:
            return self._grant(moved, is_stale=True)

        raise UnresolvableReferenceError(f"File no longer available: {recorded}", str(recorded))

    def refreshed(self, resolved: ResolvedReference) -> "SecureFileReference":
        """Mint fresh bytes for a resolved location; keeps self if that fails."""
        try:
            return SecureFileReference.create(resolved.path)
        except UnsupportedReferenceError as e:
            logger.warning(f"Could not refresh stale reference for {resolved.path}: {e}")
            return self

    def _payload(self) -> Dict[str, Any]:
        try:
            payload = json.loads(self.bookmark_data.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise UnresolvableReferenceError(f"Malformed bookmark data: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("path"), str):
            raise UnresolvableReferenceError("Malformed bookmark data: missing path")
        if not payload["path"] or "\x00" in payload["path"]:
            raise UnresolvableReferenceError("Malformed bookmark data: invalid path")
        if payload.get("version") != BOOKMARK_VERSION:
            raise UnresolvableReferenceError(
                f"Unsupported bookmark version: {payload.get('version')!r}"
            )
        return payload

    def _grant(self, path: Path, is_stale: bool) -> ResolvedReference:
        if not os.access(path, os.R_OK):
            raise UnresolvableReferenceError(f"Access to {path} was revoked", str(path))

        with _grants_lock:
            _session_grants.add(path)
        if is_stale:
            logger.warning(f"Reference for {path} is stale, but the file was located")
        return ResolvedReference(path=path, is_stale=is_stale)


def _same_identity(st: os.stat_result, payload: Dict[str, Any]) -> bool:
    inode = payload.get("inode")
    if inode:
        return (st.st_dev, st.st_ino) == (payload.get("device"), inode)
    # Filesystems without stable inodes: fall back to size
    return st.st_size == payload.get("size")


def _locate_moved(folder: Path, payload: Dict[str, Any]) -> Optional[Path]:
    """Look for the original file under a new name in its old folder."""
    if not payload.get("inode"):
        return None

    try:
        with os.scandir(folder) as it:
            for entry in it:
                try:
                    if entry.is_file() and _same_identity(entry.stat(), payload):
                        return Path(entry.path)
                except OSError:
                    continue
    except (OSError, ValueError):
        return None
    return None


def granted_paths() -> FrozenSet[Path]:
    """Paths granted to this process by successful resolutions."""
    with _grants_lock:
        return frozenset(_session_grants)


def release(path: Union[str, Path]) -> bool:
    """Give up a session grant. Returns True if the path was granted."""
    path = Path(path)
    with _grants_lock:
        if path in _session_grants:
            _session_grants.discard(path)
            return True
    return False
