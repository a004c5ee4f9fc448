"""
Key-value persistence backends.

The recent list never talks to the filesystem directly; it is handed a
KeyValueStore. JsonFileStore keeps every key in one JSON document in the
user's app directory, MemoryStore keeps them in a dict.
"""

import base64
import binascii
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from .config import Config
from .errors import StoreError

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Minimal byte-oriented key-value store."""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under key, or None."""

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""


class MemoryStore(KeyValueStore):
    """In-memory store for tests and sessions that should not persist."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class JsonFileStore(KeyValueStore):
    """
    Store backed by a single JSON file.

    Values are kept as base64 text. Every write replaces the file atomically.
    """

    VERSION = 1

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def get(self, key: str) -> Optional[bytes]:
        encoded = self._read().get(key)
        if encoded is None:
            return None
        try:
            return base64.b64decode(encoded, validate=True)
        except (binascii.Error, TypeError) as e:
            raise StoreError(f"Corrupt value for '{key}' in {self.path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        data = self._read_for_update()
        data[key] = base64.b64encode(value).decode("ascii")
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read_for_update()
        if data.pop(key, None) is not None:
            self._write(data)

    def _read(self) -> Dict[str, str]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(document, dict) or not isinstance(document.get("values"), dict):
            raise StoreError(f"Unexpected layout in {self.path}")
        version = document.get("version", 1)
        if isinstance(version, int) and version > self.VERSION:
            logger.warning(f"Store file version {version} is newer than supported {self.VERSION}")
        return document["values"]

    def _read_for_update(self) -> Dict[str, str]:
        # A corrupt document is replaced rather than blocking writes
        try:
            return dict(self._read())
        except StoreError as e:
            logger.warning(f"Discarding unreadable store: {e}")
            return {}

    def _write(self, values: Dict[str, str]) -> None:
        document = {"version": self.VERSION, "values": values}
        text = json.dumps(document, indent=2, sort_keys=True) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", dir=self.path.parent)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

        logger.debug(f"Wrote {len(values)} keys to {self.path}")


def create_store(config: Config) -> KeyValueStore:
    """Build the store backend named in the configuration."""
    backend = config.store.backend.lower()
    if backend == "memory":
        logger.info("Recent videos will not persist (memory store)")
        return MemoryStore()
    if backend != "json":
        logger.warning(f"Unknown store backend '{config.store.backend}', using json")
    return JsonFileStore(config.store.resolved_path())
