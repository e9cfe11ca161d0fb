"""Byte-oriented key-value stores backing the feed cache."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Optional, Protocol

from ..utils.logging import get_logger

logger = get_logger("rssbrief.storage.kv")

_unsafe_key_re = re.compile(r"[^A-Za-z0-9_.-]")


class StorageError(Exception):
    """Raised when a store cannot persist a value (e.g. quota exceeded)."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def set(self, key: str, value: bytes) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """In-process store with an optional total size quota."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self.quota_bytes = quota_bytes
        self._data: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self.quota_bytes:
                raise StorageError(
                    f"Quota exceeded: {used + len(value)} > {self.quota_bytes} bytes"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)


class FileStore:
    """One file per key under ``directory``."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / (_unsafe_key_re.sub("_", key) + ".json")

    def get(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.debug("Could not read %s: %s", path, exc)
            return None

    def set(self, key: str, value: bytes) -> None:
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_bytes(value)
            os.replace(tmp, path)
        except OSError as exc:
            raise StorageError(f"Could not write {path}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink()
        except FileNotFoundError:
            pass
