"""Durable key/value storage backends for persisted state envelopes.

Each domain store writes one serialized envelope under a fixed key. Two
backends are provided:

- :class:`MemoryStorage`: dict-backed, for tests and throwaway sessions.
- :class:`FileStorage`:  one ``<key>.json`` file per key in a directory.

Default directory: `CIVICBOARD_STATE_DIR` env var or `~/.civicboard`
(resolved through :mod:`civicboard.core.settings`).

Concurrency
-----------
Writes from several processes to the same key are last-write-wins. The file
backend writes to a temporary sibling and then ``os.replace``s it into place
so a reader never observes a half-written value.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from .settings import load_settings

#: Storage keys, one per domain.
VIEW_STORAGE_KEY = "lv-feed-index-storage"
MODULE_STORAGE_KEY = "lv-module-storage"
PRIVACY_STORAGE_KEY = "lv-privacy-storage"

ALL_STORAGE_KEYS: tuple[str, ...] = (VIEW_STORAGE_KEY, MODULE_STORAGE_KEY, PRIVACY_STORAGE_KEY)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class KeyValueStorage(Protocol):
    """
    Minimal string-to-string storage contract used by the persistence layer.

    Implementations must provide:
      - get(key) -> str | None   (None when nothing was ever written)
      - set(key, value) -> None  (may raise OSError, e.g. when out of space)
      - remove(key) -> None      (no-op for a missing key)
    """

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def remove(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage; contents vanish with the object."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> tuple[str, ...]:
        """Return the stored keys as a sorted tuple (stable for tests)."""
        return tuple(sorted(self._data))


def _default_dir() -> Path:
    """Return the configured base directory for state files."""
    return load_settings().state_dir


class FileStorage:
    """Persist each key as a UTF-8 JSON text file under ``base_dir``."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else _default_dir()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise ValueError(f"unsafe storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.write("\n")
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


__all__ = [
    "ALL_STORAGE_KEYS",
    "MODULE_STORAGE_KEY",
    "PRIVACY_STORAGE_KEY",
    "VIEW_STORAGE_KEY",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
]
