"""Key-value persistence used by the score store.

Values are opaque strings; callers own their encoding.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol

from backend.errors import PersistenceReadError, PersistenceWriteError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store. Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """Stores every key in a single JSON object file.

    A missing file reads as an empty store. Writes go to a sibling temp
    file that then replaces the original, so a crash mid-write leaves the
    previous contents intact.
    """

    def __init__(self, filepath: Path) -> None:
        self.filepath = filepath

    # -- persistence ----------------------------------------------------------

    def _read_all(self, key: str) -> dict[str, str]:
        if not self.filepath.exists():
            return {}
        try:
            data = json.loads(self.filepath.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise PersistenceReadError(key, f"Cannot read {self.filepath}: {exc}") from exc
        if not isinstance(data, dict):
            raise PersistenceReadError(key, f"{self.filepath} does not hold a JSON object")
        return data

    def get(self, key: str) -> str | None:
        value = self._read_all(key).get(key)
        if value is not None and not isinstance(value, str):
            raise PersistenceReadError(key, "Stored value is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all(key)
        except PersistenceReadError:
            logger.warning("Overwriting unreadable store %s", self.filepath)
            data = {}
        data[key] = value

        tmp = self.filepath.with_name(self.filepath.name + ".tmp")
        try:
            self.filepath.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
            os.replace(tmp, self.filepath)
        except OSError as exc:
            raise PersistenceWriteError(key, f"Cannot write {self.filepath}: {exc}") from exc
        logger.debug("Wrote key %r to %s", key, self.filepath)
