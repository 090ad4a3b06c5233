"""Key-value stores for persisted session stats.

A store maps string keys to string values, the same contract as browser
local storage. ``InMemoryStore`` is for tests and embedding;
``JsonFileStore`` keeps every key in one JSON object file on disk.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """Durable store backed by a single JSON object file.

    A missing file reads as empty. An unreadable or malformed file also
    reads as empty (logged); the next write first moves it aside to
    ``<name>.corrupt`` and then starts a fresh file. Write errors propagate.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read(quarantine=True)
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read(quarantine=True)
        if key in data:
            del data[key]
            self._write(data)

    def keys(self) -> list[str]:
        return list(self._read())

    def _read(self, quarantine: bool = False) -> dict:
        """Return the stored mapping; {} when missing or unreadable.

        With ``quarantine`` an unreadable file is renamed to ``<name>.corrupt``
        so the write that follows does not destroy it.
        """
        if not self._path.exists():
            return {}
        try:
            with open(self._path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self._path, exc)
            data = None
        else:
            if not isinstance(data, dict):
                logger.warning("Ignoring store %s: top level is not an object", self._path)
                data = None
        if data is None:
            if quarantine:
                self._quarantine()
            return {}
        return data

    def _quarantine(self) -> None:
        corrupt_path = self._path.with_suffix(self._path.suffix + ".corrupt")
        self._path.replace(corrupt_path)
        logger.warning("Moved unreadable store %s aside to %s", self._path, corrupt_path)

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump(data, f, indent=2, sort_keys=True)
        tmp_path.replace(self._path)
