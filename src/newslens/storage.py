"""Local key-value persistence: an in-memory store and a JSON-file store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from newslens.errors import PersistenceWriteError

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
LOGGED_IN_KEY = "newslenss-logged-in"
REMEMBERED_USERNAME_KEY = "newslenss-remembered-username"
HISTORY_KEY = "newslenss-history"
ANALYTICS_KEY = "newslenss-analytics"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """All keys live in one JSON object on disk; every write rewrites the file.

    The file is read once, on first access. Writes go through a temporary file
    in the same directory followed by ``os.replace``.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._flush(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush(data)

    def _load(self) -> dict[str, str]:
        if self._data is not None:
            return self._data
        self._data = {}
        if not self._path.exists():
            return self._data
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.exception("Failed to read store %s, starting empty", self._path)
            return self._data
        if not isinstance(raw, dict):
            logger.error("Store %s does not hold a JSON object, starting empty", self._path)
            return self._data
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        return self._data

    def _flush(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, ensure_ascii=False)
                    fh.write("\n")
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise PersistenceWriteError(f"Could not write {self._path}: {exc}") from exc
