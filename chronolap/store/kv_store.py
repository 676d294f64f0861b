"""String key-value stores backing the engine's persisted state."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Protocol


logger = logging.getLogger(__name__)


def default_store_path() -> Path:
    return Path.home() / ".chronolap" / "state.json"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Keys and string values kept in one JSON object on disk.

    Writes go through a temporary file and ``os.replace`` so a crash leaves
    either the previous file or the new one. Write failures are logged and
    the caller's in-memory state stays authoritative.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_store_path()

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=True, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.error("Saving %s failed: %s", self.path, exc)

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: top level is not an object", self.path)
            return {}
        return data
