#
# src/gtrunner/build/storage.py
#
"""
Durable key-value storage for build fingerprints.
"""
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

from gtrunner.telemetry import StructLogger

log: StructLogger = structlog.get_logger("build.storage")


@runtime_checkable
class KeyValueStore(Protocol):
    """Session-scoped storage that survives restarts."""

    def get(self, key: str, default: Any = None) -> Any:
        ...

    def update(self, key: str, value: Any) -> None:
        ...


class MemoryStore(KeyValueStore):
    """Non-durable store, for hosts that keep their own state."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._data[key] = value


class JsonFileStore(KeyValueStore):
    """
    A JSON document on disk; every update is written through atomically.

    A missing or corrupt file reads as empty, which the staleness tracker
    treats as "everything is stale".
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        self._data = self._load()

    def _load(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            log.warning("State file unreadable, starting empty", path=str(self.path), error=str(e))
            return {}
        if not isinstance(data, dict):
            log.warning("State file is not a JSON object, starting empty", path=str(self.path))
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def update(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".state-", suffix=".json", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log.debug("State persisted", key=key, path=str(self.path))


# 🔼⚙️
