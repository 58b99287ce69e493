"""
campus_gate.client.storage

Key-value storage backends for client-side state that must survive a reload.

Responsibilities:
- Define the minimal `KeyValueStorage` protocol used by the role cache.
- Provide an in-memory backend and a JSON-file backend.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Protocol


class StorageError(Exception):
    pass


class KeyValueStorage(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage:
    """
    All keys live in one JSON object on disk; every write replaces the file
    atomically so a crash never leaves a half-written record.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StorageError(f"cannot read {self._path}: {e}") from e
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"corrupt storage file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"corrupt storage file {self._path}: not an object")
        return {str(k): str(v) for k, v in data.items()}

    def _dump(self, data: dict[str, str]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".campus-", suffix=".json")
        except OSError as e:
            raise StorageError(f"cannot write {self._path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh)
            os.replace(tmp, self._path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp).unlink(missing_ok=True)
            raise StorageError(f"cannot write {self._path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        try:
            data = self._load()
        except StorageError:
            # A corrupt file cannot hold a valid entry; start over.
            data = {}
        else:
            if key not in data:
                return
        data.pop(key, None)
        self._dump(data)


# --- Module Notes -----------------------------------------------------------
# Backends only move strings; the role cache owns serialization and validation.
