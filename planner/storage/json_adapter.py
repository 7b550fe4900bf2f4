# planner/storage/json_adapter.py
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from .base import StorageAdapter, StorageError, StorageErrorCode, StorageSize

SUFFIX = ".json"


class JsonFileAdapter(StorageAdapter):
    """
    Local persistence: one JSON file per key.

    Files live under ``<directory>/<namespace>/``. Keys are percent-encoded
    into file names so any string is a valid key. Writes go to a temporary
    file first and replace the target, so a crash never leaves half a
    document behind.
    """

    def __init__(self, directory: Path | str, namespace: str = "planner") -> None:
        self.root = Path(directory) / namespace
        self.namespace = namespace
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Storage directory {self.root} is not available: {exc}",
                StorageErrorCode.NOT_AVAILABLE,
                exc,
            ) from exc

    def _path(self, key: str) -> Path:
        return self.root / f"{quote(key, safe='')}{SUFFIX}"

    def save(self, key: str, data: Any) -> None:
        path = self._path(key)
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            serialized = json.dumps(data, indent=2)
        except (TypeError, ValueError) as exc:
            raise StorageError(
                f'Failed to save data for key "{key}": {exc}',
                StorageErrorCode.WRITE_ERROR,
                exc,
            ) from exc

        try:
            with tmp_path.open("w", encoding="utf-8") as fh:
                fh.write(serialized)
            os.replace(tmp_path, path)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            code = StorageErrorCode.QUOTA_EXCEEDED if exc.errno == errno.ENOSPC else StorageErrorCode.WRITE_ERROR
            raise StorageError(f'Failed to save data for key "{key}": {exc}', code, exc) from exc

    def load(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            with path.open("r", encoding="utf-8") as fh:
                return json.load(fh)
        except FileNotFoundError:
            return None
        except ValueError as exc:
            raise StorageError(
                f'Failed to parse data for key "{key}": {exc}',
                StorageErrorCode.PARSE_ERROR,
                exc,
            ) from exc
        except OSError as exc:
            raise StorageError(
                f'Failed to load data for key "{key}": {exc}',
                StorageErrorCode.READ_ERROR,
                exc,
            ) from exc

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def has(self, key: str) -> bool:
        return self._path(key).is_file()

    def keys(self) -> list[str]:
        return sorted(unquote(path.name[: -len(SUFFIX)]) for path in self.root.glob(f"*{SUFFIX}"))

    def size(self) -> StorageSize | None:
        try:
            used = sum(path.stat().st_size for path in self.root.glob(f"*{SUFFIX}"))
            free = _free_bytes(self.root)
        except OSError:
            return None
        return StorageSize(used=used, available=free)


def _free_bytes(path: Path) -> int | None:
    if not hasattr(os, "statvfs"):
        return None
    stats = os.statvfs(path)
    return stats.f_bavail * stats.f_frsize
