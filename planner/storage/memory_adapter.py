"""In-memory storage, for tests and throwaway sessions."""

from __future__ import annotations

import json
from typing import Any

from .base import StorageAdapter, StorageError, StorageErrorCode, StorageSize, estimate_size


class MemoryAdapter(StorageAdapter):
    """
    Keeps serialized documents in a dict.

    Values are stored as JSON text so that loads return fresh copies and
    unserializable data fails the same way it would on disk. ``max_size``
    simulates a storage quota in bytes.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self._storage: dict[str, str] = {}
        self.max_size = max_size

    def _current_size(self) -> int:
        return sum(estimate_size(key, value) for key, value in self._storage.items())

    def save(self, key: str, data: Any) -> None:
        try:
            serialized = json.dumps(data)
        except (TypeError, ValueError) as exc:
            raise StorageError(
                f'Failed to save data for key "{key}": {exc}',
                StorageErrorCode.WRITE_ERROR,
                exc,
            ) from exc

        if self.max_size is not None:
            existing = self._storage.get(key)
            current = self._current_size()
            if existing is not None:
                current -= estimate_size(key, existing)
            if current + estimate_size(key, serialized) > self.max_size:
                raise StorageError(
                    f'Storage quota exceeded when saving key "{key}"',
                    StorageErrorCode.QUOTA_EXCEEDED,
                )

        self._storage[key] = serialized

    def load(self, key: str) -> Any | None:
        serialized = self._storage.get(key)
        if serialized is None:
            return None
        try:
            return json.loads(serialized)
        except ValueError as exc:
            raise StorageError(
                f'Failed to parse data for key "{key}": {exc}',
                StorageErrorCode.PARSE_ERROR,
                exc,
            ) from exc

    def remove(self, key: str) -> None:
        self._storage.pop(key, None)

    def clear(self) -> None:
        self._storage.clear()

    def has(self, key: str) -> bool:
        return key in self._storage

    def keys(self) -> list[str]:
        return list(self._storage)

    def size(self) -> StorageSize:
        used = self._current_size()
        available = self.max_size - used if self.max_size is not None else None
        return StorageSize(used=used, available=available)
