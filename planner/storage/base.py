"""
Storage adapter contract.

Adapters persist JSON-serializable documents under string keys. Every
failure is raised as ``StorageError`` carrying a ``StorageErrorCode``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StorageErrorCode(str, Enum):
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    NOT_AVAILABLE = "NOT_AVAILABLE"
    PARSE_ERROR = "PARSE_ERROR"
    WRITE_ERROR = "WRITE_ERROR"
    READ_ERROR = "READ_ERROR"
    UNKNOWN = "UNKNOWN"


class StorageError(Exception):
    def __init__(
        self,
        message: str,
        code: StorageErrorCode = StorageErrorCode.UNKNOWN,
        original: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.original = original


@dataclass(frozen=True)
class StorageSize:
    used: int
    available: int | None  # None when unbounded


def estimate_size(key: str, value: str) -> int:
    """Bytes taken by a key/value pair, counted as UTF-16."""
    return (len(key) + len(value)) * 2


class StorageAdapter:
    """Base storage adapter. Subclasses implement every method."""

    def save(self, key: str, data: Any) -> None:
        raise NotImplementedError("Subclasses must implement save()")

    def load(self, key: str) -> Any | None:
        raise NotImplementedError("Subclasses must implement load()")

    def remove(self, key: str) -> None:
        raise NotImplementedError("Subclasses must implement remove()")

    def clear(self) -> None:
        for key in self.keys():
            self.remove(key)

    def has(self, key: str) -> bool:
        raise NotImplementedError("Subclasses must implement has()")

    def keys(self) -> list[str]:
        raise NotImplementedError("Subclasses must implement keys()")

    def size(self) -> StorageSize | None:
        return None
