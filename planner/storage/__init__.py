# planner/storage/__init__.py
from .base import StorageAdapter, StorageError, StorageErrorCode, StorageSize
from .json_adapter import JsonFileAdapter
from .memory_adapter import MemoryAdapter


def create_storage_adapter(storage_config) -> StorageAdapter:
    """Build the adapter named by a ``StorageConfig``."""
    if storage_config.adapter == "memory":
        return MemoryAdapter()
    if storage_config.adapter == "json":
        return JsonFileAdapter(storage_config.directory, namespace=storage_config.namespace)
    raise StorageError(
        f"Unknown storage adapter: {storage_config.adapter}",
        StorageErrorCode.NOT_AVAILABLE,
    )


__all__ = [
    "StorageAdapter",
    "StorageError",
    "StorageErrorCode",
    "StorageSize",
    "JsonFileAdapter",
    "MemoryAdapter",
    "create_storage_adapter",
]
