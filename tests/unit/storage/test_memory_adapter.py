"""
Unit tests for planner/storage/memory_adapter.py
"""

import pytest

from planner.storage import MemoryAdapter, StorageError, StorageErrorCode
from planner.storage.base import estimate_size


class TestMemoryAdapter:
    """Test suite for the in-memory adapter."""

    def test_save_and_load(self):
        adapter = MemoryAdapter()
        adapter.save("doc", {"sections": {}, "count": 2})

        assert adapter.load("doc") == {"sections": {}, "count": 2}

    def test_load_missing_returns_none(self):
        assert MemoryAdapter().load("missing") is None

    def test_load_returns_fresh_copy(self):
        """Test that mutating a loaded value does not change storage."""
        adapter = MemoryAdapter()
        adapter.save("doc", {"items": [1]})

        loaded = adapter.load("doc")
        loaded["items"].append(2)

        assert adapter.load("doc") == {"items": [1]}

    def test_unserializable_value(self):
        adapter = MemoryAdapter()

        with pytest.raises(StorageError) as exc_info:
            adapter.save("doc", {"bad": {1, 2}})

        assert exc_info.value.code is StorageErrorCode.WRITE_ERROR
        assert isinstance(exc_info.value.original, TypeError)
        assert not adapter.has("doc")

    def test_corrupt_value(self):
        adapter = MemoryAdapter()
        adapter._storage["doc"] = "{not json"

        with pytest.raises(StorageError) as exc_info:
            adapter.load("doc")

        assert exc_info.value.code is StorageErrorCode.PARSE_ERROR

    def test_quota_exceeded(self):
        adapter = MemoryAdapter(max_size=40)
        adapter.save("a", "x" * 5)

        with pytest.raises(StorageError) as exc_info:
            adapter.save("b", "y" * 20)

        assert exc_info.value.code is StorageErrorCode.QUOTA_EXCEEDED
        assert adapter.keys() == ["a"]

    def test_quota_ignores_value_being_replaced(self):
        """Test that overwriting a key only counts the new value."""
        adapter = MemoryAdapter(max_size=estimate_size("a", '"' + "x" * 10 + '"'))
        adapter.save("a", "x" * 10)
        adapter.save("a", "z" * 10)

        assert adapter.load("a") == "z" * 10

    def test_remove_has_keys_clear(self):
        adapter = MemoryAdapter()
        adapter.save("one", 1)
        adapter.save("two", 2)

        assert adapter.has("one")
        assert sorted(adapter.keys()) == ["one", "two"]

        adapter.remove("one")
        adapter.remove("one")
        assert not adapter.has("one")

        adapter.clear()
        assert adapter.keys() == []

    def test_size(self):
        adapter = MemoryAdapter(max_size=1000)
        adapter.save("k", 1)

        size = adapter.size()

        assert size.used == estimate_size("k", "1") == 4
        assert size.available == 996

    def test_size_unbounded(self):
        assert MemoryAdapter().size().available is None
