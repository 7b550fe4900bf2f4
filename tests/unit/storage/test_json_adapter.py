"""
Unit tests for planner/storage/json_adapter.py
"""

import errno
import json
import os

import pytest

from planner.config import StorageConfig
from planner.storage import (
    JsonFileAdapter,
    MemoryAdapter,
    StorageError,
    StorageErrorCode,
    create_storage_adapter,
)


@pytest.fixture
def adapter(tmp_path):
    return JsonFileAdapter(tmp_path, namespace="test")


class TestJsonFileAdapter:
    """Test suite for file-backed storage."""

    def test_creates_namespace_directory(self, tmp_path):
        adapter = JsonFileAdapter(tmp_path / "nested", namespace="ns")
        assert adapter.root == tmp_path / "nested" / "ns"
        assert adapter.root.is_dir()

    def test_unavailable_directory(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(StorageError) as exc_info:
            JsonFileAdapter(blocker)

        assert exc_info.value.code is StorageErrorCode.NOT_AVAILABLE

    def test_save_and_load(self, adapter):
        adapter.save("plannerData", {"orientation": "portrait"})

        assert adapter.load("plannerData") == {"orientation": "portrait"}
        stored = json.loads((adapter.root / "plannerData.json").read_text(encoding="utf-8"))
        assert stored == {"orientation": "portrait"}

    def test_no_temp_file_left_behind(self, adapter):
        adapter.save("doc", [1, 2, 3])
        assert [path.name for path in adapter.root.iterdir()] == ["doc.json"]

    def test_load_missing_returns_none(self, adapter):
        assert adapter.load("missing") is None

    def test_keys_are_encoded(self, adapter):
        adapter.save("a/b c", 1)

        assert (adapter.root / "a%2Fb%20c.json").is_file()
        assert adapter.keys() == ["a/b c"]
        assert adapter.load("a/b c") == 1

    def test_unserializable_value(self, adapter):
        with pytest.raises(StorageError) as exc_info:
            adapter.save("doc", object())

        assert exc_info.value.code is StorageErrorCode.WRITE_ERROR
        assert not adapter.has("doc")

    def test_corrupt_file(self, adapter):
        (adapter.root / "doc.json").write_text("{broken", encoding="utf-8")

        with pytest.raises(StorageError) as exc_info:
            adapter.load("doc")

        assert exc_info.value.code is StorageErrorCode.PARSE_ERROR
        assert 'key "doc"' in str(exc_info.value)

    def test_unreadable_file(self, adapter):
        (adapter.root / "doc.json").mkdir()

        with pytest.raises(StorageError) as exc_info:
            adapter.load("doc")

        assert exc_info.value.code is StorageErrorCode.READ_ERROR

    def test_disk_full(self, adapter, monkeypatch):
        def no_space(*args, **kwargs):
            raise OSError(errno.ENOSPC, "No space left on device")

        monkeypatch.setattr(os, "replace", no_space)

        with pytest.raises(StorageError) as exc_info:
            adapter.save("doc", {"a": 1})

        assert exc_info.value.code is StorageErrorCode.QUOTA_EXCEEDED
        assert list(adapter.root.iterdir()) == []

    def test_other_write_failure(self, adapter, monkeypatch):
        def denied(*args, **kwargs):
            raise PermissionError(errno.EACCES, "Permission denied")

        monkeypatch.setattr(os, "replace", denied)

        with pytest.raises(StorageError) as exc_info:
            adapter.save("doc", {"a": 1})

        assert exc_info.value.code is StorageErrorCode.WRITE_ERROR

    def test_remove_has_keys_clear(self, adapter):
        adapter.save("b", 1)
        adapter.save("a", 2)

        assert adapter.keys() == ["a", "b"]
        assert adapter.has("a")

        adapter.remove("a")
        adapter.remove("a")
        assert not adapter.has("a")

        adapter.clear()
        assert adapter.keys() == []

    def test_size(self, adapter):
        adapter.save("doc", {"a": 1})

        size = adapter.size()

        assert size.used == (adapter.root / "doc.json").stat().st_size
        assert size.available is None or size.available > 0


class TestCreateStorageAdapter:
    def test_json(self, tmp_path):
        adapter = create_storage_adapter(StorageConfig(adapter="json", directory=tmp_path, namespace="x"))
        assert isinstance(adapter, JsonFileAdapter)
        assert adapter.root == tmp_path / "x"

    def test_memory(self, tmp_path):
        adapter = create_storage_adapter(StorageConfig(adapter="memory", directory=tmp_path))
        assert isinstance(adapter, MemoryAdapter)

    def test_unknown(self, tmp_path):
        with pytest.raises(StorageError) as exc_info:
            create_storage_adapter(StorageConfig(adapter="cloud", directory=tmp_path))

        assert exc_info.value.code is StorageErrorCode.NOT_AVAILABLE
