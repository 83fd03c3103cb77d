"""Tests for the key-value storage backends."""

import json
import os

import pytest

from finsight.services.storage import (
    CorruptDataError,
    InMemoryStorage,
    JsonFileStorage,
    StorageError,
)
from finsight.services.storage import json_file


class TestInMemoryStorage:
    """Tests for InMemoryStorage."""

    def test_get_missing_key(self):
        """Test absent keys read as None."""
        assert InMemoryStorage().get("nope") is None

    def test_put_and_get(self):
        """Test values are stored and replaced."""
        storage = InMemoryStorage()
        storage.put("k", "one")
        storage.put("k", "two")
        assert storage.get("k") == "two"

    def test_clear_one_key(self):
        """Test clearing a single key leaves the others."""
        storage = InMemoryStorage({"a": "1", "b": "2"})
        storage.clear("a")
        storage.clear("missing")
        assert storage.keys() == ["b"]

    def test_clear_everything(self):
        """Test clearing without a key empties the storage."""
        storage = InMemoryStorage({"a": "1", "b": "2"})
        storage.clear()
        assert storage.keys() == []


class TestJsonFileStorage:
    """Tests for JsonFileStorage."""

    def test_missing_file_is_empty(self, tmp_path):
        """Test a missing file behaves like empty storage."""
        storage = JsonFileStorage(tmp_path / "data.json")
        assert storage.get("k") is None
        assert storage.keys() == []

    def test_values_persist_across_instances(self, tmp_path):
        """Test a new instance reads what an earlier one wrote."""
        path = tmp_path / "nested" / "data.json"
        JsonFileStorage(path).put("k", "value")

        assert JsonFileStorage(path).get("k") == "value"
        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "value"}

    def test_clear_key_rewrites_file(self, tmp_path):
        """Test clearing a key removes it from the file."""
        path = tmp_path / "data.json"
        storage = JsonFileStorage(path)
        storage.put("a", "1")
        storage.put("b", "2")
        storage.clear("a")

        assert json.loads(path.read_text(encoding="utf-8")) == {"b": "2"}

    def test_no_temp_file_left_behind(self, tmp_path):
        """Test the atomic write cleans up after itself."""
        storage = JsonFileStorage(tmp_path / "data.json")
        storage.put("k", "v")
        assert sorted(p.name for p in tmp_path.iterdir()) == ["data.json"]

    def test_invalid_json_raises(self, tmp_path):
        """Test a corrupt file raises CorruptDataError."""
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileStorage(path).get("k")

    def test_non_object_raises(self, tmp_path):
        """Test a file holding a list is rejected."""
        path = tmp_path / "data.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            JsonFileStorage(path).keys()

    def test_corrupt_file_is_replaced_by_next_write(self, tmp_path):
        """Test a corrupt file reads empty after the error and is overwritten."""
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        storage = JsonFileStorage(path)
        with pytest.raises(CorruptDataError):
            storage.get("k")

        assert storage.get("k") is None
        storage.put("k", "v")

        assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}
        assert JsonFileStorage(path).get("k") == "v"

    def test_corrupt_file_can_be_cleared(self, tmp_path):
        """Test clearing everything works on a corrupt file."""
        path = tmp_path / "data.json"
        path.write_text("[1, 2]", encoding="utf-8")
        storage = JsonFileStorage(path)
        with pytest.raises(CorruptDataError):
            storage.clear()

        storage.clear()

        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_corrupt_data_is_a_storage_error(self):
        """Test the exception hierarchy."""
        assert issubclass(CorruptDataError, StorageError)

    def test_transient_write_failure_is_retried(self, tmp_path, monkeypatch):
        """Test a single failed replace is retried and succeeds."""
        calls = {"n": 0}
        real_replace = os.replace

        def flaky_replace(src, dst):
            calls["n"] += 1
            if calls["n"] == 1:
                raise OSError("disk busy")
            return real_replace(src, dst)

        monkeypatch.setattr(json_file.os, "replace", flaky_replace)
        storage = JsonFileStorage(tmp_path / "data.json")
        storage.put("k", "v")

        assert calls["n"] == 2
        assert JsonFileStorage(tmp_path / "data.json").get("k") == "v"

    def test_persistent_write_failure_raises(self, tmp_path, monkeypatch):
        """Test repeated failures surface as StorageError and leave state unchanged."""
        storage = JsonFileStorage(tmp_path / "data.json")
        storage.put("k", "old")

        def broken_replace(src, dst):
            raise OSError("read-only file system")

        monkeypatch.setattr(json_file.os, "replace", broken_replace)
        with pytest.raises(StorageError):
            storage.put("k", "new")

        assert storage.get("k") == "old"
