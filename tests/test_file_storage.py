"""Tests for the file-based task storage adapter."""

import json
from unittest.mock import patch

import pytest

from tasksync.adapters.file_storage import FileTaskStorage
from tasksync.core.tasks import Origin, Task
from tasksync.ports.task_storage import StorageReadError


@pytest.fixture
def storage(tmp_path):
    return FileTaskStorage(tmp_path / "data")


class TestFileTaskStorage:
    def test_path_uses_key(self, tmp_path):
        storage = FileTaskStorage(tmp_path, key="tasks_storage")
        assert storage.path == tmp_path / "tasks_storage.json"

    def test_missing_key_reads_empty(self, storage):
        assert storage.read_all() == []

    def test_write_then_read(self, storage):
        tasks = [
            Task(id=1700000000000, title="Buy milk", priority="high"),
            Task(id=5, title="A"),
        ]
        assert storage.write_all(tasks) is True
        assert storage.read_all() == tasks

    def test_write_creates_directory(self, storage):
        storage.write_all([Task(id=1, title="A")])
        assert storage.path.exists()

    def test_write_overwrites_whole_collection(self, storage):
        storage.write_all([Task(id=1, title="A"), Task(id=2, title="B")])
        storage.write_all([Task(id=3, title="C")])
        assert [t.id for t in storage.read_all()] == [3]

    def test_no_temp_file_left_behind(self, storage):
        storage.write_all([Task(id=1, title="A")])
        assert [p.name for p in storage.storage_dir.iterdir()] == ["tasks_storage.json"]

    def test_stored_as_json_array(self, storage):
        storage.write_all([Task(id=5, title="A")])
        data = json.loads(storage.path.read_text())
        assert data[0]["id"] == 5
        assert data[0]["origin"] == "remote"

    def test_legacy_entries_infer_origin(self, storage):
        storage.storage_dir.mkdir(parents=True)
        storage.path.write_text(json.dumps([{"id": 1700000000000, "title": "Old local"}]))
        [task] = storage.read_all()
        assert task.origin is Origin.LOCAL

    def test_entries_without_id_are_skipped(self, storage):
        storage.storage_dir.mkdir(parents=True)
        storage.path.write_text(json.dumps([{"title": "No id"}, None, {"id": 2, "title": "Ok"}]))
        assert [t.id for t in storage.read_all()] == [2]

    def test_corrupt_blob_raises(self, storage):
        storage.storage_dir.mkdir(parents=True)
        storage.path.write_text("{not json")
        with pytest.raises(StorageReadError):
            storage.read_all()

    def test_non_array_raises(self, storage):
        storage.storage_dir.mkdir(parents=True)
        storage.path.write_text('{"id": 1}')
        with pytest.raises(StorageReadError):
            storage.read_all()

    def test_write_failure_is_swallowed(self, storage):
        with patch("pathlib.Path.write_text", side_effect=OSError("disk full")):
            assert storage.write_all([Task(id=1, title="A")]) is False
        assert storage.read_all() == []
