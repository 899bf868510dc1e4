"""File-based task storage adapter."""

import json
import logging
from pathlib import Path

from tasksync.core.tasks import Task
from tasksync.ports.task_storage import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)

DEFAULT_KEY = "tasks_storage"


class FileTaskStorage:
    """
    File-based key-value blob storage.

    Implements TaskStorage protocol. The whole collection lives as one JSON
    array in ``<storage_dir>/<key>.json``.
    """

    def __init__(self, storage_dir: Path | str, key: str = DEFAULT_KEY):
        self.storage_dir = Path(storage_dir).expanduser()
        self.key = key

    @property
    def path(self) -> Path:
        return self.storage_dir / f"{self.key}.json"

    def read_all(self) -> list[Task]:
        """Read the stored collection. Returns [] if nothing was stored."""
        if not self.path.exists():
            return []

        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            raise StorageReadError(f"Cannot read {self.path}: {e}") from e

        if not isinstance(data, list):
            raise StorageReadError(f"Expected a JSON array in {self.path}")

        tasks = []
        for entry in data:
            if not isinstance(entry, dict) or entry.get("id") is None:
                continue
            try:
                tasks.append(Task.from_dict(entry))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed stored task {entry!r}: {e}")
        return tasks

    def _write(self, tasks: list[Task]) -> None:
        """Write to a sibling file, then swap it in."""
        tmp = self.path.with_suffix(".json.tmp")
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps([t.to_dict() for t in tasks], indent=2))
            tmp.replace(self.path)
        except OSError as e:
            raise StorageWriteError(f"Cannot write {self.path}: {e}") from e

    def write_all(self, tasks: list[Task]) -> bool:
        """Overwrite the stored collection. Failures are logged, never raised."""
        try:
            self._write(tasks)
        except StorageWriteError as e:
            logger.error(f"Failed to persist tasks: {e}")
            return False
        return True
