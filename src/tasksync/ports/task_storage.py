"""Local task storage interface."""

from typing import Protocol

from tasksync.core.tasks import Task


class StorageError(Exception):
    """Base class for local persistence failures."""

    pass


class StorageReadError(StorageError):
    """Raised when the stored collection exists but cannot be read."""

    pass


class StorageWriteError(StorageError):
    """Raised when the collection cannot be written."""

    pass


class TaskStorage(Protocol):
    """Interface for persisting the whole task collection under one key."""

    def read_all(self) -> list[Task]:
        """Read the stored collection. Returns [] if nothing was stored."""
        ...

    def write_all(self, tasks: list[Task]) -> bool:
        """Overwrite the stored collection. Returns False if the write failed."""
        ...
