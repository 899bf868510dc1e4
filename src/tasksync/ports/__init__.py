"""Ports - interfaces/protocols for external dependencies."""

from .task_remote import RemoteUnavailable, TaskRemote
from .task_storage import StorageError, StorageReadError, StorageWriteError, TaskStorage

__all__ = [
    "TaskRemote",
    "RemoteUnavailable",
    "TaskStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
