"""Remote task collection interface."""

from typing import Protocol

from tasksync.core.tasks import Task


class RemoteUnavailable(Exception):
    """Raised when the remote endpoint cannot be reached after all retries."""

    pass


class TaskRemote(Protocol):
    """Interface for the remote task collection."""

    def fetch_all(self) -> list[Task]:
        """Fetch one page of tasks."""
        ...

    def create(self, draft: dict) -> Task:
        """Create a task from a partial mapping. Returns the stored task."""
        ...

    def update(self, task_id: int, changes: dict) -> Task:
        """Send changes for a task. Returns the updated task."""
        ...

    def delete(self, task_id: int) -> bool:
        """Delete a task."""
        ...
