"""Observable synchronizer state."""

from dataclasses import dataclass

from .tasks import Task


@dataclass(frozen=True)
class TaskState:
    """Read-only snapshot handed to the presentation layer."""

    items: tuple[Task, ...] = ()
    loading: bool = False
    error: str | None = None
    last_sync: str | None = None
    # Bumped on every committed transition
    version: int = 0


@dataclass(frozen=True)
class SyncResult:
    """Outcome of a remote sync.

    ``from_cache`` is set when the remote failed and the local store was used
    in its place; ``remote_error`` keeps the failure message in that case.
    """

    from_cache: bool = False
    remote_error: str | None = None
