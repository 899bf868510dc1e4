"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable

# Ids above this value were minted locally from a millisecond timestamp.
# Only used to infer the origin of records that carry no explicit tag.
LOCAL_ID_THRESHOLD = 1000

DEFAULT_USER_ID = 1


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"


class Origin(str, Enum):
    """Where a task was first created."""

    LOCAL = "local"
    REMOTE = "remote"


@dataclass(frozen=True)
class Task:
    """A to-do item, as held by the synchronizer and persisted locally.

    Immutable: changes go through dataclasses.replace.
    """

    id: int
    title: str
    description: str = ""
    priority: Priority = Priority.LOW
    completed: bool = False
    created_at: str = ""
    updated_at: str | None = None
    user_id: int = DEFAULT_USER_ID
    origin: Origin | None = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "priority", Priority(self.priority))
        origin = infer_origin(self.id) if self.origin is None else Origin(self.origin)
        object.__setattr__(self, "origin", origin)

    @property
    def is_local(self) -> bool:
        return self.origin is Origin.LOCAL

    def to_dict(self) -> dict:
        """Serialize using the camelCase wire shape."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "completed": self.completed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "userId": self.user_id,
            "origin": self.origin.value,
        }

    @classmethod
    def from_dict(cls, data: dict, origin: Origin | None = None) -> "Task":
        """
        Build a Task from a wire/persisted mapping.

        Unknown keys are ignored. An explicit ``origin`` argument wins over
        the one stored in the mapping.
        """
        priority = data.get("priority") or Priority.LOW
        if priority not in (Priority.LOW.value, Priority.HIGH.value):
            priority = Priority.LOW
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            description=data.get("description") or "",
            priority=Priority(priority),
            completed=bool(data.get("completed", False)),
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt"),
            user_id=data.get("userId", DEFAULT_USER_ID),
            origin=origin or data.get("origin"),
        )


def infer_origin(task_id: int) -> Origin:
    """Origin implied by the id magnitude convention."""
    return Origin.LOCAL if task_id > LOCAL_ID_THRESHOLD else Origin.REMOTE


def dedupe_by_id(tasks: Iterable[Task]) -> list[Task]:
    """Drop repeated ids, keeping the first occurrence and the original order."""
    seen: set[int] = set()
    deduped = []
    for task in tasks:
        if task.id in seen:
            continue
        seen.add(task.id)
        deduped.append(task)
    return deduped


def local_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Tasks that were created on this device."""
    return [t for t in tasks if t.is_local]


def merge_remote(current: Iterable[Task], fetched: Iterable[Task]) -> list[Task]:
    """
    Reconcile the in-memory collection with a freshly fetched one.

    Local tasks come first and win on id collisions; every other current
    entry is replaced by the fetched set.
    """
    local = local_tasks(current)
    local_ids = {t.id for t in local}
    remote = dedupe_by_id(t for t in fetched if t.id not in local_ids)
    return local + remote


def free_local_id(tasks: Iterable[Task], candidate: int) -> int:
    """Smallest id at or above ``candidate`` that is local-range and unused."""
    taken = {t.id for t in tasks}
    new_id = max(candidate, LOCAL_ID_THRESHOLD + 1)
    while new_id in taken:
        new_id += 1
    return new_id


def prepend_task(tasks: list[Task], task: Task, id_hint: int) -> tuple[list[Task], Task]:
    """
    Put a new task at the head of the list.

    Some backends hand out the same id for every create; an id that is
    already taken is swapped for a free local one at or above ``id_hint``,
    so the existing entry is kept. Returns the new list and the task as added.
    """
    if find_task(tasks, task.id) is not None:
        task = replace(task, id=free_local_id(tasks, id_hint), origin=Origin.LOCAL)
    return [task] + tasks, task


def replace_task(tasks: list[Task], task: Task) -> list[Task]:
    """Swap in ``task`` where its id matches. Unknown ids leave the list as is."""
    return [task if t.id == task.id else t for t in tasks]


def remove_task(tasks: list[Task], task_id: int) -> list[Task]:
    return [t for t in tasks if t.id != task_id]


def find_task(tasks: Iterable[Task], task_id: int) -> Task | None:
    return next((t for t in tasks if t.id == task_id), None)


def toggle_task(tasks: list[Task], task_id: int) -> list[Task]:
    """Flip ``completed`` on the matching task."""
    return [replace(t, completed=not t.completed) if t.id == task_id else t for t in tasks]


def count_completed(tasks: Iterable[Task]) -> tuple[int, int]:
    """Return (completed, total)."""
    tasks = list(tasks)
    return sum(1 for t in tasks if t.completed), len(tasks)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
