"""Functional core - pure business logic with no I/O."""

from .tasks import (
    LOCAL_ID_THRESHOLD,
    Origin,
    Priority,
    Task,
    count_completed,
    dedupe_by_id,
    merge_remote,
)
from .state import SyncResult, TaskState
from .validation import TaskDraft, ValidationError, ensure_valid, validate_task_form

__all__ = [
    # Tasks
    "LOCAL_ID_THRESHOLD",
    "Origin",
    "Priority",
    "Task",
    "count_completed",
    "dedupe_by_id",
    "merge_remote",
    # State
    "SyncResult",
    "TaskState",
    # Validation
    "TaskDraft",
    "ValidationError",
    "ensure_valid",
    "validate_task_form",
]
