"""Task synchronizer - reconciles local and remote task state.

Owns the task collection. Every command moves through
pending -> fulfilled/rejected, mirrored into ``loading`` and ``error`` on the
observable ``TaskState``. Successful mutations are persisted to local storage
straight away.

Commands are not serialized against each other: if two race, the last one to
commit wins on the entries they share.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Mapping

from .core.state import SyncResult, TaskState
from .core.tasks import (
    Priority,
    Task,
    dedupe_by_id,
    find_task,
    format_timestamp,
    merge_remote,
    prepend_task,
    remove_task,
    replace_task,
    toggle_task,
    utc_now,
)
from .ports.task_remote import RemoteUnavailable, TaskRemote
from .ports.task_storage import StorageError, TaskStorage

logger = logging.getLogger(__name__)

Observer = Callable[[TaskState], None]
ItemsTransform = Callable[[list[Task]], list[Task]]


class TaskSynchronizer:
    """Keeps the in-memory task list, the local store and the remote in step."""

    def __init__(
        self,
        remote: TaskRemote,
        storage: TaskStorage,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._remote = remote
        self._storage = storage
        self._clock = clock
        self._state = TaskState()
        self._lock = threading.Lock()
        self._observers: list[Observer] = []

    @property
    def state(self) -> TaskState:
        return self._state

    @property
    def items(self) -> tuple[Task, ...]:
        return self._state.items

    def subscribe(self, callback: Observer) -> Callable[[], None]:
        """Call ``callback`` with the new snapshot after every change.

        Callbacks run outside the state lock, so when commands race a callback
        can receive snapshots out of order. Compare ``TaskState.version`` and
        drop any snapshot older than the last one seen.

        Returns a function that removes the subscription.
        """
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    # ---- state plumbing ----

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _commit(self, transform: ItemsTransform | None = None, **changes) -> TaskState:
        """Apply one state transition atomically, then notify observers."""
        with self._lock:
            if transform is not None:
                changes["items"] = tuple(transform(list(self._state.items)))
            changes["version"] = self._state.version + 1
            self._state = replace(self._state, **changes)
            state = self._state

        for callback in list(self._observers):
            try:
                callback(state)
            except Exception:
                logger.exception("State observer failed")
        return state

    def _persist(self, state: TaskState) -> None:
        if not self._storage.write_all(list(state.items)):
            logger.warning("Task list was not persisted; continuing with in-memory state")

    def _reject(self, action: str, error: Exception) -> None:
        logger.error(f"{action} failed: {error}")
        self._commit(loading=False, error=str(error))

    # ---- commands ----

    def load_local(self) -> TaskState:
        """Load the persisted collection. An empty store keeps current items."""
        self._commit(loading=True)
        try:
            stored = self._storage.read_all()
        except StorageError as e:
            logger.warning(f"Could not load local tasks: {e}")
            stored = []

        loaded = dedupe_by_id(stored)
        if not loaded:
            return self._commit(loading=False)
        logger.debug(f"Loaded {len(loaded)} tasks from local storage")
        return self._commit(lambda _: loaded, loading=False)

    def sync_remote(self) -> SyncResult:
        """
        Fetch the remote collection and merge it in.

        Local tasks are kept, placed first, and win on id collisions. If the
        remote is unavailable the local store stands in for it; the error only
        surfaces when the store cannot be read either.
        """
        self._commit(loading=True, error=None)
        try:
            fetched = self._remote.fetch_all()
        except RemoteUnavailable as e:
            return self._sync_from_cache(e)

        state = self._commit(
            lambda items: merge_remote(items, fetched),
            loading=False,
            last_sync=self._now(),
        )
        self._persist(state)
        logger.info(f"Synced {len(fetched)} remote tasks, {len(state.items)} total")
        return SyncResult()

    def _sync_from_cache(self, remote_error: RemoteUnavailable) -> SyncResult:
        logger.warning(f"Remote sync failed, falling back to local cache: {remote_error}")
        try:
            cached = self._storage.read_all()
        except StorageError as e:
            logger.error(f"Local cache unavailable too: {e}")
            self._commit(loading=False, error=str(remote_error))
            return SyncResult(from_cache=False, remote_error=str(remote_error))

        state = self._commit(lambda items: merge_remote(items, cached), loading=False)
        self._persist(state)
        return SyncResult(from_cache=True, remote_error=str(remote_error))

    def create(self, draft: Mapping) -> Task | None:
        """Create a task from a partial mapping and put it at the head of the list."""
        payload = {
            "description": "",
            "priority": Priority.LOW.value,
            "completed": False,
            "createdAt": self._now(),
            **draft,
        }
        self._commit(loading=True, error=None)
        try:
            task = self._remote.create(payload)
        except RemoteUnavailable as e:
            self._reject("Create", e)
            return None

        added = task
        id_hint = int(self._clock().timestamp() * 1000)

        def add(items: list[Task]) -> list[Task]:
            nonlocal added
            items, added = prepend_task(items, task, id_hint)
            return items

        state = self._commit(add, loading=False)
        if added.id != task.id:
            logger.warning(f"Remote returned id {task.id}, already in use; kept as {added.id}")
        self._persist(state)
        return added

    def update(self, task_id: int, changes: Mapping) -> Task | None:
        """
        Send changes for a task and swap in the result.

        The whole resource is sent when the task is known locally. The local
        list is left alone if the id is not in it.
        """
        existing = find_task(self._state.items, task_id)
        payload = {**existing.to_dict(), **changes} if existing else dict(changes)

        self._commit(loading=True, error=None)
        try:
            updated = self._remote.update(task_id, payload)
        except RemoteUnavailable as e:
            self._reject("Update", e)
            return None

        def apply(items: list[Task]) -> list[Task]:
            current = find_task(items, task_id)
            if current is None:
                return items
            return replace_task(items, replace(updated, id=task_id, origin=current.origin))

        state = self._commit(apply, loading=False)
        self._persist(state)
        return find_task(state.items, task_id) or updated

    def delete(self, task_id: int) -> bool:
        self._commit(loading=True, error=None)
        try:
            self._remote.delete(task_id)
        except RemoteUnavailable as e:
            self._reject("Delete", e)
            return False

        state = self._commit(lambda items: remove_task(items, task_id), loading=False)
        self._persist(state)
        return True

    def toggle_completed(self, task_id: int) -> Task | None:
        """Flip completion locally. Never sent to the remote."""
        if find_task(self._state.items, task_id) is None:
            return None
        state = self._commit(lambda items: toggle_task(items, task_id))
        self._persist(state)
        return find_task(state.items, task_id)

    def clear_error(self) -> None:
        self._commit(error=None)
