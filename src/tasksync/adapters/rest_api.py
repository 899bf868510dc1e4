"""REST API adapter - HTTP client for the remote task collection."""

import logging
import random
import time
from datetime import datetime
from typing import Callable

import requests

from tasksync.config import Config, load_config
from tasksync.core.tasks import (
    LOCAL_ID_THRESHOLD,
    Origin,
    Priority,
    Task,
    format_timestamp,
    utc_now,
)
from tasksync.ports.task_remote import RemoteUnavailable

logger = logging.getLogger(__name__)


class RestTaskAdapter:
    """
    REST collection adapter.

    Implements TaskRemote protocol. Every call goes through a bounded retry
    loop with linear backoff. No business logic - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
        rng: random.Random | None = None,
    ):
        self.config = config or load_config()
        self._session = session or requests.Session()
        self._sleep = sleep
        self._clock = clock
        self._rng = rng or random.Random()
        self._last_local_id = LOCAL_ID_THRESHOLD

    def _now(self) -> str:
        return format_timestamp(self._clock())

    def _request(self, method: str, endpoint: str, **kwargs) -> dict | list:
        """Make an API request, retrying failed attempts."""
        url = f"{self.config.api_base_url}{endpoint}"
        attempts = max(1, self.config.max_attempts)
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                resp = self._session.request(
                    method, url, timeout=self.config.request_timeout, **kwargs
                )
                resp.raise_for_status()
                return resp.json() if resp.content else {}
            except (requests.RequestException, ValueError) as e:
                last_error = e
                # Backoff grows with each failed attempt, including the last
                delay = self.config.retry_base_delay * attempt
                logger.warning(
                    f"{method} {endpoint} failed (attempt {attempt}/{attempts}): {e}"
                )
                self._sleep(delay)

        logger.error(f"{method} {endpoint} giving up after {attempts} attempts")
        raise RemoteUnavailable(str(last_error)) from last_error

    def _simulate(self, item: dict) -> dict:
        """Fill in fields the placeholder fixture does not provide."""
        return {
            **item,
            "priority": self._rng.choice([Priority.LOW.value, Priority.HIGH.value]),
            "createdAt": self._now(),
        }

    def fetch_all(self) -> list[Task]:
        """Fetch the first page of tasks."""
        page_size = self.config.page_size
        data = self._request("GET", "/todos", params={"_limit": page_size})
        if not isinstance(data, list):
            raise RemoteUnavailable(f"Expected a list of tasks, got {type(data).__name__}")

        tasks = []
        for item in data[:page_size]:
            if not isinstance(item, dict) or "id" not in item:
                continue
            if self.config.simulate_fields:
                item = self._simulate(item)
            try:
                tasks.append(Task.from_dict(item, origin=Origin.REMOTE))
            except (TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed remote task {item!r}: {e}")
        logger.debug(f"Fetched {len(tasks)} tasks")
        return tasks

    def _next_local_id(self) -> int:
        """Millisecond timestamp, bumped if the clock has not moved on."""
        candidate = int(self._clock().timestamp() * 1000)
        self._last_local_id = max(candidate, self._last_local_id + 1)
        return self._last_local_id

    def create(self, draft: dict) -> Task:
        """Create a task, under the configured id policy."""
        payload = {
            **draft,
            "userId": self.config.user_id,
            "createdAt": draft.get("createdAt") or self._now(),
        }

        if self.config.id_policy == "local":
            payload["id"] = self._next_local_id()
            return Task.from_dict(payload, origin=Origin.LOCAL)

        data = self._request(
            "POST",
            "/todos",
            json={
                "title": draft["title"],
                "completed": False,
                "userId": self.config.user_id,
            },
        )
        if not isinstance(data, dict) or "id" not in data:
            raise RemoteUnavailable("Create response did not include an id")
        return Task.from_dict({**payload, **data}, origin=Origin.LOCAL)

    def update(self, task_id: int, changes: dict) -> Task:
        """Send changes for a task and return the server copy with them applied."""
        body = {k: v for k, v in changes.items() if k != "origin"}
        data = self._request("PUT", f"/todos/{task_id}", json=body)
        if not isinstance(data, dict):
            data = {}
        return Task.from_dict(
            {**data, **body, "id": task_id, "updatedAt": self._now()}
        )

    def delete(self, task_id: int) -> bool:
        """Delete a task."""
        self._request("DELETE", f"/todos/{task_id}")
        return True
