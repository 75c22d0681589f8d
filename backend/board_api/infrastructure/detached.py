"""Detached Tasks — fire-and-forget execution whose outcome is only logged.

Invariants:
    - spawn_detached() returns immediately; the caller never awaits the task
    - The task's outcome (result, exception, cancellation) is observed only by
      a done-callback that logs
    - DetachedTasks keeps a strong reference until the task finishes
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any

logger = logging.getLogger(__name__)


class DetachedTasks:
    """Owns detached tasks for one process-wide service."""

    def __init__(self, name: str):
        self.name = name
        self._tasks: set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], label: str) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(
            coro, name=f"{self.name}:{label}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            logger.warning(f"Detached task {task.get_name()} was cancelled")
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Detached task {task.get_name()} failed: {exc}",
                exc_info=exc,
            )

    async def drain(self, timeout: float) -> None:
        """Wait up to `timeout` seconds for pending tasks, then cancel the rest."""
        pending = set(self._tasks)
        if not pending:
            return
        _, still_running = await asyncio.wait(pending, timeout=timeout)
        for task in still_running:
            task.cancel()
        if still_running:
            await asyncio.gather(*still_running, return_exceptions=True)
