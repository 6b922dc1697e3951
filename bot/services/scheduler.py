from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

LOGGER = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class ScheduledTask:
    """Handle for a callback that fires once after a delay."""

    def __init__(self, name: str, delay: float, due_at: float) -> None:
        self.name = name
        self.delay = delay
        # In event loop time (``loop.time()``).
        self.due_at = due_at
        self._task: asyncio.Task[None] | None = None

    def _attach(self, task: asyncio.Task[None]) -> None:
        self._task = task

    def cancel(self) -> bool:
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    def add_done_callback(self, callback: Callable[[ScheduledTask], None]) -> None:
        """Run ``callback(handle)`` once the task finishes, is cancelled or fails."""
        if self._task is None:
            raise RuntimeError(f"{self.name} is not scheduled")
        self._task.add_done_callback(lambda _task: callback(self))

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancelled(self) -> bool:
        return self._task is not None and self._task.cancelled()

    async def wait(self) -> None:
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise


class TaskScheduler:
    """Runs fire-once delayed callbacks as event loop tasks.

    ``sleep`` is injectable so tests can drive time by hand.
    """

    def __init__(self, sleep: SleepFn | None = None) -> None:
        self._sleep: SleepFn = sleep or asyncio.sleep
        self._tasks: set[asyncio.Task[None]] = set()

    def schedule(
        self,
        delay: float,
        callback: Callable[[], Awaitable[None]],
        *,
        name: str = "scheduled-task",
    ) -> ScheduledTask:
        loop = asyncio.get_running_loop()
        handle = ScheduledTask(name=name, delay=delay, due_at=loop.time() + delay)
        task = loop.create_task(self._run(delay, callback, name), name=name)
        # The loop only keeps weak references to tasks.
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        handle._attach(task)
        return handle

    async def _run(self, delay: float, callback: Callable[[], Awaitable[None]], name: str) -> None:
        await self._sleep(delay)
        try:
            await callback()
        except Exception:
            LOGGER.exception("Scheduled task %s failed", name)

    def cancel_all(self) -> None:
        for task in list(self._tasks):
            task.cancel()

    @property
    def pending(self) -> int:
        return len(self._tasks)
