"""
Periodic task scheduling for the poll and retention paths.
"""

import asyncio
import contextlib
import logging
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)

PeriodicTask = Callable[[], Awaitable[Any]]


class Scheduler(Protocol):
    """Protocol for schedulers that run a coroutine function at a fixed period."""

    def schedule(self, task: PeriodicTask, delay: float, period: float) -> Any:
        """
        Run task() after `delay` seconds, then every `period` seconds.
        Returns a handle for cancel(). Runs of the same task must not overlap.
        """

    async def cancel(self, handle: Any) -> None:
        """Stop a scheduled task. A run in progress may finish or be cancelled."""


class AsyncioScheduler:
    """
    Scheduler backed by one asyncio.Task per scheduled callback.

    Each task awaits its callback before sleeping again, so runs of one task
    never overlap and the period is the delay between the end of one run and
    the start of the next. Exceptions from a run are logged and the schedule
    continues.
    """

    def schedule(
        self, task: PeriodicTask, delay: float, period: float
    ) -> asyncio.Task:
        name = getattr(task, "__name__", repr(task))
        return asyncio.create_task(
            self._run(task, delay, period), name=f"sqlbus:{name}"
        )

    async def cancel(self, handle: asyncio.Task) -> None:
        if handle.done():
            return
        handle.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await handle

    @staticmethod
    async def _run(task: PeriodicTask, delay: float, period: float) -> None:
        await asyncio.sleep(delay)
        while True:
            try:
                await task()
            except Exception:  # pylint: disable=broad-exception-caught
                logger.exception("scheduled task %r failed", task)
            await asyncio.sleep(period)
