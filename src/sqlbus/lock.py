"""
Shared/exclusive lock for asyncio.

I/O paths (publish, poll, retention) hold the shared side and may run
together. Lifecycle transitions (start, close) hold the exclusive side, so
they wait for in-flight I/O to finish and block new I/O until they are done.
Waiting writers take precedence over new readers.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator


class ReadWriteLock:
    """Writer-preferring read/write lock for coroutines on one event loop."""

    def __init__(self) -> None:
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @property
    def readers(self) -> int:
        """Number of coroutines currently holding the shared side."""
        return self._readers

    @property
    def locked_exclusive(self) -> bool:
        """True while a coroutine holds the exclusive side."""
        return self._writer

    @asynccontextmanager
    async def shared(self) -> AsyncIterator[None]:
        """Hold the shared side for the duration of the block."""
        async with self._cond:
            await self._cond.wait_for(
                lambda: not self._writer and not self._writers_waiting
            )
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator[None]:
        """Hold the exclusive side for the duration of the block."""
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(
                    lambda: not self._writer and not self._readers
                )
            finally:
                self._writers_waiting -= 1
                if not self._writer and not self._writers_waiting:
                    # Cancelled while waiting: readers blocked on us can go on
                    self._cond.notify_all()
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()
