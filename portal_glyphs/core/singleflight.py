"""
Single-Flight
=============

Per-key deduplication of in-flight coroutines: while a computation for a key is
running, later callers for the same key await its result instead of starting
another one.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Hashable, TypeVar

from portal_glyphs.config.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class SingleFlight:
    """Run at most one task per key; share its outcome with every waiter."""

    def __init__(self) -> None:
        self._inflight: Dict[Hashable, "asyncio.Task[Any]"] = {}
        self.logger: Any = logger.bind(component="single_flight")

    @property
    def in_flight(self) -> int:
        return len(self._inflight)

    def is_running(self, key: Hashable) -> bool:
        return key in self._inflight

    async def do(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the shared computation for ``key``, starting it if none is running.

        The shared task is shielded: cancelling a waiter (client disconnect,
        request deadline) leaves the task running for the remaining waiters and
        for its side effects. The key is released once the task finishes,
        whether it succeeded or failed.
        """
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._release(key, done))
            self.logger.debug("Started flight", key=key)
        else:
            self.logger.debug("Joined flight", key=key)

        return await asyncio.shield(task)

    def _release(self, key: Hashable, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
        # Mark the exception retrieved; every waiter may have gone away.
        if not task.cancelled() and task.exception() is not None:
            self.logger.debug("Flight failed", key=key, error=str(task.exception()))
