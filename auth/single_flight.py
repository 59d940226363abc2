from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable


class SingleFlight:
    """Collapse concurrent calls for the same key into one running task.

    The lookup and the insertion in ``do`` happen without an ``await`` in
    between, so on one event loop no two callers can both start work for a
    key. The task removes its own entry before it settles.
    """

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    def in_flight(self, key: str) -> bool:
        return key in self._tasks

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(self._run(key, fn))
            self._tasks[key] = task
            task.add_done_callback(_retrieve_exception)
        # shield: one waiter being cancelled must not cancel the shared task
        return await asyncio.shield(task)

    def reset(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()

    async def _run(self, key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fn()
        finally:
            if self._tasks.get(key) is asyncio.current_task():
                del self._tasks[key]


def _retrieve_exception(task: asyncio.Task) -> None:
    # keeps asyncio quiet when every waiter was cancelled before the task failed
    if not task.cancelled():
        task.exception()
