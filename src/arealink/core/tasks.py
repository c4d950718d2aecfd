import asyncio
import logging
import weakref
from collections.abc import Coroutine
from typing import Any

LOGGER = logging.getLogger(__name__)

DEFAULT_CANCEL_TIMEOUT_SECONDS = 5


class TaskBucket:
    """Background tasks of one owner, such as the client's receive loop and refresh timer.

    Finished tasks drop out on their own. A task that dies with an exception is logged as soon
    as it finishes, so a crashed receive loop does not go unnoticed until shutdown.
    """

    def __init__(self, name: str, cancellation_timeout: float | None = None) -> None:
        self.name = name
        self.cancel_timeout = DEFAULT_CANCEL_TIMEOUT_SECONDS if cancellation_timeout is None else cancellation_timeout
        self._tasks: weakref.WeakSet[asyncio.Task[Any]] = weakref.WeakSet()

    def __len__(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task[Any]:
        """Start `coro` as a task owned by this bucket."""
        task = asyncio.create_task(coro, name=name)
        self.add(task)
        return task

    def add(self, task: asyncio.Task[Any]) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            LOGGER.error("[%s] task %s crashed", self.name, task.get_name(), exc_info=exc)

    async def cancel_all(self) -> list[asyncio.Task[Any]]:
        """Cancel every running task and wait up to `cancel_timeout` for them to stop.

        The calling task is never cancelled, so a task may close its own bucket.

        Returns:
            The tasks that were still running when the timeout expired.
        """
        current = asyncio.current_task()
        running = [task for task in list(self._tasks) if task is not current and not task.done()]
        if not running:
            return []

        for task in running:
            task.cancel()
        _, stragglers = await asyncio.wait(running, timeout=self.cancel_timeout)

        for task in stragglers:
            LOGGER.warning(
                "[%s] task %s still running %.1fs after cancellation", self.name, task.get_name(), self.cancel_timeout
            )
        return list(stragglers)
