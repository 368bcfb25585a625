"""Threading helpers for background work."""
from __future__ import annotations

import concurrent.futures
from typing import Callable

from ghostwriter.core.logging import get_logger


class BackgroundWorkers:
    """Shared thread pool for blocking I/O that must stay off the UI thread.

    Tasks are tracked by key; submitting under a key that is still pending
    cancels the earlier task.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="ghostwriter"
        )
        self._tasks: dict[str, concurrent.futures.Future] = {}
        self._shutting_down = False
        self.logger = get_logger(__name__)

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    def submit(self, key: str, func: Callable, *args, **kwargs) -> concurrent.futures.Future | None:
        if self._shutting_down:
            self.logger.debug("Rejecting task %s: worker pool is shutting down", key)
            return None
        self.cancel(key)
        try:
            future = self._executor.submit(func, *args, **kwargs)
        except RuntimeError:
            self.logger.debug("Executor refused task %s", key, exc_info=True)
            return None
        self._tasks[key] = future
        future.add_done_callback(lambda done, task_key=key: self._forget(task_key, done))
        return future

    def cancel(self, key: str) -> None:
        future = self._tasks.pop(key, None)
        if future and not future.done():
            future.cancel()

    def shutdown(self, wait: bool = False) -> None:
        self._shutting_down = True
        for key in list(self._tasks):
            self.cancel(key)
        self._executor.shutdown(wait=wait, cancel_futures=True)

    def _forget(self, key: str, future: concurrent.futures.Future) -> None:
        if self._tasks.get(key) is future:
            self._tasks.pop(key, None)
