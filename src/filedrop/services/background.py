"""Worker pool for fire-and-forget relocation tasks."""
from __future__ import annotations
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any
from filedrop.logging import logger


class BackgroundRunner:
    """Thin wrapper over a thread pool; callers never wait on the returned future."""

    def __init__(self, max_workers: int = 4) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="relocation",
        )

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(_log_escaped_exception)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


def _log_escaped_exception(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Background task raised: %r", exc, exc_info=exc)
