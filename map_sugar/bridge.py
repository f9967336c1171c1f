"""Run the async transforms from synchronous code on a dedicated loop thread."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import TYPE_CHECKING, Any, Self, TypeVar


if TYPE_CHECKING:
    from collections.abc import Coroutine
    from concurrent.futures import Future
    from types import TracebackType


logger = logging.getLogger(__name__)

_T = TypeVar("_T")

_SHUTDOWN_TIMEOUT = 5


async def _cancel_pending() -> int:
    """Cancel every other task on the running loop and wait for them to settle."""
    current = asyncio.current_task()
    pending = [task for task in asyncio.all_tasks() if task is not current]
    for task in pending:
        _ = task.cancel()
    _ = await asyncio.gather(*pending, return_exceptions=True)
    return len(pending)


class AsyncLoopBridge:
    """Owns an asyncio event loop running forever in a daemon thread.

    Coroutines are submitted with :func:`asyncio.run_coroutine_threadsafe`, so
    :meth:`run` blocks the caller but works even when the caller is itself
    running inside an event loop.

    :meth:`close` cancels whatever is still running on the loop before stopping
    it; callers blocked in :meth:`run` then get
    :class:`concurrent.futures.CancelledError` instead of waiting forever.
    """

    def __init__(self) -> None:
        super().__init__()
        self._started = threading.Event()
        self._loop = asyncio.new_event_loop()
        self._accepting = True
        self._worker = threading.Thread(target=self._serve, name="map-sugar-bridge", daemon=True)
        self._worker.start()
        _ = self._started.wait()

    def _serve(self) -> None:
        asyncio.set_event_loop(self._loop)
        _ = self._loop.call_soon(self._started.set)
        logger.debug("bridge loop serving on thread %s", threading.current_thread().name)
        try:
            self._loop.run_forever()
        finally:
            self._loop.close()
            logger.debug("bridge loop closed")

    def run(self, coroutine: Coroutine[Any, Any, _T]) -> _T:
        """Run ``coroutine`` on the bridge loop and return its result."""
        if not self._accepting:
            coroutine.close()
            msg = "bridge loop is not running"
            raise RuntimeError(msg)
        future: Future[_T] = asyncio.run_coroutine_threadsafe(coroutine, self._loop)
        return future.result()

    def close(self) -> None:
        """Cancel pending work, stop the loop and join its thread.

        Safe to call more than once.
        """
        if not self._accepting:
            return
        self._accepting = False
        cancelled = asyncio.run_coroutine_threadsafe(_cancel_pending(), self._loop).result(
            timeout=_SHUTDOWN_TIMEOUT
        )
        if cancelled:
            logger.debug("bridge cancelled %d pending task(s) on close", cancelled)
        _ = self._loop.call_soon_threadsafe(self._loop.stop)
        self._worker.join(timeout=_SHUTDOWN_TIMEOUT)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


def run_sync(coroutine: Coroutine[Any, Any, _T]) -> _T:
    """Run a single coroutine to completion on a short-lived bridge.

    >>> from map_sugar import map_values_async
    >>> run_sync(map_values_async({"a": 1}, str))
    {'a': '1'}
    """
    with AsyncLoopBridge() as bridge:
        return bridge.run(coroutine)
