"""
Event loop running on a daemon thread.

Used by TrainingSessionMachine when the host drives it from plain
synchronous code (a UI timer, a CLI loop) and no asyncio loop is running.
"""

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Coroutine, Optional

logger = logging.getLogger(__name__)


class BackgroundEventLoop:
    """Owns one event loop and the thread that runs it."""

    def __init__(self, name: str = "training-session-estimates") -> None:
        self._loop = asyncio.new_event_loop()
        self._ready = threading.Event()
        self._thread = threading.Thread(target=self._run_loop, name=name, daemon=True)
        self._thread.start()
        self._ready.wait(timeout=5.0)

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._ready.set()
        self._loop.run_forever()
        pending = asyncio.all_tasks(self._loop)
        for task in pending:
            task.cancel()
        if pending:
            self._loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
        self._loop.close()

    @property
    def is_running(self) -> bool:
        return self._thread.is_alive()

    def submit(self, coro: Coroutine[Any, Any, None]) -> concurrent.futures.Future:
        """Schedule coro on the loop thread; safe to call from any thread."""
        return asyncio.run_coroutine_threadsafe(coro, self._loop)

    def shutdown(self, timeout: Optional[float] = 5.0) -> None:
        """Stop the loop, cancelling whatever is still in flight."""
        if not self._thread.is_alive():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning(f"Background event loop did not stop within {timeout}s")
