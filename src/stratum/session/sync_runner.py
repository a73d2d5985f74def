"""Blocking bridge for Session's async operations."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar

T = TypeVar("T")


class SyncRunner:
    """Thread-safe async runner for sync contexts. Singleton per process.

    Keeps one event loop alive on a daemon thread so loop-bound clients
    (e.g. redis asyncio connection pools) survive across blocking calls.
    """

    _instance: SyncRunner | None = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None

    @classmethod
    def get(cls) -> SyncRunner:
        """Get the singleton SyncRunner instance, creating it if necessary."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    inst = cls()
                    inst._start()
                    cls._instance = inst
        return cls._instance

    def _start(self) -> None:
        """Start the background event loop thread."""
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever,
            daemon=True,
            name="stratum-sync-loop",
        )
        self._thread.start()

    def run(self, coro: Coroutine[Any, Any, T]) -> T:
        """Run a coroutine on the background loop, blocking until complete.

        Raises:
            RuntimeError: If called from the runner's own loop (would deadlock).
        """
        if self._loop is None:
            raise RuntimeError("Runner not initialized")
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            coro.close()
            raise RuntimeError("Blocking Session call made from its own event loop; use *_async")
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()
