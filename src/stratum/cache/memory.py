"""In-process shared cache backend.

Suitable for single-process use and testing: several sessions can share one
instance the way they would share a Redis server.

Usage:
    shared = MemorySharedCache()
    session_a = Session(store, shared_cache=shared)
    session_b = Session(store, shared_cache=shared)
"""

from __future__ import annotations

import time
from collections.abc import Callable, Mapping, Sequence


class MemorySharedCache:
    """Dict-backed SharedCache with per-key expiry.

    Args:
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._items: dict[str, tuple[bytes, float | None]] = {}

    def _live(self, key: str) -> bytes | None:
        item = self._items.get(key)
        if item is None:
            return None
        data, expires_at = item
        if expires_at is not None and expires_at <= self._clock():
            del self._items[key]
            return None
        return data

    async def get_multi(self, keys: Sequence[str]) -> dict[str, bytes]:
        """Fetch present, unexpired keys."""
        found: dict[str, bytes] = {}
        for key in keys:
            data = self._live(key)
            if data is not None:
                found[key] = data
        return found

    async def set_multi(self, items: Mapping[str, bytes], expiry: float | None = None) -> None:
        """Store items; `expiry` of None or <= 0 means no expiry."""
        expires_at = self._clock() + expiry if expiry and expiry > 0 else None
        for key, data in items.items():
            self._items[key] = (bytes(data), expires_at)

    async def delete_multi(self, keys: Sequence[str]) -> None:
        """Remove keys."""
        for key in keys:
            self._items.pop(key, None)

    async def flush(self) -> None:
        """Drop everything."""
        self._items.clear()

    def __len__(self) -> int:
        return sum(1 for key in list(self._items) if self._live(key) is not None)
