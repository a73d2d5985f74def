"""Shared cache backend protocol.

A backend is a volatile byte store keyed by string, shared between sessions
and processes. It may lose entries at any time; the SharedCacheAdapter
layers typed, best-effort semantics on top.

Usage:
    backend = MemorySharedCache()          # in-process, for tests/dev
    backend = RedisSharedCache.from_url("redis://localhost:6379/0")
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class SharedCache(Protocol):
    """Batched get/set/delete/flush over a best-effort byte store."""

    async def get_multi(self, keys: Sequence[str]) -> dict[str, bytes]:
        """Fetch the keys that are present. Missing keys are simply absent."""
        ...

    async def set_multi(self, items: Mapping[str, bytes], expiry: float | None = None) -> None:
        """Store every item, expiring after `expiry` seconds (None = backend default)."""
        ...

    async def delete_multi(self, keys: Sequence[str]) -> None:
        """Remove keys; missing keys are ignored."""
        ...

    async def flush(self) -> None:
        """Invalidate every entry owned by this cache."""
        ...
