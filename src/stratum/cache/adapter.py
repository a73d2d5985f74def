"""Typed, best-effort access to a shared cache backend.

The shared cache is never the tier of record. Any backend failure is logged
and turned into a miss (reads) or ignored (writes) so the session can fall
through to the durable store. Only an explicit flush() reports failure.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TypeVar

from stratum.cache.models import CacheEntry
from stratum.cache.protocol import SharedCache
from stratum.config import CacheSettings
from stratum.core.batching import chunked
from stratum.core.errors import CallLevelError
from stratum.core.identity import Identity

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SharedCacheAdapter:
    """Identity/CacheEntry view over a SharedCache backend.

    Args:
        backend: Byte-level shared cache implementation.
        settings: Expiry and batching configuration.
    """

    def __init__(self, backend: SharedCache, settings: CacheSettings | None = None) -> None:
        self._backend = backend
        self._settings = settings or CacheSettings()

    @property
    def backend(self) -> SharedCache:
        """Get the underlying backend."""
        return self._backend

    async def _each_chunk(
        self,
        operation: str,
        keys: Sequence[T],
        call: Callable[[Sequence[T]], Awaitable[None]],
    ) -> None:
        """Run `call` on every chunk concurrently, logging and dropping failures."""

        async def guarded(chunk: Sequence[T]) -> None:
            try:
                await call(chunk)
            except Exception as e:
                logger.warning(f"Shared cache {operation} failed for {len(chunk)} keys: {e!r}")

        await asyncio.gather(*(guarded(c) for c in chunked(keys, self._settings.max_batch)))

    async def get_multi(self, identities: Sequence[Identity]) -> dict[Identity, CacheEntry]:
        """Look up identities; failures and undecodable payloads count as misses."""
        by_key = {identity.encode(): identity for identity in identities}
        found: dict[Identity, CacheEntry] = {}

        async def fetch(keys: Sequence[str]) -> None:
            for key, data in (await self._backend.get_multi(keys)).items():
                identity = by_key.get(key)
                if identity is None:
                    continue
                try:
                    found[identity] = CacheEntry.from_bytes(identity, data)
                except ValueError as e:
                    logger.warning(f"Discarding undecodable shared cache entry {key!r}: {e}")

        await self._each_chunk("get", list(by_key), fetch)
        logger.debug(f"Shared cache hit {len(found)}/{len(by_key)}")
        return found

    async def put_multi(self, entries: Iterable[CacheEntry]) -> None:
        """Write entries, positive and negative ones with their own expiry."""
        positive: dict[str, bytes] = {}
        negative: dict[str, bytes] = {}
        for entry in entries:
            try:
                data = entry.to_bytes()
            except (TypeError, ValueError) as e:
                logger.warning(f"Not caching {entry.identity}: {e}")
                continue
            (positive if entry.present else negative)[entry.identity.encode()] = data

        await asyncio.gather(
            self._set_multi(positive, self._settings.expiry_seconds),
            self._set_multi(negative, self._settings.negative_expiry_seconds),
        )

    async def _set_multi(self, items: dict[str, bytes], expiry: float | None) -> None:
        if not items:
            return

        async def store(keys: Sequence[str]) -> None:
            await self._backend.set_multi({k: items[k] for k in keys}, expiry)

        await self._each_chunk("put", list(items), store)

    async def delete_multi(self, identities: Iterable[Identity]) -> None:
        """Invalidate identities."""
        keys = list(dict.fromkeys(identity.encode() for identity in identities))
        if keys:
            await self._each_chunk("delete", keys, self._backend.delete_multi)

    async def flush(self) -> None:
        """Invalidate every entry.

        Raises:
            CallLevelError: If the backend could not be flushed.
        """
        try:
            await self._backend.flush()
        except Exception as e:
            raise CallLevelError(f"Shared cache flush failed: {e}") from e
