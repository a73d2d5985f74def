"""Session: request-scoped coordinator over the local, shared and durable tiers.

Usage:
    store = MemoryStore()
    shared = MemorySharedCache()

    session = Session(store, shared_cache=shared)
    post = Post(title="hello")
    session.put(post)                 # post.id assigned by the store

    again = Post(id=post.id)
    session.get(again)                # local cache hit, no store call

    # In async code
    await session.get_multi_async([a, b, c])
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from stratum.cache.adapter import SharedCacheAdapter
from stratum.cache.local import LocalCache
from stratum.cache.models import CacheEntry
from stratum.cache.protocol import SharedCache
from stratum.config import CacheSettings, StoreSettings
from stratum.core.entity.codec import apply_properties, to_properties
from stratum.core.entity.operations import assign_identity, resolve, resolve_or_fail
from stratum.core.errors import (
    IncompleteIdentityError,
    ItemError,
    MultiError,
    NotFoundError,
)
from stratum.core.identity import Identity, IdKind
from stratum.session.sync_runner import SyncRunner
from stratum.storage.adapter import StoreAdapter
from stratum.storage.protocol import DurableStore

logger = logging.getLogger(__name__)


class Session:
    """Serves Get/Put/Delete for entity values through three cache tiers.

    One session serves one logical request and owns a private LocalCache.
    It is not safe for concurrent calls; the tiers it fronts are.

    Args:
        store: Durable store (tier of record).
        shared_cache: Optional shared cache backend; None disables the tier.
        cache_settings: Shared cache expiry and batching.
        store_settings: Durable store batching, concurrency and retry.
    """

    def __init__(
        self,
        store: DurableStore,
        shared_cache: SharedCache | None = None,
        cache_settings: CacheSettings | None = None,
        store_settings: StoreSettings | None = None,
    ) -> None:
        self._store = StoreAdapter(store, store_settings or StoreSettings())
        self._shared = (
            SharedCacheAdapter(shared_cache, cache_settings or CacheSettings())
            if shared_cache is not None
            else None
        )
        self._local = LocalCache()

    @classmethod
    def from_settings(
        cls,
        store: DurableStore,
        cache_settings: CacheSettings | None = None,
        store_settings: StoreSettings | None = None,
    ) -> Session:
        """Create a session whose shared tier is Redis when configured.

        Without ``cache_settings.redis_url`` the session has no shared tier.
        """
        cache_settings = cache_settings or CacheSettings()
        shared: SharedCache | None = None
        if cache_settings.redis_url:
            from stratum.cache.redis_cache import RedisSharedCache

            shared = RedisSharedCache.from_settings(cache_settings)
        return cls(store, shared, cache_settings, store_settings)

    @property
    def local_cache(self) -> LocalCache:
        """This session's private cache tier."""
        return self._local

    # Identity

    def resolve(self, value: Any) -> Identity | None:
        """Identity of value, or None if its type declares no id field."""
        return resolve(value)

    def resolve_or_fail(self, value: Any) -> Identity:
        """Identity of value; raises IncompleteIdentityError if underivable."""
        return resolve_or_fail(value)

    @staticmethod
    def _complete_identities(values: Sequence[Any], operation: str) -> list[Identity]:
        identities = [resolve_or_fail(value) for value in values]
        for index, identity in enumerate(identities):
            if not identity.complete:
                raise IncompleteIdentityError(
                    f"{operation} requires a complete identity; item {index} is {identity}"
                )
        return identities

    # Get

    def _apply(self, value: Any, entry: CacheEntry) -> ItemError | None:
        if not entry.present:
            return NotFoundError(entry.identity)
        apply_properties(value, entry.properties or {})
        return None

    async def get_multi_async(self, values: Sequence[Any]) -> None:
        """Fill each value in place from the first tier that knows it.

        Lookup order: local cache, shared cache, durable store. Durable
        results (including confirmed absence) are written back to both caches.

        Raises:
            IncompleteIdentityError: If any value lacks a complete identity.
            MultiError: If any item failed; successful items are still filled.
        """
        identities = self._complete_identities(values, "get")
        errors: list[ItemError | None] = [None] * len(values)

        pending: list[int] = []
        for index, identity in enumerate(identities):
            entry = self._local.get(identity)
            if entry is None:
                pending.append(index)
            else:
                errors[index] = self._apply(values[index], entry)
        local_hits = len(values) - len(pending)

        if pending and self._shared is not None:
            cached = await self._shared.get_multi([identities[i] for i in pending])
            remaining: list[int] = []
            for index in pending:
                entry = cached.get(identities[index])
                if entry is None:
                    remaining.append(index)
                    continue
                self._local.put(entry)
                errors[index] = self._apply(values[index], entry)
            pending = remaining

        fetched = 0
        if pending:
            results = await self._store.get_multi([identities[i] for i in pending])
            write_back: list[CacheEntry] = []
            for index, result in zip(pending, results, strict=True):
                identity = identities[index]
                if isinstance(result, NotFoundError):
                    entry = CacheEntry.missing(identity)
                elif isinstance(result, ItemError):
                    errors[index] = result
                    continue
                else:
                    entry = CacheEntry.found(identity, result)
                    fetched += 1
                self._local.put(entry)
                write_back.append(entry)
                errors[index] = self._apply(values[index], entry)
            if write_back and self._shared is not None:
                await self._shared.put_multi(write_back)

        logger.debug(
            f"get_multi({len(values)}): {local_hits} local, "
            f"{len(values) - local_hits - len(pending)} shared, {len(pending)} durable "
            f"({fetched} found)"
        )
        if any(error is not None for error in errors):
            raise MultiError(errors)

    async def get_async(self, value: Any) -> None:
        """Fill one value in place.

        Raises:
            IncompleteIdentityError: If the value lacks a complete identity.
            NotFoundError: If the entity does not exist.
            ItemError: TransientError or other per-item failure.
        """
        try:
            await self.get_multi_async([value])
        except MultiError as e:
            error = e.errors[0]
            if error is None:
                raise
            raise error from error.__cause__

    # Put

    async def put_multi_async(self, values: Sequence[Any]) -> list[Identity]:
        """Write values to the durable store, then through to both caches.

        Values with incomplete identities get their store-assigned id written
        back into their id field.

        Returns:
            Complete identities in input order.

        Raises:
            IncompleteIdentityError: If a value's identity cannot be derived,
                or an incomplete identity uses a string id.
            CallLevelError: If the durable write failed.
        """
        identities = [resolve_or_fail(value) for value in values]
        for index, identity in enumerate(identities):
            if not identity.complete and identity.id_kind is IdKind.STRING:
                raise IncompleteIdentityError(
                    f"put of item {index} needs a string id; only numeric ids are assigned"
                )
        properties = [to_properties(value) for value in values]

        try:
            assigned = await self._store.put_multi(list(zip(identities, properties, strict=True)))
        except Exception:
            known = [identity for identity in identities if identity.complete]
            for identity in known:
                self._local.delete(identity)
            if known and self._shared is not None:
                await self._shared.delete_multi(known)
            raise

        entries: list[CacheEntry] = []
        for value, before, after, props in zip(values, identities, assigned, properties, strict=True):
            if not before.complete:
                assign_identity(value, after)
            entry = CacheEntry.found(after, props)
            self._local.put(entry)
            entries.append(entry)
        if entries and self._shared is not None:
            await self._shared.put_multi(entries)
        return assigned

    async def put_async(self, value: Any) -> Identity:
        """Write one value; returns its complete identity."""
        return (await self.put_multi_async([value]))[0]

    # Delete

    async def delete_multi_async(self, values: Sequence[Any]) -> None:
        """Delete entities and invalidate them in both cache tiers.

        Invalidation runs even when the durable delete fails.

        Raises:
            IncompleteIdentityError: If any value lacks a complete identity.
            CallLevelError: If the durable delete failed.
        """
        identities = self._complete_identities(values, "delete")
        try:
            await self._store.delete_multi(identities)
        finally:
            for identity in identities:
                self._local.delete(identity)
            if identities and self._shared is not None:
                await self._shared.delete_multi(identities)

    async def delete_async(self, value: Any) -> None:
        """Delete one entity."""
        await self.delete_multi_async([value])

    # Flush

    async def flush_shared_cache_async(self) -> None:
        """Invalidate every shared cache entry; no-op without a shared tier.

        Raises:
            CallLevelError: If the backend could not be flushed.
        """
        if self._shared is not None:
            await self._shared.flush()

    def flush_local_cache(self) -> None:
        """Forget everything this session has cached locally."""
        self._local.clear()

    # Blocking wrappers

    def get(self, value: Any) -> None:
        """Synchronous wrapper for get_async."""
        SyncRunner.get().run(self.get_async(value))

    def get_multi(self, values: Sequence[Any]) -> None:
        """Synchronous wrapper for get_multi_async."""
        SyncRunner.get().run(self.get_multi_async(values))

    def put(self, value: Any) -> Identity:
        """Synchronous wrapper for put_async."""
        return SyncRunner.get().run(self.put_async(value))

    def put_multi(self, values: Sequence[Any]) -> list[Identity]:
        """Synchronous wrapper for put_multi_async."""
        return SyncRunner.get().run(self.put_multi_async(values))

    def delete(self, value: Any) -> None:
        """Synchronous wrapper for delete_async."""
        SyncRunner.get().run(self.delete_async(value))

    def delete_multi(self, values: Sequence[Any]) -> None:
        """Synchronous wrapper for delete_multi_async."""
        SyncRunner.get().run(self.delete_multi_async(values))

    def flush_shared_cache(self) -> None:
        """Synchronous wrapper for flush_shared_cache_async."""
        SyncRunner.get().run(self.flush_shared_cache_async())
