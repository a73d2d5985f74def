"""Shared test fixtures."""

from collections.abc import Sequence

import pytest

from stratum import Identity, ItemError, MemorySharedCache, MemoryStore, Session
from stratum.core.entity.codec import Properties


class CountingStore(MemoryStore):
    """MemoryStore that records every batch of identities it is asked to read."""

    def __init__(self, max_batch: int | None = None) -> None:
        super().__init__(max_batch=max_batch)
        self.get_calls: list[list[Identity]] = []

    async def get_multi(self, identities: Sequence[Identity]) -> list[Properties | ItemError]:
        self.get_calls.append(list(identities))
        return await super().get_multi(identities)

    @property
    def reads(self) -> int:
        """Total identities read across all calls."""
        return sum(len(call) for call in self.get_calls)


@pytest.fixture
def store() -> CountingStore:
    """Fresh durable store that counts reads."""
    return CountingStore()


@pytest.fixture
def shared() -> MemorySharedCache:
    """Fresh in-process shared cache."""
    return MemorySharedCache()


@pytest.fixture
def session(store: CountingStore, shared: MemorySharedCache) -> Session:
    """Session over the store and shared cache fixtures."""
    return Session(store, shared_cache=shared)


@pytest.fixture
def new_session(store: CountingStore, shared: MemorySharedCache):
    """Factory for additional sessions sharing the same tiers (a new request)."""

    def factory() -> Session:
        return Session(store, shared_cache=shared)

    return factory
