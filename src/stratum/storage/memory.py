"""Local in-memory durable store implementation.

Dict-based store suitable for single-process use and testing. Values are
deep-copied on the way in and out so callers never alias stored state.

Usage:
    store = MemoryStore()
    session = Session(store, shared_cache=MemorySharedCache())
"""

from __future__ import annotations

import copy as cp
from collections.abc import Sequence

from stratum.core.entity.codec import Properties
from stratum.core.errors import ItemError, NotFoundError
from stratum.core.identity import Identity
from stratum.storage.allocator import IdAllocator


class MemoryStore:
    """Simple in-memory DurableStore.

    Args:
        max_batch: Reject calls carrying more items than this, the way hosted
            stores enforce per-call limits (None = unlimited).
    """

    def __init__(self, max_batch: int | None = None) -> None:
        """Initialize an empty store.

        Args:
            max_batch: Optional per-call item limit.
        """
        self._max_batch = max_batch
        self._allocator = IdAllocator()
        self._records: dict[Identity, Properties] = {}

    def _check_batch(self, operation: str, size: int) -> None:
        if self._max_batch is not None and size > self._max_batch:
            raise ValueError(f"{operation} of {size} items exceeds batch limit {self._max_batch}")

    async def get_multi(self, identities: Sequence[Identity]) -> list[Properties | ItemError]:
        """Fetch stored properties in input order.

        Args:
            identities: Complete identities to look up.

        Returns:
            Properties copy or NotFoundError per identity.
        """
        self._check_batch("get", len(identities))
        results: list[Properties | ItemError] = []
        for identity in identities:
            if not identity.complete:
                results.append(ItemError(f"incomplete identity: {identity}", identity))
                continue
            record = self._records.get(identity)
            results.append(NotFoundError(identity) if record is None else cp.deepcopy(record))
        return results

    async def put_multi(self, items: Sequence[tuple[Identity, Properties]]) -> list[Identity]:
        """Store entities, allocating ids for incomplete identities.

        Ids are allocated for the whole call before anything is written.

        Args:
            items: (identity, properties) pairs.

        Returns:
            Complete identities in input order.
        """
        self._check_batch("put", len(items))
        assigned = [self._allocator.complete(identity) for identity, _ in items]
        for identity, (_, properties) in zip(assigned, items, strict=True):
            self._records[identity] = cp.deepcopy(properties)
        return assigned

    async def delete_multi(self, identities: Sequence[Identity]) -> None:
        """Delete entities; missing ones are ignored.

        Args:
            identities: Identities to delete.
        """
        self._check_batch("delete", len(identities))
        for identity in identities:
            self._records.pop(identity, None)

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __len__(self) -> int:
        return len(self._records)
