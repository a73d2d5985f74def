"""Durable store protocol for swappable backends.

The durable store is the tier of record. Implementations must answer every
lookup with either the stored properties or a NotFoundError; a missing
answer is never acceptable the way it is for the shared cache.

Usage:
    store = MemoryStore()
    session = Session(store)
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from stratum.core.entity.codec import Properties
from stratum.core.errors import ItemError
from stratum.core.identity import Identity


@runtime_checkable
class DurableStore(Protocol):
    """Abstract durable store interface. Implementations handle actual data."""

    async def get_multi(self, identities: Sequence[Identity]) -> list[Properties | ItemError]:
        """Fetch entities in input order.

        Each slot is the stored properties, a NotFoundError, or another
        ItemError (e.g. TransientError) for that identity. Raising instead
        fails every identity in the call.
        """
        ...

    async def put_multi(self, items: Sequence[tuple[Identity, Properties]]) -> list[Identity]:
        """Write entities, returning their identities in input order.

        Incomplete identities receive a newly allocated numeric id.
        """
        ...

    async def delete_multi(self, identities: Sequence[Identity]) -> None:
        """Delete entities; deleting a missing entity is not an error."""
        ...
