"""Request-scoped in-process cache tier.

One LocalCache belongs to one Session and dies with it. It is a plain dict
keyed by Identity equality and is not safe for concurrent mutation.
"""

from __future__ import annotations

from stratum.cache.models import CacheEntry
from stratum.core.identity import Identity


class LocalCache:
    """Mapping from identity to the latest known CacheEntry."""

    def __init__(self) -> None:
        self._entries: dict[Identity, CacheEntry] = {}

    def get(self, identity: Identity) -> CacheEntry | None:
        """Cached entry for identity, or None if this tier has never seen it."""
        return self._entries.get(identity)

    def put(self, entry: CacheEntry) -> None:
        """Store or overwrite the entry for its identity."""
        self._entries[entry.identity] = entry

    def delete(self, identity: Identity) -> None:
        """Forget identity; no-op if absent."""
        self._entries.pop(identity, None)

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)
