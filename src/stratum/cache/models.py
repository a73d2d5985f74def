"""Cache entry model shared by the local and shared cache tiers."""

from __future__ import annotations

from dataclasses import dataclass

from stratum.core.entity.codec import Properties, dumps_properties, loads_properties
from stratum.core.identity import Identity


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """Cached outcome of a durable lookup for one identity.

    Both states are valid cache content: `present` entries carry the stored
    properties, absent entries record a confirmed not-found.
    """

    identity: Identity
    properties: Properties | None = None

    @classmethod
    def found(cls, identity: Identity, properties: Properties) -> CacheEntry:
        """Entry for an entity that exists."""
        return cls(identity=identity, properties=properties)

    @classmethod
    def missing(cls, identity: Identity) -> CacheEntry:
        """Negative entry: the durable store confirmed the identity is absent."""
        return cls(identity=identity, properties=None)

    @property
    def present(self) -> bool:
        """True if the entity exists."""
        return self.properties is not None

    def to_bytes(self) -> bytes:
        """Serialize for the shared cache (identity travels in the key)."""
        return dumps_properties(self.properties)

    @classmethod
    def from_bytes(cls, identity: Identity, data: bytes) -> CacheEntry:
        """Rebuild an entry read from the shared cache under `identity`'s key."""
        return cls(identity=identity, properties=loads_properties(data))
