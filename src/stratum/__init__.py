"""Stratum: request-scoped entity caching over a shared cache and a durable store.

Usage:
    from dataclasses import dataclass
    from typing import Annotated

    from stratum import IdField, MemorySharedCache, MemoryStore, Session

    @dataclass
    class User:
        id: Annotated[int, IdField()] = 0
        name: str = ""

    session = Session(MemoryStore(), shared_cache=MemorySharedCache())
    user = User(name="ada")
    session.put(user)            # user.id now assigned

    loaded = User(id=user.id)
    session.get(loaded)          # served from the session's local cache
"""

__version__ = "0.1.0"

# Core primitives
from stratum.core import (
    CallLevelError,
    EntityDescriptor,
    ErrorKind,
    Identity,
    IdField,
    IdKind,
    IncompleteIdentityError,
    ItemError,
    KindField,
    MultiError,
    NotFoundError,
    ParentField,
    StratumError,
    TransientError,
    assign_identity,
    describe,
    entity,
    is_not_found_at,
    kind_of,
    resolve,
    resolve_or_fail,
)

# Cache tiers
from stratum.cache import (
    CacheEntry,
    LocalCache,
    MemorySharedCache,
    RedisSharedCache,
    SharedCache,
    SharedCacheAdapter,
)

# Configuration
from stratum.config import CacheSettings, StoreSettings

# Session
from stratum.session import Session

# Durable store
from stratum.storage import (
    DurableStore,
    IdAllocator,
    MemoryStore,
    RetryPolicy,
    StoreAdapter,
)

__all__ = [
    # Version
    "__version__",
    # Identity
    "Identity",
    "IdKind",
    # Entities
    "EntityDescriptor",
    "IdField",
    "KindField",
    "ParentField",
    "entity",
    "describe",
    "resolve",
    "resolve_or_fail",
    "assign_identity",
    "kind_of",
    # Errors
    "StratumError",
    "IncompleteIdentityError",
    "ItemError",
    "NotFoundError",
    "TransientError",
    "CallLevelError",
    "MultiError",
    "ErrorKind",
    "is_not_found_at",
    # Session
    "Session",
    # Cache
    "CacheEntry",
    "LocalCache",
    "SharedCache",
    "SharedCacheAdapter",
    "MemorySharedCache",
    "RedisSharedCache",
    # Storage
    "DurableStore",
    "MemoryStore",
    "StoreAdapter",
    "IdAllocator",
    "RetryPolicy",
    # Config
    "CacheSettings",
    "StoreSettings",
]
