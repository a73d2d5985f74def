"""Core primitives: identities, entity declarations, and errors."""

from stratum.core.entity import (
    EntityDescriptor,
    IdField,
    KindField,
    ParentField,
    assign_identity,
    describe,
    entity,
    kind_of,
    resolve,
    resolve_or_fail,
)
from stratum.core.errors import (
    CallLevelError,
    ErrorKind,
    IncompleteIdentityError,
    ItemError,
    MultiError,
    NotFoundError,
    StratumError,
    TransientError,
    is_not_found_at,
)
from stratum.core.identity import Identity, IdKind

__all__ = [
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
]
