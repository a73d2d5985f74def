"""Entity identity: derived (kind, id, parent) descriptors."""

from stratum.core.identity.models import MAX_INT_ID, Identity, IdKind

__all__ = [
    "Identity",
    "IdKind",
    "MAX_INT_ID",
]
