"""Identity resolution and write-back for entity values.

All functions are pure with respect to the registry: they read a value's
role fields through its cached descriptor and never inspect the type
beyond that.
"""

from __future__ import annotations

from typing import Any

from stratum.core.entity.core import describe
from stratum.core.entity.models import EntityDescriptor
from stratum.core.errors import IncompleteIdentityError
from stratum.core.identity import Identity, IdKind


def _kind(value: Any, descriptor: EntityDescriptor) -> str:
    if descriptor.kind_field is not None:
        kind = getattr(value, descriptor.kind_field)
        if kind:
            return str(kind)
    return descriptor.default_kind


def _parent(value: Any, descriptor: EntityDescriptor) -> Identity | None:
    if descriptor.parent_field is None:
        return None
    parent = getattr(value, descriptor.parent_field)
    if parent is not None and not isinstance(parent, Identity):
        raise TypeError(
            f"{type(value).__name__}.{descriptor.parent_field} must be an Identity or None, "
            f"got {type(parent).__name__}"
        )
    return parent


def kind_of(value: Any) -> str:
    """Resolved kind of an entity value.

    A non-empty kind field wins, then the KindField default, then the
    class name.
    """
    return _kind(value, describe(value))


def resolve(value: Any) -> Identity | None:
    """Derive the identity of an entity value.

    Returns:
        The (possibly incomplete) identity, or None when the value's type
        declares no id field.
    """
    descriptor = describe(value)
    if descriptor.id_field is None:
        return None

    raw_id = getattr(value, descriptor.id_field)
    kind = _kind(value, descriptor)
    parent = _parent(value, descriptor)
    if descriptor.id_kind is IdKind.STRING:
        return Identity.named(kind, raw_id or "", parent=parent)
    return Identity.numeric(kind, raw_id or 0, parent=parent)


def resolve_or_fail(value: Any) -> Identity:
    """Like resolve(), but raise when no identity can be derived at all.

    A zero or empty id is not a failure: it yields an incomplete identity.

    Raises:
        IncompleteIdentityError: If the value's type declares no id field.
    """
    identity = resolve(value)
    if identity is None:
        raise IncompleteIdentityError(f"{type(value).__name__} declares no id field")
    return identity


def assign_identity(value: Any, identity: Identity) -> None:
    """Write an identity back into a value's role fields.

    Used after the durable store assigns an id to an incomplete identity.

    Raises:
        IncompleteIdentityError: If the value's type declares no id field.
        TypeError: If the identity's id kind does not fit the id field.
    """
    descriptor = describe(value)
    if descriptor.id_field is None:
        raise IncompleteIdentityError(f"{type(value).__name__} declares no id field")
    if identity.id_kind is not descriptor.id_kind:
        raise TypeError(
            f"Cannot store a {identity.id_kind.name.lower()} id in "
            f"{type(value).__name__}.{descriptor.id_field}"
        )

    setattr(value, descriptor.id_field, identity.id)
    if descriptor.kind_field is not None:
        setattr(value, descriptor.kind_field, identity.kind)
    if descriptor.parent_field is not None:
        setattr(value, descriptor.parent_field, identity.parent)
