"""Entity descriptor registry and decorator.

Usage:
    @entity
    @dataclass
    class User:
        id: Annotated[int, IdField()] = 0
        name: str = ""

    descriptor = describe(User)
    descriptor.property_names  # ("name",)
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import fields, is_dataclass
from typing import Annotated, Any, get_args, get_origin, get_type_hints, overload

from stratum.core.entity.models import (
    EntityDescriptor,
    FieldRole,
    IdField,
    KindField,
    ParentField,
    RoleMarker,
)
from stratum.core.identity import IdKind


def _is_pydantic(cls: type) -> bool:
    """Check if class is a Pydantic model without importing pydantic.

    Args:
        cls: Class to check.

    Returns:
        True if class inherits from pydantic.BaseModel, False otherwise.
    """
    for base in cls.__mro__:
        if base.__module__.startswith("pydantic") and base.__name__ == "BaseModel":
            return True
    return False


def _markers(extras: Any) -> list[RoleMarker]:
    return [x for x in extras if isinstance(x, IdField | KindField | ParentField)]


def _declared_fields(cls: type) -> list[tuple[str, Any, list[RoleMarker]]]:
    """(name, base type, role markers) for each instance field, in declaration order.

    Pydantic keeps ``Annotated`` extras in FieldInfo.metadata; other classes
    are read through their own type hints.
    """
    if _is_pydantic(cls):
        return [
            (name, info.annotation, _markers(info.metadata))
            for name, info in cls.model_fields.items()  # type: ignore[attr-defined]
        ]

    hints = get_type_hints(cls, include_extras=True)
    if is_dataclass(cls):
        names = [f.name for f in fields(cls)]
    else:
        names = [name for name in hints if not name.startswith("_")]

    declared: list[tuple[str, Any, list[RoleMarker]]] = []
    for name in names:
        hint = hints.get(name)
        if get_origin(hint) is Annotated:
            base, *extras = get_args(hint)
            declared.append((name, base, _markers(extras)))
        else:
            declared.append((name, hint, []))
    return declared


def _build_descriptor(cls: type) -> EntityDescriptor:
    """Derive the role-to-field mapping for one entity type.

    Raises:
        TypeError: If a role is declared twice, or the id field is neither
            int nor str.
    """
    declared = _declared_fields(cls)
    roles: dict[FieldRole, str] = {}
    id_kind: IdKind | None = None
    kind_default: str | None = None

    for name, base, markers in declared:
        for marker in markers:
            if marker.role in roles:
                raise TypeError(
                    f"{cls.__name__} declares {marker.role.name.lower()} on both "
                    f"{roles[marker.role]!r} and {name!r}"
                )
            roles[marker.role] = name
            if isinstance(marker, IdField):
                if base is int:
                    id_kind = IdKind.NUMERIC
                elif base is str:
                    id_kind = IdKind.STRING
                else:
                    raise TypeError(f"{cls.__name__}.{name}: id field must be int or str")
            elif isinstance(marker, KindField):
                kind_default = marker.default

    role_names = set(roles.values())
    properties = [field for field in declared if field[0] not in role_names]
    return EntityDescriptor(
        entity_type=cls,
        type_name=f"{cls.__module__}.{cls.__qualname__}",
        default_kind=kind_default or cls.__name__,
        id_field=roles.get(FieldRole.ID),
        id_kind=id_kind,
        kind_field=roles.get(FieldRole.KIND),
        parent_field=roles.get(FieldRole.PARENT),
        property_names=tuple(name for name, _, _ in properties),
        property_types=tuple(base for _, base, _ in properties),
    )


class EntityRegistry:
    """Process-local cache of entity descriptors keyed by type.

    Descriptors are built lazily on first use and never change afterwards,
    so lookups need no locking. Two threads racing on a first build produce
    equal descriptors; the last write wins harmlessly.
    """

    def __init__(self) -> None:
        """Initialize empty entity registry."""
        self._by_type: dict[type, EntityDescriptor] = {}

    def describe(self, cls: type) -> EntityDescriptor:
        """Get (building if needed) the descriptor for an entity type.

        Args:
            cls: Entity class to describe.

        Returns:
            Cached descriptor for the class.
        """
        descriptor = self._by_type.get(cls)
        if descriptor is None:
            descriptor = _build_descriptor(cls)
            self._by_type[cls] = descriptor
        return descriptor

    def is_registered(self, cls: type) -> bool:
        """Check if a descriptor has been built for a type."""
        return cls in self._by_type


# Module-level registry instance
_registry = EntityRegistry()


def get_registry() -> EntityRegistry:
    """Access the global entity registry.

    Returns:
        The process-local EntityRegistry instance.
    """
    return _registry


def describe(value_or_type: Any) -> EntityDescriptor:
    """Descriptor for an entity value or class."""
    cls = value_or_type if isinstance(value_or_type, type) else type(value_or_type)
    return _registry.describe(cls)


@overload
def entity(cls: type) -> type: ...


@overload
def entity(cls: None = None) -> Callable[[type], type]: ...


def entity(cls: type | None = None) -> type | Callable[[type], type]:
    """Register a dataclass or Pydantic model as an entity type up front.

    Registration is optional (descriptors are built on first use); the
    decorator moves declaration errors to import time.

    Raises:
        TypeError: If class is neither a dataclass nor Pydantic model, or
            declares no id field.

    Note:
        Apply @entity AFTER @dataclass:

        >>> @entity
        ... @dataclass
        ... class User:
        ...     id: Annotated[int, IdField()] = 0
    """

    def decorator(c: type) -> type:
        if not (is_dataclass(c) or _is_pydantic(c)):
            raise TypeError(
                f"Entity {c.__name__} must be a dataclass or Pydantic model. "
                f"Did you forget @dataclass decorator?"
            )
        descriptor = _registry.describe(c)
        if not descriptor.resolvable:
            raise TypeError(f"Entity {c.__name__} declares no IdField")
        c.__entity_descriptor__ = descriptor  # type: ignore[attr-defined]
        return c

    if cls is None:
        return decorator
    return decorator(cls)
