"""Entity models: role markers and per-type descriptors.

Role markers bind a field to the identity role it plays. They are attached
with ``typing.Annotated`` so the same declaration works for dataclasses and
Pydantic models:

    @dataclass
    class Post:
        id: Annotated[int, IdField()] = 0
        kind: Annotated[str, KindField(default="BlogPost")] = ""
        blog: Annotated[Identity | None, ParentField()] = None
        title: str = ""
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, ClassVar

from stratum.core.identity import IdKind


class FieldRole(Enum):
    """Identity role a field can play."""

    ID = auto()
    KIND = auto()
    PARENT = auto()


@dataclass(frozen=True, slots=True)
class IdField:
    """Marks the field holding the entity id (``int`` or ``str``)."""

    role: ClassVar[FieldRole] = FieldRole.ID


@dataclass(frozen=True, slots=True)
class KindField:
    """Marks the field holding the entity kind.

    An empty field value falls back to `default`, then to the class name.
    """

    default: str | None = None
    role: ClassVar[FieldRole] = FieldRole.KIND


@dataclass(frozen=True, slots=True)
class ParentField:
    """Marks the field holding the parent Identity (or None)."""

    role: ClassVar[FieldRole] = FieldRole.PARENT


RoleMarker = IdField | KindField | ParentField


@dataclass(frozen=True, slots=True)
class EntityDescriptor:
    """Immutable role-to-field mapping computed once per entity type."""

    entity_type: type
    type_name: str
    default_kind: str
    id_field: str | None
    id_kind: IdKind | None
    kind_field: str | None
    parent_field: str | None
    property_names: tuple[str, ...]
    property_types: tuple[Any, ...] = ()

    @property
    def resolvable(self) -> bool:
        """True when the type declares an id field at all."""
        return self.id_field is not None

    @property
    def role_fields(self) -> tuple[str, ...]:
        """Names of fields bound to identity roles (never stored as properties)."""
        return tuple(
            name
            for name in (self.id_field, self.kind_field, self.parent_field)
            if name is not None
        )
