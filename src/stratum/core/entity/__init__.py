"""Entity declaration, identity resolution, and property encoding."""

from stratum.core.entity.codec import (
    Properties,
    apply_properties,
    dumps_properties,
    loads_properties,
    to_properties,
)
from stratum.core.entity.core import EntityRegistry, describe, entity, get_registry
from stratum.core.entity.models import (
    EntityDescriptor,
    FieldRole,
    IdField,
    KindField,
    ParentField,
)
from stratum.core.entity.operations import assign_identity, kind_of, resolve, resolve_or_fail

__all__ = [
    "EntityDescriptor",
    "EntityRegistry",
    "FieldRole",
    "IdField",
    "KindField",
    "ParentField",
    "Properties",
    "apply_properties",
    "assign_identity",
    "describe",
    "dumps_properties",
    "entity",
    "get_registry",
    "kind_of",
    "loads_properties",
    "resolve",
    "resolve_or_fail",
    "to_properties",
]
