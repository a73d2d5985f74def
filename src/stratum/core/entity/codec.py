"""Property codec: entity value <-> property dict <-> bytes.

Role fields (id, kind, parent) are never part of the property dict; the
identity carries them. Each property is dumped to its JSON form through a
pydantic TypeAdapter for its declared type and validated back through the
same adapter, so datetimes, nested models and tuples come back typed no
matter which tier served them.
"""

from __future__ import annotations

import copy
import json
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter

from stratum.core.entity.core import describe

Properties = dict[str, Any]


@lru_cache(maxsize=None)
def _adapter(field_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(Any if field_type is None else field_type)


def to_properties(value: Any) -> Properties:
    """Snapshot a value's non-role fields in JSON-compatible form.

    Returns:
        A fresh dict; mutating the value afterwards does not affect it.

    Raises:
        TypeError: If a field's declared type has no pydantic schema.
        ValueError: If a field value cannot be serialized.
    """
    descriptor = describe(value)
    return {
        name: _adapter(field_type).dump_python(getattr(value, name), mode="json")
        for name, field_type in zip(
            descriptor.property_names, descriptor.property_types, strict=True
        )
    }


def apply_properties(value: Any, properties: Properties) -> None:
    """Copy stored properties into a value in place, restoring declared types.

    Keys the value's type does not declare are ignored; declared fields
    missing from `properties` keep their current value.

    Raises:
        pydantic.ValidationError: If a stored property no longer fits its field type.
    """
    descriptor = describe(value)
    for name, field_type in zip(descriptor.property_names, descriptor.property_types, strict=True):
        if name in properties:
            raw = copy.deepcopy(properties[name])
            setattr(value, name, _adapter(field_type).validate_python(raw))


def dumps_properties(properties: Properties | None) -> bytes:
    """Encode a property dict (or None for absence) as compact JSON bytes."""
    return json.dumps(properties, separators=(",", ":"), sort_keys=True).encode()


def loads_properties(data: bytes) -> Properties | None:
    """Decode bytes produced by dumps_properties().

    Raises:
        ValueError: If the payload is not a JSON object or null.
    """
    decoded = json.loads(data)
    if decoded is not None and not isinstance(decoded, dict):
        raise ValueError(f"Expected property object, got {type(decoded).__name__}")
    return decoded
