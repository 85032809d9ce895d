"""
Declarative description of the user record shape.

The users table has changed shape several times (``age1`` became
``age``, ``address`` became ``occupation``, ``name`` was split into
first and last name, ``address2`` came and went).  Instead of keeping
one handler set per revision, the active shape is described by a list
of :class:`FieldDescriptor` objects.  Request validation (``schemas.user``)
and SQL generation (``core.queries``) are both derived from that list.

A shape is selected with the ``USER_SCHEMA`` setting, which is either
a key of :data:`SCHEMA_VARIANTS` or a compact field list::

    name:string,age:number,address2:string?

A trailing ``?`` marks an optional field.
"""

import re
from dataclasses import dataclass
from typing import Dict, Tuple

STRING = "string"
NUMBER = "number"
FIELD_TYPES = (STRING, NUMBER)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def is_identifier(name: str) -> bool:
    """Return True if ``name`` can be used unquoted as a table or column name."""
    return bool(_IDENTIFIER.fullmatch(name))


@dataclass(frozen=True)
class FieldDescriptor:
    """Name, type and required/optional status of one record attribute."""

    name: str
    kind: str = STRING
    required: bool = True

    def __post_init__(self) -> None:
        if not is_identifier(self.name):
            raise ValueError(f"Invalid field name {self.name!r}")
        if self.name.lower() == "id":
            raise ValueError("'id' is assigned by the store and cannot be declared")
        if self.kind not in FIELD_TYPES:
            raise ValueError(f"Field {self.name!r} has unknown type {self.kind!r}")


Fields = Tuple[FieldDescriptor, ...]


SCHEMA_VARIANTS: Dict[str, Fields] = {
    "name_age": (
        FieldDescriptor("name"),
        FieldDescriptor("age", NUMBER),
    ),
    "name_age_occupation": (
        FieldDescriptor("name"),
        FieldDescriptor("age", NUMBER),
        FieldDescriptor("occupation"),
    ),
    "name_age_address": (
        FieldDescriptor("name"),
        FieldDescriptor("age", NUMBER),
        FieldDescriptor("address"),
    ),
    "name_age_address2": (
        FieldDescriptor("name"),
        FieldDescriptor("age", NUMBER),
        FieldDescriptor("address"),
        FieldDescriptor("address2", required=False),
    ),
    "split_name": (
        FieldDescriptor("nameF"),
        FieldDescriptor("nameL"),
        FieldDescriptor("age", NUMBER),
    ),
    "split_name_occupation": (
        FieldDescriptor("fname"),
        FieldDescriptor("lname"),
        FieldDescriptor("age", NUMBER),
        FieldDescriptor("occupation"),
    ),
}

DEFAULT_VARIANT = "name_age_occupation"


def parse_fields(spec: str) -> Fields:
    """Parse a compact field list such as ``name:string,age:number,note:string?``.

    The type defaults to ``string`` when omitted.  Raises ``ValueError``
    for empty lists, unknown types, invalid names or duplicates.
    """
    fields = []
    seen = set()
    for chunk in spec.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        required = not chunk.endswith("?")
        chunk = chunk.rstrip("?")
        name, _, kind = chunk.partition(":")
        descriptor = FieldDescriptor(name.strip(), (kind.strip() or STRING).lower(), required)
        if descriptor.name.lower() in seen:
            raise ValueError(f"Duplicate field {descriptor.name!r}")
        seen.add(descriptor.name.lower())
        fields.append(descriptor)
    if not fields:
        raise ValueError("A user schema needs at least one field")
    return tuple(fields)


def resolve_fields(schema: str) -> Fields:
    """Return the descriptors for a variant key or a compact field list."""
    schema = (schema or DEFAULT_VARIANT).strip()
    if schema in SCHEMA_VARIANTS:
        return SCHEMA_VARIANTS[schema]
    if ":" not in schema and "," not in schema:
        raise ValueError(
            f"Unknown user schema {schema!r}; expected one of "
            f"{', '.join(sorted(SCHEMA_VARIANTS))} or a field list"
        )
    return parse_fields(schema)
