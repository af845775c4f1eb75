"""Schema management entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class SchemaType(str, Enum):
    """Avro type tags understood by the mapper."""

    NULL = "null"
    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    BYTES = "bytes"
    STRING = "string"
    RECORD = "record"
    ENUM = "enum"
    ARRAY = "array"
    MAP = "map"
    FIXED = "fixed"
    UNION = "union"


PRIMITIVE_TYPES = frozenset(
    {
        SchemaType.NULL,
        SchemaType.BOOLEAN,
        SchemaType.INT,
        SchemaType.LONG,
        SchemaType.FLOAT,
        SchemaType.DOUBLE,
        SchemaType.BYTES,
        SchemaType.STRING,
    }
)


@dataclass(frozen=True)
class TypeSchema:  # pylint: disable=too-many-instance-attributes
    """One node of a loaded Avro schema."""

    type: SchemaType
    name: str | None = None
    namespace: str | None = None
    logical_type: str | None = None
    items: TypeSchema | None = None
    values: TypeSchema | None = None
    members: tuple[TypeSchema, ...] = ()
    symbols: tuple[str, ...] = ()
    fields: tuple[FieldSchema, ...] = ()
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def full_name(self) -> str | None:
        if self.name is None:
            return None
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    def field_named(self, name: str) -> FieldSchema:
        """Return the field called ``name``.

        Raises:
          KeyError: If the record has no such field.
        """
        for candidate in self.fields:
            if candidate.name == name:
                return candidate
        raise KeyError(name)


# Named record schemas are plain type nodes whose tag is RECORD.
RecordSchema = TypeSchema


@dataclass(frozen=True)
class FieldSchema:  # pylint: disable=too-many-instance-attributes
    """Record field definition with its effective (non-null) type."""

    name: str
    schema: TypeSchema
    effective: TypeSchema
    optional: bool = False
    has_default: bool = False
    default: Any = None
    properties: Mapping[str, Any] = field(default_factory=dict, compare=False)
