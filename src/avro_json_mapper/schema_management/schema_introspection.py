"""Schema introspection helpers used by both conversion directions."""

from __future__ import annotations

from collections.abc import Sequence

from avro_json_mapper.errors import SchemaMalformedError

from .schema_models import FieldSchema, SchemaType, TypeSchema


def effective_type(schema: TypeSchema) -> TypeSchema:
    """Return the first non-null member of a union, or the schema itself.

    Fields are frequently declared as ``["null", "<type>"]`` to allow a null
    value; the member carrying data is the "effective" type.
    """
    if schema.type is not SchemaType.UNION:
        return schema
    for member in schema.members:
        if member.type is not SchemaType.NULL:
            return member
    raise SchemaMalformedError("Union type must declare at least one non-null member.")


def is_optional(schema: TypeSchema) -> bool:
    """Return whether the schema is a union admitting null."""
    return schema.type is SchemaType.UNION and any(
        member.type is SchemaType.NULL for member in schema.members
    )


def paths_of(field: FieldSchema, selector_key: str) -> tuple[str, ...]:
    """Read the path annotation(s) of a field in declared order.

    An absent or null property yields no paths, which leaves the field out of
    the mapping in both directions.
    """
    return _annotation_values(field.properties.get(selector_key))


def element_paths_of(schema: TypeSchema, selector_key: str) -> tuple[str, ...]:
    """Read the path annotation(s) carried by a type node (array or record)."""
    return _annotation_values(schema.properties.get(selector_key))


def record_path(schema: TypeSchema, selector_key: str) -> str | None:
    """Return the record-level path locating a record's object in a document."""
    paths = element_paths_of(schema, selector_key)
    return paths[0] if paths else None


def _annotation_values(value: object) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value if item is not None)
    return (str(value),)
