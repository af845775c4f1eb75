"""AVSC schema loading service."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from avro_json_mapper.errors import SchemaMalformedError

from .schema_introspection import effective_type, is_optional
from .schema_models import (
    PRIMITIVE_TYPES,
    FieldSchema,
    RecordSchema,
    SchemaType,
    TypeSchema,
)

logger = logging.getLogger(__name__)

_TYPE_RESERVED_KEYS = frozenset(
    {
        "type",
        "name",
        "namespace",
        "fields",
        "items",
        "values",
        "symbols",
        "logicalType",
        "size",
        "doc",
        "aliases",
        "default",
    }
)
_FIELD_RESERVED_KEYS = frozenset({"name", "type", "default", "doc", "aliases", "order"})
_PRIMITIVE_NAMES = {schema_type.value: schema_type for schema_type in PRIMITIVE_TYPES}


def load_record_schema(text: str) -> RecordSchema:
    """Parse AVSC text into an immutable record schema."""
    try:
        root = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaMalformedError(f"Invalid avsc schema: {exc}") from exc
    return parse_record_schema(root)


def parse_record_schema(root: Any) -> RecordSchema:
    """Build a record schema from an already decoded AVSC document."""
    schema = _parse_node(root, namespace=None, names={})
    if schema.type is not SchemaType.RECORD:
        raise SchemaMalformedError("Avro root must be a record with named fields.")
    logger.debug("Loaded record schema %s with %d fields", schema.full_name, len(schema.fields))
    return schema


def iter_record_schemas(schema: TypeSchema) -> Iterator[RecordSchema]:
    """Yield every record schema reachable from ``schema``, outermost first."""
    seen: set[str] = set()
    yield from _iter_records(schema, seen)


def _iter_records(schema: TypeSchema, seen: set[str]) -> Iterator[RecordSchema]:
    if schema.type is SchemaType.RECORD:
        full_name = schema.full_name or ""
        if full_name in seen:
            return
        seen.add(full_name)
        yield schema
        for record_field in schema.fields:
            yield from _iter_records(record_field.schema, seen)
    elif schema.type is SchemaType.UNION:
        for member in schema.members:
            yield from _iter_records(member, seen)
    elif schema.type is SchemaType.ARRAY and schema.items is not None:
        yield from _iter_records(schema.items, seen)
    elif schema.type is SchemaType.MAP and schema.values is not None:
        yield from _iter_records(schema.values, seen)


def _parse_node(node: Any, *, namespace: str | None, names: dict[str, TypeSchema]) -> TypeSchema:
    if isinstance(node, list):
        return _parse_union(node, namespace=namespace, names=names)
    if isinstance(node, str):
        if node in _PRIMITIVE_NAMES:
            return TypeSchema(type=_PRIMITIVE_NAMES[node])
        return _lookup_named(node, namespace=namespace, names=names)
    if isinstance(node, Mapping):
        return _parse_mapping(node, namespace=namespace, names=names)
    raise SchemaMalformedError("Unsupported Avro schema segment.")


def _parse_union(
    node: Sequence[Any], *, namespace: str | None, names: dict[str, TypeSchema]
) -> TypeSchema:
    if not node:
        raise SchemaMalformedError("Avro union must declare at least one member.")
    members = tuple(_parse_node(item, namespace=namespace, names=names) for item in node)
    if any(member.type is SchemaType.UNION for member in members):
        raise SchemaMalformedError("Avro unions may not immediately contain other unions.")
    return TypeSchema(type=SchemaType.UNION, members=members)


def _parse_mapping(
    node: Mapping[str, Any], *, namespace: str | None, names: dict[str, TypeSchema]
) -> TypeSchema:
    type_name = node.get("type")
    if isinstance(type_name, (list, Mapping)):
        return _parse_node(type_name, namespace=namespace, names=names)
    if not isinstance(type_name, str):
        raise SchemaMalformedError("AVSC node is missing a valid 'type'.")

    properties = {key: value for key, value in node.items() if key not in _TYPE_RESERVED_KEYS}
    logical_type = node.get("logicalType")
    if logical_type is not None and not isinstance(logical_type, str):
        raise SchemaMalformedError("logicalType must be a string.")

    if type_name in _PRIMITIVE_NAMES:
        return TypeSchema(
            type=_PRIMITIVE_NAMES[type_name],
            logical_type=logical_type,
            properties=properties,
        )
    if type_name in {"record", "error"}:
        return _parse_record(node, namespace=namespace, names=names, properties=properties)
    if type_name == "enum":
        name, enum_namespace = _split_name(node, namespace)
        symbols = node.get("symbols")
        if not isinstance(symbols, Sequence) or isinstance(symbols, str):
            raise SchemaMalformedError("Enum schema requires a symbols array.")
        schema = TypeSchema(
            type=SchemaType.ENUM,
            name=name,
            namespace=enum_namespace,
            symbols=tuple(str(symbol) for symbol in symbols),
            properties=properties,
        )
        return _register(schema, names)
    if type_name == "fixed":
        name, fixed_namespace = _split_name(node, namespace)
        schema = TypeSchema(
            type=SchemaType.FIXED,
            name=name,
            namespace=fixed_namespace,
            logical_type=logical_type,
            properties=properties,
        )
        return _register(schema, names)
    if type_name == "array":
        if "items" not in node:
            raise SchemaMalformedError("Array schema requires items.")
        return TypeSchema(
            type=SchemaType.ARRAY,
            items=_parse_node(node["items"], namespace=namespace, names=names),
            properties=properties,
        )
    if type_name == "map":
        if "values" not in node:
            raise SchemaMalformedError("Map schema requires values.")
        return TypeSchema(
            type=SchemaType.MAP,
            values=_parse_node(node["values"], namespace=namespace, names=names),
            properties=properties,
        )
    return _lookup_named(type_name, namespace=namespace, names=names)


def _parse_record(
    node: Mapping[str, Any],
    *,
    namespace: str | None,
    names: dict[str, TypeSchema],
    properties: Mapping[str, Any],
) -> TypeSchema:
    name, record_namespace = _split_name(node, namespace)
    raw_fields = node.get("fields")
    if not isinstance(raw_fields, Sequence) or isinstance(raw_fields, str):
        raise SchemaMalformedError("Avro record requires fields.")

    fields: list[FieldSchema] = []
    seen_names: set[str] = set()
    for raw_field in raw_fields:
        if not isinstance(raw_field, Mapping) or "name" not in raw_field:
            raise SchemaMalformedError("Avro field definitions must include a name.")
        field_name = str(raw_field["name"])
        if field_name in seen_names:
            raise SchemaMalformedError(f"Duplicate field {field_name} in record {name}.")
        seen_names.add(field_name)
        if "type" not in raw_field:
            raise SchemaMalformedError(f"Field {name}.{field_name} requires a type.")
        field_schema = _parse_node(raw_field["type"], namespace=record_namespace, names=names)
        fields.append(
            FieldSchema(
                name=field_name,
                schema=field_schema,
                effective=effective_type(field_schema),
                optional=is_optional(field_schema),
                has_default="default" in raw_field,
                default=raw_field.get("default"),
                properties={
                    key: value
                    for key, value in raw_field.items()
                    if key not in _FIELD_RESERVED_KEYS
                },
            )
        )

    schema = TypeSchema(
        type=SchemaType.RECORD,
        name=name,
        namespace=record_namespace,
        fields=tuple(fields),
        properties=properties,
    )
    return _register(schema, names)


def _split_name(node: Mapping[str, Any], namespace: str | None) -> tuple[str, str | None]:
    raw_name = node.get("name")
    if not isinstance(raw_name, str) or not raw_name.strip():
        raise SchemaMalformedError("Named Avro types require a name.")
    if "." in raw_name:
        qualifier, _, short_name = raw_name.rpartition(".")
        return short_name, qualifier
    declared_namespace = node.get("namespace")
    if isinstance(declared_namespace, str):
        return raw_name, declared_namespace or None
    return raw_name, namespace


def _register(schema: TypeSchema, names: dict[str, TypeSchema]) -> TypeSchema:
    full_name = schema.full_name or ""
    if full_name in names:
        raise SchemaMalformedError(f"Duplicate named type detected: {full_name}")
    names[full_name] = schema
    return schema


def _lookup_named(
    reference: str, *, namespace: str | None, names: dict[str, TypeSchema]
) -> TypeSchema:
    candidates = [reference]
    if "." not in reference and namespace:
        candidates.insert(0, f"{namespace}.{reference}")
    for candidate in candidates:
        if candidate in names:
            return names[candidate]
    raise SchemaMalformedError(f"Unknown or not yet defined Avro type: {reference}")
