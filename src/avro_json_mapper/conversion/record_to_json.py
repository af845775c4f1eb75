"""Record to JSON tree builder."""

from __future__ import annotations

import logging
from typing import Any

from avro_json_mapper.errors import UnsupportedTypeError
from avro_json_mapper.json_paths.path_resolver import (
    leaf_name,
    resolve_write,
    resolve_write_object,
)
from avro_json_mapper.record_model.records import Record
from avro_json_mapper.schema_management.schema_introspection import (
    effective_type,
    paths_of,
    record_path,
)
from avro_json_mapper.schema_management.schema_models import FieldSchema, SchemaType
from avro_json_mapper.value_conversion.scalar_coercion import stringify

logger = logging.getLogger(__name__)

_NOT_EMITTED = frozenset({SchemaType.NULL, SchemaType.UNION, SchemaType.ENUM})


def build_document(record: Record, selector_key: str) -> dict[str, Any]:
    """Create a new JSON tree holding the annotated fields of ``record``.

    A path annotation on the record type itself designates the object under
    which the record's fields are written.
    """
    document: dict[str, Any] = {}
    root_path = record_path(record.schema, selector_key)
    target = resolve_write_object(document, root_path) if root_path else document
    build_json_tree(record, target, selector_key)
    logger.debug("Built JSON document for %s", record.schema.full_name)
    return document


def build_json_tree(record: Record, out_node: dict[str, Any], selector_key: str) -> None:
    """Write every annotated field of ``record`` into ``out_node``, in schema order."""
    for record_field in record.schema.fields:
        field_type = record_field.effective
        if field_type.type in _NOT_EMITTED:
            continue
        paths = paths_of(record_field, selector_key)
        value = record.get(record_field.name)
        if field_type.type is SchemaType.RECORD:
            if paths and value is not None:
                nested = resolve_write_object(out_node, paths[0])
                build_json_tree(value, nested, selector_key)
        elif field_type.type is SchemaType.ARRAY:
            if paths and value:
                _write_array(record_field, value, out_node, paths[0], selector_key)
        elif field_type.type is SchemaType.MAP:
            if paths:
                raise UnsupportedTypeError(
                    f"Map fields are not supported (field {record_field.name})."
                )
        else:
            _write_scalar(value, out_node, paths)


def _write_array(
    record_field: FieldSchema,
    values: list[Any],
    out_node: dict[str, Any],
    path: str,
    selector_key: str,
) -> None:
    items = record_field.effective.items
    element_type = effective_type(items).type if items is not None else None
    array_node: list[Any] = []
    if element_type is SchemaType.RECORD:
        for item in values:
            element: dict[str, Any] = {}
            array_node.append(element)
            build_json_tree(item, element, selector_key)
    elif element_type is SchemaType.STRING:
        array_node.extend(values)
    else:
        raise UnsupportedTypeError(
            "Arrays with element types other than records or strings are not supported "
            f"(field {record_field.name})."
        )
    resolve_write(out_node, path)[leaf_name(path)] = array_node


def _write_scalar(value: Any, out_node: dict[str, Any], paths: tuple[str, ...]) -> None:
    text = stringify(value)
    if not text:
        return
    for path in paths:
        resolve_write(out_node, path)[leaf_name(path)] = text
