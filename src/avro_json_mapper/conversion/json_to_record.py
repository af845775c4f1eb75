"""JSON tree to record builder."""

from __future__ import annotations

import logging
from typing import Any

from avro_json_mapper.constants import JSONPATH_DEFAULT
from avro_json_mapper.errors import ConversionError, UnsupportedTypeError
from avro_json_mapper.json_paths.path_resolver import resolve_read
from avro_json_mapper.record_model.records import Record, default_value, is_timestamp
from avro_json_mapper.record_model.type_registry import RecordFactory, TypeRegistry
from avro_json_mapper.schema_management.schema_introspection import (
    effective_type,
    element_paths_of,
    paths_of,
    record_path,
)
from avro_json_mapper.schema_management.schema_models import (
    FieldSchema,
    RecordSchema,
    SchemaType,
    TypeSchema,
)
from avro_json_mapper.value_conversion.date_normalization import normalize_date
from avro_json_mapper.value_conversion.scalar_coercion import as_text, coerce, parse_long

logger = logging.getLogger(__name__)

_NOT_READ = frozenset(
    {SchemaType.NULL, SchemaType.UNION, SchemaType.ENUM, SchemaType.BYTES, SchemaType.FIXED}
)
_SCALAR_ELEMENTS = frozenset(
    {
        SchemaType.STRING,
        SchemaType.INT,
        SchemaType.LONG,
        SchemaType.FLOAT,
        SchemaType.DOUBLE,
        SchemaType.BOOLEAN,
    }
)


class JsonRecordBuilder:
    """Populates records from JSON trees following the schema path annotations.

    Nested record types are instantiated through the injected registry, looked
    up as ``{base_namespace}.{type name}``.
    """

    def __init__(self, registry: TypeRegistry, selector_key: str = JSONPATH_DEFAULT) -> None:
        self._registry = registry
        self._selector_key = selector_key

    def convert(
        self, document: Any, base_namespace: str | None, target_type: RecordSchema | str
    ) -> Record:
        """Convert a whole document, failing atomically.

        Raises:
          ConversionError: Wrapping whatever went wrong during the descent.
        """
        try:
            record = self._instantiate(base_namespace, target_type)
            node = document
            root_path = record_path(record.schema, self._selector_key)
            if root_path:
                node = resolve_read(document, root_path)
                if node is None:
                    logger.debug("Root path %s absent, keeping defaults", root_path)
                    return record
            return self._populate(record, node, base_namespace)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            raise ConversionError("Failed to parse document", input=document) from exc

    def build(self, node: Any, base_namespace: str | None, factory: RecordFactory) -> Record:
        """Populate a new record from ``factory`` without error wrapping."""
        return self._populate(factory(), node, base_namespace)

    def _instantiate(self, base_namespace: str | None, target_type: RecordSchema | str) -> Record:
        if isinstance(target_type, str):
            return self._registry.lookup(base_namespace, target_type)()
        return Record.new(target_type)

    def _populate(self, record: Record, node: Any, base_namespace: str | None) -> Record:
        for record_field in record.schema.fields:
            field_type = record_field.effective
            paths = paths_of(record_field, self._selector_key)
            if not paths:
                continue
            if field_type.type is SchemaType.MAP:
                raise UnsupportedTypeError(
                    f"Map fields are not supported (field {record_field.name})."
                )
            if field_type.type in _NOT_READ:
                continue
            # Only the first annotated path is read.
            field_node = resolve_read(node, paths[0])
            if field_node is None:
                continue
            record.put(
                record_field.name,
                self._read_value(record_field, field_type, field_node, base_namespace),
            )
        return record

    def _read_value(
        self,
        record_field: FieldSchema,
        field_type: TypeSchema,
        field_node: Any,
        base_namespace: str | None,
    ) -> Any:
        if field_type.type is SchemaType.RECORD:
            factory = self._factory_for(field_type, base_namespace)
            return self.build(field_node, base_namespace, factory)
        if field_type.type is SchemaType.ARRAY:
            return self._read_array(record_field, field_type, field_node, base_namespace)
        if is_timestamp(field_type):
            return _read_timestamp(record_field, field_node)
        if field_type.type is SchemaType.LONG:
            return parse_long(field_node)
        return coerce(field_type.type, field_node)

    def _read_array(
        self,
        record_field: FieldSchema,
        field_type: TypeSchema,
        field_node: Any,
        base_namespace: str | None,
    ) -> list[Any]:
        if not isinstance(field_node, list):
            raise UnsupportedTypeError(f"Field {record_field.name} expects a JSON array.")
        if field_type.items is None:
            raise UnsupportedTypeError(f"Array field {record_field.name} declares no items.")
        element_type = effective_type(field_type.items)
        if element_type.type is SchemaType.RECORD:
            factory = self._factory_for(element_type, base_namespace)
            return [self.build(element, base_namespace, factory) for element in field_node]
        if element_type.type not in _SCALAR_ELEMENTS:
            raise UnsupportedTypeError(
                f"Arrays of {element_type.type.value} are not supported "
                f"(field {record_field.name})."
            )
        element_paths = element_paths_of(field_type, self._selector_key)
        values = []
        for element in field_node:
            value_node = resolve_read(element, element_paths[0]) if element_paths else element
            if value_node is None:
                continue
            values.append(coerce(element_type.type, value_node))
        return values

    def _factory_for(self, schema: TypeSchema, base_namespace: str | None) -> RecordFactory:
        if schema.name is None:
            raise UnsupportedTypeError("Nested records must be named.")
        return self._registry.lookup(base_namespace, schema.name)


def _read_timestamp(record_field: FieldSchema, field_node: Any) -> Any:
    instant = normalize_date(as_text(field_node))
    if instant is not None:
        return instant
    return default_value(record_field)
