"""Public conversion operations between JSON text/trees and records.

The mapping is driven by path annotations stored on each field of the Avro
schema (property ``jsonpath`` by default)::

    {"name": "city", "type": ["null", "string"], "jsonpath": "address.city"}

A field may list several paths; every one of them is written, only the first
one is read.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from avro_json_mapper.constants import JSONPATH_DEFAULT
from avro_json_mapper.record_model.records import Record
from avro_json_mapper.record_model.type_registry import TypeRegistry
from avro_json_mapper.schema_management.schema_models import RecordSchema
from avro_json_mapper.value_conversion.scalar_coercion import stringify

from .json_to_record import JsonRecordBuilder
from .record_to_json import build_document

logger = logging.getLogger(__name__)


def record_from_json_text(
    text: str,
    base_namespace: str | None,
    target_type: RecordSchema | str,
    selector_key: str = JSONPATH_DEFAULT,
    *,
    registry: TypeRegistry | None = None,
) -> Record | None:
    """Convert a JSON string into a record of ``target_type``.

    Args:
      text: The JSON document.
      base_namespace: Namespace used to look up nested record types; defaults
        to the namespace of ``target_type`` when it is a schema.
      target_type: The record schema to build, or its name in ``registry``.
      selector_key: Field property holding the path annotations.
      registry: Record factories; built from ``target_type`` when omitted.

    Returns:
      The record, or ``None`` when ``text`` is not a JSON object.

    Raises:
      ConversionError: If the document cannot be converted.
    """
    document = parse_document(text)
    if document is None:
        return None
    if registry is None:
        if isinstance(target_type, str):
            raise ValueError("A registry is required to resolve a target type by name.")
        registry = TypeRegistry.from_schema(target_type)
    if base_namespace is None and not isinstance(target_type, str):
        base_namespace = target_type.namespace
    builder = JsonRecordBuilder(registry, selector_key)
    return builder.convert(document, base_namespace, target_type)


def json_text_from_record(record: Record, selector_key: str = JSONPATH_DEFAULT) -> str:
    """Convert a record into a JSON string."""
    return serialize_document(json_tree_from_record(record, selector_key))


def json_tree_from_record(record: Record, selector_key: str = JSONPATH_DEFAULT) -> dict[str, Any]:
    """Convert a record into a JSON tree of dicts, lists and strings."""
    return build_document(record, selector_key)


def parse_document(text: str) -> dict[str, Any] | None:
    """Parse JSON text into an object tree; ``None`` if it is not a JSON object."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        logger.error("Json message not parsable", exc_info=True)
        return None
    if not isinstance(document, dict):
        logger.error("Json message root must be an object, got %s", type(document).__name__)
        return None
    return document


def serialize_document(tree: Any) -> str:
    """Serialize a JSON tree in compact form."""
    return json.dumps(tree, ensure_ascii=False, separators=(",", ":"), default=stringify)
