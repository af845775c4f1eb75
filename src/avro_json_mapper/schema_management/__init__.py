"""Schema management exports."""

from .schema_introspection import (
    effective_type,
    element_paths_of,
    is_optional,
    paths_of,
    record_path,
)
from .schema_loading import iter_record_schemas, load_record_schema, parse_record_schema
from .schema_models import FieldSchema, RecordSchema, SchemaType, TypeSchema

__all__ = [
    "FieldSchema",
    "RecordSchema",
    "SchemaType",
    "TypeSchema",
    "effective_type",
    "element_paths_of",
    "is_optional",
    "iter_record_schemas",
    "load_record_schema",
    "parse_record_schema",
    "paths_of",
    "record_path",
]
