"""Schema-driven conversion between Avro records and JSON documents."""

from .constants import (
    FORMAT_PROPERTIES_KEY,
    JSONPATH_DEFAULT,
    SCALEOUT_PROPERTIES_KEY,
    TIMEZONE_PROPERTIES_KEY,
)
from .conversion import (
    JsonRecordBuilder,
    json_text_from_record,
    json_tree_from_record,
    parse_document,
    record_from_json_text,
    serialize_document,
)
from .errors import (
    ConversionError,
    InvalidPathError,
    MappingError,
    SchemaMalformedError,
    TypeNotFoundError,
    UnsupportedPathError,
    UnsupportedTypeError,
)
from .record_model import Record, TypeRegistry
from .schema_management import RecordSchema, load_record_schema

__all__ = [
    "FORMAT_PROPERTIES_KEY",
    "JSONPATH_DEFAULT",
    "SCALEOUT_PROPERTIES_KEY",
    "TIMEZONE_PROPERTIES_KEY",
    "ConversionError",
    "InvalidPathError",
    "JsonRecordBuilder",
    "MappingError",
    "Record",
    "RecordSchema",
    "SchemaMalformedError",
    "TypeNotFoundError",
    "TypeRegistry",
    "UnsupportedPathError",
    "UnsupportedTypeError",
    "json_text_from_record",
    "json_tree_from_record",
    "load_record_schema",
    "parse_document",
    "record_from_json_text",
    "serialize_document",
]
