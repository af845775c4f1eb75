"""Conversion engine exports."""

from .json_to_record import JsonRecordBuilder
from .mapper import (
    json_text_from_record,
    json_tree_from_record,
    parse_document,
    record_from_json_text,
    serialize_document,
)
from .record_to_json import build_document, build_json_tree

__all__ = [
    "JsonRecordBuilder",
    "build_document",
    "build_json_tree",
    "json_text_from_record",
    "json_tree_from_record",
    "parse_document",
    "record_from_json_text",
    "serialize_document",
]
