"""Record to JSON builder tests."""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest
from avro_json_mapper.conversion.record_to_json import build_document, build_json_tree
from avro_json_mapper.errors import UnsupportedPathError, UnsupportedTypeError
from avro_json_mapper.record_model.records import Record
from avro_json_mapper.schema_management.schema_loading import load_record_schema

_CUSTOMER_SCHEMA = load_record_schema(
    json.dumps(
        {
            "type": "record",
            "name": "Customer",
            "namespace": "com.example.crm",
            "fields": [
                {"name": "name", "type": "string", "jsonpath": "customer.name"},
                {
                    "name": "email",
                    "type": ["null", "string"],
                    "default": None,
                    "jsonpath": ["contact.email", "customer.email"],
                },
                {
                    "name": "age",
                    "type": ["null", "int"],
                    "default": None,
                    "jsonpath": "customer.age",
                },
                {"name": "vip", "type": "boolean", "default": False, "jsonpath": "flags.vip"},
                {"name": "internalNote", "type": ["null", "string"], "default": None},
                {
                    "name": "status",
                    "type": {"type": "enum", "name": "Status", "symbols": ["ACTIVE", "CLOSED"]},
                    "default": "ACTIVE",
                    "jsonpath": "status",
                },
                {
                    "name": "address",
                    "type": [
                        "null",
                        {
                            "type": "record",
                            "name": "Address",
                            "fields": [
                                {"name": "street", "type": "string", "jsonpath": "street"},
                                {"name": "city", "type": "string", "jsonpath": "location.city"},
                            ],
                        },
                    ],
                    "default": None,
                    "jsonpath": "customer.address",
                },
                {
                    "name": "tags",
                    "type": {"type": "array", "items": "string"},
                    "default": [],
                    "jsonpath": "tags",
                },
                {
                    "name": "orders",
                    "type": {
                        "type": "array",
                        "items": {
                            "type": "record",
                            "name": "Order",
                            "fields": [
                                {"name": "id", "type": "string", "jsonpath": "id"},
                                {"name": "amount", "type": "double", "jsonpath": "total.amount"},
                            ],
                        },
                    },
                    "default": [],
                    "jsonpath": "history.orders",
                },
                {
                    "name": "since",
                    "type": ["null", {"type": "long", "logicalType": "timestamp-millis"}],
                    "default": None,
                    "jsonpath": "customer.since",
                },
            ],
        }
    )
)


def _schema_with_field(field: dict, **record_properties: object) -> Record:
    schema = load_record_schema(
        json.dumps({"type": "record", "name": "Single", "fields": [field], **record_properties})
    )
    return Record.new(schema)


def test_builds_nested_document_from_annotations() -> None:
    record = Record.from_dict(
        _CUSTOMER_SCHEMA,
        {
            "name": "Ada",
            "email": "ada@example.com",
            "age": 36,
            "vip": True,
            "internalNote": "never exported",
            "address": {"street": "1 Main St", "city": "London"},
            "tags": ["gold", "early"],
            "orders": [{"id": "O-1", "amount": 10.5}, {"id": "O-2", "amount": 3.0}],
            "since": "2021-05-01T10:00:00+02:00",
        },
    )

    document = build_document(record, "jsonpath")

    assert document == {
        "customer": {
            "name": "Ada",
            "email": "ada@example.com",
            "age": "36",
            "address": {"street": "1 Main St", "location": {"city": "London"}},
            "since": "2021-05-01T08:00:00Z",
        },
        "contact": {"email": "ada@example.com"},
        "flags": {"vip": "true"},
        "tags": ["gold", "early"],
        "history": {
            "orders": [
                {"id": "O-1", "total": {"amount": "10.5"}},
                {"id": "O-2", "total": {"amount": "3.0"}},
            ]
        },
    }


def test_unset_optional_fields_and_empty_arrays_emit_nothing() -> None:
    record = Record.from_dict(_CUSTOMER_SCHEMA, {"name": "Ada"})

    document = build_document(record, "jsonpath")

    assert document == {"customer": {"name": "Ada"}, "flags": {"vip": "false"}}


def test_empty_string_values_are_not_written() -> None:
    record = Record.from_dict(_CUSTOMER_SCHEMA, {"name": ""})

    assert "customer" not in build_document(record, "jsonpath")


def test_unknown_selector_key_produces_empty_document() -> None:
    record = Record.from_dict(_CUSTOMER_SCHEMA, {"name": "Ada", "vip": True})

    assert build_document(record, "xmlpath") == {}


def test_build_json_tree_mutates_caller_owned_node() -> None:
    record = Record.from_dict(_CUSTOMER_SCHEMA, {"name": "Ada"})
    out_node: dict = {"existing": "kept", "customer": {"id": "C-1"}}

    result = build_json_tree(record, out_node, "jsonpath")

    assert result is None
    assert out_node == {
        "existing": "kept",
        "customer": {"id": "C-1", "name": "Ada"},
        "flags": {"vip": "false"},
    }


def test_record_level_annotation_roots_the_document() -> None:
    record = _schema_with_field(
        {"name": "code", "type": "string", "jsonpath": "code"}, jsonpath="envelope.body"
    )
    record["code"] = "X1"

    assert build_document(record, "jsonpath") == {"envelope": {"body": {"code": "X1"}}}


def test_array_of_unsupported_elements_fails() -> None:
    record = _schema_with_field(
        {"name": "scores", "type": {"type": "array", "items": "int"}, "jsonpath": "scores"}
    )
    record["scores"] = [1, 2]

    with pytest.raises(UnsupportedTypeError, match="scores"):
        build_document(record, "jsonpath")


def test_annotated_map_fails_and_unannotated_map_is_inert() -> None:
    annotated = _schema_with_field(
        {"name": "labels", "type": {"type": "map", "values": "string"}, "jsonpath": "labels"}
    )
    annotated["labels"] = {"a": "b"}
    inert = _schema_with_field({"name": "labels", "type": {"type": "map", "values": "string"}})
    inert["labels"] = {"a": "b"}

    with pytest.raises(UnsupportedTypeError, match="Map"):
        build_document(annotated, "jsonpath")
    assert build_document(inert, "jsonpath") == {}


def test_indexed_write_path_is_rejected() -> None:
    record = _schema_with_field({"name": "sku", "type": "string", "jsonpath": "lines[0].sku"})
    record["sku"] = "A-1"

    with pytest.raises(UnsupportedPathError):
        build_document(record, "jsonpath")


def test_timestamps_are_written_as_utc_instants() -> None:
    record = Record.from_dict(
        _CUSTOMER_SCHEMA,
        {"name": "Ada", "since": datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)},
    )

    assert build_document(record, "jsonpath")["customer"]["since"] == "2020-01-02T03:04:05Z"
