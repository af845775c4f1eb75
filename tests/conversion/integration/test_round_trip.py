"""End-to-end conversion through the public text entry points."""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime

import pytest
from avro_json_mapper import (
    Record,
    RecordSchema,
    TypeRegistry,
    json_text_from_record,
    load_record_schema,
    record_from_json_text,
)


def _schema(fields: list[dict], name: str = "Sample") -> RecordSchema:
    return load_record_schema(
        json.dumps(
            {"type": "record", "name": name, "namespace": "com.example.sample", "fields": fields}
        )
    )


_SCALARS = _schema(
    [
        {"name": "label", "type": "string", "jsonpath": "label"},
        {"name": "count", "type": "int", "jsonpath": "stats.count"},
        {"name": "total", "type": "long", "jsonpath": "stats.total"},
        {"name": "ratio", "type": "double", "jsonpath": "stats.ratio"},
        {"name": "weight", "type": "float", "jsonpath": "stats.weight"},
        {"name": "active", "type": "boolean", "jsonpath": "flags.active"},
        {"name": "note", "type": ["null", "string"], "default": None, "jsonpath": "note"},
    ]
)


def test_scalar_record_survives_a_round_trip() -> None:
    record = Record.from_dict(
        _SCALARS,
        {
            "label": "größe",
            "count": -12,
            "total": 9223372036854775807,
            "ratio": 0.125,
            "weight": 2.5,
            "active": True,
            "note": "hello",
        },
    )

    assert record_from_json_text(json_text_from_record(record), None, _SCALARS) == record


def test_skip_level_path_nests_on_write_and_flattens_on_read() -> None:
    schema = _schema([{"name": "value", "type": "string", "jsonpath": "a.b.c"}])
    record = Record.from_dict(schema, {"value": "deep"})

    text = json_text_from_record(record)

    assert json.loads(text) == {"a": {"b": {"c": "deep"}}}
    assert record_from_json_text(text, None, schema)["value"] == "deep"


def test_array_of_records_preserves_order_and_content() -> None:
    schema = _schema(
        [
            {
                "name": "items",
                "type": {
                    "type": "array",
                    "items": {
                        "type": "record",
                        "name": "Item",
                        "fields": [
                            {"name": "code", "type": "string", "jsonpath": "code"},
                            {"name": "amount", "type": "int", "jsonpath": "price.amount"},
                        ],
                    },
                },
                "default": [],
                "jsonpath": "basket.items",
            }
        ]
    )
    record = Record.from_dict(
        schema, {"items": [{"code": "B", "amount": 2}, {"code": "A", "amount": 1}]}
    )

    text = json_text_from_record(record)
    restored = record_from_json_text(text, None, schema)

    assert json.loads(text) == {
        "basket": {
            "items": [
                {"code": "B", "price": {"amount": "2"}},
                {"code": "A", "price": {"amount": "1"}},
            ]
        }
    }
    assert restored == record
    assert [item.to_dict() for item in restored["items"]] == [
        {"code": "B", "amount": 2},
        {"code": "A", "amount": 1},
    ]


_DATED = _schema(
    [
        {
            "name": "createdAt",
            "type": {"type": "long", "logicalType": "timestamp-millis"},
            "default": 1000,
            "jsonpath": "created",
        },
        {
            "name": "closedAt",
            "type": ["null", {"type": "long", "logicalType": "timestamp-millis"}],
            "default": None,
            "jsonpath": "closed",
        },
    ]
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("2021-05-01T10:00:00+02:00", datetime(2021, 5, 1, 8, tzinfo=UTC)),
        ("2021-05-01", datetime(2021, 5, 1, tzinfo=UTC)),
        ("20210501+0200", datetime(2021, 5, 1, 12, tzinfo=UTC)),
        ("2021-05-01 10:00:00", datetime(2021, 5, 1, 10).astimezone(UTC)),
    ],
)
def test_date_literals_are_read_as_utc_instants(text: str, expected: datetime) -> None:
    record = record_from_json_text(json.dumps({"created": text, "closed": text}), None, _DATED)

    assert record is not None
    assert record["createdAt"] == expected
    assert record["closedAt"] == expected


def test_unparseable_date_falls_back_to_default_or_null() -> None:
    record = record_from_json_text(
        '{"created": "not-a-date", "closed": "not-a-date"}', None, _DATED
    )

    assert record is not None
    assert record["createdAt"] == datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)
    assert record["closedAt"] is None


def test_optional_field_is_skipped_on_write_and_defaulted_on_read() -> None:
    record = Record.from_dict(_SCALARS, {"label": "x", "count": 1, "active": False})

    text = json_text_from_record(record)

    assert "note" not in json.loads(text)
    assert record_from_json_text(text, None, _SCALARS)["note"] is None


def test_fan_out_on_write_and_first_path_on_read() -> None:
    schema = _schema(
        [{"name": "email", "type": "string", "jsonpath": ["primary.email", "backup.email"]}]
    )
    record = Record.from_dict(schema, {"email": "a@example.com"})

    assert json.loads(json_text_from_record(record)) == {
        "primary": {"email": "a@example.com"},
        "backup": {"email": "a@example.com"},
    }
    restored = record_from_json_text(
        '{"primary": {"email": "first@example.com"}, "backup": {"email": "second@example.com"}}',
        None,
        schema,
    )
    assert restored["email"] == "first@example.com"
    assert record_from_json_text('{"backup": {"email": "x"}}', None, schema)["email"] is None


def test_missing_path_leaves_only_that_field_at_default() -> None:
    schema = _schema(
        [
            {"name": "present", "type": "string", "jsonpath": "here"},
            {"name": "missing", "type": "string", "default": "fallback", "jsonpath": "not.there"},
        ]
    )

    record = record_from_json_text('{"here": "value"}', None, schema)

    assert record is not None
    assert record.to_dict() == {"present": "value", "missing": "fallback"}


def test_custom_selector_key_selects_other_annotations() -> None:
    schema = _schema(
        [{"name": "value", "type": "string", "jsonpath": "json.value", "xpath": "x.value"}]
    )
    record = Record.from_dict(schema, {"value": "v"})

    assert json_text_from_record(record, "xpath") == '{"x":{"value":"v"}}'
    assert record_from_json_text('{"x": {"value": "w"}}', None, schema, "xpath")["value"] == "w"


@pytest.mark.parametrize("text", ["{not json", "[1, 2]", '"text"'])
def test_non_object_text_yields_none_and_logs(
    text: str, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.ERROR, logger="avro_json_mapper"):
        assert record_from_json_text(text, None, _SCALARS) is None

    assert any(entry.levelno == logging.ERROR for entry in caplog.records)


def test_target_type_by_name_requires_a_registry() -> None:
    registry = TypeRegistry.from_schema(_SCALARS)

    record = record_from_json_text(
        '{"label": "named"}', "com.example.sample", "Sample", registry=registry
    )

    assert record is not None
    assert record["label"] == "named"
    with pytest.raises(ValueError):
        record_from_json_text('{"label": "named"}', "com.example.sample", "Sample")


def test_json_text_is_compact_and_keeps_unicode() -> None:
    record = Record.from_dict(_SCALARS, {"label": "größe", "count": 1, "active": True})

    assert json_text_from_record(record) == (
        '{"label":"größe","stats":{"count":"1"},"flags":{"active":"true"}}'
    )
