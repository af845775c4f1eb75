"""Record instances built from record schemas."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from avro_json_mapper.schema_management.schema_introspection import effective_type
from avro_json_mapper.schema_management.schema_models import (
    FieldSchema,
    RecordSchema,
    SchemaType,
    TypeSchema,
)
from avro_json_mapper.value_conversion.date_normalization import normalize_date

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass
class Record:
    """Values of one record schema, keyed by field name."""

    schema: RecordSchema
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, schema: RecordSchema) -> Record:
        """Create a record populated with the schema defaults."""
        return cls(
            schema=schema,
            values={
                record_field.name: default_value(record_field) for record_field in schema.fields
            },
        )

    @classmethod
    def from_dict(cls, schema: RecordSchema, data: Mapping[str, Any]) -> Record:
        """Build a record from plain Python data (as read from a JSON file)."""
        record = cls.new(schema)
        for record_field in schema.fields:
            if record_field.name in data:
                record.put(
                    record_field.name,
                    _from_plain(record_field.effective, data[record_field.name]),
                )
        return record

    def get(self, name: str) -> Any:
        self.schema.field_named(name)
        return self.values.get(name)

    def put(self, name: str, value: Any) -> None:
        self.schema.field_named(name)
        self.values[name] = value

    def __getitem__(self, name: str) -> Any:
        return self.get(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self.put(name, value)

    def to_dict(self) -> dict[str, Any]:
        """Return the record as nested plain Python data."""
        return {name: _to_plain(value) for name, value in self.values.items()}

    def __repr__(self) -> str:
        return f"Record({self.schema.full_name!r}, {self.values!r})"


def default_value(record_field: FieldSchema) -> Any:
    """Return the declared default of a field converted to a record value."""
    if not record_field.has_default or record_field.default is None:
        return None
    return _from_plain(record_field.effective, record_field.default)


def is_timestamp(schema: TypeSchema) -> bool:
    return (
        schema.type is SchemaType.LONG
        and schema.logical_type is not None
        and schema.logical_type.startswith("timestamp")
    )


def instant_from_epoch(value: int, logical_type: str | None = "timestamp-millis") -> datetime:
    """Interpret an epoch number as an aware UTC instant."""
    if logical_type == "timestamp-micros":
        return _EPOCH + timedelta(microseconds=value)
    return _EPOCH + timedelta(milliseconds=value)


def _from_plain(schema: TypeSchema, value: Any) -> Any:
    if value is None:
        return None
    if schema.type is SchemaType.RECORD and isinstance(value, Mapping):
        return Record.from_dict(schema, value)
    if (
        schema.type is SchemaType.ARRAY
        and schema.items is not None
        and isinstance(value, Sequence)
        and not isinstance(value, str)
    ):
        items = effective_type(schema.items)
        return [_from_plain(items, item) for item in value]
    if is_timestamp(schema):
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return instant_from_epoch(value, schema.logical_type)
            except OverflowError:
                logger.debug("Epoch value %s is outside the datetime range", value)
                return None
        if isinstance(value, str):
            return normalize_date(value)
    return value


def _to_plain(value: Any) -> Any:
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    return value
