"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from avro_json_mapper.schema_management.schema_models import RecordSchema


@dataclass(frozen=True)
class SchemaConfig:
    """Normalized schema settings."""

    text: str
    source_path: Path | None


@dataclass(frozen=True)
class MappingSettings:
    """Top-level mapping configuration aggregate."""

    path: Path
    schema: SchemaConfig
    record_schema: RecordSchema
    target_schema: RecordSchema
    selector_key: str
    base_namespace: str | None
