"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from avro_json_mapper.constants import JSONPATH_DEFAULT
from avro_json_mapper.errors import SchemaMalformedError
from avro_json_mapper.schema_management.schema_loading import (
    iter_record_schemas,
    load_record_schema,
)
from avro_json_mapper.schema_management.schema_models import RecordSchema

from .runtime_settings import MappingSettings, SchemaConfig


class ConfigurationError(Exception):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> MappingSettings:
    """Load and validate the mapping configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    schema = _parse_schema_section(parsed.get("schema"), path.parent)
    try:
        record_schema = load_record_schema(schema.text)
    except SchemaMalformedError as exc:
        raise ConfigurationError(str(exc)) from exc

    mapping = parsed.get("mapping") or {}
    if not isinstance(mapping, Mapping):
        raise ConfigurationError("Configuration section 'mapping' must be a mapping.")
    selector_key = _require_non_empty_string(
        mapping.get("selector_key", JSONPATH_DEFAULT), "mapping.selector_key"
    )
    base_namespace = _optional_string(mapping.get("base_namespace"), "mapping.base_namespace")
    if base_namespace is None:
        base_namespace = record_schema.namespace
    target_type = _optional_string(mapping.get("target_type"), "mapping.target_type")
    target_schema = _resolve_target_schema(target_type, record_schema)

    return MappingSettings(
        path=path,
        schema=schema,
        record_schema=record_schema,
        target_schema=target_schema,
        selector_key=selector_key,
        base_namespace=base_namespace,
    )


def _parse_schema_section(value: Any, base_path: Path) -> SchemaConfig:
    section = _require_mapping(value, "schema")
    inline = section.get("inline")
    path_value = section.get("path")
    if inline and path_value:
        raise ConfigurationError("Schema definition must not set both inline and path.")
    if inline:
        if not isinstance(inline, str):
            raise ConfigurationError("Schema inline value must be a string.")
        text, source_path = inline, None
    elif path_value:
        if not isinstance(path_value, str):
            raise ConfigurationError("Schema path must be a string.")
        schema_path = _resolve_path(base_path, path_value)
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")
        text, source_path = schema_path.read_text(encoding="utf-8"), schema_path
    else:
        raise ConfigurationError("Schema definition requires either inline or path.")
    if not text.strip():
        raise ConfigurationError("Schema text cannot be empty.")
    return SchemaConfig(text=text, source_path=source_path)


def _resolve_target_schema(target_type: str | None, record_schema: RecordSchema) -> RecordSchema:
    if target_type is None:
        return record_schema
    for candidate in iter_record_schemas(record_schema):
        if target_type in (candidate.name, candidate.full_name):
            return candidate
    raise ConfigurationError(f"mapping.target_type '{target_type}' does not exist in schema.")


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
