"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "mapping.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Mapping configuration template for avro-json-mapper.
# Replace every <REQUIRED> placeholder before running to-json or to-record.
# Uncomment <OPTIONAL> entries only when your setup needs them.

schema:
  # Provide either the inline AVSC JSON text or a path to the .avsc file
  # (relative paths are resolved against this file).
  path: "<REQUIRED>"
  # inline: "<OPTIONAL>"

mapping:
  # Field property holding the JSON path annotations.
  selector_key: "jsonpath"
  # Namespace used to resolve nested record types; defaults to the schema namespace.
  # base_namespace: "<OPTIONAL>"
  # Record type converted by to-json and to-record; defaults to the schema root record.
  # target_type: "<OPTIONAL>"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML mapping configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder mapping configuration to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(
            f"Mapping configuration file already exists: {destination.resolve()}"
        )
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
