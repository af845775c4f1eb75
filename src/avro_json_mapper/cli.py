"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from pathlib import Path

import click

from avro_json_mapper.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from avro_json_mapper.conversion import (
    json_text_from_record,
    record_from_json_text,
    serialize_document,
)
from avro_json_mapper.errors import MappingError
from avro_json_mapper.record_model import Record, TypeRegistry


class CliError(Exception):
    """Custom CLI error."""


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="avro-json-mapper")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool) -> None:
    """Schema-driven Avro record / JSON document converter."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
        )


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML mapping configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML mapping configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="to-json")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mapping configuration file",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to a JSON file holding the record values",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the mapped JSON document to write (stdout when omitted)",
)
def to_json(config_path: str, input_path: str, output_path: str | None) -> None:
    """Map record values onto a JSON document using the schema path annotations."""
    try:
        settings = load_configuration(config_path)
        data = json.loads(Path(input_path).read_text(encoding="utf-8"))
        if not isinstance(data, Mapping):
            raise CliError(f"Record input must be a JSON object: {input_path}")
        record = Record.from_dict(settings.target_schema, data)
        text = json_text_from_record(record, settings.selector_key)
        _emit(text, output_path)
    except (ConfigurationError, MappingError, OSError, ValueError) as exc:
        raise CliError(str(exc)) from exc


@cli.command(name="to-record")
@click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to YAML/JSON mapping configuration file",
)
@click.option(
    "--input",
    "input_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the JSON document to convert",
)
@click.option(
    "--output",
    "output_path",
    required=False,
    type=click.Path(path_type=str),
    help="Path to the record values file to write (stdout when omitted)",
)
def to_record(config_path: str, input_path: str, output_path: str | None) -> None:
    """Build a record from a JSON document using the schema path annotations."""
    try:
        settings = load_configuration(config_path)
        document_text = Path(input_path).read_text(encoding="utf-8")
        record = record_from_json_text(
            document_text,
            settings.base_namespace,
            settings.target_schema,
            settings.selector_key,
            registry=TypeRegistry.from_schema(settings.record_schema),
        )
        if record is None:
            raise CliError(f"Input is not a JSON object: {input_path}")
        _emit(serialize_document(record.to_dict()), output_path)
    except MappingError as exc:
        cause = exc.__cause__
        message = f"{exc}: {cause}" if cause is not None else str(exc)
        raise CliError(message) from exc
    except (ConfigurationError, OSError) as exc:
        raise CliError(str(exc)) from exc


def _emit(text: str, output_path: str | None) -> None:
    if output_path is None:
        click.echo(text)
        return
    destination = Path(output_path)
    destination.write_text(text, encoding="utf-8")
    click.echo(str(destination.resolve()))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
