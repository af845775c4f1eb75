"""Mapping error taxonomy."""

from __future__ import annotations


class MappingError(Exception):
    """Base class for every error raised by the mapper."""


class SchemaMalformedError(MappingError):
    """Raised when a schema cannot be interpreted (degenerate union, invalid AVSC)."""


class UnsupportedTypeError(MappingError):
    """Raised for schema types the mapper does not convert."""


class InvalidPathError(MappingError):
    """Raised when a path annotation cannot be parsed."""


class UnsupportedPathError(MappingError):
    """Raised when a path cannot be used for writing."""


class TypeNotFoundError(MappingError):
    """Raised when a nested record type is not registered."""


class ConversionError(MappingError):
    """Raised when a JSON document cannot be converted into a record."""

    def __init__(self, message: str, *, input: object = None) -> None:
        super().__init__(message)
        self.input = input
