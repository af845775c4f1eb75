"""Registry of constructible record types."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from avro_json_mapper.errors import TypeNotFoundError
from avro_json_mapper.schema_management.schema_loading import iter_record_schemas
from avro_json_mapper.schema_management.schema_models import RecordSchema

from .records import Record

RecordFactory = Callable[[], Record]


class TypeRegistry:
    """Maps fully qualified type names to zero-argument record factories."""

    def __init__(self, factories: Mapping[str, RecordFactory] | None = None) -> None:
        self._factories: dict[str, RecordFactory] = dict(factories or {})

    @classmethod
    def from_schema(cls, schema: RecordSchema) -> TypeRegistry:
        """Register every record type reachable from ``schema``."""
        registry = cls()
        for record_schema in iter_record_schemas(schema):
            registry.register_schema(record_schema)
        return registry

    def register(self, namespace: str | None, name: str, factory: RecordFactory) -> None:
        self._factories[_qualified(namespace, name)] = factory

    def register_schema(self, schema: RecordSchema) -> None:
        """Register a factory creating default-populated records of ``schema``."""
        if schema.name is None:
            raise ValueError("Only named record schemas can be registered.")
        self.register(schema.namespace, schema.name, lambda: Record.new(schema))

    def lookup(self, namespace: str | None, name: str) -> RecordFactory:
        """Return the factory registered for ``namespace.name``.

        Raises:
          TypeNotFoundError: If nothing is registered under that name.
        """
        qualified = _qualified(namespace, name)
        try:
            return self._factories[qualified]
        except KeyError as exc:
            raise TypeNotFoundError(f"Record type not found: {qualified}") from exc

    def __contains__(self, qualified_name: object) -> bool:
        return qualified_name in self._factories


def _qualified(namespace: str | None, name: str) -> str:
    return f"{namespace}.{name}" if namespace else name
