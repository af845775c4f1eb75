"""Record model exports."""

from .records import Record, default_value, instant_from_epoch, is_timestamp
from .type_registry import RecordFactory, TypeRegistry

__all__ = [
    "Record",
    "RecordFactory",
    "TypeRegistry",
    "default_value",
    "instant_from_epoch",
    "is_timestamp",
]
