"""Scalar value and date conversion exports."""

from .date_normalization import normalize_date, parse_zone
from .scalar_coercion import as_text, coerce, format_instant, parse_long, stringify

__all__ = [
    "as_text",
    "coerce",
    "format_instant",
    "normalize_date",
    "parse_long",
    "parse_zone",
    "stringify",
]
