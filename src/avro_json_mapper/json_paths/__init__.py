"""JSON path resolution exports."""

from .path_resolver import (
    PathSegment,
    leaf_name,
    parse_path,
    resolve_read,
    resolve_write,
    resolve_write_object,
)

__all__ = [
    "PathSegment",
    "leaf_name",
    "parse_path",
    "resolve_read",
    "resolve_write",
    "resolve_write_object",
]
