"""Navigation of JSON trees along dot/bracket path annotations.

A path is a sequence of ``.``-separated segments; each segment names an object
member and may end with a single ``[<n>]`` array index, e.g.
``order.lines[0].sku``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from avro_json_mapper.errors import InvalidPathError, UnsupportedPathError

_SEGMENT_PATTERN = re.compile(r"(?P<name>[^.\[\]]+)(?:\[(?P<index>[0-9]+)\])?")


@dataclass(frozen=True)
class PathSegment:
    """One member name with an optional array index."""

    name: str
    index: int | None = None


@lru_cache(maxsize=1024)
def parse_path(path: str) -> tuple[PathSegment, ...]:
    """Split a path annotation into segments.

    Raises:
      InvalidPathError: If the path is empty or a segment is malformed.
    """
    if not path or not path.strip():
        raise InvalidPathError("Path annotation must not be empty.")
    segments = []
    for raw_segment in path.split("."):
        match = _SEGMENT_PATTERN.fullmatch(raw_segment)
        if match is None:
            raise InvalidPathError(f"Invalid segment {raw_segment!r} in path {path!r}.")
        index = match["index"]
        segments.append(PathSegment(name=match["name"], index=int(index) if index else None))
    return tuple(segments)


def resolve_read(root: Any, path: str) -> Any | None:
    """Return the node at ``path`` or ``None`` when any step is missing."""
    node = root
    for segment in parse_path(path):
        if not isinstance(node, dict):
            return None
        node = node.get(segment.name)
        if node is None:
            return None
        if segment.index is not None:
            if not isinstance(node, list) or segment.index >= len(node):
                return None
            node = node[segment.index]
            if node is None:
                return None
    return node


def resolve_write(root: dict[str, Any], path: str) -> dict[str, Any]:
    """Return the object on which the last segment of ``path`` is to be set.

    Missing intermediate objects are created and attached.

    Raises:
      UnsupportedPathError: If the path carries an array index or crosses a
        non-object value.
    """
    segments = parse_path(path)
    if any(segment.index is not None for segment in segments):
        raise UnsupportedPathError(f"Array indexes are not supported in write paths: {path}")
    node = root
    for segment in segments[:-1]:
        child = node.get(segment.name)
        if child is None:
            child = {}
            node[segment.name] = child
        elif not isinstance(child, dict):
            raise UnsupportedPathError(
                f"Cannot write below non-object member {segment.name!r} of path {path}"
            )
        node = child
    return node


def leaf_name(path: str) -> str:
    """Return the member name addressed by the last segment of ``path``."""
    return parse_path(path)[-1].name


def resolve_write_object(root: dict[str, Any], path: str) -> dict[str, Any]:
    """Return the object at ``path``, creating every missing level."""
    container = resolve_write(root, path)
    name = leaf_name(path)
    existing = container.get(name)
    if isinstance(existing, dict):
        return existing
    if existing is not None:
        raise UnsupportedPathError(f"Cannot replace non-object member {name!r} of path {path}")
    created: dict[str, Any] = {}
    container[name] = created
    return created
