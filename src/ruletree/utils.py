from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any

_MISSING = object()


def deep_get(obj: Any, path: str, default: Any = None) -> Any:
    """Read a nested value from an input record using dot-separated notation.

    Used by ``Accessor.path()`` so that rules can project plain dict
    payloads and typed records (dataclasses, attribute objects) alike.

    Args:
        obj: The record to traverse.
        path: Dot-separated path to the desired value. Examples:
            - ``"user.name"`` for ``{"user": {"name": "Alice"}}``
            - ``"items.0.id"`` for ``{"items": [{"id": 1}]}``
            - ``"address.city"`` for an object with an ``address``
              attribute
        default: Value to return if the path cannot be resolved.

    Returns:
        The value at the path, or ``default`` if any segment is missing.

    Path resolution rules:
        - Mapping: segment is looked up as a string key
        - List/tuple: segment is parsed as an integer (negative indices allowed)
        - Anything else: segment is read as a public attribute; methods
          and names starting with an underscore resolve to ``default``
        - Empty segments (consecutive dots) are ignored

    Examples:
        >>> deep_get({"a": {"b": 1}}, "a.b")
        1
        >>> deep_get({"items": [10, 20]}, "items.-1")
        20
        >>> deep_get({}, "missing.path", default="N/A")
        'N/A'
    """
    parts = [p for p in path.split(".") if p]
    cur = obj
    for part in parts:
        if isinstance(cur, Mapping):
            if part in cur:
                cur = cur[part]
                continue
            return default
        if isinstance(cur, (list, tuple)):
            try:
                index = int(part)
            except ValueError:
                return default
            if -len(cur) <= index < len(cur):
                cur = cur[index]
                continue
            return default
        if part.startswith("_"):
            return default
        cur = getattr(cur, part, _MISSING)
        if cur is _MISSING or inspect.isroutine(cur):
            return default
    return cur


def indent(depth: int, unit: str = "|      ") -> str:
    """Return the prefix used for one line of a tree rendering at ``depth``."""
    return unit * depth
