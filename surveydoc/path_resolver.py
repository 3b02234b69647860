"""
JSON path resolution over arbitrary nested survey data.

Paths use dots and brackets (``formData.owners[0].name``,
``formData["risk-impact"]``). A literal ``[]`` segment flattens over an
array: ``formData.systems[].name`` yields the ``name`` of every element,
with falsy entries dropped.

Resolution never raises: a missing plain path resolves to ``''`` and a
missing flattened path resolves to ``[]``.
"""

from __future__ import annotations

from typing import Any, List, Optional

FLATTEN = "[]"

_MISSING = object()


def split_path(path: str) -> List[str]:
    """
    Split a dotted/bracketed path into key segments.

    >>> split_path('a.b[0]["x-y"]')
    ['a', 'b', '0', 'x-y']
    """
    segments: List[str] = []
    buf = ""
    i = 0
    while i < len(path):
        ch = path[i]
        if ch == ".":
            if buf:
                segments.append(buf)
                buf = ""
            i += 1
        elif ch == "[":
            if buf:
                segments.append(buf)
                buf = ""
            end = path.find("]", i)
            if end == -1:
                # unbalanced bracket, keep the rest as a plain key
                buf = path[i:]
                break
            inner = path[i + 1:end].strip()
            if len(inner) >= 2 and inner[0] == inner[-1] and inner[0] in ("'", '"'):
                inner = inner[1:-1]
            segments.append(inner)
            i = end + 1
        else:
            buf += ch
            i += 1
    if buf:
        segments.append(buf)
    return segments


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, dict):
        return current.get(segment, _MISSING)
    if isinstance(current, (list, tuple)) and segment.isdigit():
        idx = int(segment)
        return current[idx] if idx < len(current) else _MISSING
    return _MISSING


def get_path(data: Any, path: Optional[str], default: Any = "") -> Any:
    """
    Safe deep get.

    A key that literally contains dots wins over the split path. An
    explicit ``None`` at the end of the path is returned as ``None``; any
    missing segment yields ``default``.
    """
    if not path:
        return default
    if isinstance(data, dict) and path in data:
        return data[path]

    current: Any = data
    for segment in split_path(path):
        current = _step(current, segment)
        if current is _MISSING:
            return default
    return current


def is_falsy(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0 or value != value  # NaN
    return False


def resolve(data: Any, path: Optional[str]) -> Any:
    """
    Resolve ``path`` against ``data``.

    Returns ``''`` for an empty path or a missing plain path, and a list
    for any path containing the ``[]`` flatten segment.
    """
    if not path:
        return ""

    if FLATTEN not in path:
        return get_path(data, path, "")

    idx = path.index(FLATTEN)
    base = path[:idx]
    if base.endswith("."):
        base = base[:-1]
    rest = path[idx + len(FLATTEN):]
    if rest.startswith("."):
        rest = rest[1:]

    array = get_path(data, base, []) if base else data
    if not isinstance(array, (list, tuple)):
        return []

    flattened: List[Any] = []
    for item in array:
        if not rest:
            value = item
        elif FLATTEN in rest:
            value = resolve(item, rest)
        else:
            value = get_path(item, rest, "")

        if isinstance(value, (list, tuple)):
            flattened.extend(value)
        else:
            flattened.append(value)

    return [v for v in flattened if not is_falsy(v)]


__all__ = ["FLATTEN", "get_path", "is_falsy", "resolve", "split_path"]
