"""
Bracket-notation query strings.

Nested payloads are flattened the way most REST backends (Rails, PHP, express
``qs``) expect them:

    {"filter": {"name": "Ada"}, "ids": [1, 2]}
    ->
    filter%5Bname%5D=Ada&ids%5B0%5D=1&ids%5B1%5D=2

Values are percent-encoded per RFC 3986 (spaces become ``%20``).
"""

from __future__ import annotations

import re
from typing import Any, Mapping
from urllib.parse import quote, unquote_plus

# Lists longer than this are parsed back as dicts keyed by index.
ARRAY_LIMIT = 20

_KEY_SEGMENT_PATTERN = re.compile(r"\[([^\[\]]*)\]")


def _encode(value: str) -> str:
    return quote(value, safe="-._~")


def _format_scalar(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _flatten(prefix: str, value: Any, pairs: list[tuple[str, str]]):
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]" if prefix else str(key), item, pairs)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, pairs)
    else:
        pairs.append((prefix, _format_scalar(value)))


def stringify(data: Mapping[str, Any]) -> str:
    """
    Serialise a (possibly nested) mapping into a query string.

    Empty dicts and lists produce no pairs; ``None`` produces ``key=``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in data.items():
        _flatten(str(key), value, pairs)
    return "&".join(f"{_encode(key)}={_encode(value)}" for key, value in pairs)


def _split_key(key: str) -> list[str]:
    """``a[b][0]`` -> ``["a", "b", "0"]``; ``a[]`` -> ``["a", ""]``."""
    bracket = key.find("[")
    if bracket <= 0:
        return [key]
    segments = [key[:bracket]]
    rest = key[bracket:]
    position = 0
    for match in _KEY_SEGMENT_PATTERN.finditer(rest):
        if match.start() != position:
            break
        segments.append(match.group(1))
        position = match.end()
    if position != len(rest):
        # Unbalanced brackets: keep the remainder as a literal segment
        segments.append(rest[position:])
    return segments


def _assign(target: dict, segments: list[str], value: Any):
    key = segments[0]
    if len(segments) == 1:
        if key == "":
            key = str(len(target))
        if key in target:
            existing = target[key]
            target[key] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            target[key] = value
        return

    if key == "":
        key = str(len(target))
    child = target.get(key)
    if not isinstance(child, dict):
        child = {} if child is None else {"0": child}
        target[key] = child
    _assign(child, segments[1:], value)


def _compact(value: Any) -> Any:
    """Turn dicts keyed by small integers back into lists."""
    if isinstance(value, list):
        return [_compact(item) for item in value]
    if not isinstance(value, dict):
        return value
    value = {key: _compact(item) for key, item in value.items()}
    if value and all(key.isdigit() and int(key) <= ARRAY_LIMIT for key in value):
        return [value[key] for key in sorted(value, key=int)]
    return value


def parse(query: str) -> dict[str, Any]:
    """
    Parse a query string produced by :func:`stringify` (or any bracket-notation
    query) back into nested dicts and lists. All leaf values are strings.
    """
    result: dict[str, Any] = {}
    for part in query.lstrip("?").split("&"):
        if not part:
            continue
        raw_key, _, raw_value = part.partition("=")
        key = unquote_plus(raw_key)
        if not key:
            continue
        _assign(result, _split_key(key), unquote_plus(raw_value))
    return {key: _compact(value) for key, value in result.items()}
