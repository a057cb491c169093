"""
String interpolation for operation templates.

Templates are plain strings with ``{source.dotted.path}`` placeholders, e.g.
``"/users/{args.id}"`` or ``"Bearer {context.token}"``. Values are looked up
in a fixed set of named sources (root, args, context, info, env).

Usage:
    ctx = InterpolationContext(args={"id": 42})
    interpolate("/users/{args.id}", ctx)  # "/users/42"

    parse_interpolation_strings(["/users/{args.id}"])  # {"id": "ID"}
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, Mapping, Optional, Protocol

# {args.id}, {context.headers.authorization}, {env.API_TOKEN}
_PLACEHOLDER_PATTERN = re.compile(r"\{\s*([A-Za-z_$][\w$-]*(?:\.[\w$-]+)*)\s*\}")

DEFAULT_ARG_TYPE = "ID"
DEFAULT_NESTED_ARG_TYPE = "JSON"


class _NotFound:
    """Sentinel for a placeholder that resolves to nothing."""

    _instance: Optional[_NotFound] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


class LookupSource(Protocol):
    def lookup(self, path: str) -> Any:
        ...


def lookup_path(value: Any, parts: Iterable[str]) -> Any:
    """
    Walk ``parts`` through mappings, sequences and attributes.

    Returns NOT_FOUND as soon as a segment cannot be resolved.
    """
    for part in parts:
        if value is None or value is NOT_FOUND:
            return NOT_FOUND
        if isinstance(value, Mapping):
            if part not in value:
                return NOT_FOUND
            value = value[part]
        elif isinstance(value, (list, tuple)):
            try:
                value = value[int(part)]
            except (ValueError, IndexError):
                return NOT_FOUND
        else:
            value = getattr(value, part, NOT_FOUND)
    return value


def stringify_value(value: Any) -> str:
    """Render a resolved value for inclusion in a URL, header or body string."""
    if value is None or value is NOT_FOUND:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def interpolate(template: Optional[str], source: LookupSource) -> str:
    """Substitute every placeholder in ``template``; unresolved ones become ``""``."""
    if not template:
        return template or ""
    return _PLACEHOLDER_PATTERN.sub(
        lambda match: stringify_value(source.lookup(match.group(1))),
        template,
    )


def get_interpolation_keys(template: Optional[str]) -> list[str]:
    """Return placeholder paths referenced by ``template`` in order of appearance."""
    if not template:
        return []
    return _PLACEHOLDER_PATTERN.findall(template)


def parse_interpolation_strings(
    templates: Iterable[Optional[str]],
    arg_type_map: Optional[Mapping[str, str]] = None,
) -> dict[str, str]:
    """
    Derive field arguments from ``args.*`` placeholders.

    Args:
        templates: Every template the operation will interpolate
        arg_type_map: Optional argument name -> GraphQL type notation

    Returns:
        Dict of argument name -> GraphQL type notation. Arguments default to
        ``ID``; placeholders reaching into an argument (``args.filter.name``)
        default to ``JSON`` and register the top-level argument.
    """
    arg_type_map = arg_type_map or {}
    args: dict[str, str] = {}

    for template in templates:
        for key in get_interpolation_keys(template):
            parts = key.split(".")
            if parts[0] != "args" or len(parts) < 2:
                continue
            arg_name = parts[1]
            if arg_name in arg_type_map:
                args[arg_name] = arg_type_map[arg_name]
            elif len(parts) > 2:
                args[arg_name] = DEFAULT_NESTED_ARG_TYPE
            else:
                args.setdefault(arg_name, DEFAULT_ARG_TYPE)

    return args
