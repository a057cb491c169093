"""
Utility functions for restgraph.

Includes:
- Case conversion (camelCase <-> snake_case, PascalCase)
- Null cleaning of request payloads
- Case-insensitive header lookup
- Compact JSON serialisation of request bodies
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping, Optional


# =============================================================================
# Case conversion utilities
# =============================================================================

_SNAKE_TO_CAMEL_PATTERN = re.compile(r'_([a-z])')
_WORD_SPLIT_PATTERN = re.compile(r'[^A-Za-z0-9]+')


def to_camel_case(name: str) -> str:
    """
    Convert snake_case to camelCase.

    Examples:
        pubsub_topic -> pubsubTopic
        request_base_body -> requestBaseBody
        arg_type_map -> argTypeMap
    """
    def replace_underscore(match):
        return match.group(1).upper()

    return _SNAKE_TO_CAMEL_PATTERN.sub(replace_underscore, name)


def to_pascal_case(name: str) -> str:
    """
    Convert any separated or camelCase name to PascalCase.

    Examples:
        query -> Query
        mutation -> Mutation
        sub_scription -> SubScription
    """
    words = [word for word in _WORD_SPLIT_PATTERN.split(name) if word]
    return "".join(word[0].upper() + word[1:] for word in words)


# =============================================================================
# Payload utilities
# =============================================================================


def clean_object(obj: Any) -> Any:
    """
    Recursively drop keys whose value is ``None``.

    List items keep their positions, so ``None`` inside a list stays put.

    Returns new containers; the input is left untouched. Cleaning is
    idempotent: ``clean_object(clean_object(x)) == clean_object(x)``.

    Example:
        {"a": 1, "b": None, "c": {"d": None}, "e": [1, None]}
        ->
        {"a": 1, "c": {}, "e": [1, None]}
    """
    if isinstance(obj, Mapping):
        cleaned = {}
        for key, value in obj.items():
            value = clean_object(value)
            if value is not None:
                cleaned[key] = value
        return cleaned
    if isinstance(obj, (list, tuple)):
        return [clean_object(item) for item in obj]
    return obj


def find_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    """Case-insensitive header lookup. Returns None when absent or empty."""
    lowered = name.lower()
    for key, value in headers.items():
        if key.lower() == lowered and value:
            return value
    return None


def json_flat_stringify(data: Any) -> str:
    """Serialise a request body as compact JSON."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


def url_join(*parts: str) -> str:
    """
    Join URL fragments with single slashes.

    Examples:
        ("http://api/", "/users/1") -> http://api/users/1
        ("http://api", "users?x=1") -> http://api/users?x=1
        ("", "/users") -> /users
    """
    pieces = [part for part in parts if part]
    if not pieces:
        return ""
    result = pieces[0]
    for piece in pieces[1:]:
        if piece.startswith("?") or piece.startswith("#"):
            result = result.rstrip("/") + piece
        else:
            result = result.rstrip("/") + "/" + piece.lstrip("/")
    return result
