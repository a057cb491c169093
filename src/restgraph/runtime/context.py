"""
Per-invocation context objects.

Both are created inside a single field invocation and discarded afterwards;
nothing here is shared between concurrent requests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from ..core.interpolation import NOT_FOUND, lookup_path

INTERPOLATION_SOURCES = ("root", "args", "context", "info", "env")


@dataclass(frozen=True)
class InterpolationContext:
    """
    Read-only bag of values addressed by ``{source.path}`` placeholders.

    Sources:
    - root: parent object of the field
    - args: field arguments
    - context: per-request GraphQL context value
    - info: GraphQLResolveInfo (subscriptions only)
    - env: process environment
    """
    root: Any = None
    args: Mapping[str, Any] = field(default_factory=dict)
    context: Any = None
    info: Any = None
    env: Mapping[str, str] = field(default_factory=lambda: os.environ)

    def lookup(self, path: str) -> Any:
        """Resolve ``source.a.b``; returns NOT_FOUND for unknown sources or keys."""
        source, _, rest = path.partition(".")
        if source not in INTERPOLATION_SOURCES:
            return NOT_FOUND
        value = getattr(self, source)
        if not rest:
            return NOT_FOUND if value is None else value
        return lookup_path(value, rest.split("."))


@dataclass(frozen=True)
class RequestPlan:
    """Fully resolved request, ready for dispatch."""
    url: str
    method: str
    headers: Mapping[str, str]
    body: Optional[Union[str, bytes]] = None

    def __post_init__(self):
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


def get_capability(context: Any, name: str) -> Any:
    """Read ``name`` from a dict-like or attribute-style GraphQL context."""
    if context is None:
        return None
    if isinstance(context, Mapping):
        return context.get(name)
    return getattr(context, name, None)
