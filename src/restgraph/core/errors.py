"""
Custom exceptions for the restgraph system.

Build-time problems are raised as exceptions. Per-request failures are never
raised: they are returned to graphql-core as structured ``GraphQLError``
instances built by :func:`create_error`.
"""

from __future__ import annotations

from typing import Any, Optional

from graphql import GraphQLError


class RestGraphError(Exception):
    """Base exception for all restgraph errors."""
    pass


class GraphConfigError(RestGraphError):
    """Raised when an operation descriptor cannot be bound to the schema."""

    def __init__(self, message: str, operation: Optional[str] = None):
        self.operation = operation
        super().__init__(f"[{operation}] {message}" if operation else message)


class ExecutionError(RestGraphError):
    """Raised by capabilities (fetch, pub/sub) that fail outside a resolver."""

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(f"{message}{f' ({url})' if url else ''}")


def create_error(message: str, **extensions: Any) -> GraphQLError:
    """
    Build the structured error returned by resolvers.

    Extensions with a ``None`` value are dropped so every error carries only
    the keys that apply to it (url, method, status, responseText, cause...).
    """
    return GraphQLError(
        message,
        extensions={key: value for key, value in extensions.items() if value is not None},
    )
