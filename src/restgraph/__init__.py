"""
restgraph - GraphQL fields backed by declaratively described HTTP APIs.

Each operation descriptor binds one root field of a GraphQL schema to an HTTP
endpoint (or a pub/sub topic). Invoking the field interpolates the request
templates, calls the endpoint and reshapes the response to the field's type.

Usage:
    from graphql import build_schema, graphql
    from restgraph import HttpxFetch, build_registry

    schema = build_schema(sdl)
    build_registry(schema, {
        "baseUrl": "https://api.example.com",
        "operations": [{"type": "query", "field": "user", "path": "/users/{args.id}"}],
    }, fetch=HttpxFetch())

    result = await graphql(schema, "{ user(id: 42) { id name } }")
"""

from __future__ import annotations

from .api import create_graphql_router
from .core import (
    ExecutionError,
    GraphConfigError,
    GraphQLJSON,
    HttpOperation,
    LoaderConfig,
    Operation,
    PubSubOperation,
    RestGraphError,
    parse_operation,
)
from .core.registry import OperationBinding, OperationRegistry, build_registry
from .gateway import Gateway
from .messaging import InMemoryPubSub, RedisPubSub
from .runtime import (
    HttpOperationExecutor,
    HttpxFetch,
    InterpolationContext,
    PubSubOperationExecutor,
    RequestPlan,
)

__version__ = "0.1.0"

__all__ = [
    # Definitions
    "HttpOperation",
    "PubSubOperation",
    "Operation",
    "parse_operation",
    "LoaderConfig",
    "GraphQLJSON",
    # Errors
    "RestGraphError",
    "GraphConfigError",
    "ExecutionError",
    # Registry
    "OperationBinding",
    "OperationRegistry",
    "build_registry",
    # Runtime
    "InterpolationContext",
    "RequestPlan",
    "HttpOperationExecutor",
    "PubSubOperationExecutor",
    "HttpxFetch",
    # Messaging
    "InMemoryPubSub",
    "RedisPubSub",
    # API
    "create_graphql_router",
    "Gateway",
]
