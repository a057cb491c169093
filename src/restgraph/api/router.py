"""
FastAPI router for GraphQL execution.

Endpoints:
- POST /graphql - Executes a query or mutation against the bound schema
- WS /graphql - Streams subscription events (see ``websocket.py``)
- GET /__schema - Returns the schema as SDL

Request body:
    {"query": "{ user(id: 42) { id name } }", "variables": {}, "operationName": null}

The GraphQL context passed to resolvers is ``{"request": connection}`` by
default, where the connection is the HTTP request or the WebSocket; pass
``context_factory`` to add per-request ``fetch``/``pubsub`` capabilities or
auth data used by ``{context.*}`` placeholders.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from fastapi import APIRouter, Request, WebSocket
from fastapi.requests import HTTPConnection
from fastapi.responses import PlainTextResponse
from graphql import (
    ExecutionResult,
    GraphQLError,
    GraphQLSchema,
    OperationType,
    get_operation_ast,
    graphql,
    parse,
    print_schema,
)

from ..core.errors import create_error
from .models import GraphQLRequest
from .websocket import GraphQLWebSocketHandler

logger = logging.getLogger(__name__)

ContextFactory = Callable[[HTTPConnection], Union[Any, Awaitable[Any]]]


async def default_context(connection: HTTPConnection) -> dict[str, Any]:
    return {"request": connection}


def is_subscription_request(query: str, operation_name: Optional[str] = None) -> bool:
    """True when the selected operation of ``query`` is a subscription."""
    try:
        document = parse(query)
    except GraphQLError:
        # Syntax errors are reported by the executor
        return False
    operation = get_operation_ast(document, operation_name)
    return operation is not None and operation.operation == OperationType.SUBSCRIPTION


def create_graphql_router(
    schema: GraphQLSchema,
    context_factory: Optional[ContextFactory] = None,
    path: str = "/graphql",
) -> APIRouter:
    """
    Create a router serving ``schema``.

    Args:
        schema: Schema with execution logic attached (see build_registry)
        context_factory: Builds the GraphQL context from the HTTP request or WebSocket
        path: URL path of the GraphQL endpoint (HTTP and WebSocket)

    Returns:
        APIRouter to include in a FastAPI app
    """
    router = APIRouter()
    make_context = context_factory or default_context
    subscriptions = GraphQLWebSocketHandler(schema)

    async def build_context(connection: HTTPConnection) -> Any:
        context = make_context(connection)
        if inspect.isawaitable(context):
            context = await context
        return context

    @router.post(path)
    async def execute_graphql(body: GraphQLRequest, request: Request) -> dict[str, Any]:
        """Execute a GraphQL operation and return ``{"data", "errors"}``."""
        if is_subscription_request(body.query, body.operation_name):
            error = create_error(f"Subscriptions are served over WebSocket at {path}")
            return ExecutionResult(data=None, errors=[error]).formatted

        result = await graphql(
            schema,
            body.query,
            variable_values=body.variables,
            operation_name=body.operation_name,
            context_value=await build_context(request),
        )
        if result.errors:
            logger.debug(f"GraphQL execution returned {len(result.errors)} error(s)")
        return result.formatted

    @router.websocket(path)
    async def stream_graphql(websocket: WebSocket):
        """Serve subscription operations over a WebSocket."""
        await subscriptions.handle_connection(websocket, await build_context(websocket))

    @router.get("/__schema", response_class=PlainTextResponse)
    async def get_schema_sdl() -> str:
        """Return the schema (including derived arguments) as SDL."""
        return print_schema(schema)

    return router
