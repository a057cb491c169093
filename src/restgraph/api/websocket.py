"""
WebSocket transport for Subscription fields.

Message flow (graphql-transport-ws message names):

    server -> {"type": "connection_ack"}
    client -> {"type": "subscribe", "id": "1", "payload": {"query": "subscription { ... }"}}
    server -> {"type": "next", "id": "1", "payload": {"data": {...}}}     (per event)
    server -> {"type": "complete", "id": "1"}                            (stream ended)
    client -> {"type": "complete", "id": "1"}                            (stop early)
    client -> {"type": "ping"}  server -> {"type": "pong"}

Failures before the stream starts are sent as
``{"type": "error", "id": "1", "payload": [<formatted GraphQL errors>]}``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Optional

from fastapi import WebSocket, WebSocketDisconnect
from graphql import ExecutionResult, GraphQLError, GraphQLSchema, parse, subscribe, validate
from pydantic import ValidationError

from .models import GraphQLRequest

logger = logging.getLogger(__name__)


class GraphQLWebSocketHandler:
    """
    Serves subscription operations over one WebSocket connection at a time.

    Each ``subscribe`` message runs as its own task so several subscriptions
    can share a connection; all of them are cancelled on disconnect.
    """

    def __init__(self, schema: GraphQLSchema):
        self.schema = schema

    async def handle_connection(self, websocket: WebSocket, context: Any):
        """
        Handle one client connection.

        Args:
            websocket: FastAPI WebSocket, accepted here
            context: GraphQL context shared by the connection's subscriptions
        """
        await websocket.accept()
        await websocket.send_json({"type": "connection_ack"})
        streams: dict[str, asyncio.Task] = {}

        try:
            while True:
                message = await websocket.receive_json()
                await self._handle_message(websocket, message, context, streams)
        except WebSocketDisconnect:
            logger.info("Subscription client disconnected")
        finally:
            for task in streams.values():
                task.cancel()

    async def _handle_message(
        self,
        websocket: WebSocket,
        message: dict,
        context: Any,
        streams: dict[str, asyncio.Task],
    ):
        message_type = message.get("type")
        operation_id = message.get("id")

        if message_type == "subscribe":
            if operation_id is None:
                await self._send_error(websocket, None, "Subscribe message requires an id")
                return
            if operation_id in streams:
                await self._send_error(websocket, operation_id, f"Subscriber for {operation_id} already exists")
                return
            task = asyncio.create_task(
                self._stream(websocket, operation_id, message.get("payload") or {}, context)
            )
            streams[operation_id] = task
            task.add_done_callback(lambda _: streams.pop(operation_id, None))

        elif message_type == "complete":
            task = streams.pop(operation_id, None)
            if task is not None:
                task.cancel()

        elif message_type == "ping":
            await websocket.send_json({"type": "pong"})

        else:
            logger.warning(f"Unknown message type: {message_type}")
            await self._send_error(websocket, operation_id, f"Unknown message type: {message_type}")

    async def _stream(self, websocket: WebSocket, operation_id: str, payload: dict, context: Any):
        """Run one subscription and forward every event to the client."""
        try:
            request = GraphQLRequest.model_validate(payload)
        except ValidationError as e:
            await self._send_error(websocket, operation_id, f"Invalid subscribe payload: {e}")
            return

        try:
            document = parse(request.query)
        except GraphQLError as e:
            await self._send_errors(websocket, operation_id, [e])
            return

        errors = validate(self.schema, document)
        if errors:
            await self._send_errors(websocket, operation_id, errors)
            return

        result = subscribe(
            self.schema,
            document,
            variable_values=request.variables,
            operation_name=request.operation_name,
            context_value=context,
        )
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, ExecutionResult):
            await self._send_errors(websocket, operation_id, result.errors or [])
            return

        logger.debug(f"Subscription {operation_id} started")
        try:
            async for event in result:
                await websocket.send_json({"type": "next", "id": operation_id, "payload": event.formatted})
        finally:
            await result.aclose()
        await websocket.send_json({"type": "complete", "id": operation_id})
        logger.debug(f"Subscription {operation_id} completed")

    async def _send_error(self, websocket: WebSocket, operation_id: Optional[str], message: str):
        await self._send_errors(websocket, operation_id, [GraphQLError(message)])

    async def _send_errors(self, websocket: WebSocket, operation_id: Optional[str], errors: list[GraphQLError]):
        await websocket.send_json({
            "type": "error",
            "id": operation_id,
            "payload": [error.formatted for error in errors],
        })
