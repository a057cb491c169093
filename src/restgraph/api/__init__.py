"""
API module - FastAPI endpoints.
"""

from __future__ import annotations

from .models import GraphQLRequest
from .router import create_graphql_router, default_context, is_subscription_request
from .websocket import GraphQLWebSocketHandler

__all__ = [
    "GraphQLRequest",
    "GraphQLWebSocketHandler",
    "create_graphql_router",
    "default_context",
    "is_subscription_request",
]
