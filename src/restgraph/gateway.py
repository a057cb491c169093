"""
restgraph Gateway - main entry point for serving a bound schema.

Usage:
    from restgraph import Gateway

    gateway = Gateway(
        schema=open("schema.graphql").read(),
        config={
            "baseUrl": "https://api.example.com",
            "operations": [
                {"type": "query", "field": "user", "path": "/users/{args.id}"},
            ],
        },
    )

    app = gateway.app
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Mapping, Optional, Union

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from graphql import GraphQLSchema, build_schema

from .api import create_graphql_router
from .api.router import ContextFactory
from .core.config import LoaderConfig
from .core.registry import OperationRegistry, build_registry
from .messaging import RedisPubSub
from .runtime.fetch import HttpxFetch

logger = logging.getLogger(__name__)


class Gateway:
    """
    GraphQL gateway over declaratively described HTTP APIs.

    Features:
    - Binds operation descriptors to the schema at startup
    - Default httpx fetch and optional Redis event bus
    - Provides FastAPI app with the GraphQL endpoint
    """

    def __init__(
        self,
        schema: Union[GraphQLSchema, str],
        config: Union[LoaderConfig, Mapping[str, Any]],
        *,
        title: str = "restgraph Gateway",
        cors_origins: Optional[List[str]] = None,
        redis_url: Optional[str] = None,
        timeout: float = 30.0,
        context_factory: Optional[ContextFactory] = None,
    ):
        """
        Initialize gateway.

        Args:
            schema: GraphQLSchema or SDL string
            config: LoaderConfig or the raw descriptor document
            title: FastAPI app title
            cors_origins: CORS allowed origins (default: localhost:3000)
            redis_url: Redis URL for Subscription fields (default: $REDIS_URL)
            timeout: Upstream HTTP timeout in seconds
            context_factory: Builds the GraphQL context from the HTTP request or WebSocket
        """
        self.schema = build_schema(schema) if isinstance(schema, str) else schema
        self.config = config if isinstance(config, LoaderConfig) else LoaderConfig.from_dict(config)
        self.title = title
        self.cors_origins = cors_origins or ["http://localhost:3000", "http://127.0.0.1:3000"]
        self.redis_url = redis_url or os.getenv("REDIS_URL")

        self.fetch = HttpxFetch(timeout=timeout)
        self.pubsub = RedisPubSub(self.redis_url) if self.redis_url else None

        self.registry: OperationRegistry = build_registry(
            self.schema,
            self.config,
            fetch=self.fetch,
            pubsub=self.pubsub,
        )

        self.app = self._create_app(context_factory)
        self.app.state.gateway = self

    async def close(self):
        """Release the HTTP client and the Redis connection."""
        await self.fetch.close()
        if self.pubsub is not None:
            await self.pubsub.close()

    def _create_app(self, context_factory: Optional[ContextFactory]) -> FastAPI:
        """Create FastAPI application."""
        app = FastAPI(
            title=self.title,
            description="restgraph Gateway - GraphQL over REST",
            version="1.0.0",
        )

        # CORS
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        app.include_router(create_graphql_router(self.schema, context_factory))

        # Health check
        @app.get("/health")
        async def health():
            return {"status": "ok"}

        @app.get("/__status")
        async def schema_status():
            """Get bound operation counts per root type."""
            counts: dict[str, int] = {}
            for binding in self.registry.values():
                counts[binding.root_type_name] = counts.get(binding.root_type_name, 0) + 1
            return {
                "operations": len(self.registry),
                "byRootType": counts,
                "pubsub": self.pubsub is not None,
            }

        @app.on_event("shutdown")
        async def shutdown():
            await self.close()
            logger.info("Gateway shut down")

        return app
