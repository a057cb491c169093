"""
Messaging module - event buses for Subscription fields.

Provides:
- RedisClient: Connection management
- InMemoryPubSub: In-process bus
- RedisPubSub: Redis channel bus with JSON payloads

Usage:
    from restgraph.messaging import RedisPubSub

    bus = RedisPubSub("redis://redis:6379")
    registry = build_registry(schema, config, pubsub=bus)

    await bus.publish("user.7.updated", {"id": 7, "name": "Ada"})
"""

from __future__ import annotations

from .client import RedisClient
from .pubsub import InMemoryPubSub, RedisPubSub

__all__ = [
    "RedisClient",
    "InMemoryPubSub",
    "RedisPubSub",
]
