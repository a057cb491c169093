"""
Event buses for Subscription fields.

Both buses expose the same two calls:

    await bus.publish("user.7.updated", {"id": 7, "name": "Ada"})
    async for payload in bus.async_iterator("user.7.updated"):
        ...

InMemoryPubSub - single process, for tests and embedded use
RedisPubSub - Redis channels, JSON payloads, for multi-process gateways
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, AsyncIterator, Dict, Optional

from .client import RedisClient

logger = logging.getLogger(__name__)


class InMemoryPubSub:
    """
    In-process bus; every subscriber gets its own queue.

    Usage:
        bus = InMemoryPubSub()
        iterator = bus.async_iterator("user.7.updated")
        await bus.publish("user.7.updated", {"id": 7})
        payload = await iterator.__anext__()
    """

    def __init__(self):
        self._queues: Dict[str, set[asyncio.Queue]] = {}

    def subscriber_count(self, topic: str) -> int:
        return len(self._queues.get(topic, ()))

    async def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver ``payload`` to every current subscriber of ``topic``.

        Returns:
            Number of subscribers that received the payload
        """
        queues = self._queues.get(topic, set())
        for queue in queues:
            queue.put_nowait(payload)
        logger.debug(f"Published to {topic}: {len(queues)} subscribers received")
        return len(queues)

    def async_iterator(self, topic: str) -> AsyncIterator[Any]:
        # Register eagerly so payloads published before the first
        # __anext__ are not lost.
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.setdefault(topic, set()).add(queue)
        return self._iterate(topic, queue)

    async def _iterate(self, topic: str, queue: asyncio.Queue) -> AsyncIterator[Any]:
        try:
            while True:
                yield await queue.get()
        finally:
            subscribers = self._queues.get(topic)
            if subscribers is not None:
                subscribers.discard(queue)
                if not subscribers:
                    del self._queues[topic]


class RedisPubSub:
    """
    Redis-backed bus with JSON payloads.

    Usage:
        bus = RedisPubSub("redis://redis:6379")
        await bus.publish("camera.updated", {"id": 123})

        async for event in bus.async_iterator("camera.updated"):
            print(event)
    """

    def __init__(self, redis_url: Optional[str] = None, client: Optional[RedisClient] = None):
        """
        Initialize bus.

        Args:
            redis_url: Redis URL (ignored when ``client`` is given)
            client: Existing RedisClient to share
        """
        if client is None:
            if redis_url is None:
                raise ValueError("redis_url or client is required")
            client = RedisClient(redis_url)
        self.client = client

    async def close(self):
        await self.client.disconnect()

    async def publish(self, topic: str, payload: Any) -> int:
        """
        Publish a JSON-serialisable payload.

        Returns:
            Number of subscribers that received the message
        """
        await self.client.connect()
        message = json.dumps(payload, ensure_ascii=False)
        count = await self.client.publish(topic, message)
        logger.debug(f"Published to {topic}: {count} subscribers received")
        return count

    async def async_iterator(self, topic: str) -> AsyncIterator[Any]:
        """Yield decoded payloads from ``topic`` until the consumer stops."""
        await self.client.connect()
        pubsub = self.client.pubsub()
        await pubsub.subscribe(topic)
        logger.info(f"Subscribed to Redis channel: {topic}")
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                data = message.get("data")
                try:
                    yield json.loads(data) if isinstance(data, (str, bytes)) else data
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON in message from {topic}: {str(data)[:100]}")
        finally:
            await pubsub.unsubscribe(topic)
            await pubsub.aclose()
            logger.info(f"Unsubscribed from Redis channel: {topic}")
