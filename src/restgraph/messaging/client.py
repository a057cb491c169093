"""
Redis client for the pub/sub event bus.
"""

from __future__ import annotations

import logging
from typing import Optional

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Lazily connected Redis client.

    Usage:
        client = RedisClient("redis://redis:6379")
        await client.connect()
        await client.publish("user.7.updated", '{"id": 7}')
    """

    def __init__(self, redis_url: str):
        """
        Initialize Redis client.

        Args:
            redis_url: Redis connection URL
        """
        self.redis_url = redis_url
        self._redis: Optional[aioredis.Redis] = None

    @property
    def connected(self) -> bool:
        return self._redis is not None

    async def connect(self):
        """Connect to Redis"""
        if self._redis is not None:
            return

        logger.info(f"Connecting to Redis: {self.redis_url}")
        self._redis = aioredis.from_url(
            self.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        logger.info("Redis client connected")

    async def disconnect(self):
        """Disconnect from Redis"""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
            logger.info("Redis client disconnected")

    @property
    def redis(self) -> aioredis.Redis:
        """Get underlying Redis connection"""
        if self._redis is None:
            raise RuntimeError("Redis client not connected. Call await client.connect() first.")
        return self._redis

    async def publish(self, channel: str, message: str) -> int:
        """
        Publish message to channel.

        Returns:
            Number of subscribers that received the message
        """
        return await self.redis.publish(channel, message)

    def pubsub(self) -> aioredis.client.PubSub:
        """Get pub/sub instance for subscribing to channels"""
        return self.redis.pubsub()
