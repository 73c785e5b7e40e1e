# adapters/store.py - Redis connection lifecycle and error translation
import functools
import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from config import settings
from domain.errors import UpstreamFailure

logger = logging.getLogger(__name__)

def translate_errors(func):
    """Re-raise any store transport/command error as UpstreamFailure"""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except RedisError as e:
            logger.error(f"Store call {func.__qualname__} failed: {e}")
            raise UpstreamFailure(f"Store call failed: {e}") from e
    return wrapper

class RedisStore:
    """Owns the single long-lived client; connects lazily on first use"""

    def __init__(self, url: str = None, client: Optional[redis.Redis] = None):
        self.url = url or settings.REDIS_URL
        self._client = client

    @property
    def client(self) -> redis.Redis:
        if self._client is None:
            logger.info(f"Connecting to Redis at {self.url}")
            self._client = redis.from_url(self.url, decode_responses=True)
        return self._client

    async def close(self):
        """Release the connection; safe to call when never connected"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis connection closed")

    async def health_check(self) -> bool:
        """Check if the store answers PING"""
        try:
            return bool(await self.client.ping())
        except RedisError as e:
            logger.error(f"Store health check failed: {e}")
            return False
