# adapters/cache.py - TTL cache for external lookups, keyed by restaurant id
import json
import logging
from typing import Any, Callable, Optional

import redis.asyncio as redis

from adapters.store import translate_errors
from config import settings

logger = logging.getLogger(__name__)

class ExternalCache:
    """Values expire through the store's own TTL; nothing here polls"""

    def __init__(self, client: redis.Redis, key_for: Callable[[str], str], ttl: int = None):
        self.client = client
        self.key_for = key_for
        self.ttl = ttl or settings.WEATHER_CACHE_TTL

    @translate_errors
    async def get(self, entity_id: str) -> Optional[Any]:
        """Cached value, or None on a miss"""
        raw = await self.client.get(self.key_for(entity_id))
        if raw is None:
            logger.debug(f"Cache miss for {entity_id}")
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            # Unreadable entry; drop it so the next put starts clean
            logger.warning(f"Discarding undecodable cache entry for {entity_id}")
            await self.client.delete(self.key_for(entity_id))
            return None
        logger.debug(f"Cache hit for {entity_id}")
        return value

    @translate_errors
    async def put(self, entity_id: str, value: Any, ttl: int = None) -> None:
        await self.client.set(self.key_for(entity_id), json.dumps(value), ex=ttl or self.ttl)
