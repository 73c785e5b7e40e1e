# adapters/rank.py - Restaurants ordered by cumulative rating score
from typing import List, Optional, Tuple

import redis.asyncio as redis

from adapters.keys import KeyNamespace
from adapters.store import translate_errors

class RankIndex:
    """
    One sorted set, member = restaurant id, score = sum of review ratings.

    The score is additive on purpose: it ranks cumulative popularity x rating,
    not the mean rating.
    """

    def __init__(self, client: redis.Redis, keys: KeyNamespace):
        self.client = client
        self.key = keys.restaurants_by_rating()

    @translate_errors
    async def seed(self, entity_id: str, score: float = 0) -> None:
        await self.client.zadd(self.key, {entity_id: score})

    @translate_errors
    async def increment_score(self, entity_id: str, delta: float) -> float:
        return await self.client.zincrby(self.key, delta, entity_id)

    @translate_errors
    async def score(self, entity_id: str) -> Optional[float]:
        return await self.client.zscore(self.key, entity_id)

    @translate_errors
    async def range_descending(self, offset: int, count: int) -> List[str]:
        """Ids by score, highest first; an offset past the end gives []"""
        if count <= 0 or offset < 0:
            return []
        return await self.client.zrevrange(self.key, offset, offset + count - 1)

    @translate_errors
    async def range_descending_with_scores(self, offset: int, count: int) -> List[Tuple[str, float]]:
        if count <= 0 or offset < 0:
            return []
        return await self.client.zrevrange(self.key, offset, offset + count - 1, withscores=True)
