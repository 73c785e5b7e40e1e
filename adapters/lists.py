# adapters/lists.py - Ordered id lists (review ids per restaurant)
from typing import Callable, List

import redis.asyncio as redis

from adapters.store import translate_errors

class OrderedList:
    """Append-ordered ids; oldest first"""

    def __init__(self, client: redis.Redis, key_for: Callable[[str], str]):
        self.client = client
        self.key_for = key_for

    @translate_errors
    async def append(self, owner_id: str, member: str) -> int:
        return await self.client.rpush(self.key_for(owner_id), member)

    @translate_errors
    async def range(self, owner_id: str, offset: int, count: int) -> List[str]:
        if count <= 0 or offset < 0:
            return []
        return await self.client.lrange(self.key_for(owner_id), offset, offset + count - 1)

    @translate_errors
    async def remove(self, owner_id: str, member: str) -> int:
        return await self.client.lrem(self.key_for(owner_id), 0, member)
