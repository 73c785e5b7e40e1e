# adapters/sets.py - Unordered membership indices
from typing import Set

import redis.asyncio as redis

from adapters.store import translate_errors

class SetIndex:
    def __init__(self, client: redis.Redis):
        self.client = client

    @translate_errors
    async def add_membership(self, set_key: str, member: str) -> bool:
        """Returns False when the member was already present"""
        return await self.client.sadd(set_key, member) == 1

    @translate_errors
    async def members(self, set_key: str) -> Set[str]:
        return await self.client.smembers(set_key)
