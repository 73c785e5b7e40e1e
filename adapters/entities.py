# adapters/entities.py - Flat-field records stored as Redis hashes
import uuid
from typing import Optional, Union

import redis.asyncio as redis

from adapters.keys import KeyNamespace
from adapters.store import translate_errors
from domain.errors import NotFound

def new_id() -> str:
    """128-bit random id"""
    return uuid.uuid4().hex

class EntityStore:
    def __init__(self, client: redis.Redis, keys: KeyNamespace):
        self.client = client
        self.keys = keys

    @translate_errors
    async def create(self, kind: str, fields: dict, entity_id: Optional[str] = None) -> str:
        """Write a new record under `<kind>:<id>` and return the id"""
        entity_id = entity_id or new_id()
        await self.client.hset(self.keys.key(kind, entity_id), mapping={"id": entity_id, **fields})
        return entity_id

    @translate_errors
    async def get(self, kind: str, entity_id: str) -> dict:
        record = await self.client.hgetall(self.keys.key(kind, entity_id))
        if not record:
            raise NotFound(f"{kind} {entity_id} not found")
        return record

    @translate_errors
    async def get_field(self, kind: str, entity_id: str, field: str) -> Optional[str]:
        return await self.client.hget(self.keys.key(kind, entity_id), field)

    @translate_errors
    async def increment_field(self, kind: str, entity_id: str, field: str,
                              delta: Union[int, float] = 1) -> Union[int, float]:
        key = self.keys.key(kind, entity_id)
        if isinstance(delta, float):
            return await self.client.hincrbyfloat(key, field, delta)
        return await self.client.hincrby(key, field, delta)

    @translate_errors
    async def exists(self, kind: str, entity_id: str) -> bool:
        return await self.client.exists(self.keys.key(kind, entity_id)) == 1

    @translate_errors
    async def delete(self, kind: str, entity_id: str) -> bool:
        return await self.client.delete(self.keys.key(kind, entity_id)) == 1
