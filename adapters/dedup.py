# adapters/dedup.py - Bloom filter guarding restaurant creation against duplicates
import logging

import redis.asyncio as redis

from adapters.keys import KeyNamespace
from adapters.store import translate_errors
from config import settings

logger = logging.getLogger(__name__)

def fingerprint(name: str, location: str) -> str:
    return f"{name.strip().lower()}:{location.strip()}"

class DedupFilter:
    """
    Insert/test only; entries are never removed.

    False positives happen at the reserved error rate, false negatives never.
    Checking and adding are two separate commands, so two concurrent creations
    of the same name+location can both pass `exists`.
    """

    def __init__(self, client: redis.Redis, keys: KeyNamespace):
        self.client = client
        self.key = keys.bloom_restaurants()

    @translate_errors
    async def exists(self, fp: str) -> bool:
        return bool(await self.client.bf().exists(self.key, fp))

    @translate_errors
    async def add(self, fp: str) -> bool:
        """Returns False when the fingerprint was (probably) already present"""
        return bool(await self.client.bf().add(self.key, fp))

    @translate_errors
    async def reserve(self, expected_items: int = None, false_positive_rate: float = None) -> None:
        """Drop and recreate the filter; destroys every existing entry"""
        expected_items = expected_items or settings.BLOOM_CAPACITY
        false_positive_rate = false_positive_rate or settings.BLOOM_ERROR_RATE
        await self.client.delete(self.key)
        await self.client.bf().reserve(self.key, false_positive_rate, expected_items)
        logger.info(
            f"Reserved bloom filter {self.key} "
            f"(capacity={expected_items}, error_rate={false_positive_rate})"
        )

    @translate_errors
    async def ensure_reserved(self, expected_items: int = None, false_positive_rate: float = None) -> bool:
        """Reserve only if the filter does not exist yet"""
        if await self.client.exists(self.key):
            return False
        await self.reserve(expected_items, false_positive_rate)
        return True
