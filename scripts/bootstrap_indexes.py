# scripts/bootstrap_indexes.py - Out-of-band (re)creation of the search index and dedup filter
import asyncio
import logging
import sys

from adapters.dedup import DedupFilter
from adapters.keys import KeyNamespace
from adapters.search import SearchIndex
from adapters.store import RedisStore
from config import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

async def bootstrap(store: RedisStore, reset_filter: bool = False):
    """
    Rebuild the search index; reserve the dedup filter.

    With `reset_filter` the filter is dropped and recreated, which forgets
    every fingerprint and lets existing restaurants be created again.
    """
    keys = KeyNamespace(settings.KEY_PREFIX)

    await SearchIndex(store.client, keys).rebuild()

    dedup = DedupFilter(store.client, keys)
    if reset_filter:
        await dedup.reserve(settings.BLOOM_CAPACITY, settings.BLOOM_ERROR_RATE)
    elif not await dedup.ensure_reserved(settings.BLOOM_CAPACITY, settings.BLOOM_ERROR_RATE):
        logger.info("Dedup filter already reserved, keeping its entries")

async def main():
    reset_filter = "--reset-filter" in sys.argv[1:]
    store = RedisStore(settings.REDIS_URL)
    try:
        await bootstrap(store, reset_filter=reset_filter)
        logger.info("Bootstrap completed")
    finally:
        await store.close()

if __name__ == "__main__":
    asyncio.run(main())
