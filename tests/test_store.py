import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from adapters.dedup import DedupFilter, fingerprint
from adapters.entities import EntityStore
from adapters.keys import KeyNamespace
from adapters.store import RedisStore
from conftest import open_context
from domain.errors import UpstreamFailure


def test_store_errors_become_upstream_failures():
    client = MagicMock()
    client.hgetall = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    entities = EntityStore(client, KeyNamespace("foodhub"))

    with pytest.raises(UpstreamFailure) as excinfo:
        asyncio.run(entities.get("restaurants", "abc"))
    assert isinstance(excinfo.value.__cause__, RedisConnectionError)


def test_health_check_reports_unreachable_store():
    client = MagicMock()
    client.ping = AsyncMock(side_effect=RedisConnectionError("connection refused"))
    assert asyncio.run(RedisStore(client=client).health_check()) is False


def test_close_releases_client_once():
    client = MagicMock()
    client.aclose = AsyncMock()
    store = RedisStore(client=client)

    asyncio.run(store.close())
    asyncio.run(store.close())

    client.aclose.assert_awaited_once()


def test_dedup_filter_add_and_exists(server):
    async def scenario():
        async with open_context(server) as ctx:
            fp = fingerprint("Sushi Go", "1,1")
            assert not await ctx.dedup.exists(fp)
            assert await ctx.dedup.add(fp)
            assert await ctx.dedup.exists(fp)
            # Adding again is harmless at the structure level
            assert not await ctx.dedup.add(fp)

    asyncio.run(scenario())


def test_reserve_is_destructive_and_ensure_is_not(server):
    async def scenario():
        async with open_context(server) as ctx:
            fp = fingerprint("Sushi Go", "1,1")
            await ctx.dedup.add(fp)

            assert not await ctx.dedup.ensure_reserved(1000, 0.01)
            assert await ctx.dedup.exists(fp)

            await ctx.dedup.reserve(1000, 0.01)
            assert not await ctx.dedup.exists(fp)

    asyncio.run(scenario())


def test_startup_reserves_filter(server):
    async def scenario():
        async with open_context(server) as ctx:
            assert await ctx.store.client.exists(ctx.keys.bloom_restaurants()) == 1

    asyncio.run(scenario())


def test_increment_field_int_and_float(server):
    async def scenario():
        async with open_context(server) as ctx:
            restaurant_id = await ctx.entities.create("restaurants", {"viewCount": 0, "avgStars": 0.0})
            assert await ctx.entities.increment_field("restaurants", restaurant_id, "viewCount") == 1
            assert await ctx.entities.increment_field("restaurants", restaurant_id, "avgStars", 2.5) == 2.5
            assert await ctx.entities.delete("restaurants", restaurant_id)
            assert not await ctx.entities.exists("restaurants", restaurant_id)

    asyncio.run(scenario())


def test_dedup_filter_uses_configured_key():
    client = MagicMock()
    assert DedupFilter(client, KeyNamespace("foodhub")).key == "foodhub:bloom_restaurants"
