import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ResponseError

from adapters.documents import DocumentStore
from conftest import open_context
from domain.errors import NotFound


def test_append_creates_missing_document(server):
    async def scenario():
        async with open_context(server) as ctx:
            assert await ctx.details.append_to_list("r1", "$.reviews", {"id": "a"}) == 1
            assert await ctx.details.get_document("r1") == {"reviews": [{"id": "a"}]}

    asyncio.run(scenario())


def test_append_keeps_sibling_fields(server):
    async def scenario():
        async with open_context(server) as ctx:
            await ctx.details.set_document("r1", {"contact": {"phone": "555-0100"}, "reviews": [{"id": "a"}]})

            assert await ctx.details.append_to_list("r1", "$.reviews", {"id": "b"}) == 2

            document = await ctx.details.get_document("r1")
            assert document["contact"] == {"phone": "555-0100"}
            assert document["reviews"] == [{"id": "a"}, {"id": "b"}]

    asyncio.run(scenario())


def test_append_adds_array_to_document_without_it(server):
    async def scenario():
        async with open_context(server) as ctx:
            await ctx.details.set_document("r1", {"contact": {"phone": "555-0100"}})

            assert await ctx.details.append_to_list("r1", "$.reviews", {"id": "a"}) == 1

            document = await ctx.details.get_document("r1")
            assert document == {"contact": {"phone": "555-0100"}, "reviews": [{"id": "a"}]}

    asyncio.run(scenario())


def test_set_document_replaces_wholesale(server):
    async def scenario():
        async with open_context(server) as ctx:
            await ctx.details.append_to_list("r1", "$.reviews", {"id": "a"})
            await ctx.details.set_document("r1", {"hours": "9-5"})
            assert await ctx.details.get_document("r1") == {"hours": "9-5"}

    asyncio.run(scenario())


def test_remove_from_list(server):
    async def scenario():
        async with open_context(server) as ctx:
            for item_id in ("a", "b", "c"):
                await ctx.details.append_to_list("r1", "$.reviews", {"id": item_id})

            removed = await ctx.details.remove_from_list("r1", "$.reviews", lambda item: item["id"] == "b")

            assert removed == 1
            assert await ctx.details.get_list("r1", "$.reviews") == [{"id": "a"}, {"id": "c"}]
            assert await ctx.details.remove_from_list("missing", "$.reviews", lambda item: True) == 0

    asyncio.run(scenario())


def test_missing_document(server):
    async def scenario():
        async with open_context(server) as ctx:
            with pytest.raises(NotFound):
                await ctx.details.get_document("missing")

    asyncio.run(scenario())


def test_nested_list_paths_are_rejected(server):
    async def scenario():
        async with open_context(server) as ctx:
            with pytest.raises(ValueError):
                await ctx.details.append_to_list("r1", "$.a.b", {"id": "x"})

    asyncio.run(scenario())


def _mock_json(document=None, arrappend=None):
    client = MagicMock()
    json = client.json.return_value
    json.get = AsyncMock(return_value=[document] if document is not None else None)
    # nx=True finds an existing document and declines
    json.set = AsyncMock(return_value=None)
    json.arrappend = arrappend or AsyncMock(return_value=[2])
    return client, json


@pytest.mark.parametrize("arrappend", [
    AsyncMock(side_effect=ResponseError("ERR Path '$.reviews' does not exist")),
    AsyncMock(return_value=[None]),
    AsyncMock(return_value=[]),
])
def test_append_creates_array_whichever_way_the_server_reports_it_missing(arrappend):
    client, json = _mock_json({"contact": {}}, arrappend)
    store = DocumentStore(client, lambda entity_id: f"details:{entity_id}")

    assert asyncio.run(store.append_to_list("r1", "$.reviews", {"id": "a"})) == 1

    json.set.assert_awaited_with("details:r1", "$.reviews", [{"id": "a"}])


def test_append_returns_length_reported_by_server():
    client, json = _mock_json({"reviews": [{"id": "a"}]})
    store = DocumentStore(client, lambda entity_id: f"details:{entity_id}")

    assert asyncio.run(store.append_to_list("r1", "$.reviews", {"id": "b"})) == 2
    assert json.set.await_count == 1


def test_get_list_reads_through_the_root_document():
    client, json = _mock_json({"reviews": [{"id": "a"}], "hours": "9-5"})
    store = DocumentStore(client, lambda entity_id: f"details:{entity_id}")

    assert asyncio.run(store.get_list("r1", "$.reviews")) == [{"id": "a"}]
    json.get.assert_awaited_once_with("details:r1", "$")


def test_get_list_without_array(server):
    async def scenario():
        async with open_context(server) as ctx:
            assert await ctx.details.get_list("missing", "$.reviews") is None
            await ctx.details.set_document("r1", {"reviews": "none yet"})
            assert await ctx.details.get_list("r1", "$.reviews") is None
            assert await ctx.details.remove_from_list("r1", "$.reviews", lambda item: True) == 0

    asyncio.run(scenario())
