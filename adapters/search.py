# adapters/search.py - RediSearch index over restaurant hashes
import logging
from typing import List

import redis.asyncio as redis
from redis.commands.search.field import NumericField, TextField
from redis.commands.search.index_definition import IndexDefinition, IndexType
from redis.commands.search.query import Query
from redis.exceptions import ResponseError

from adapters.keys import KeyNamespace
from adapters.store import translate_errors

logger = logging.getLogger(__name__)

SORT_FIELD = "avgStars"  # holds the SUM of ratings, same value as the rank score
PROJECTION = ("id", "name", "location", SORT_FIELD)

SCHEMA = (
    TextField("id", no_stem=True),
    TextField("name"),
    NumericField(SORT_FIELD, sortable=True),
)

class SearchIndex:
    """
    Read-only access for request handling.

    RediSearch indexes hash writes under the prefix on its own once the
    index exists; `rebuild` is only needed when the schema changes and is
    run by scripts/bootstrap_indexes.py, never per request.
    """

    def __init__(self, client: redis.Redis, keys: KeyNamespace):
        self.client = client
        self.name = keys.search_index()
        self.prefix = keys.restaurant_prefix()

    @translate_errors
    async def search(self, query: str, offset: int = 0, count: int = 10,
                     sort_by_stars: bool = False) -> List[dict]:
        """Run a native RediSearch query; no parsing or validation here"""
        q = Query(query).return_fields(*PROJECTION).paging(offset, count)
        if sort_by_stars:
            q = q.sort_by(SORT_FIELD, asc=False)
        result = await self.client.ft(self.name).search(q)
        return [self._project(doc) for doc in result.docs]

    def _project(self, doc) -> dict:
        # doc.id is the hash key; the stored `id` field is not returned separately
        key = doc.id
        projection = {"id": key[len(self.prefix):] if key.startswith(self.prefix) else key}
        for field in PROJECTION[1:]:
            projection[field] = getattr(doc, field, None)
        return projection

    @translate_errors
    async def rebuild(self) -> None:
        """Drop the index if present, then create it"""
        index = self.client.ft(self.name)
        try:
            await index.dropindex(delete_documents=False)
            logger.info(f"Dropped search index {self.name}")
        except ResponseError as e:
            logger.info(f"Search index {self.name} absent, nothing to drop ({e})")

        definition = IndexDefinition(prefix=[self.prefix], index_type=IndexType.HASH)
        await index.create_index(SCHEMA, definition=definition)
        logger.info(f"Created search index {self.name} on prefix {self.prefix}")
