# adapters/documents.py - Nested JSON documents attached to an entity
from typing import Callable, List, Optional

import redis.asyncio as redis
from redis.exceptions import ResponseError

from adapters.store import translate_errors
from domain.errors import NotFound

ROOT = "$"

def _field_name(list_path: str) -> str:
    """`$.reviews` -> `reviews`; only single-level array paths are supported"""
    name = list_path[2:] if list_path.startswith("$.") else list_path
    if not name or "." in name or "[" in name:
        raise ValueError(f"Unsupported list path {list_path!r}")
    return name

def _unwrap(result):
    # JSONPath replies on the root come back as a one-match list
    if isinstance(result, list):
        return result[0] if result else None
    return result

class DocumentStore:
    def __init__(self, client: redis.Redis, key_for: Callable[[str], str]):
        self.client = client
        self.key_for = key_for

    async def _read(self, entity_id: str) -> Optional[dict]:
        return _unwrap(await self.client.json().get(self.key_for(entity_id), ROOT))

    @translate_errors
    async def set_document(self, entity_id: str, document: dict) -> None:
        """Replace the whole document at the root path"""
        await self.client.json().set(self.key_for(entity_id), ROOT, document)

    @translate_errors
    async def get_document(self, entity_id: str) -> dict:
        document = await self._read(entity_id)
        if document is None:
            raise NotFound(f"Document for {entity_id} not found")
        return document

    @translate_errors
    async def get_list(self, entity_id: str, list_path: str) -> Optional[List]:
        """The array at `list_path`, or None when the document or array is absent"""
        field = _field_name(list_path)
        document = await self._read(entity_id)
        if not isinstance(document, dict):
            return None
        items = document.get(field)
        return items if isinstance(items, list) else None

    @translate_errors
    async def append_to_list(self, entity_id: str, list_path: str, element) -> int:
        """
        Append one element to the array at `list_path`, returning its new length.

        A missing document is created holding just that array; a document
        without the array gets one. Sibling fields are never rewritten.
        """
        key = self.key_for(entity_id)
        field = _field_name(list_path)
        json = self.client.json()

        if await json.set(key, ROOT, {field: [element]}, nx=True):
            return 1

        try:
            length = _unwrap(await json.arrappend(key, list_path, element))
        except ResponseError:
            # Some servers reject a missing path instead of matching nothing
            length = None
        if length is None:
            # Document exists but has no such array yet
            await json.set(key, list_path, [element])
            return 1
        return length

    @translate_errors
    async def remove_from_list(self, entity_id: str, list_path: str,
                               predicate: Callable[[dict], bool]) -> int:
        """
        Drop elements matching `predicate` by rewriting the array.

        Read and rewrite are separate commands; an append landing in between
        is lost.
        """
        items = await self.get_list(entity_id, list_path)
        if not items:
            return 0
        kept = [item for item in items if not predicate(item)]
        removed = len(items) - len(kept)
        if removed:
            await self.client.json().set(self.key_for(entity_id), list_path, kept)
        return removed
