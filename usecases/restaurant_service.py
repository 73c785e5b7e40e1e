# usecases/restaurant_service.py - Restaurant use cases across record, sets, rank, filter and documents
import asyncio
import logging
from typing import List, Optional

from adapters import keys as kinds
from adapters.batch import BestEffortBatch
from adapters.dedup import DedupFilter, fingerprint
from adapters.documents import DocumentStore
from adapters.entities import EntityStore, new_id
from adapters.keys import KeyNamespace
from adapters.rank import RankIndex
from adapters.search import SearchIndex
from adapters.sets import SetIndex
from domain.errors import Conflict, InvalidPrecondition, NotFound
from domain.models import Restaurant, normalize_cuisine, page_offset

logger = logging.getLogger(__name__)

class RestaurantService:
    def __init__(
        self,
        keys: KeyNamespace,
        entities: EntityStore,
        sets: SetIndex,
        rank: RankIndex,
        dedup: DedupFilter,
        details: DocumentStore,
        search_index: SearchIndex
    ):
        self.keys = keys
        self.entities = entities
        self.sets = sets
        self.rank = rank
        self.dedup = dedup
        self.details = details
        self.search_index = search_index

    async def ensure_exists(self, restaurant_id: str):
        """Entity guard for every restaurant-scoped operation"""
        if not restaurant_id:
            raise InvalidPrecondition("Restaurant id is required")
        if not await self.entities.exists(kinds.RESTAURANTS, restaurant_id):
            raise NotFound(f"Restaurant {restaurant_id} not found")

    async def create_restaurant(self, name: str, location: str,
                                cuisines: Optional[List[str]] = None) -> str:
        """
        Record, rank seed, filter entry and cuisine memberships in one batch.

        The duplicate check and the batch are not atomic; a concurrent
        creation of the same name+location can slip between them. A failed
        batch leaves whatever did succeed in place.
        """
        try:
            restaurant = Restaurant(name=name, location=location, cuisines=cuisines or [])
        except ValueError as e:
            raise InvalidPrecondition(str(e))

        fp = fingerprint(restaurant.name, restaurant.location)
        if await self.dedup.exists(fp):
            raise Conflict(f"Restaurant '{restaurant.name}' at {restaurant.location} already exists")

        restaurant_id = new_id()
        batch = BestEffortBatch("create restaurant")
        batch.add("record", self.entities.create(kinds.RESTAURANTS, restaurant.to_record(), restaurant_id))
        batch.add("rank", self.rank.seed(restaurant_id, 0))
        batch.add("dedup", self.dedup.add(fp))
        for cuisine in restaurant.cuisines:
            batch.add(f"catalog:{cuisine}", self.sets.add_membership(self.keys.cuisines(), cuisine))
            batch.add(f"cuisine:{cuisine}", self.sets.add_membership(self.keys.cuisine(cuisine), restaurant_id))
            batch.add(f"restaurant_cuisines:{cuisine}",
                      self.sets.add_membership(self.keys.restaurant_cuisines(restaurant_id), cuisine))

        result = await batch.run()
        result.raise_for_failures("create restaurant")

        logger.info(f"Created restaurant {restaurant_id} ({restaurant.name})")
        return restaurant_id

    async def get_restaurant(self, restaurant_id: str) -> Restaurant:
        """Read a restaurant and count the view"""
        await self.ensure_exists(restaurant_id)

        view_count, record, cuisines, score = await asyncio.gather(
            self.entities.increment_field(kinds.RESTAURANTS, restaurant_id, "viewCount", 1),
            self.entities.get(kinds.RESTAURANTS, restaurant_id),
            self.sets.members(self.keys.restaurant_cuisines(restaurant_id)),
            self.rank.score(restaurant_id)
        )

        try:
            restaurant = Restaurant.from_record(record, cuisines)
        except ValueError as e:
            raise InvalidPrecondition(f"Restaurant {restaurant_id} has an unusable record: {e}")
        restaurant.view_count = int(view_count)
        restaurant.rating_score = float(score or 0)
        return restaurant

    async def top_restaurants(self, page: int = 1, limit: int = 10) -> List[dict]:
        """One page of restaurants ordered by rating score, highest first"""
        try:
            offset = page_offset(page, limit)
        except ValueError as e:
            raise InvalidPrecondition(str(e))

        ranked = await self.rank.range_descending_with_scores(offset, limit)
        records = await asyncio.gather(
            *(self.entities.get(kinds.RESTAURANTS, restaurant_id) for restaurant_id, _ in ranked),
            return_exceptions=True
        )

        results = []
        for (restaurant_id, score), record in zip(ranked, records):
            if isinstance(record, NotFound):
                # Ranked but never fully written
                logger.warning(f"Ranked restaurant {restaurant_id} has no record, skipping")
                continue
            if isinstance(record, BaseException):
                raise record
            results.append({
                "id": restaurant_id,
                "name": record.get("name"),
                "location": record.get("location"),
                "ratingScore": score,
            })
        return results

    async def cuisines(self) -> List[str]:
        return sorted(await self.sets.members(self.keys.cuisines()))

    async def restaurants_by_cuisine(self, cuisine: str) -> List[str]:
        cuisine = normalize_cuisine(cuisine or "")
        if not cuisine:
            raise InvalidPrecondition("Cuisine is required")
        return sorted(await self.sets.members(self.keys.cuisine(cuisine)))

    async def set_details(self, restaurant_id: str, document: dict) -> None:
        """Replace the details document, including any appended reviews"""
        await self.ensure_exists(restaurant_id)
        if not isinstance(document, dict):
            raise InvalidPrecondition("Details must be a JSON object")
        await self.details.set_document(restaurant_id, document)

    async def get_details(self, restaurant_id: str) -> dict:
        await self.ensure_exists(restaurant_id)
        return await self.details.get_document(restaurant_id)

    async def search(self, query: str, page: int = 1, limit: int = 10,
                     sort_by_stars: bool = False) -> List[dict]:
        if not query:
            raise InvalidPrecondition("Search query is required")
        try:
            offset = page_offset(page, limit)
        except ValueError as e:
            raise InvalidPrecondition(str(e))
        return await self.search_index.search(query, offset, limit, sort_by_stars)
