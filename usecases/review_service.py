# usecases/review_service.py - Review submission, listing and deletion
import asyncio
import logging
import time
from typing import List, Optional

from adapters import keys as kinds
from adapters.batch import BestEffortBatch
from adapters.documents import DocumentStore
from adapters.entities import EntityStore, new_id
from adapters.lists import OrderedList
from adapters.rank import RankIndex
from domain.errors import InvalidPrecondition, NotFound
from domain.models import Review, page_offset
from usecases.restaurant_service import RestaurantService

logger = logging.getLogger(__name__)

REVIEWS_PATH = "$.reviews"

def now_ms() -> int:
    return int(time.time() * 1000)

class ReviewService:
    def __init__(
        self,
        restaurants: RestaurantService,
        entities: EntityStore,
        review_ids: OrderedList,
        rank: RankIndex,
        details: DocumentStore
    ):
        self.restaurants = restaurants
        self.entities = entities
        self.review_ids = review_ids
        self.rank = rank
        self.details = details

    async def add_review(self, restaurant_id: str, text: str, rating: int,
                         created_at: Optional[int] = None) -> Review:
        """
        Store a review everywhere it is represented and add its rating to the
        restaurant's score. The score is a running sum, never an average.
        """
        await self.restaurants.ensure_exists(restaurant_id)
        try:
            review = Review(
                restaurant_id=restaurant_id,
                text=text or "",
                rating=rating,
                created_at=created_at if created_at is not None else now_ms(),
                id=new_id()
            )
        except ValueError as e:
            raise InvalidPrecondition(str(e))

        batch = BestEffortBatch("add review")
        batch.add("list", self.review_ids.append(restaurant_id, review.id))
        batch.add("record", self.entities.create(kinds.REVIEW_DETAILS, review.to_record(), review.id))
        batch.add("document", self.details.append_to_list(restaurant_id, REVIEWS_PATH, review.to_dict()))
        batch.add("rank", self.rank.increment_score(restaurant_id, review.rating))
        batch.add("stars", self.entities.increment_field(
            kinds.RESTAURANTS, restaurant_id, "avgStars", float(review.rating)))

        result = await batch.run()
        result.raise_for_failures("add review")

        logger.info(
            f"Review {review.id} added to restaurant {restaurant_id} "
            f"(rating={review.rating}, score={result.values['rank']})"
        )
        return review

    async def list_reviews(self, restaurant_id: str, page: int = 1, limit: int = 10) -> List[Review]:
        """Reviews in submission order"""
        await self.restaurants.ensure_exists(restaurant_id)
        try:
            offset = page_offset(page, limit)
        except ValueError as e:
            raise InvalidPrecondition(str(e))

        review_ids = await self.review_ids.range(restaurant_id, offset, limit)
        records = await asyncio.gather(
            *(self.entities.get(kinds.REVIEW_DETAILS, review_id) for review_id in review_ids),
            return_exceptions=True
        )

        reviews = []
        for review_id, record in zip(review_ids, records):
            if isinstance(record, NotFound):
                logger.warning(f"Listed review {review_id} has no record, skipping")
                continue
            if isinstance(record, BaseException):
                raise record
            reviews.append(Review.from_record(record))
        return reviews

    async def delete_review(self, restaurant_id: str, review_id: str) -> None:
        """
        Remove a review from every representation: list reference, flat
        record, details document element, and its rating from the score.
        """
        await self.restaurants.ensure_exists(restaurant_id)
        record = await self.entities.get(kinds.REVIEW_DETAILS, review_id)
        if record.get("restaurantId") != restaurant_id:
            raise NotFound(f"Review {review_id} not found for restaurant {restaurant_id}")
        rating = int(record.get("rating", 0))

        batch = BestEffortBatch("delete review")
        batch.add("list", self.review_ids.remove(restaurant_id, review_id))
        batch.add("record", self.entities.delete(kinds.REVIEW_DETAILS, review_id))
        batch.add("document", self.details.remove_from_list(
            restaurant_id, REVIEWS_PATH, lambda item: item.get("id") == review_id))
        batch.add("rank", self.rank.increment_score(restaurant_id, -rating))
        batch.add("stars", self.entities.increment_field(
            kinds.RESTAURANTS, restaurant_id, "avgStars", float(-rating)))

        result = await batch.run()
        result.raise_for_failures("delete review")
        logger.info(f"Review {review_id} deleted from restaurant {restaurant_id}")
