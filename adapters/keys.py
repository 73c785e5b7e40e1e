# adapters/keys.py - Key naming scheme for every entity and index
from config import settings

DELIMITER = ":"

# First segment per kind; no two kinds share one
RESTAURANTS = "restaurants"
RESTAURANT_DETAILS = "restaurant_details"
RESTAURANT_CUISINES = "restaurant_cuisines"
CUISINES = "cuisines"
CUISINE = "cuisine"
RESTAURANTS_BY_RATING = "restaurants_by_rating"
REVIEWS = "reviews"
REVIEW_DETAILS = "review_details"
SEARCH_INDEX = "idx"
BLOOM_RESTAURANTS = "bloom_restaurants"
WEATHER = "weather"

class KeyNamespace:
    """Builds `<root>:<segment>:...` keys; pure and deterministic"""

    def __init__(self, root: str = None):
        self.root = root or settings.KEY_PREFIX

    def key(self, *segments: str) -> str:
        return DELIMITER.join([self.root, *(str(s) for s in segments)])

    def restaurant(self, restaurant_id: str) -> str:
        return self.key(RESTAURANTS, restaurant_id)

    def restaurant_prefix(self) -> str:
        return self.key(RESTAURANTS) + DELIMITER

    def restaurant_details(self, restaurant_id: str) -> str:
        return self.key(RESTAURANT_DETAILS, restaurant_id)

    def restaurant_cuisines(self, restaurant_id: str) -> str:
        return self.key(RESTAURANT_CUISINES, restaurant_id)

    def cuisines(self) -> str:
        return self.key(CUISINES)

    def cuisine(self, name: str) -> str:
        return self.key(CUISINE, name)

    def restaurants_by_rating(self) -> str:
        return self.key(RESTAURANTS_BY_RATING)

    def reviews(self, restaurant_id: str) -> str:
        return self.key(REVIEWS, restaurant_id)

    def review_details(self, review_id: str) -> str:
        return self.key(REVIEW_DETAILS, review_id)

    def search_index(self) -> str:
        return self.key(SEARCH_INDEX, RESTAURANTS)

    def bloom_restaurants(self) -> str:
        return self.key(BLOOM_RESTAURANTS)

    def weather(self, restaurant_id: str) -> str:
        return self.key(WEATHER, restaurant_id)
