# usecases/weather_service.py - Cached weather lookup for a restaurant's location
import logging

from adapters import keys as kinds
from adapters.cache import ExternalCache
from adapters.entities import EntityStore
from domain.errors import InvalidPrecondition
from domain.models import Coordinates, WeatherProvider
from usecases.restaurant_service import RestaurantService

logger = logging.getLogger(__name__)

class WeatherService:
    def __init__(
        self,
        restaurants: RestaurantService,
        entities: EntityStore,
        cache: ExternalCache,
        provider: WeatherProvider
    ):
        self.restaurants = restaurants
        self.entities = entities
        self.cache = cache
        self.provider = provider

    async def get_weather(self, restaurant_id: str) -> dict:
        """
        Cached weather for the restaurant; on a miss, look it up from the
        `location` field and cache it. Failures are never cached.
        """
        await self.restaurants.ensure_exists(restaurant_id)

        cached = await self.cache.get(restaurant_id)
        if cached is not None:
            return cached

        location = await self.entities.get_field(kinds.RESTAURANTS, restaurant_id, "location")
        try:
            coordinates = Coordinates.parse(location)
        except ValueError as e:
            raise InvalidPrecondition(f"Restaurant {restaurant_id}: {e}")

        weather = await self.provider.current_weather(coordinates)
        await self.cache.put(restaurant_id, weather)
        logger.info(f"Cached weather for restaurant {restaurant_id} ({self.cache.ttl}s)")
        return weather
