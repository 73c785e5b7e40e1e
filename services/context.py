# services/context.py - Process-lifetime owner of the store client and components
import logging
from typing import Optional

import redis.asyncio as redis

from adapters.cache import ExternalCache
from adapters.dedup import DedupFilter
from adapters.documents import DocumentStore
from adapters.entities import EntityStore
from adapters.keys import KeyNamespace
from adapters.lists import OrderedList
from adapters.rank import RankIndex
from adapters.search import SearchIndex
from adapters.sets import SetIndex
from adapters.store import RedisStore
from adapters.weather import OpenWeatherProvider
from config import Settings, settings as default_settings
from domain.models import WeatherProvider
from usecases.restaurant_service import RestaurantService
from usecases.review_service import ReviewService
from usecases.weather_service import WeatherService

logger = logging.getLogger(__name__)

class AppContext:
    """
    Built once per process and handed to request handlers.

    Every component shares the one client held by `store`; `close` releases
    it on shutdown.
    """

    def __init__(
        self,
        store: RedisStore,
        config: Settings = None,
        weather_provider: Optional[WeatherProvider] = None
    ):
        self.config = config or default_settings
        self.store = store
        self.keys = KeyNamespace(self.config.KEY_PREFIX)
        client = store.client

        self.entities = EntityStore(client, self.keys)
        self.sets = SetIndex(client)
        self.rank = RankIndex(client, self.keys)
        self.dedup = DedupFilter(client, self.keys)
        self.details = DocumentStore(client, self.keys.restaurant_details)
        self.review_ids = OrderedList(client, self.keys.reviews)
        self.weather_cache = ExternalCache(client, self.keys.weather, self.config.WEATHER_CACHE_TTL)
        self.search_index = SearchIndex(client, self.keys)
        self.weather_provider = weather_provider or OpenWeatherProvider(
            api_url=self.config.WEATHER_API_URL,
            api_key=self.config.WEATHER_API_KEY,
            timeout=self.config.WEATHER_TIMEOUT_SECONDS
        )

        self.restaurants = RestaurantService(
            self.keys, self.entities, self.sets, self.rank,
            self.dedup, self.details, self.search_index
        )
        self.reviews = ReviewService(
            self.restaurants, self.entities, self.review_ids, self.rank, self.details
        )
        self.weather = WeatherService(
            self.restaurants, self.entities, self.weather_cache, self.weather_provider
        )

    @classmethod
    def from_client(cls, client: redis.Redis, config: Settings = None,
                    weather_provider: Optional[WeatherProvider] = None) -> "AppContext":
        return cls(RedisStore(client=client), config, weather_provider)

    async def startup(self):
        """Make sure the dedup filter exists with the configured accuracy"""
        created = await self.dedup.ensure_reserved(
            self.config.BLOOM_CAPACITY, self.config.BLOOM_ERROR_RATE
        )
        if not created:
            logger.info("Dedup filter already reserved")

    async def close(self):
        if isinstance(self.weather_provider, OpenWeatherProvider):
            self.weather_provider.close()
        await self.store.close()
