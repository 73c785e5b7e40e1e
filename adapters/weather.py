# adapters/weather.py - OpenWeatherMap client for the weather lookup
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

import requests

from config import settings
from domain.errors import UpstreamFailure
from domain.models import Coordinates, WeatherProvider

logger = logging.getLogger(__name__)

class OpenWeatherProvider(WeatherProvider):
    """Blocking `requests` calls run in a small thread pool"""

    def __init__(self, api_url: str = None, api_key: str = None, timeout: float = None):
        self.api_url = api_url or settings.WEATHER_API_URL
        self.api_key = api_key or settings.WEATHER_API_KEY
        self.timeout = timeout or settings.WEATHER_TIMEOUT_SECONDS
        self.executor = ThreadPoolExecutor(max_workers=4)

    async def current_weather(self, coordinates: Coordinates) -> dict:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, self._fetch_sync, coordinates)

    def _fetch_sync(self, coordinates: Coordinates) -> dict:
        """Synchronous lookup"""
        params = {
            "lat": coordinates.latitude,
            "lon": coordinates.longitude,
            "units": "metric",
            "appid": self.api_key,
        }
        try:
            response = requests.get(self.api_url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Weather lookup failed for {coordinates}: {e}")
            raise UpstreamFailure(f"Weather lookup failed: {e}") from e

    def close(self):
        self.executor.shutdown(wait=False)
