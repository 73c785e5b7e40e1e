from contextlib import asynccontextmanager

import fakeredis
import pytest

from config import Settings
from domain.errors import UpstreamFailure
from domain.models import Coordinates, WeatherProvider
from services.context import AppContext

TEST_SETTINGS = Settings(KEY_PREFIX="test", WEATHER_CACHE_TTL=3600, BLOOM_CAPACITY=10000, BLOOM_ERROR_RATE=0.001)


class StubWeatherProvider(WeatherProvider):
    def __init__(self, payload=None, fail=False):
        self.payload = payload or {"weather": [{"main": "Clear"}], "main": {"temp": 21.5}}
        self.fail = fail
        self.calls = []

    async def current_weather(self, coordinates: Coordinates) -> dict:
        self.calls.append(coordinates)
        if self.fail:
            raise UpstreamFailure("weather service down")
        return self.payload


def make_context(server, provider=None) -> AppContext:
    client = fakeredis.FakeAsyncRedis(server=server, decode_responses=True)
    return AppContext.from_client(client, TEST_SETTINGS, provider or StubWeatherProvider())


@asynccontextmanager
async def open_context(server, provider=None):
    ctx = make_context(server, provider)
    await ctx.startup()
    try:
        yield ctx
    finally:
        await ctx.close()


@pytest.fixture
def server():
    return fakeredis.FakeServer()


@pytest.fixture
def weather():
    return StubWeatherProvider()
