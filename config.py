# config.py - Configuration management
from pydantic_settings import BaseSettings
from typing import Optional

class Settings(BaseSettings):
    # Redis Stack (hashes, sets, bloom, json, search)
    REDIS_URL: str = "redis://localhost:6379/0"
    KEY_PREFIX: str = "foodhub"

    # Dedup filter
    BLOOM_CAPACITY: int = 1_000_000
    BLOOM_ERROR_RATE: float = 0.0001

    # Weather lookup + cache
    WEATHER_API_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    WEATHER_API_KEY: Optional[str] = None
    WEATHER_TIMEOUT_SECONDS: float = 5.0
    WEATHER_CACHE_TTL: int = 3600  # 1 hour

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10

    class Config:
        env_file = ".env"

settings = Settings()
