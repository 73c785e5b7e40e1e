# main.py - FastAPI application entry point
import logging
from contextlib import asynccontextmanager
from adapters.api import app
from adapters.store import RedisStore
from services.context import AppContext
from config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app):
    """Application startup and shutdown"""
    logger.info("Starting Restaurant Directory API...")

    context = AppContext(RedisStore(settings.REDIS_URL), settings)
    try:
        await context.startup()
    except Exception as e:
        logger.error(f"Startup failed: {e}")
        await context.close()
        raise

    app.state.context = context
    logger.info(f"API ready at http://{settings.API_HOST}:{settings.API_PORT}")

    yield

    logger.info("Shutting down services...")
    await context.close()

# Set lifespan for the app
app.router.lifespan_context = lifespan

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=False,
        workers=1,
        log_level=settings.LOG_LEVEL.lower()
    )
