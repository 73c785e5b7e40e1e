# adapters/api.py - Thin FastAPI surface over the directory use cases
from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Any, Dict, List
import time
import logging

from config import settings
from domain.errors import DirectoryError
from services.context import AppContext

# Set up logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Pydantic schemas
class RestaurantCreateRequest(BaseModel):
    name: str = Field(..., description="Restaurant name")
    location: str = Field(..., description="Coordinates as 'longitude,latitude'")
    cuisines: List[str] = Field(default_factory=list, description="Cuisine names")

class RestaurantCreatedResponse(BaseModel):
    id: str

class ReviewCreateRequest(BaseModel):
    text: str = Field("", description="Review text")
    rating: int = Field(..., description="Rating from 1 to 5")

class HealthResponseSchema(BaseModel):
    status: str
    timestamp: float
    store_connected: bool

# Create FastAPI app
app = FastAPI(
    title="Restaurant Directory API",
    description="Restaurants, reviews and rankings on Redis Stack",
    version="1.0.0"
)

def get_context(request: Request) -> AppContext:
    """Dependency injection for the process-wide context"""
    return request.app.state.context

@app.exception_handler(DirectoryError)
async def directory_error_handler(request: Request, exc: DirectoryError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": str(exc)})

# Performance monitoring middleware
@app.middleware("http")
async def performance_middleware(request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    if process_time > 0.1:
        logger.warning(f"Slow request: {request.url.path} took {process_time*1000:.2f}ms")

    return response

@app.get("/health", response_model=HealthResponseSchema)
async def health_check(ctx: AppContext = Depends(get_context)):
    """Health check endpoint"""
    store_healthy = await ctx.store.health_check()
    return HealthResponseSchema(
        status="healthy" if store_healthy else "unhealthy",
        timestamp=time.time(),
        store_connected=store_healthy
    )

@app.post("/restaurants", response_model=RestaurantCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_restaurant(request: RestaurantCreateRequest, ctx: AppContext = Depends(get_context)):
    restaurant_id = await ctx.restaurants.create_restaurant(
        request.name, request.location, request.cuisines
    )
    return RestaurantCreatedResponse(id=restaurant_id)

@app.get("/restaurants")
async def top_restaurants(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    ctx: AppContext = Depends(get_context)
):
    """Restaurants ranked by cumulative rating score"""
    return await ctx.restaurants.top_restaurants(page, limit)

@app.get("/restaurants/search")
async def search_restaurants(
    q: str = Query(..., description="RediSearch query"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    sort_by_stars: bool = False,
    ctx: AppContext = Depends(get_context)
):
    return await ctx.restaurants.search(q, page, limit, sort_by_stars)

@app.get("/restaurants/{restaurant_id}")
async def get_restaurant(restaurant_id: str, ctx: AppContext = Depends(get_context)):
    restaurant = await ctx.restaurants.get_restaurant(restaurant_id)
    return restaurant.to_dict()

@app.post("/restaurants/{restaurant_id}/details", status_code=status.HTTP_204_NO_CONTENT)
async def set_restaurant_details(
    restaurant_id: str,
    document: Dict[str, Any],
    ctx: AppContext = Depends(get_context)
):
    await ctx.restaurants.set_details(restaurant_id, document)

@app.get("/restaurants/{restaurant_id}/details")
async def get_restaurant_details(restaurant_id: str, ctx: AppContext = Depends(get_context)):
    return await ctx.restaurants.get_details(restaurant_id)

@app.post("/restaurants/{restaurant_id}/reviews", status_code=status.HTTP_201_CREATED)
async def add_review(
    restaurant_id: str,
    request: ReviewCreateRequest,
    ctx: AppContext = Depends(get_context)
):
    review = await ctx.reviews.add_review(restaurant_id, request.text, request.rating)
    return review.to_dict()

@app.get("/restaurants/{restaurant_id}/reviews")
async def list_reviews(
    restaurant_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    ctx: AppContext = Depends(get_context)
):
    reviews = await ctx.reviews.list_reviews(restaurant_id, page, limit)
    return [review.to_dict() for review in reviews]

@app.delete("/restaurants/{restaurant_id}/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(restaurant_id: str, review_id: str, ctx: AppContext = Depends(get_context)):
    await ctx.reviews.delete_review(restaurant_id, review_id)

@app.get("/restaurants/{restaurant_id}/weather")
async def get_weather(restaurant_id: str, ctx: AppContext = Depends(get_context)):
    return await ctx.weather.get_weather(restaurant_id)

@app.get("/cuisines")
async def list_cuisines(ctx: AppContext = Depends(get_context)):
    return await ctx.restaurants.cuisines()

@app.get("/cuisines/{cuisine}")
async def restaurants_for_cuisine(cuisine: str, ctx: AppContext = Depends(get_context)):
    return await ctx.restaurants.restaurants_by_cuisine(cuisine)
