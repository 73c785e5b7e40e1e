# domain/models.py - Core business entities
import math
from dataclasses import dataclass, field
from typing import List, Optional
from abc import ABC, abstractmethod

MIN_RATING = 1
MAX_RATING = 5

def normalize_cuisine(name: str) -> str:
    return name.strip().lower()

def page_offset(page: int, limit: int) -> int:
    """Zero-based offset of a 1-based page"""
    if page < 1:
        raise ValueError(f"Page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"Limit must be >= 1, got {limit}")
    return (page - 1) * limit

@dataclass
class Restaurant:
    name: str
    location: str  # "lng,lat"
    cuisines: List[str] = field(default_factory=list)
    id: Optional[str] = None
    view_count: int = 0
    rating_score: float = 0.0

    def __post_init__(self):
        self.name = (self.name or "").strip()
        self.location = (self.location or "").strip()
        if not self.name:
            raise ValueError("Restaurant name must not be empty")
        if not self.location:
            raise ValueError("Restaurant location must not be empty")
        # Set semantics, first occurrence wins
        seen = []
        for cuisine in self.cuisines:
            cuisine = normalize_cuisine(cuisine)
            if cuisine and cuisine not in seen:
                seen.append(cuisine)
        self.cuisines = seen

    def to_record(self) -> dict:
        """Flat hash fields (cuisines live in sets, score in the rank index)"""
        return {
            "name": self.name,
            "location": self.location,
            "viewCount": self.view_count,
            "avgStars": self.rating_score,
        }

    @classmethod
    def from_record(cls, record: dict, cuisines: Optional[List[str]] = None) -> "Restaurant":
        return cls(
            id=record.get("id"),
            name=record.get("name", ""),
            location=record.get("location", ""),
            cuisines=sorted(cuisines or []),
            view_count=int(record.get("viewCount", 0)),
            rating_score=float(record.get("avgStars", 0)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "cuisines": self.cuisines,
            "viewCount": self.view_count,
            "ratingScore": self.rating_score,
        }

@dataclass
class Review:
    restaurant_id: str
    text: str
    rating: int
    created_at: int  # epoch milliseconds
    id: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.rating, bool) or not isinstance(self.rating, int):
            raise ValueError(f"Rating must be an integer, got {self.rating!r}")
        if not MIN_RATING <= self.rating <= MAX_RATING:
            raise ValueError(f"Rating must be between {MIN_RATING} and {MAX_RATING}, got {self.rating}")
        if not self.restaurant_id:
            raise ValueError("Review must reference a restaurant")

    def to_record(self) -> dict:
        return {
            "restaurantId": self.restaurant_id,
            "text": self.text,
            "rating": self.rating,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_record(cls, record: dict) -> "Review":
        return cls(
            id=record.get("id"),
            restaurant_id=record.get("restaurantId", ""),
            text=record.get("text", ""),
            rating=int(record.get("rating", 0)),
            created_at=int(record.get("createdAt", 0)),
        )

    def to_dict(self) -> dict:
        return {"id": self.id, **self.to_record()}

@dataclass
class Coordinates:
    longitude: float
    latitude: float

    @classmethod
    def parse(cls, location: Optional[str]) -> "Coordinates":
        """Parse a "<longitude>,<latitude>" location field"""
        parts = (location or "").split(",")
        if len(parts) != 2:
            raise ValueError(f"Location {location!r} is not a 'lng,lat' pair")
        try:
            longitude, latitude = (float(part.strip()) for part in parts)
        except ValueError:
            raise ValueError(f"Location {location!r} has non-numeric coordinates")
        if not (math.isfinite(longitude) and math.isfinite(latitude)):
            raise ValueError(f"Location {location!r} has non-finite coordinates")
        return cls(longitude=longitude, latitude=latitude)

# External collaborator interface (dependency inversion)
class WeatherProvider(ABC):
    @abstractmethod
    async def current_weather(self, coordinates: Coordinates) -> dict:
        """Fetch current weather; raises UpstreamFailure on any failure"""
        pass
