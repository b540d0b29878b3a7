"""Core data models shared by the landmark, citation and content pipelines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

CITATION_STATUSES = ("unchecked", "found", "missing", "pending")
CONTENT_STATUSES = ("draft", "published", "archived")
LANDMARK_CATEGORIES = (
    "education",
    "recreation",
    "culture",
    "shopping",
    "dining",
    "healthcare",
    "worship",
    "fitness",
    "sports",
    "government",
    "services",
)


@dataclass(slots=True)
class Location:
    id: int
    user_id: int
    business_name: str
    address: str
    city: str
    state: str
    zip_code: str
    service_type: str
    keywords: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_miles: float = 5.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Location":
        radius = row.get("radius_miles")
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            business_name=row["business_name"],
            address=row["address"],
            city=row["city"],
            state=row["state"],
            zip_code=row["zip_code"],
            service_type=row["service_type"],
            keywords=row.get("keywords"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            radius_miles=float(radius) if radius is not None else 5.0,
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


@dataclass(slots=True)
class LandmarkCandidate:
    """Normalized Nearby Search result, before it is cached."""

    place_id: str
    name: str
    type: str
    category: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None


@dataclass(slots=True)
class Landmark:
    id: int
    location_id: int
    place_id: str
    name: str
    type: str
    category: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    user_ratings_total: Optional[int] = None
    cached_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Landmark":
        return cls(
            id=row["id"],
            location_id=row["location_id"],
            place_id=row["place_id"],
            name=row["name"],
            type=row["type"],
            category=row.get("category"),
            address=row.get("address"),
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            rating=row.get("rating"),
            user_ratings_total=row.get("user_ratings_total"),
            cached_at=row.get("cached_at"),
        )


@dataclass(slots=True)
class CategoryError:
    """A single Nearby Search query that failed during a refresh."""

    type: str
    error: str


@dataclass(slots=True)
class RefreshResult:
    location: Location
    landmarks: List[Landmark]
    stats: Dict[str, Any]
    errors: List[CategoryError] = field(default_factory=list)
    replaced: bool = True


@dataclass(frozen=True, slots=True)
class Directory:
    name: str
    url: str
    tier: int


@dataclass(slots=True)
class Citation:
    id: int
    location_id: int
    directory_name: str
    directory_url: Optional[str] = None
    status: str = "unchecked"
    nap_consistent: bool = False
    last_checked: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Citation":
        return cls(
            id=row["id"],
            location_id=row["location_id"],
            directory_name=row["directory_name"],
            directory_url=row.get("directory_url"),
            status=row.get("status") or "unchecked",
            nap_consistent=bool(row.get("nap_consistent")),
            last_checked=row.get("last_checked"),
            created_at=row.get("created_at"),
        )


@dataclass(slots=True)
class CitationSummary:
    total: int = 0
    found: int = 0
    missing: int = 0
    unchecked: int = 0
    pending: int = 0
    consistent: int = 0

    @classmethod
    def from_row(cls, row: Optional[Mapping[str, Any]]) -> "CitationSummary":
        if not row:
            return cls()
        # SUM() over zero rows comes back as NULL.
        return cls(**{name: int(row.get(name) or 0) for name in ("total", "found", "missing", "unchecked", "pending", "consistent")})


@dataclass(slots=True)
class Recommendation:
    priority: str
    message: str
    action: str


@dataclass(slots=True)
class Content:
    id: int
    location_id: int
    content_type: str
    body: str
    title: Optional[str] = None
    landmarks_used: Optional[List[str]] = None
    status: str = "draft"
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Content":
        landmarks_used = row.get("landmarks_used")
        if landmarks_used is not None and not isinstance(landmarks_used, list):
            landmarks_used = None
        return cls(
            id=row["id"],
            location_id=row["location_id"],
            content_type=row["content_type"],
            body=row["body"],
            title=row.get("title"),
            landmarks_used=landmarks_used,
            status=row.get("status") or "draft",
            created_at=row.get("created_at"),
        )


@dataclass(slots=True)
class Review:
    id: int
    location_id: int
    review_text: str
    reviewer_name: Optional[str] = None
    rating: Optional[int] = None
    response_text: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Review":
        return cls(
            id=row["id"],
            location_id=row["location_id"],
            review_text=row["review_text"],
            reviewer_name=row.get("reviewer_name"),
            rating=row.get("rating"),
            response_text=row.get("response_text"),
            responded_at=row.get("responded_at"),
            created_at=row.get("created_at"),
        )


@dataclass(slots=True)
class GenerationOutcome:
    tokens_used: int
    content: Optional[Content] = None
    response: Optional[str] = None
