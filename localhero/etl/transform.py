"""Utilities for transforming Google Places responses into landmark rows."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from localhero.models import LandmarkCandidate

logger = logging.getLogger(__name__)

METERS_PER_MILE = 1609.34


def miles_to_meters(miles: float) -> float:
    return round(miles * METERS_PER_MILE, 2)


def compose_address(address: str, city: str, state: str, zip_code: str) -> str:
    return f"{address}, {city}, {state} {zip_code}"


def parse_keywords(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [keyword.strip() for keyword in raw.split(",") if keyword.strip()]


def to_landmark_candidate(result: Dict[str, Any], place_type: str, category: Optional[str]) -> Optional[LandmarkCandidate]:
    place_id = result.get("place_id")
    name = result.get("name")
    if not place_id or not name:
        logger.debug("Skipping result without place_id or name: %s", result)
        return None

    geometry = result.get("geometry", {}).get("location", {})
    return LandmarkCandidate(
        place_id=place_id,
        name=name,
        type=place_type,
        category=category,
        address=result.get("vicinity") or result.get("formatted_address"),
        latitude=geometry.get("lat"),
        longitude=geometry.get("lng"),
        rating=result.get("rating"),
        user_ratings_total=result.get("user_ratings_total"),
    )


def dedupe_landmarks(candidates: Iterable[LandmarkCandidate]) -> List[LandmarkCandidate]:
    """Drop repeated place ids, keeping the first occurrence in input order."""
    seen = set()
    unique = []
    for candidate in candidates:
        if candidate.place_id in seen:
            continue
        seen.add(candidate.place_id)
        unique.append(candidate)
    return unique


def group_by_type(landmarks: Iterable[Any]) -> Dict[str, int]:
    """Count landmarks per type, most common first."""
    counts: Dict[str, int] = {}
    for landmark in landmarks:
        counts[landmark.type] = counts.get(landmark.type, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: (-item[1], item[0])))
