"""Fetch, cache and sample nearby landmarks for a location."""

import logging
import random
import threading
import time
import weakref
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence, Tuple

import psycopg2

from localhero.core.config import Settings, get_settings
from localhero.core.errors import CacheReplaceError, NotFoundError, ValidationError
from localhero.etl.transform import compose_address, dedupe_landmarks, group_by_type, miles_to_meters, to_landmark_candidate
from localhero.models import CategoryError, Landmark, LandmarkCandidate, Location, RefreshResult
from localhero.services.access import require_location
from localhero.storage import landmarks as landmark_store
from localhero.storage import locations as location_store
from localhero.vendors import google_places

logger = logging.getLogger(__name__)

# Query order is also dedup precedence: the first type to return a place owns it.
PLACE_TYPES: Tuple[Tuple[str, str], ...] = (
    ("school", "education"),
    ("park", "recreation"),
    ("museum", "culture"),
    ("library", "education"),
    ("shopping_mall", "shopping"),
    ("restaurant", "dining"),
    ("hospital", "healthcare"),
    ("church", "worship"),
    ("gym", "fitness"),
    ("stadium", "sports"),
    ("university", "education"),
    ("city_hall", "government"),
    ("post_office", "services"),
    ("fire_station", "services"),
    ("police", "services"),
)

# Entries disappear once no refresh holds or waits on the lock.
_refresh_locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
_refresh_locks_guard = threading.Lock()


def _refresh_lock(location_id: int) -> threading.Lock:
    with _refresh_locks_guard:
        lock = _refresh_locks.get(location_id)
        if lock is None:
            lock = threading.Lock()
            _refresh_locks[location_id] = lock
        return lock


def refresh_landmarks(location_id: int, user_id: Optional[int] = None) -> RefreshResult:
    """Rebuild the landmark cache for a location from Google Places.

    Geocodes the location first if it has no coordinates yet. Failed category
    queries are reported in ``RefreshResult.errors`` and do not abort the
    refresh. Geocoding failures (``GeocodingError``) and cache replacement
    failures (``CacheReplaceError``) do, leaving the previous cache intact.
    """
    settings = get_settings()
    if not settings.google_api_key:
        raise RuntimeError("GOOGLE_API_KEY is required")

    require_location(location_id, user_id)

    with _refresh_lock(location_id):
        # Re-read under the lock so a refresh that just geocoded is seen.
        location = location_store.get_location(location_id)
        if location is None:
            raise NotFoundError(f"Location {location_id} not found")
        if not location.has_coordinates:
            location = _geocode_location(location, settings)

        radius_meters = miles_to_meters(location.radius_miles or settings.default_radius_miles)
        logger.info(
            "Refreshing landmarks for location=%s at %s,%s radius=%sm",
            location.id,
            location.latitude,
            location.longitude,
            radius_meters,
        )

        candidates, errors, succeeded = _search_all_types(location, radius_meters, settings)
        landmarks = dedupe_landmarks(candidates)

        replaced = succeeded > 0
        if replaced:
            _replace_cache(location.id, landmarks, settings.cache_replace_attempts)
        else:
            logger.warning("Every Places query failed for location=%s; keeping the previous cache", location.id)

        cached = landmark_store.list_landmarks(location.id)

    logger.info(
        "Completed landmark refresh for location=%s: fetched=%d unique=%d errors=%d",
        location.id,
        len(candidates),
        len(landmarks),
        len(errors),
    )
    return RefreshResult(
        location=location,
        landmarks=cached,
        stats={"total": len(cached), "by_type": group_by_type(cached)},
        errors=errors,
        replaced=replaced,
    )


def _geocode_location(location: Location, settings: Settings) -> Location:
    address = compose_address(location.address, location.city, location.state, location.zip_code)
    geo = google_places.geocode(address, api_key=settings.google_api_key)
    logger.info("Geocoded location=%s to %s,%s (%s)", location.id, geo.latitude, geo.longitude, geo.formatted_address)
    updated = location_store.set_coordinates(location.id, geo.latitude, geo.longitude)
    if updated is None:
        raise NotFoundError(f"Location {location.id} not found")
    return updated


def _search_all_types(
    location: Location, radius_meters: float, settings: Settings
) -> Tuple[List[LandmarkCandidate], List[CategoryError], int]:
    candidates: List[LandmarkCandidate] = []
    errors: List[CategoryError] = []
    succeeded = 0

    for index, (place_type, category) in enumerate(PLACE_TYPES):
        if index:
            time.sleep(settings.places_request_delay)
        try:
            results = google_places.nearby_search(
                location.latitude,
                location.longitude,
                radius_meters,
                place_type,
                api_key=settings.google_api_key,
            )
        except google_places.GooglePlacesError as exc:
            logger.warning("Places query failed for type=%s: %s", place_type, exc)
            errors.append(CategoryError(type=place_type, error=str(exc)))
            continue

        succeeded += 1
        logger.debug("Fetched %d results for type=%s", len(results), place_type)
        for result in results:
            candidate = to_landmark_candidate(result, place_type, category)
            if candidate is not None:
                candidates.append(candidate)

    return candidates, errors, succeeded


def _replace_cache(location_id: int, landmarks: Sequence[LandmarkCandidate], attempts: int) -> int:
    cached_at = datetime.now(timezone.utc)
    last_error: Optional[Exception] = None
    for attempt in range(1, attempts + 1):
        try:
            return landmark_store.replace_landmarks(location_id, landmarks, cached_at)
        except psycopg2.Error as exc:
            last_error = exc
            logger.warning(
                "Landmark cache replacement failed for location=%s (attempt %d/%d): %s",
                location_id,
                attempt,
                attempts,
                exc,
            )
    raise CacheReplaceError(
        f"Could not replace the landmark cache for location {location_id}; the previous landmarks were kept"
    ) from last_error


def list_landmarks(location_id: int, place_type: Optional[str] = None) -> List[Landmark]:
    return landmark_store.list_landmarks(location_id, place_type=place_type)


def cache_age_days(location_id: int, now: Optional[datetime] = None) -> Optional[int]:
    """Whole days since the oldest cached landmark, or None if nothing is cached."""
    oldest = landmark_store.oldest_cached_at(location_id)
    if oldest is None:
        return None
    if oldest.tzinfo is None:
        oldest = oldest.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0, (now - oldest).days)


def sample_landmarks(
    location_id: int, n: int, place_type: Optional[str] = None, category: Optional[str] = None
) -> List[Landmark]:
    """Pick up to ``n`` distinct cached landmarks at random. May return fewer, or none."""
    if n < 0:
        raise ValidationError("Sample size must not be negative")
    cached = landmark_store.list_landmarks(location_id, place_type=place_type, category=category)
    return random.sample(cached, min(n, len(cached)))


def type_counts(location_id: int) -> Dict[str, int]:
    return landmark_store.type_counts(location_id)
