"""Client utilities for the Google Places and Geocoding APIs."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import requests

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_BASE_URL = "https://maps.googleapis.com/maps/api/place"
_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


class GooglePlacesError(RuntimeError):
    """Raised when the Places API returns a non-successful response."""


class GeocodingError(RuntimeError):
    """Raised when an address cannot be resolved to coordinates."""

    def __init__(self, status: str, message: str = ""):
        self.status = status
        super().__init__(f"Geocoding failed: {message or status}")


@dataclass(frozen=True)
class GeocodeResult:
    latitude: float
    longitude: float
    formatted_address: str


def geocode(address: str, api_key: str) -> GeocodeResult:
    params = {"address": address, "key": api_key}
    try:
        response = _SESSION.get(_GEOCODE_URL, params=params, timeout=10)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        logger.error("geocode request failed for %r: %s", address, exc)
        raise GeocodingError("REQUEST_FAILED", str(exc)) from exc

    status = payload.get("status")
    results = payload.get("results") or []
    if status != "OK" or not results:
        logger.error("geocode failed: status=%s, error_message=%s", status, payload.get("error_message"))
        raise GeocodingError(status or "UNKNOWN", payload.get("error_message") or "")

    first = results[0]
    location = first.get("geometry", {}).get("location", {})
    return GeocodeResult(
        latitude=location.get("lat"),
        longitude=location.get("lng"),
        formatted_address=first.get("formatted_address", ""),
    )


def nearby_search(latitude: float, longitude: float, radius_meters: float, place_type: str, api_key: str) -> List[Dict[str, Any]]:
    """Return the raw Nearby Search results for one place type. ZERO_RESULTS yields an empty list."""
    params = {
        "location": f"{latitude},{longitude}",
        "radius": radius_meters,
        "type": place_type,
        "key": api_key,
    }
    try:
        response = _SESSION.get(f"{_BASE_URL}/nearbysearch/json", params=params, timeout=10)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        raise GooglePlacesError(f"Places request failed: {exc}") from exc

    status = payload.get("status")
    if status in {"OK", "ZERO_RESULTS"}:
        return payload.get("results") or []
    logger.error("nearby_search failed: type=%s, status=%s, error_message=%s", place_type, status, payload.get("error_message"))
    if status == "REQUEST_DENIED":
        raise GooglePlacesError("Google Places API key is invalid or has insufficient permissions")
    raise GooglePlacesError(payload.get("error_message") or f"Places search failed: {status}")
