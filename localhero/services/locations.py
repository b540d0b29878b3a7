"""Location registration and maintenance."""

import logging
from typing import Any, Dict, Optional

from localhero.core.config import get_settings
from localhero.core.errors import NotFoundError, ValidationError
from localhero.models import Location
from localhero.services import citation_audit
from localhero.services.access import require_location
from localhero.storage import locations as location_store

logger = logging.getLogger(__name__)

MIN_RADIUS_MILES = 1
MAX_RADIUS_MILES = 50

_REQUIRED_FIELDS = ("business_name", "address", "city", "state", "zip_code", "service_type")
_ADDRESS_FIELDS = {"address", "city", "state", "zip_code"}


def _validate_radius(value: Any) -> float:
    try:
        radius = float(value)
    except (TypeError, ValueError):
        raise ValidationError("radius_miles must be numeric") from None
    if not MIN_RADIUS_MILES <= radius <= MAX_RADIUS_MILES:
        raise ValidationError(f"radius_miles must be between {MIN_RADIUS_MILES} and {MAX_RADIUS_MILES}")
    return radius


def create_location(user_id: int, fields: Dict[str, Any]) -> Location:
    missing = [name for name in _REQUIRED_FIELDS if not str(fields.get(name) or "").strip()]
    if missing:
        raise ValidationError(f"missing fields: {', '.join(missing)}")

    payload = {name: str(fields[name]).strip() for name in _REQUIRED_FIELDS}
    payload["user_id"] = user_id
    payload["keywords"] = fields.get("keywords") or None
    payload["latitude"] = fields.get("latitude")
    payload["longitude"] = fields.get("longitude")
    radius = fields.get("radius_miles")
    payload["radius_miles"] = _validate_radius(radius if radius is not None else get_settings().default_radius_miles)

    location = location_store.create_location(payload)
    citation_audit.initialize_citations(location.id)
    return location


def update_location(location_id: int, updates: Dict[str, Any], user_id: Optional[int] = None) -> Location:
    require_location(location_id, user_id)
    updates = dict(updates)
    if "radius_miles" in updates:
        updates["radius_miles"] = _validate_radius(updates["radius_miles"])
    # A new address invalidates the stored coordinates; the next refresh geocodes again.
    if _ADDRESS_FIELDS & updates.keys() and "latitude" not in updates and "longitude" not in updates:
        updates["latitude"] = None
        updates["longitude"] = None

    location = location_store.update_location(location_id, updates)
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    return location


def delete_location(location_id: int, user_id: Optional[int] = None) -> None:
    require_location(location_id, user_id)
    location_store.delete_location(location_id)
    logger.info("Deleted location=%s and its dependent rows", location_id)


def location_stats(location_id: int, user_id: Optional[int] = None) -> Dict[str, int]:
    require_location(location_id, user_id)
    return location_store.get_stats(location_id)
