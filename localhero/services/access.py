"""Location lookup with ownership checks."""

from typing import Optional

from localhero.core.errors import NotAuthorizedError, NotFoundError
from localhero.models import Location
from localhero.storage import locations as location_store


def require_location(location_id: int, user_id: Optional[int] = None) -> Location:
    """Load a location, enforcing ownership when ``user_id`` is given."""
    location = location_store.get_location(location_id)
    if location is None:
        raise NotFoundError(f"Location {location_id} not found")
    if user_id is not None and location.user_id != user_id:
        raise NotAuthorizedError("Not authorized to access this location")
    return location
