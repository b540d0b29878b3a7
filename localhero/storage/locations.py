"""Location rows."""

import logging
from typing import Any, Dict, List, Optional

from localhero.core import db
from localhero.models import Location

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "business_name",
    "address",
    "city",
    "state",
    "zip_code",
    "service_type",
    "keywords",
    "latitude",
    "longitude",
    "radius_miles",
)

_INSERT_LOCATION = """
INSERT INTO locations (
    user_id,
    business_name,
    address,
    city,
    state,
    zip_code,
    service_type,
    keywords,
    latitude,
    longitude,
    radius_miles
) VALUES (
    %(user_id)s,
    %(business_name)s,
    %(address)s,
    %(city)s,
    %(state)s,
    %(zip_code)s,
    %(service_type)s,
    %(keywords)s,
    %(latitude)s,
    %(longitude)s,
    %(radius_miles)s
)
RETURNING *;
"""

_STATS = """
SELECT
    (SELECT COUNT(*) FROM landmarks WHERE location_id = %(id)s) AS landmark_count,
    (SELECT COUNT(*) FROM content WHERE location_id = %(id)s) AS content_count,
    (SELECT COUNT(*) FROM reviews WHERE location_id = %(id)s) AS review_count;
"""


def create_location(fields: Dict[str, Any]) -> Location:
    params = {name: fields.get(name) for name in ("user_id",) + _UPDATABLE_FIELDS}
    row = db.fetch_one(_INSERT_LOCATION, params)
    logger.info("Created location %s for user %s", row["id"], row["user_id"])
    return Location.from_row(row)


def get_location(location_id: int) -> Optional[Location]:
    row = db.fetch_one("SELECT * FROM locations WHERE id = %s;", (location_id,))
    return Location.from_row(row) if row else None


def list_locations(user_id: int) -> List[Location]:
    rows = db.fetch_all("SELECT * FROM locations WHERE user_id = %s ORDER BY created_at DESC;", (user_id,))
    return [Location.from_row(row) for row in rows]


def update_location(location_id: int, updates: Dict[str, Any]) -> Optional[Location]:
    # Column names only ever come from the whitelist, values stay parameterised.
    columns = [name for name in _UPDATABLE_FIELDS if name in updates]
    if not columns:
        return get_location(location_id)

    assignments = ", ".join(f"{name} = %({name})s" for name in columns)
    params = {name: updates[name] for name in columns}
    params["id"] = location_id
    row = db.fetch_one(f"UPDATE locations SET {assignments}, updated_at = NOW() WHERE id = %(id)s RETURNING *;", params)
    return Location.from_row(row) if row else None


def set_coordinates(location_id: int, latitude: float, longitude: float) -> Optional[Location]:
    return update_location(location_id, {"latitude": latitude, "longitude": longitude})


def delete_location(location_id: int) -> bool:
    row = db.fetch_one("DELETE FROM locations WHERE id = %s RETURNING id;", (location_id,))
    return row is not None


def get_stats(location_id: int) -> Dict[str, int]:
    row = db.fetch_one(_STATS, {"id": location_id}) or {}
    return {
        "landmark_count": int(row.get("landmark_count") or 0),
        "content_count": int(row.get("content_count") or 0),
        "review_count": int(row.get("review_count") or 0),
    }
