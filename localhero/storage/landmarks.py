"""Landmark cache rows.

A location's landmarks are only ever written as a whole generation: the old
rows are deleted and the new rows inserted inside one transaction, so readers
see either the previous set or the new one.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from psycopg2 import extras

from localhero.core import db
from localhero.models import Landmark, LandmarkCandidate

logger = logging.getLogger(__name__)

# First key of the two-key advisory lock, scoping it to landmark refreshes.
_LOCK_NAMESPACE = 7301

_DELETE_FOR_LOCATION = "DELETE FROM landmarks WHERE location_id = %s;"

_INSERT_LANDMARKS = """
INSERT INTO landmarks (
    location_id,
    place_id,
    name,
    type,
    category,
    address,
    latitude,
    longitude,
    rating,
    user_ratings_total,
    cached_at
) VALUES %s;
"""

_TYPE_COUNTS = """
SELECT type, COUNT(*) AS count
FROM landmarks
WHERE location_id = %s
GROUP BY type
ORDER BY count DESC, type;
"""


def _to_values(location_id: int, candidate: LandmarkCandidate, cached_at: datetime) -> tuple:
    return (
        location_id,
        candidate.place_id,
        candidate.name,
        candidate.type,
        candidate.category,
        candidate.address,
        candidate.latitude,
        candidate.longitude,
        candidate.rating,
        candidate.user_ratings_total,
        cached_at,
    )


def replace_landmarks(location_id: int, candidates: Sequence[LandmarkCandidate], cached_at: datetime) -> int:
    """Swap the location's cached landmarks for ``candidates`` in a single transaction."""
    values = [_to_values(location_id, candidate, cached_at) for candidate in candidates]
    with db.transaction() as cur:
        cur.execute("SELECT pg_advisory_xact_lock(%s, %s);", (_LOCK_NAMESPACE, location_id))
        cur.execute(_DELETE_FOR_LOCATION, (location_id,))
        if values:
            extras.execute_values(cur, _INSERT_LANDMARKS, values, page_size=100)
    logger.debug("Replaced landmark cache for location %s with %d rows", location_id, len(values))
    return len(values)


def list_landmarks(location_id: int, place_type: Optional[str] = None, category: Optional[str] = None) -> List[Landmark]:
    clauses = ["location_id = %(location_id)s"]
    params = {"location_id": location_id}
    if place_type:
        clauses.append("type = %(type)s")
        params["type"] = place_type
    if category:
        clauses.append("category = %(category)s")
        params["category"] = category
    rows = db.fetch_all(f"SELECT * FROM landmarks WHERE {' AND '.join(clauses)} ORDER BY type, name;", params)
    return [Landmark.from_row(row) for row in rows]


def oldest_cached_at(location_id: int) -> Optional[datetime]:
    row = db.fetch_one("SELECT MIN(cached_at) AS oldest_cache FROM landmarks WHERE location_id = %s;", (location_id,))
    return row["oldest_cache"] if row else None


def type_counts(location_id: int) -> Dict[str, int]:
    rows = db.fetch_all(_TYPE_COUNTS, (location_id,))
    return {row["type"]: int(row["count"]) for row in rows}
