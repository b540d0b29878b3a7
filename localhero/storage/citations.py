"""Citation audit rows."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Set

from localhero.core import db
from localhero.models import Citation, CitationSummary, Directory

logger = logging.getLogger(__name__)

_INSERT_CITATION = """
INSERT INTO citations (location_id, directory_name, directory_url, status)
VALUES (%(location_id)s, %(directory_name)s, %(directory_url)s, 'unchecked')
ON CONFLICT (location_id, directory_name) DO NOTHING;
"""

_SUMMARY = """
SELECT
    COUNT(*) AS total,
    SUM(CASE WHEN status = 'found' THEN 1 ELSE 0 END) AS found,
    SUM(CASE WHEN status = 'missing' THEN 1 ELSE 0 END) AS missing,
    SUM(CASE WHEN status = 'unchecked' THEN 1 ELSE 0 END) AS unchecked,
    SUM(CASE WHEN status = 'pending' THEN 1 ELSE 0 END) AS pending,
    SUM(CASE WHEN nap_consistent THEN 1 ELSE 0 END) AS consistent
FROM citations
WHERE location_id = %s;
"""


def existing_directory_names(location_id: int) -> Set[str]:
    rows = db.fetch_all("SELECT directory_name FROM citations WHERE location_id = %s;", (location_id,))
    return {row["directory_name"] for row in rows}


def insert_citations(location_id: int, directories: Iterable[Directory]) -> None:
    with db.transaction() as cur:
        for directory in directories:
            cur.execute(
                _INSERT_CITATION,
                {"location_id": location_id, "directory_name": directory.name, "directory_url": directory.url},
            )


def list_citations(location_id: int) -> List[Citation]:
    rows = db.fetch_all("SELECT * FROM citations WHERE location_id = %s ORDER BY directory_name;", (location_id,))
    return [Citation.from_row(row) for row in rows]


def get_citation(citation_id: int) -> Optional[Citation]:
    row = db.fetch_one("SELECT * FROM citations WHERE id = %s;", (citation_id,))
    return Citation.from_row(row) if row else None


def update_status(citation_id: int, status: str, checked_at: datetime, nap_consistent: Optional[bool] = None) -> Optional[Citation]:
    assignments = ["status = %(status)s", "last_checked = %(checked_at)s"]
    params = {"id": citation_id, "status": status, "checked_at": checked_at}
    if nap_consistent is not None:
        assignments.append("nap_consistent = %(nap_consistent)s")
        params["nap_consistent"] = nap_consistent
    row = db.fetch_one(f"UPDATE citations SET {', '.join(assignments)} WHERE id = %(id)s RETURNING *;", params)
    return Citation.from_row(row) if row else None


def summary(location_id: int) -> CitationSummary:
    return CitationSummary.from_row(db.fetch_one(_SUMMARY, (location_id,)))
