"""Generated content and review rows."""

from datetime import datetime
from typing import List, Optional

from psycopg2 import extras

from localhero.core import db
from localhero.models import Content, Review

_INSERT_CONTENT = """
INSERT INTO content (location_id, content_type, title, body, landmarks_used)
VALUES (%(location_id)s, %(content_type)s, %(title)s, %(body)s, %(landmarks_used)s)
RETURNING *;
"""

_INSERT_REVIEW = """
INSERT INTO reviews (location_id, reviewer_name, rating, review_text)
VALUES (%(location_id)s, %(reviewer_name)s, %(rating)s, %(review_text)s)
RETURNING *;
"""


def create_content(location_id: int, content_type: str, title: str, body: str, landmarks_used: Optional[List[str]] = None) -> Content:
    row = db.fetch_one(
        _INSERT_CONTENT,
        {
            "location_id": location_id,
            "content_type": content_type,
            "title": title,
            "body": body,
            "landmarks_used": extras.Json(landmarks_used) if landmarks_used is not None else None,
        },
    )
    return Content.from_row(row)


def list_content(location_id: int, content_type: Optional[str] = None, limit: int = 50) -> List[Content]:
    if content_type:
        rows = db.fetch_all(
            "SELECT * FROM content WHERE location_id = %s AND content_type = %s ORDER BY created_at DESC LIMIT %s;",
            (location_id, content_type, limit),
        )
    else:
        rows = db.fetch_all(
            "SELECT * FROM content WHERE location_id = %s ORDER BY created_at DESC LIMIT %s;",
            (location_id, limit),
        )
    return [Content.from_row(row) for row in rows]


def update_content_status(content_id: int, location_id: int, status: str) -> Optional[Content]:
    row = db.fetch_one(
        "UPDATE content SET status = %s WHERE id = %s AND location_id = %s RETURNING *;",
        (status, content_id, location_id),
    )
    return Content.from_row(row) if row else None


def create_review(location_id: int, reviewer_name: Optional[str], rating: int, review_text: str) -> Review:
    row = db.fetch_one(
        _INSERT_REVIEW,
        {"location_id": location_id, "reviewer_name": reviewer_name, "rating": rating, "review_text": review_text},
    )
    return Review.from_row(row)


def get_review(review_id: int) -> Optional[Review]:
    row = db.fetch_one("SELECT * FROM reviews WHERE id = %s;", (review_id,))
    return Review.from_row(row) if row else None


def list_reviews(location_id: int, pending_only: bool = False, limit: int = 50) -> List[Review]:
    pending_clause = " AND response_text IS NULL" if pending_only else ""
    rows = db.fetch_all(
        f"SELECT * FROM reviews WHERE location_id = %s{pending_clause} ORDER BY created_at DESC LIMIT %s;",
        (location_id, limit),
    )
    return [Review.from_row(row) for row in rows]


def add_review_response(review_id: int, response_text: str, responded_at: datetime) -> Optional[Review]:
    row = db.fetch_one(
        "UPDATE reviews SET response_text = %s, responded_at = %s WHERE id = %s RETURNING *;",
        (response_text, responded_at, review_id),
    )
    return Review.from_row(row) if row else None
