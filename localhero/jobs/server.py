"""HTTP entrypoint exposing landmark, citation and content operations."""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, is_dataclass
from typing import Any, Dict

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from localhero.core.config import get_settings
from localhero.core.errors import (
    CacheReplaceError,
    NoLandmarksError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from localhero.services import citation_audit, content, landmark_cache, locations
from localhero.services.access import require_location
from localhero.storage import content as content_store
from localhero.vendors.gemini import GeminiError
from localhero.vendors.google_places import GeocodingError, GooglePlacesError

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

_ERROR_STATUS = (
    (ValidationError, 400),
    (NotAuthenticatedError, 401),
    (NotAuthorizedError, 403),
    (NotFoundError, 404),
    (NoLandmarksError, 409),
    (GeocodingError, 502),
    (GooglePlacesError, 502),
    (GeminiError, 502),
    (CacheReplaceError, 500),
)


def _to_json(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, dict):
        return {key: _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(item) for item in value]
    return value


def _register_error_handlers() -> None:
    for exc_class, status in _ERROR_STATUS:

        def handler(exc: Exception, status: int = status) -> Any:
            if status >= 500:
                logger.error("Request failed: %s", exc)
            return jsonify({"error": str(exc)}), status

        app.register_error_handler(exc_class, handler)


_register_error_handlers()


@app.errorhandler(Exception)
def handle_unexpected(exc: Exception) -> Any:
    if isinstance(exc, HTTPException):
        return exc
    logger.exception("Unhandled error: %s", exc)
    return jsonify({"error": "Internal server error"}), 500


def _current_user_id() -> int:
    # The upstream gateway authenticates the caller and forwards the user id.
    raw = request.headers.get("X-User-Id", "")
    try:
        return int(raw)
    except ValueError:
        raise NotAuthenticatedError("Missing or invalid X-User-Id header") from None


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be numeric") from None


# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; does not touch the database."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": getattr(settings, "worker_port", None),
                "revision": os.getenv("K_REVISION", "unknown"),
            }
        ),
        200,
    )


@app.post("/locations")
def create_location() -> Any:
    location = locations.create_location(_current_user_id(), _payload())
    return jsonify({"data": _to_json(location)}), 201


@app.get("/locations/<int:location_id>")
def get_location(location_id: int) -> Any:
    location = require_location(location_id, _current_user_id())
    data = {
        "location": _to_json(location),
        "stats": locations.location_stats(location_id),
        "cache_age_days": landmark_cache.cache_age_days(location_id),
    }
    return jsonify({"data": data}), 200


@app.put("/locations/<int:location_id>")
def update_location(location_id: int) -> Any:
    location = locations.update_location(location_id, _payload(), user_id=_current_user_id())
    return jsonify({"data": _to_json(location)}), 200


@app.delete("/locations/<int:location_id>")
def delete_location(location_id: int) -> Any:
    locations.delete_location(location_id, user_id=_current_user_id())
    return "", 204


@app.post("/locations/<int:location_id>/landmarks/refresh")
def refresh_landmarks(location_id: int) -> Any:
    result = landmark_cache.refresh_landmarks(location_id, user_id=_current_user_id())
    return jsonify({"data": _to_json(result)}), 200


@app.get("/locations/<int:location_id>/landmarks")
def list_landmarks(location_id: int) -> Any:
    require_location(location_id, _current_user_id())
    landmarks = landmark_cache.list_landmarks(location_id, place_type=request.args.get("type"))
    data = {
        "landmarks": _to_json(landmarks),
        "types": landmark_cache.type_counts(location_id),
        "cache_age_days": landmark_cache.cache_age_days(location_id),
    }
    return jsonify({"data": data}), 200


@app.get("/locations/<int:location_id>/landmarks/sample")
def sample_landmarks(location_id: int) -> Any:
    require_location(location_id, _current_user_id())
    landmarks = landmark_cache.sample_landmarks(
        location_id,
        _int_arg("n", 5),
        place_type=request.args.get("type"),
        category=request.args.get("category"),
    )
    return jsonify({"data": _to_json(landmarks)}), 200


@app.get("/locations/<int:location_id>/citations")
def get_citations(location_id: int) -> Any:
    report = citation_audit.audit_report(location_id, user_id=_current_user_id())
    data = {key: report[key] for key in ("citations", "summary", "score", "directories", "catalog_version")}
    return jsonify(_to_json(data)), 200


@app.post("/locations/<int:location_id>/citations/initialize")
def initialize_citations(location_id: int) -> Any:
    require_location(location_id, _current_user_id())
    citations = citation_audit.initialize_citations(location_id)
    return jsonify({"message": "Citations initialized", "citations": _to_json(citations), "total": len(citations)}), 200


@app.put("/locations/<int:location_id>/citations/<int:citation_id>")
def update_citation(location_id: int, citation_id: int) -> Any:
    payload = _payload()
    nap_consistent = payload.get("nap_consistent", payload.get("napConsistent"))
    citation = citation_audit.update_citation_status(
        citation_id,
        payload.get("status"),
        nap_consistent=nap_consistent,
        user_id=_current_user_id(),
        location_id=location_id,
    )
    return jsonify({"message": "Citation updated", "citation": _to_json(citation)}), 200


@app.get("/locations/<int:location_id>/audit-summary")
def audit_summary(location_id: int) -> Any:
    report = citation_audit.audit_report(location_id, user_id=_current_user_id())
    data = {key: report[key] for key in ("summary", "score", "missing_priority", "recommendations")}
    return jsonify(_to_json(data)), 200


@app.get("/locations/<int:location_id>/content")
def list_content(location_id: int) -> Any:
    require_location(location_id, _current_user_id())
    items = content_store.list_content(location_id, content_type=request.args.get("type"), limit=_int_arg("limit", 50))
    return jsonify({"data": _to_json(items)}), 200


@app.post("/locations/<int:location_id>/content/gbp-post")
def generate_gbp_post(location_id: int) -> Any:
    outcome = content.generate_gbp_post(location_id, tone=_payload().get("tone", "professional"), user_id=_current_user_id())
    return jsonify({"data": _to_json(outcome)}), 201


@app.post("/locations/<int:location_id>/content/location-page")
def generate_location_page(location_id: int) -> Any:
    outcome = content.generate_location_page(location_id, user_id=_current_user_id())
    return jsonify({"data": _to_json(outcome)}), 201


@app.post("/locations/<int:location_id>/content/social-posts")
def generate_social_posts(location_id: int) -> Any:
    count = _payload().get("count", 3)
    if not isinstance(count, int):
        return jsonify({"error": "count must be numeric"}), 400
    outcome = content.generate_social_posts(location_id, count=count, user_id=_current_user_id())
    return jsonify({"data": _to_json(outcome)}), 201


@app.patch("/locations/<int:location_id>/content/<int:content_id>")
def update_content(location_id: int, content_id: int) -> Any:
    item = content.set_content_status(location_id, content_id, _payload().get("status"), user_id=_current_user_id())
    return jsonify({"data": _to_json(item)}), 200


@app.get("/locations/<int:location_id>/reviews")
def list_reviews(location_id: int) -> Any:
    require_location(location_id, _current_user_id())
    pending_only = request.args.get("pending", "").lower() in {"1", "true", "yes"}
    reviews = content_store.list_reviews(location_id, pending_only=pending_only)
    return jsonify({"data": _to_json(reviews)}), 200


@app.post("/locations/<int:location_id>/reviews")
def create_review(location_id: int) -> Any:
    payload = _payload()
    review = content.add_review(
        location_id,
        payload.get("review_text"),
        payload.get("rating"),
        reviewer_name=payload.get("reviewer_name"),
        user_id=_current_user_id(),
    )
    return jsonify({"data": _to_json(review)}), 201


@app.post("/locations/<int:location_id>/reviews/respond")
def respond_to_review(location_id: int) -> Any:
    payload = _payload()
    outcome = content.generate_review_response(
        location_id,
        review_text=payload.get("review_text"),
        rating=payload.get("rating"),
        reviewer_name=payload.get("reviewer_name"),
        tone=payload.get("tone", "professional"),
        review_id=payload.get("review_id"),
        user_id=_current_user_id(),
    )
    return jsonify({"data": _to_json(outcome)}), 200


def main() -> None:
    """Bind on PORT when the platform injects it, otherwise on WORKER_PORT."""
    env_port = os.getenv("PORT")
    port = int(env_port or get_settings().worker_port)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
