import pytest

from localhero.core.config import Settings
from localhero.core.errors import CacheReplaceError, NoLandmarksError, NotAuthorizedError, NotFoundError
from localhero.jobs import server
from localhero.models import CategoryError, Citation, CitationSummary, Content, GenerationOutcome, Landmark, Location, RefreshResult
from localhero.vendors.google_places import GeocodingError


def _location():
    return Location(
        id=1,
        user_id=3,
        business_name="Joe's Plumbing",
        address="100 Congress Ave",
        city="Austin",
        state="TX",
        zip_code="78701",
        service_type="Plumber",
        latitude=30.27,
        longitude=-97.74,
    )


def _require_location(location_id, user_id=None):
    if location_id != 1:
        raise NotFoundError(f"Location {location_id} not found")
    if user_id is not None and user_id != 3:
        raise NotAuthorizedError("Not authorized to access this location")
    return _location()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(server, "require_location", _require_location)
    monkeypatch.setattr(
        server, "get_settings", lambda: Settings(google_api_key="", gemini_api_key="", database_url="", worker_port=9100)
    )
    server.app.config["TESTING"] = True
    with server.app.test_client() as test_client:
        yield test_client


HEADERS = {"X-User-Id": "3"}


def test_healthz(client):
    response = client.get("/healthz")

    assert response.status_code == 200
    body = response.get_json()
    assert body["status"] == "ok"
    assert body["worker_port_config"] == 9100


def test_missing_user_header_is_unauthenticated(client):
    response = client.get("/locations/1")

    assert response.status_code == 401
    assert "X-User-Id" in response.get_json()["error"]


def test_unknown_location_is_404(client):
    response = client.get("/locations/2/landmarks", headers=HEADERS)

    assert response.status_code == 404


def test_other_users_location_is_403(client):
    response = client.get("/locations/1/landmarks", headers={"X-User-Id": "8"})

    assert response.status_code == 403


def test_list_landmarks(client, monkeypatch):
    landmark = Landmark(id=1, location_id=1, place_id="p1", name="Zilker Park", type="park", category="recreation")
    monkeypatch.setattr(server.landmark_cache, "list_landmarks", lambda location_id, place_type=None: [landmark])
    monkeypatch.setattr(server.landmark_cache, "type_counts", lambda location_id: {"park": 1})
    monkeypatch.setattr(server.landmark_cache, "cache_age_days", lambda location_id: 2)

    response = client.get("/locations/1/landmarks", headers=HEADERS)

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["landmarks"][0]["name"] == "Zilker Park"
    assert data["types"] == {"park": 1}
    assert data["cache_age_days"] == 2


def test_refresh_reports_partial_failures(client, monkeypatch):
    def fake_refresh(location_id, user_id=None):
        return RefreshResult(
            location=_location(),
            landmarks=[],
            stats={"total": 0, "by_type": {}},
            errors=[CategoryError(type="museum", error="Places search failed: UNKNOWN_ERROR")],
        )

    monkeypatch.setattr(server.landmark_cache, "refresh_landmarks", fake_refresh)

    response = client.post("/locations/1/landmarks/refresh", headers=HEADERS)

    data = response.get_json()["data"]
    assert response.status_code == 200
    assert data["errors"] == [{"type": "museum", "error": "Places search failed: UNKNOWN_ERROR"}]
    assert data["replaced"] is True


def test_refresh_geocoding_failure_is_502(client, monkeypatch):
    def fake_refresh(location_id, user_id=None):
        raise GeocodingError("ZERO_RESULTS")

    monkeypatch.setattr(server.landmark_cache, "refresh_landmarks", fake_refresh)

    response = client.post("/locations/1/landmarks/refresh", headers=HEADERS)

    assert response.status_code == 502
    assert response.get_json()["error"] == "Geocoding failed: ZERO_RESULTS"


def test_refresh_cache_failure_is_500(client, monkeypatch):
    def fake_refresh(location_id, user_id=None):
        raise CacheReplaceError("kept previous landmarks")

    monkeypatch.setattr(server.landmark_cache, "refresh_landmarks", fake_refresh)

    response = client.post("/locations/1/landmarks/refresh", headers=HEADERS)

    assert response.status_code == 500


def test_sample_validates_n(client):
    response = client.get("/locations/1/landmarks/sample?n=abc", headers=HEADERS)

    assert response.status_code == 400


def test_update_citation_rejects_invalid_status(client):
    response = client.put("/locations/1/citations/4", json={"status": "listed"}, headers=HEADERS)

    assert response.status_code == 400


def test_update_citation_accepts_camel_case_nap(client, monkeypatch):
    captured = {}

    def fake_update(citation_id, status, nap_consistent=None, user_id=None, location_id=None):
        captured.update(citation_id=citation_id, status=status, nap=nap_consistent, user=user_id, location=location_id)
        return Citation(id=citation_id, location_id=1, directory_name="Yelp", status=status, nap_consistent=True)

    monkeypatch.setattr(server.citation_audit, "update_citation_status", fake_update)

    response = client.put("/locations/1/citations/4", json={"status": "found", "napConsistent": True}, headers=HEADERS)

    assert response.status_code == 200
    assert captured == {"citation_id": 4, "status": "found", "nap": True, "user": 3, "location": 1}
    assert response.get_json()["citation"]["directory_name"] == "Yelp"


def test_audit_summary(client, monkeypatch):
    report = {
        "summary": CitationSummary(total=15, found=8, missing=4, unchecked=3, consistent=6),
        "score": 62,
        "missing_priority": [],
        "recommendations": [],
        "citations": [],
        "directories": [],
        "catalog_version": 1,
    }
    monkeypatch.setattr(server.citation_audit, "audit_report", lambda location_id, user_id=None: report)

    response = client.get("/locations/1/audit-summary", headers=HEADERS)

    body = response.get_json()
    assert body["score"] == 62
    assert body["summary"]["found"] == 8
    assert "citations" not in body


def test_generation_without_landmarks_is_409(client, monkeypatch):
    def fake_generate(location_id, tone="professional", user_id=None):
        raise NoLandmarksError("No landmarks cached. Please refresh landmarks first.")

    monkeypatch.setattr(server.content, "generate_gbp_post", fake_generate)

    response = client.post("/locations/1/content/gbp-post", json={"tone": "friendly"}, headers=HEADERS)

    assert response.status_code == 409
    assert response.get_json()["error"] == "No landmarks cached. Please refresh landmarks first."


def test_generate_location_page(client, monkeypatch):
    item = Content(id=9, location_id=1, content_type="location_page", body="copy", title="Plumber in Austin, TX")
    monkeypatch.setattr(
        server.content,
        "generate_location_page",
        lambda location_id, user_id=None: GenerationOutcome(tokens_used=50, content=item),
    )

    response = client.post("/locations/1/content/location-page", headers=HEADERS)

    data = response.get_json()["data"]
    assert response.status_code == 201
    assert data["content"]["title"] == "Plumber in Austin, TX"
    assert data["tokens_used"] == 50


def test_social_posts_count_must_be_numeric(client):
    response = client.post("/locations/1/content/social-posts", json={"count": "three"}, headers=HEADERS)

    assert response.status_code == 400


def test_delete_location(client, monkeypatch):
    deleted = []
    monkeypatch.setattr(server.locations, "delete_location", lambda location_id, user_id=None: deleted.append(location_id))

    response = client.delete("/locations/1", headers=HEADERS)

    assert response.status_code == 204
    assert deleted == [1]


def test_create_location(client, monkeypatch):
    monkeypatch.setattr(server.locations, "create_location", lambda user_id, fields: _location())

    response = client.post("/locations", json={"business_name": "Joe's Plumbing"}, headers=HEADERS)

    assert response.status_code == 201
    assert response.get_json()["data"]["city"] == "Austin"


def test_unexpected_error_is_json_500(client, monkeypatch):
    def fake_refresh(location_id, user_id=None):
        raise KeyError("lat")

    monkeypatch.setattr(server.landmark_cache, "refresh_landmarks", fake_refresh)

    response = client.post("/locations/1/landmarks/refresh", headers=HEADERS)

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_unknown_route_is_still_404(client):
    assert client.get("/nope").status_code == 404


def test_invalid_user_header_is_unauthenticated(client):
    response = client.get("/locations/1", headers={"X-User-Id": "abc"})

    assert response.status_code == 401


def test_update_citation_rejects_string_nap(client, monkeypatch):
    stored = []
    monkeypatch.setattr(server.citation_audit.citation_store, "update_status", lambda *args: stored.append(args))

    response = client.put(
        "/locations/1/citations/4", json={"status": "found", "napConsistent": "false"}, headers=HEADERS
    )

    assert response.status_code == 400
    assert "nap_consistent" in response.get_json()["error"]
    assert stored == []
