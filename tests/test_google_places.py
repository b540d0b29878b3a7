import pytest
import requests

from localhero.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.response = None
        self.exc = None

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    return session


def test_nearby_search_success(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OK", "results": [{"place_id": "p1"}]})

    results = google_places.nearby_search(30.1, -97.7, 8046.7, "school", "key")

    assert results == [{"place_id": "p1"}]
    url, params, timeout = patch_session.calls[0]
    assert "nearbysearch" in url
    assert params["location"] == "30.1,-97.7"
    assert params["radius"] == 8046.7
    assert params["type"] == "school"
    assert timeout == 10


def test_nearby_search_zero_results_is_empty(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS"})

    assert google_places.nearby_search(1, 2, 100, "park", "key") == []


def test_nearby_search_request_denied(patch_session):
    patch_session.response = DummyResponse(payload={"status": "REQUEST_DENIED", "error_message": "bad key"})

    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.nearby_search(1, 2, 100, "park", "key")

    assert "invalid or has insufficient permissions" in str(excinfo.value)


def test_nearby_search_other_status(patch_session):
    patch_session.response = DummyResponse(payload={"status": "OVER_QUERY_LIMIT"})

    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.nearby_search(1, 2, 100, "park", "key")

    assert "OVER_QUERY_LIMIT" in str(excinfo.value)


def test_nearby_search_network_error(patch_session):
    patch_session.exc = requests.ConnectionError("unreachable")

    with pytest.raises(google_places.GooglePlacesError):
        google_places.nearby_search(1, 2, 100, "park", "key")


def test_geocode_success(patch_session):
    patch_session.response = DummyResponse(
        payload={
            "status": "OK",
            "results": [
                {
                    "formatted_address": "100 Congress Ave, Austin, TX 78701, USA",
                    "geometry": {"location": {"lat": 30.26, "lng": -97.74}},
                }
            ],
        }
    )

    result = google_places.geocode("100 Congress Ave, Austin, TX 78701", "key")

    assert result.latitude == 30.26
    assert result.longitude == -97.74
    assert result.formatted_address.startswith("100 Congress Ave")
    url, params, _ = patch_session.calls[0]
    assert "geocode" in url
    assert params["address"] == "100 Congress Ave, Austin, TX 78701"


def test_geocode_failure_is_distinct_from_places_error(patch_session):
    patch_session.response = DummyResponse(payload={"status": "ZERO_RESULTS", "results": []})

    with pytest.raises(google_places.GeocodingError) as excinfo:
        google_places.geocode("nowhere", "key")

    assert excinfo.value.status == "ZERO_RESULTS"
    assert not isinstance(excinfo.value, google_places.GooglePlacesError)


def test_geocode_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=500)

    with pytest.raises(google_places.GeocodingError) as excinfo:
        google_places.geocode("somewhere", "key")

    assert excinfo.value.status == "REQUEST_FAILED"
