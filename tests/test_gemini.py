import pytest
import requests

from localhero.vendors import gemini


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

    def post(self, url, params=None, json=None, timeout=None):
        self.calls.append((url, params, json, timeout))
        return self.response


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(gemini, "_SESSION", session)
    return session


def test_generate_text_success(patch_session):
    patch_session.response = DummyResponse(
        payload={
            "candidates": [{"content": {"parts": [{"text": "Hello "}, {"text": "Austin!"}]}}],
            "usageMetadata": {"totalTokenCount": 321},
        }
    )

    result = gemini.generate_text("system", "user", api_key="key", model="gemini-2.0-flash")

    assert result.text == "Hello Austin!"
    assert result.tokens_used == 321
    url, params, body, timeout = patch_session.calls[0]
    assert url.endswith("/gemini-2.0-flash:generateContent")
    assert params == {"key": "key"}
    assert body["contents"][0]["parts"][0]["text"] == "system\n\nuser"
    assert timeout == 30


def test_generate_text_requires_key(patch_session):
    with pytest.raises(gemini.GeminiError):
        gemini.generate_text("system", "user", api_key="", model="gemini-2.0-flash")
    assert patch_session.calls == []


def test_generate_text_http_error(patch_session):
    patch_session.response = DummyResponse(status_code=403)

    with pytest.raises(gemini.GeminiError):
        gemini.generate_text("system", "user", api_key="key", model="gemini-2.0-flash")


def test_generate_text_blocked_prompt(patch_session):
    patch_session.response = DummyResponse(payload={"promptFeedback": {"blockReason": "SAFETY"}})

    with pytest.raises(gemini.GeminiError) as excinfo:
        gemini.generate_text("system", "user", api_key="key", model="gemini-2.0-flash")

    assert "SAFETY" in str(excinfo.value)


def test_session_retries_server_errors():
    session = gemini._build_session()
    adapter = session.get_adapter("https://generativelanguage.googleapis.com")

    assert adapter.max_retries.total == 3
    assert 503 in adapter.max_retries.status_forcelist
