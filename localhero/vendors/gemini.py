"""Client utilities for the Gemini generateContent REST endpoint."""

import logging
from dataclasses import dataclass

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger(__name__)
_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


def _build_session() -> requests.Session:
    session = requests.Session()
    retries = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=(500, 502, 503, 504),
        allowed_methods=("POST",),
    )
    session.mount("https://", HTTPAdapter(max_retries=retries))
    return session


_SESSION = _build_session()


class GeminiError(RuntimeError):
    """Raised when text generation fails or returns no text."""


@dataclass(frozen=True)
class GenerationResult:
    text: str
    tokens_used: int


def generate_text(system_prompt: str, user_prompt: str, api_key: str, model: str) -> GenerationResult:
    if not api_key:
        raise GeminiError("GEMINI_API_KEY is required for content generation")

    body = {"contents": [{"role": "user", "parts": [{"text": f"{system_prompt}\n\n{user_prompt}"}]}]}
    try:
        response = _SESSION.post(
            f"{_BASE_URL}/{model}:generateContent",
            params={"key": api_key},
            json=body,
            timeout=30,
        )
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as exc:
        logger.error("Gemini request failed: %s", exc)
        raise GeminiError(f"Text generation request failed: {exc}") from exc

    candidates = payload.get("candidates") or []
    parts = candidates[0].get("content", {}).get("parts", []) if candidates else []
    text = "".join(part.get("text", "") for part in parts).strip()
    if not text:
        reason = payload.get("promptFeedback", {}).get("blockReason") or (candidates[0].get("finishReason") if candidates else None)
        logger.error("Gemini returned no text: reason=%s", reason)
        raise GeminiError(f"Text generation returned no content ({reason or 'empty response'})")

    tokens = payload.get("usageMetadata", {}).get("totalTokenCount") or 0
    return GenerationResult(text=text, tokens_used=int(tokens))
