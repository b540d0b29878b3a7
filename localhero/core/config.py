"""Application configuration helpers."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    google_api_key: str
    gemini_api_key: str
    database_url: str
    gemini_model: str = "gemini-2.0-flash"
    worker_port: int = 9000
    places_request_delay: float = 0.1
    default_radius_miles: float = 5.0
    cache_replace_attempts: int = 2


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    google_api_key = os.getenv("GOOGLE_API_KEY", "")
    gemini_api_key = os.getenv("GEMINI_API_KEY", "")
    database_url = os.getenv("DATABASE_URL", "")
    gemini_model = os.getenv("GEMINI_MODEL", "").strip() or "gemini-2.0-flash"
    worker_port = int(os.getenv("WORKER_PORT", "9000"))
    places_request_delay = float(os.getenv("PLACES_REQUEST_DELAY", "0.1"))
    default_radius_miles = float(os.getenv("DEFAULT_RADIUS_MILES", "5"))
    cache_replace_attempts = max(1, int(os.getenv("CACHE_REPLACE_ATTEMPTS", "2")))

    if not database_url:
        logger.warning("DATABASE_URL is not set; database operations will fail.")
    if not google_api_key:
        logger.warning("GOOGLE_API_KEY is not configured; geocoding and Places requests will fail.")
    if not gemini_api_key:
        logger.warning("GEMINI_API_KEY is not configured; content generation will fail.")

    return Settings(
        google_api_key=google_api_key,
        gemini_api_key=gemini_api_key,
        database_url=database_url,
        gemini_model=gemini_model,
        worker_port=worker_port,
        places_request_delay=places_request_delay,
        default_radius_miles=default_radius_miles,
        cache_replace_attempts=cache_replace_attempts,
    )
