"""Combine locations and sampled landmarks into generated, persisted content."""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from localhero.core.config import get_settings
from localhero.core.errors import NotAuthorizedError, NotFoundError, NoLandmarksError, ValidationError
from localhero.etl.transform import parse_keywords
from localhero.models import CONTENT_STATUSES, Content, GenerationOutcome, Review
from localhero.services import landmark_cache, prompts
from localhero.services.access import require_location
from localhero.storage import content as content_store
from localhero.vendors import gemini

logger = logging.getLogger(__name__)

GBP_POST_LANDMARKS = 5
GBP_POST_MENTIONS = 3
LOCATION_PAGE_LANDMARKS = 8
SOCIAL_POST_LANDMARKS = 5
MAX_SOCIAL_POSTS = 10


def _generate(prompt: prompts.Prompt) -> gemini.GenerationResult:
    settings = get_settings()
    system_prompt, user_prompt = prompt
    return gemini.generate_text(system_prompt, user_prompt, api_key=settings.gemini_api_key, model=settings.gemini_model)


def _require_landmarks(location_id: int, n: int):
    landmarks = landmark_cache.sample_landmarks(location_id, n)
    if not landmarks:
        raise NoLandmarksError("No landmarks cached. Please refresh landmarks first.")
    return landmarks


def _validate_rating(rating) -> int:
    # Whole stars only; bool is an int subclass.
    if isinstance(rating, bool) or (isinstance(rating, float) and not rating.is_integer()):
        raise ValidationError("rating must be a whole number between 1 and 5")
    try:
        value = int(rating)
    except (TypeError, ValueError):
        raise ValidationError("rating must be a number between 1 and 5") from None
    if not 1 <= value <= 5:
        raise ValidationError("rating must be a number between 1 and 5")
    return value


def generate_gbp_post(location_id: int, tone: str = "professional", user_id: Optional[int] = None) -> GenerationOutcome:
    location = require_location(location_id, user_id)
    landmarks = _require_landmarks(location_id, GBP_POST_LANDMARKS)

    result = _generate(
        prompts.gbp_post_prompt(
            location.business_name,
            location.service_type,
            location.city,
            location.state,
            landmarks,
            parse_keywords(location.keywords),
            tone or "professional",
        )
    )
    content = content_store.create_content(
        location_id,
        "gbp_post",
        title=f"GBP Post - {date.today().isoformat()}",
        body=result.text,
        landmarks_used=prompts.landmark_names(landmarks, GBP_POST_MENTIONS),
    )
    logger.info("Generated GBP post %s for location=%s (%d tokens)", content.id, location_id, result.tokens_used)
    return GenerationOutcome(content=content, tokens_used=result.tokens_used)


def generate_location_page(location_id: int, user_id: Optional[int] = None) -> GenerationOutcome:
    location = require_location(location_id, user_id)
    landmarks = _require_landmarks(location_id, LOCATION_PAGE_LANDMARKS)

    result = _generate(
        prompts.location_page_prompt(
            location.business_name,
            location.service_type,
            location.city,
            location.state,
            location.zip_code,
            landmarks,
            parse_keywords(location.keywords),
        )
    )
    content = content_store.create_content(
        location_id,
        "location_page",
        title=f"{location.service_type} in {location.city}, {location.state}",
        body=result.text,
        landmarks_used=prompts.landmark_names(landmarks),
    )
    logger.info("Generated location page %s for location=%s (%d tokens)", content.id, location_id, result.tokens_used)
    return GenerationOutcome(content=content, tokens_used=result.tokens_used)


def generate_social_posts(location_id: int, count: int = 3, user_id: Optional[int] = None) -> GenerationOutcome:
    if not 1 <= count <= MAX_SOCIAL_POSTS:
        raise ValidationError(f"count must be between 1 and {MAX_SOCIAL_POSTS}")
    location = require_location(location_id, user_id)
    # Social posts still work without landmarks; the prompt says none are available.
    landmarks = landmark_cache.sample_landmarks(location_id, SOCIAL_POST_LANDMARKS)

    result = _generate(
        prompts.social_posts_prompt(location.business_name, location.service_type, location.city, landmarks, count)
    )
    content = content_store.create_content(
        location_id,
        "social_posts",
        title=f"Social Posts - {date.today().isoformat()}",
        body=result.text,
        landmarks_used=prompts.landmark_names(landmarks),
    )
    return GenerationOutcome(content=content, tokens_used=result.tokens_used)


def generate_review_response(
    location_id: int,
    review_text: Optional[str] = None,
    rating: Optional[int] = None,
    reviewer_name: Optional[str] = None,
    tone: str = "professional",
    review_id: Optional[int] = None,
    user_id: Optional[int] = None,
) -> GenerationOutcome:
    """Draft a reply to a review.

    With ``review_id`` the stored review supplies the text and rating, and the
    reply is saved on it.
    """
    location = require_location(location_id, user_id)

    if review_id is not None:
        review = content_store.get_review(review_id)
        if review is None:
            raise NotFoundError(f"Review {review_id} not found")
        if review.location_id != location_id:
            raise NotAuthorizedError("Review does not belong to this location")
        review_text = review_text or review.review_text
        rating = rating if rating is not None else review.rating
        reviewer_name = reviewer_name or review.reviewer_name

    if not review_text or not review_text.strip():
        raise ValidationError("review_text is required")
    rating = _validate_rating(rating)

    result = _generate(
        prompts.review_response_prompt(
            location.business_name,
            location.service_type,
            reviewer_name,
            rating,
            review_text,
            tone or "professional",
        )
    )
    if review_id is not None:
        content_store.add_review_response(review_id, result.text, datetime.now(timezone.utc))
    return GenerationOutcome(response=result.text, tokens_used=result.tokens_used)


def set_content_status(location_id: int, content_id: int, status: str, user_id: Optional[int] = None) -> Content:
    if status not in CONTENT_STATUSES:
        raise ValidationError(f"Invalid status {status!r}; expected one of {', '.join(CONTENT_STATUSES)}")
    require_location(location_id, user_id)
    content = content_store.update_content_status(content_id, location_id, status)
    if content is None:
        raise NotFoundError(f"Content {content_id} not found")
    return content


def add_review(
    location_id: int,
    review_text: str,
    rating,
    reviewer_name: Optional[str] = None,
    user_id: Optional[int] = None,
) -> Review:
    require_location(location_id, user_id)
    if not review_text or not review_text.strip():
        raise ValidationError("review_text is required")
    return content_store.create_review(location_id, reviewer_name, _validate_rating(rating), review_text.strip())
