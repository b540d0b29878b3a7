"""Prompt builders for location-aware content generation."""

from typing import Iterable, List, Optional, Sequence, Tuple

from localhero.models import Landmark

Prompt = Tuple[str, str]

NO_LANDMARKS = "No specific landmarks available."


def format_landmark_mentions(landmarks: Optional[Sequence[Landmark]]) -> str:
    if not landmarks:
        return NO_LANDMARKS
    lines = []
    for landmark in landmarks:
        line = f"- {landmark.name} ({landmark.type})"
        if landmark.address:
            line += f" - near {landmark.address}"
        lines.append(line)
    return "\n".join(lines)


def review_sentiment(rating: int) -> str:
    if rating >= 4:
        return "positive"
    if rating >= 3:
        return "neutral"
    return "negative"


def gbp_post_prompt(
    business_name: str,
    service_type: str,
    city: str,
    state: str,
    landmarks: Sequence[Landmark],
    keywords: Iterable[str],
    tone: str,
) -> Prompt:
    system = "You are an expert local SEO copywriter who creates authentic, location-specific content."
    user = f"""You are a local SEO expert writing a Google Business Profile post for a {service_type} business.

Business: {business_name}
Location: {city}, {state}
Keywords to naturally include: {', '.join(keywords) or service_type}
Tone: {tone}

Local landmarks and points of interest to mention naturally:
{format_landmark_mentions(landmarks)}

Write a compelling 150-200 word Google Business Profile post that:
1. Highlights the business's service
2. Naturally mentions 2-3 of the local landmarks to establish local relevance
3. Includes a call-to-action
4. Feels authentic and local, not generic

The post should feel like it was written by someone who actually knows the area. Do NOT use phrases like "in your area" or "local community" - be specific with the landmarks."""
    return system, user


def location_page_prompt(
    business_name: str,
    service_type: str,
    city: str,
    state: str,
    zip_code: str,
    landmarks: Sequence[Landmark],
    keywords: Iterable[str],
) -> Prompt:
    system = (
        "You are an expert local SEO copywriter who creates authentic, location-specific content "
        "that ranks well in Google Map Pack."
    )
    user = f"""You are a local SEO expert writing a location-specific service page.

Business: {business_name}
Service: {service_type}
Location: {city}, {state} {zip_code}
Target Keywords: {', '.join(keywords) or f'{service_type} {city}'}

Local landmarks to reference naturally:
{format_landmark_mentions(landmarks)}

Write an SEO-optimized location page (400-500 words) that includes:
1. H1: "{service_type} in {city}, {state}"
2. Introduction establishing local presence
3. Services section with local context
4. "Areas We Serve" section mentioning specific neighborhoods/landmarks
5. Why choose us section
6. Call-to-action

Make the content hyper-local by referencing specific landmarks, schools, and neighborhoods. This should NOT read like generic content with the city name inserted."""
    return system, user


_SENTIMENT_GUIDANCE = {
    "positive": "Expresses genuine gratitude and mentions a specific point from their review",
    "neutral": "Acknowledges their feedback and offers to improve",
    "negative": "Apologizes sincerely, takes responsibility, and offers to make it right",
}


def review_response_prompt(
    business_name: str,
    service_type: str,
    reviewer_name: Optional[str],
    rating: int,
    review_text: str,
    tone: str,
) -> Prompt:
    sentiment = review_sentiment(rating)
    system = "You are a business owner who personally responds to every review with authenticity and care."
    user = f"""You are responding to a customer review for {business_name}, a {service_type} business.

Reviewer: {reviewer_name or 'Customer'}
Rating: {rating}/5 stars
Review: "{review_text}"
Sentiment: {sentiment}
Desired Tone: {tone}

Write a personalized response (50-100 words) that:
1. Thanks them by name if provided
2. {_SENTIMENT_GUIDANCE[sentiment]}
3. Mentions the specific service if relevant (e.g., "Glad we could fix your {service_type.lower()}...")
4. Invites them back or to contact you directly

Do NOT use generic phrases like "valued customer" - make it personal and authentic."""
    return system, user


def social_posts_prompt(
    business_name: str,
    service_type: str,
    city: str,
    landmarks: Sequence[Landmark],
    count: int,
) -> Prompt:
    system = "You are a social media expert for local businesses."
    user = f"""Create {count} unique social media posts for {business_name}, a {service_type} in {city}.

Local landmarks to reference:
{format_landmark_mentions(landmarks)}

For each post:
- Keep it under 280 characters
- Include a local reference
- Include a call-to-action
- Make each post distinct in approach (tip, promotion, community mention, etc.)

Format as a numbered list."""
    return system, user


def landmark_names(landmarks: Sequence[Landmark], limit: Optional[int] = None) -> List[str]:
    selected = landmarks if limit is None else landmarks[:limit]
    return [landmark.name for landmark in selected]
