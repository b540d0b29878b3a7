"""Citation directory checklist, audit score and recommendations."""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from localhero.core.errors import NotFoundError, ValidationError
from localhero.models import CITATION_STATUSES, Citation, CitationSummary, Directory, Recommendation
from localhero.services.access import require_location
from localhero.storage import citations as citation_store

logger = logging.getLogger(__name__)

CATALOG_VERSION = 1

DIRECTORY_CATALOG: Sequence[Directory] = (
    Directory("Google Business Profile", "https://business.google.com", 1),
    Directory("Yelp", "https://yelp.com", 1),
    Directory("Facebook Business", "https://facebook.com/business", 1),
    Directory("Apple Maps", "https://mapsconnect.apple.com", 1),
    Directory("Bing Places", "https://bingplaces.com", 2),
    Directory("Yellow Pages", "https://yellowpages.com", 2),
    Directory("BBB", "https://bbb.org", 2),
    Directory("Angi", "https://angi.com", 2),
    Directory("HomeAdvisor", "https://homeadvisor.com", 2),
    Directory("Thumbtack", "https://thumbtack.com", 2),
    Directory("Nextdoor", "https://nextdoor.com", 2),
    Directory("MapQuest", "https://mapquest.com", 3),
    Directory("Foursquare", "https://foursquare.com", 3),
    Directory("Manta", "https://manta.com", 3),
    Directory("Superpages", "https://superpages.com", 3),
)

PRIORITY_DIRECTORIES = tuple(directory.name for directory in DIRECTORY_CATALOG if directory.tier == 1)

PRESENCE_WEIGHT = 0.6
CONSISTENCY_WEIGHT = 0.4


def initialize_citations(location_id: int) -> List[Citation]:
    """Add an unchecked row for every catalog directory the location is not tracked on yet."""
    existing = citation_store.existing_directory_names(location_id)
    missing = [directory for directory in DIRECTORY_CATALOG if directory.name not in existing]
    if missing:
        citation_store.insert_citations(location_id, missing)
        logger.info("Initialised %d citations for location=%s", len(missing), location_id)
    return citation_store.list_citations(location_id)


def update_citation_status(
    citation_id: int,
    status: str,
    nap_consistent: Optional[bool] = None,
    user_id: Optional[int] = None,
    location_id: Optional[int] = None,
) -> Citation:
    """Record the result of checking one directory.

    ``nap_consistent`` is stored whenever it is given, whatever the status.
    """
    if status not in CITATION_STATUSES:
        raise ValidationError(f"Invalid status {status!r}; expected one of {', '.join(CITATION_STATUSES)}")
    if nap_consistent is not None and not isinstance(nap_consistent, bool):
        raise ValidationError("nap_consistent must be true or false")

    citation = citation_store.get_citation(citation_id)
    if citation is None or (location_id is not None and citation.location_id != location_id):
        raise NotFoundError(f"Citation {citation_id} not found")
    require_location(citation.location_id, user_id)

    updated = citation_store.update_status(citation_id, status, datetime.now(timezone.utc), nap_consistent)
    if updated is None:
        raise NotFoundError(f"Citation {citation_id} not found")
    logger.debug("Citation %s -> %s (nap_consistent=%s)", citation_id, status, nap_consistent)
    return updated


def summarize(location_id: int) -> CitationSummary:
    return citation_store.summary(location_id)


def calculate_score(summary: CitationSummary) -> int:
    """Weighted 0-100 score: 60% directory presence, 40% NAP consistency of found listings."""
    if summary.total <= 0:
        return 0
    presence = summary.found / summary.total * 100 * PRESENCE_WEIGHT
    consistency = summary.consistent / summary.found * 100 * CONSISTENCY_WEIGHT if summary.found > 0 else 0
    return int(math.floor(presence + consistency + 0.5))


def build_recommendations(summary: CitationSummary, citations: Sequence[Citation]) -> List[Recommendation]:
    recommendations = []

    if summary.missing > 0:
        recommendations.append(
            Recommendation(
                priority="high",
                message=f"You're missing from {summary.missing} {'directory' if summary.missing == 1 else 'directories'}. "
                "Add your business to increase visibility.",
                action="Add to missing directories",
            )
        )

    if summary.found > 0 and summary.consistent < summary.found:
        inconsistent = summary.found - summary.consistent
        recommendations.append(
            Recommendation(
                priority="high",
                message=f"{inconsistent} {'listing has' if inconsistent == 1 else 'listings have'} inconsistent NAP data. "
                "This hurts your local SEO.",
                action="Fix NAP consistency",
            )
        )

    if summary.unchecked > 0:
        subject = "directory hasn't" if summary.unchecked == 1 else "directories haven't"
        recommendations.append(
            Recommendation(
                priority="medium",
                message=f"{summary.unchecked} {subject} been checked. Review your presence.",
                action="Audit unchecked directories",
            )
        )

    missing_priority = [
        citation.directory_name
        for citation in citations
        if citation.directory_name in PRIORITY_DIRECTORIES and citation.status == "missing"
    ]
    if missing_priority:
        recommendations.append(
            Recommendation(
                priority="critical",
                message=f"You're missing from key directories: {', '.join(missing_priority)}",
                action="Add to priority directories immediately",
            )
        )

    return recommendations


def audit_report(location_id: int, user_id: Optional[int] = None) -> Dict[str, Any]:
    require_location(location_id, user_id)
    citations = citation_store.list_citations(location_id)
    summary = summarize(location_id)
    return {
        "summary": summary,
        "score": calculate_score(summary),
        "recommendations": build_recommendations(summary, citations),
        "missing_priority": [citation for citation in citations if citation.status == "missing"][:5],
        "citations": citations,
        "directories": list(DIRECTORY_CATALOG),
        "catalog_version": CATALOG_VERSION,
    }
