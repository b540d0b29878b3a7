"""CLI job to refresh the cached landmarks of one location."""

import argparse
import logging
from typing import Optional

from localhero.core.db import init_pool, init_schema
from localhero.models import RefreshResult
from localhero.services import citation_audit, landmark_cache

logger = logging.getLogger(__name__)


def run_refresh_job(*, location_id: int, init_tables: bool = False, init_citations: bool = False) -> RefreshResult:
    init_pool()
    if init_tables:
        init_schema()

    result = landmark_cache.refresh_landmarks(location_id)
    for place_type, count in result.stats["by_type"].items():
        logger.info("  %-15s %d", place_type, count)
    for error in result.errors:
        logger.warning("Category %s failed: %s", error.type, error.error)
    if not result.replaced:
        logger.warning("Landmark cache for location=%s was left unchanged", location_id)
    logger.info("Location %s now has %d cached landmarks", location_id, result.stats["total"])

    if init_citations:
        citations = citation_audit.initialize_citations(location_id)
        logger.info("Location %s tracks %d citation directories", location_id, len(citations))
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Refresh Google Places landmarks for a location")
    parser.add_argument("--location-id", dest="location_id", type=int, required=True, help="Location to refresh")
    parser.add_argument("--init-schema", dest="init_tables", action="store_true", help="Create missing tables first")
    parser.add_argument(
        "--init-citations",
        dest="init_citations",
        action="store_true",
        help="Also make sure the citation checklist exists for the location",
    )
    return parser


def main(argv: Optional[list] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    run_refresh_job(
        location_id=args.location_id,
        init_tables=args.init_tables,
        init_citations=args.init_citations,
    )


if __name__ == "__main__":
    main()
