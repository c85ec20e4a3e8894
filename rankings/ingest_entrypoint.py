"""Ingest entrypoint - Standalone script for running one ingest invocation.

Usage:
    python -m rankings.ingest_entrypoint scrape                 # Markdown scrape, default sport
    python -m rankings.ingest_entrypoint scrape basketball      # Markdown scrape, one sport
    python -m rankings.ingest_entrypoint espn football 2026     # ESPN JSON API, sport and class year

The caller's bearer token is read from INGEST_TOKEN.
"""

import asyncio
import os
import sys

from rankings.core.config import settings
from rankings.core.db import SessionLocal
from rankings.core.errors import RankingsError
from rankings.core.logging import get_logger
from rankings.services.audit import AuditLogger
from rankings.services.auth import HttpAuthorizer
from rankings.services.ingest_service import PIPELINES, IngestSummary, RankingIngestService
from rankings.services.repository import SqlRankingRepository

logger = get_logger("ingest_entrypoint")


async def run_ingest_job(pipeline: str, sport: str, year: int | None) -> IngestSummary:
    """Run one ingest invocation against the configured database."""
    logger.info(f"Starting {pipeline} ingest job for sport: {sport}")
    with SessionLocal() as db:
        service = RankingIngestService(
            repository=SqlRankingRepository(db),
            authorizer=HttpAuthorizer(),
            audit=AuditLogger(db),
        )
        return await service.run(os.environ.get("INGEST_TOKEN"), sport, year, pipeline=pipeline)  # type: ignore[arg-type]


def main():
    """Main entry point for the ingest pipeline."""
    args = sys.argv[1:]
    if not args or args[0] not in PIPELINES:
        logger.error(f"Usage: ingest_entrypoint <{'|'.join(PIPELINES)}> [sport] [year]")
        sys.exit(2)

    pipeline = args[0]
    sport = args[1] if len(args) > 1 else settings.DEFAULT_SPORT
    try:
        year = int(args[2]) if len(args) > 2 else None
    except ValueError:
        logger.error(f"Invalid year: {args[2]}")
        sys.exit(2)

    try:
        summary = asyncio.run(run_ingest_job(pipeline, sport, year))
    except RankingsError as exc:
        logger.error(f"Ingest aborted: {exc}")
        sys.exit(1)

    logger.info(f"Ingest completed: {summary.to_response()}")

    if summary.status == "failed":
        sys.exit(1)

    return summary


if __name__ == "__main__":
    main()
