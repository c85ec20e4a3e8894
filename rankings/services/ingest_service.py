"""End-to-end ranking ingest: fetch, extract, dedupe, upsert, record the run."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence

import httpx

from rankings.core.errors import PersistenceError
from rankings.core.logging import get_logger, run_logger
from rankings.ingestion.base import BaseSource, SourceResult
from rankings.ingestion.dedup import deduplicate
from rankings.ingestion.espn_source import build_espn_sources
from rankings.ingestion.runner import IngestionRunner
from rankings.ingestion.scraped_source import build_scraped_sources
from rankings.services.audit import AuditLogger
from rankings.services.auth import Authorizer, require_role
from rankings.services.repository import RankingRepository, RunHandle, RunOutcome

log = get_logger("ingest_service")

PipelineName = Literal["scrape", "espn"]


@dataclass(frozen=True)
class Pipeline:
    audit_action: str
    build_sources: Callable[[str, int], List[BaseSource]]


PIPELINES: Dict[str, Pipeline] = {
    "scrape": Pipeline("scrape_external_rankings", build_scraped_sources),
    "espn": Pipeline("fetch_espn_rankings", build_espn_sources),
}


@dataclass
class IngestSummary:
    run_id: Optional[RunHandle]
    status: str
    sport: str
    year: int
    athletes_scraped: int = 0
    athletes_imported: int = 0
    athletes_skipped: int = 0
    by_source: Dict[str, int] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "athletes_imported": self.athletes_imported,
            "by_source": self.by_source,
            "errors": self.errors or None,
            "run_id": str(self.run_id) if self.run_id else None,
        }


def current_year() -> int:
    return datetime.now(timezone.utc).year


def resolve_status(errors: Sequence[str], imported: int) -> str:
    """A run fails only when something went wrong and nothing was imported."""
    return "failed" if errors and imported == 0 else "completed"


class RankingIngestService:
    """Orchestrates one invocation for one sport (and optionally one year).

    Responsibilities:
    - Authorize the caller before any run record exists
    - Fan out to every configured source and isolate their failures
    - Deduplicate the whole batch once, then upsert it once
    - Finalize the run record and emit the audit entry
    """

    def __init__(
        self,
        repository: RankingRepository,
        authorizer: Authorizer,
        audit: Optional[AuditLogger] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.repository = repository
        self.authorizer = authorizer
        self.audit = audit
        self.client = client

    async def run(
        self,
        token: Optional[str],
        sport: str,
        year: Optional[int] = None,
        pipeline: PipelineName = "scrape",
        sources: Optional[Sequence[BaseSource]] = None,
    ) -> IngestSummary:
        principal = require_role(await self.authorizer.authorize(token))

        year = year or current_year()
        config = PIPELINES[pipeline]
        if sources is None:
            sources = config.build_sources(sport, year)

        names = [source.name for source in sources]
        log.info(f"Starting {pipeline} ingest | sport={sport} year={year} sources={names}")

        run_metadata = {"year": year, "pipeline": pipeline, "endpoints_tried": len(names)}
        handle = self._open_run(sport, principal.user_id, names, run_metadata)
        run_log = run_logger("ingest_service", handle, sport)

        results = await IngestionRunner(sources, client=self.client).run()
        errors = [str(result.error) for result in results if not result.ok]
        candidates = [candidate for result in results for candidate in result.candidates]
        unique = deduplicate(candidates)
        run_log.info(f"Deduplicated {len(candidates)} candidates into {len(unique)}")

        summary = IngestSummary(
            run_id=handle,
            status="pending",
            sport=sport,
            year=year,
            athletes_scraped=len(candidates),
            athletes_skipped=len(candidates) - len(unique),
            errors=errors,
        )

        try:
            imported = self.repository.upsert_candidates(unique)
        except Exception as exc:  # noqa: BLE001
            run_log.error(f"Upsert failed: {exc}")
            summary.errors.append(f"Database: {exc}")
            summary.status = "failed"
            self._close_run(summary, results)
            self._audit(config.audit_action, summary, principal.user_id)
            raise PersistenceError(f"Database: {exc}") from exc

        summary.athletes_imported = imported
        summary.by_source = dict(Counter(candidate.source for candidate in unique))
        summary.status = resolve_status(summary.errors, imported)

        self._close_run(summary, results)
        self._audit(config.audit_action, summary, principal.user_id)

        run_log.info(
            f"Ingest finished | status={summary.status} scraped={summary.athletes_scraped} "
            f"imported={imported} skipped={summary.athletes_skipped} errors={len(summary.errors)}"
        )
        return summary

    # -------------------------------------------------------------------------
    # Run recording
    # -------------------------------------------------------------------------
    def _open_run(self, sport: str, initiated_by: str, names: List[str], metadata: Dict[str, Any]) -> Optional[RunHandle]:
        try:
            return self.repository.create_run(sport, initiated_by, names, metadata)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Failed to create run record: {exc}")
            return None

    def _close_run(self, summary: IngestSummary, results: Sequence[SourceResult]) -> None:
        if summary.run_id is None:
            return
        outcome = RunOutcome(
            status=summary.status,
            sources_succeeded=[result.name for result in results if result.ok],
            athletes_scraped=summary.athletes_scraped,
            athletes_imported=summary.athletes_imported,
            athletes_skipped=summary.athletes_skipped,
            errors=list(summary.errors),
            metadata={"records_discarded": sum(result.discarded for result in results)},
        )
        try:
            self.repository.finalize_run(summary.run_id, outcome)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Failed to finalize run {summary.run_id}: {exc}")

    def _audit(self, action: str, summary: IngestSummary, actor: str) -> None:
        if self.audit is None:
            return
        self.audit.log(
            action,
            {
                "sport": summary.sport,
                "year": summary.year,
                "athletes_count": summary.athletes_imported,
                "errors": summary.errors or None,
                "run_id": str(summary.run_id) if summary.run_id else None,
            },
            actor=actor,
        )
