"""Persistence interface used by the ingest orchestrator.

The orchestrator only talks to ``RankingRepository``; the SQLAlchemy
implementation below is the production one, and tests substitute an
in-memory fake.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from rankings.core.logging import get_logger
from rankings.models.rankings import CONFLICT_COLUMNS, ExternalRanking
from rankings.models.runs import ScrapingRun
from rankings.schemas.candidate import CandidateRecord

log = get_logger("repository")

RunHandle = uuid.UUID

# Columns overwritten on conflict: every mapped column except identity ones
UPDATE_COLUMNS = tuple(
    name for name in CandidateRecord.model_fields if name not in CONFLICT_COLUMNS
)


@dataclass
class RunOutcome:
    """Terminal state of a run, written once by ``finalize_run``."""

    status: str
    sources_succeeded: List[str] = field(default_factory=list)
    athletes_scraped: int = 0
    athletes_imported: int = 0
    athletes_skipped: int = 0
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


class RankingRepository(ABC):
    """Ranking store + run history, as seen by the orchestrator."""

    @abstractmethod
    def create_run(
        self,
        sport: str,
        initiated_by: Optional[str],
        sources_attempted: Sequence[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RunHandle:
        """Insert a ``pending`` run and return its id."""

    @abstractmethod
    def finalize_run(self, handle: RunHandle, outcome: RunOutcome) -> None:
        """Move a run to its terminal state."""

    @abstractmethod
    def upsert_candidates(self, batch: Sequence[CandidateRecord]) -> int:
        """Insert-or-overwrite the batch; return the number of rows written."""


class SqlRankingRepository(RankingRepository):
    """SQLAlchemy implementation (PostgreSQL in production, SQLite in tests)."""

    def __init__(self, db: Session):
        self.db = db

    def create_run(
        self,
        sport: str,
        initiated_by: Optional[str],
        sources_attempted: Sequence[str],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> RunHandle:
        run = ScrapingRun(
            sport=sport,
            status="pending",
            initiated_by=initiated_by,
            sources_attempted=list(sources_attempted),
            sources_succeeded=[],
            athletes_scraped=0,
            athletes_imported=0,
            athletes_skipped=0,
            errors=[],
            meta=metadata or {},
        )
        self.db.add(run)
        self.db.commit()
        self.db.refresh(run)
        return run.id

    def finalize_run(self, handle: RunHandle, outcome: RunOutcome) -> None:
        run = self.db.get(ScrapingRun, handle)
        if run is None:
            log.warning(f"Run {handle} vanished before finalization")
            return

        run.status = outcome.status
        run.sources_succeeded = list(outcome.sources_succeeded)
        run.athletes_scraped = outcome.athletes_scraped
        run.athletes_imported = outcome.athletes_imported
        run.athletes_skipped = outcome.athletes_skipped
        run.errors = list(outcome.errors)
        run.meta = {**(run.meta or {}), **outcome.metadata}
        run.completed_at = datetime.now(timezone.utc)
        self.db.commit()

    def upsert_candidates(self, batch: Sequence[CandidateRecord]) -> int:
        """Bulk upsert (idempotent write); overwrites every column on conflict."""
        if not batch:
            return 0

        rows = [{"id": uuid.uuid4(), **candidate.to_row()} for candidate in batch]
        insert = self._insert_for_dialect()
        stmt = insert(ExternalRanking).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=list(CONFLICT_COLUMNS),
            set_={
                **{name: getattr(stmt.excluded, name) for name in UPDATE_COLUMNS},
                "last_updated": datetime.now(timezone.utc),
            },
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return len(rows)

    def _insert_for_dialect(self):
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert
        if dialect == "sqlite":
            return sqlite.insert
        raise NotImplementedError(f"Upsert not supported for dialect {dialect!r}")
