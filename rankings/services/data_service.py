"""Data Service - Query logic for the ranking store and run history."""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rankings.core.logging import get_logger
from rankings.models.rankings import ExternalRanking
from rankings.models.runs import ScrapingRun

log = get_logger("data_service")


class DataService:
    """Handles all read operations - reads from DB only, no writes."""

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Ranking Store Queries
    # -------------------------------------------------------------------------
    def _ranking_filters(
        self,
        stmt,
        sport: Optional[str] = None,
        source: Optional[str] = None,
        graduation_year: Optional[int] = None,
        state: Optional[str] = None,
        position: Optional[str] = None,
        name: Optional[str] = None,
    ):
        if sport:
            stmt = stmt.where(ExternalRanking.sport == sport)
        if source:
            stmt = stmt.where(ExternalRanking.source == source)
        if graduation_year:
            stmt = stmt.where(ExternalRanking.graduation_year == graduation_year)
        if state:
            stmt = stmt.where(ExternalRanking.state == state)
        if position:
            stmt = stmt.where(ExternalRanking.position == position.upper())
        if name:
            stmt = stmt.where(ExternalRanking.athlete_name.ilike(f"%{name}%"))
        return stmt

    def get_rankings(
        self,
        limit: int = 100,
        offset: int = 0,
        **filters: Any,
    ) -> List[ExternalRanking]:
        """Get ranking rows ordered by overall rank (unranked last)."""
        stmt = self._ranking_filters(select(ExternalRanking), **filters)
        stmt = stmt.order_by(
            ExternalRanking.overall_rank.asc().nullslast(),
            ExternalRanking.athlete_name.asc(),
        )
        stmt = stmt.limit(limit).offset(offset)
        return list(self.db.execute(stmt).scalars().all())

    def get_ranking_count(self, **filters: Any) -> int:
        stmt = self._ranking_filters(select(func.count()).select_from(ExternalRanking), **filters)
        return self.db.execute(stmt).scalar() or 0

    # -------------------------------------------------------------------------
    # Run History Queries
    # -------------------------------------------------------------------------
    def get_runs(
        self,
        sport: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 10,
    ) -> List[ScrapingRun]:
        """Get recent runs with optional filtering."""
        stmt = select(ScrapingRun)

        if sport:
            stmt = stmt.where(ScrapingRun.sport == sport)
        if status:
            stmt = stmt.where(ScrapingRun.status == status)

        stmt = stmt.order_by(ScrapingRun.started_at.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def get_run(self, run_id: str) -> Optional[ScrapingRun]:
        try:
            uid = uuid.UUID(run_id)
        except ValueError:
            return None
        return self.db.get(ScrapingRun, uid)

    def get_latest_run(self, sport: Optional[str] = None) -> Optional[ScrapingRun]:
        runs = self.get_runs(sport=sport, limit=1)
        return runs[0] if runs else None

    def get_sources_summary(self) -> List[Dict[str, Any]]:
        """Row count and freshest update per source tag."""
        stmt = (
            select(
                ExternalRanking.source,
                func.count(),
                func.max(ExternalRanking.last_updated),
            )
            .group_by(ExternalRanking.source)
            .order_by(ExternalRanking.source)
        )
        return [
            {"source": source, "rows": count, "last_updated": last_updated}
            for source, count, last_updated in self.db.execute(stmt).all()
        ]
