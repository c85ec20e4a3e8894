"""Ranking routes - Read access to the canonical ranking store."""

import time
import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from rankings.api.deps import get_db
from rankings.schemas.api import RankingOut, RankingsResponse
from rankings.services.data_service import DataService

router = APIRouter(prefix="/rankings", tags=["rankings"])

SourceFilter = Literal["maxpreps", "247sports", "espn-markdown", "espn-api"]


@router.get("", response_model=RankingsResponse)
def get_rankings(
    sport: Optional[str] = Query(None, description="Filter by sport"),
    source: Optional[SourceFilter] = Query(None, description="Filter by source tag"),
    graduation_year: Optional[int] = Query(None, ge=1900, le=2100, description="Filter by class year"),
    state: Optional[str] = Query(None, description="Filter by state"),
    position: Optional[str] = Query(None, description="Filter by position abbreviation"),
    name: Optional[str] = Query(None, description="Filter by athlete name (case-insensitive partial match)"),
    limit: int = Query(50, ge=1, le=500, description="Number of records to return (max 500)"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    db: Session = Depends(get_db),
):
    """
    Get ranking rows ordered by overall rank.

    Includes request metadata (request_id, latency_ms) and the total number
    of rows matching the filters.
    """
    start = time.perf_counter()
    request_id = str(uuid.uuid4())

    filters = {
        "sport": sport,
        "source": source,
        "graduation_year": graduation_year,
        "state": state,
        "position": position,
        "name": name,
    }
    service = DataService(db)
    results = service.get_rankings(limit=limit, offset=offset, **filters)
    total_count = service.get_ranking_count(**filters)

    latency_ms = int((time.perf_counter() - start) * 1000)

    return RankingsResponse(
        request_id=request_id,
        api_latency_ms=latency_ms,
        total_count=total_count,
        data=[RankingOut.model_validate(r) for r in results],
    )


@router.get("/count")
def get_ranking_count(
    sport: Optional[str] = Query(None, description="Filter by sport"),
    source: Optional[SourceFilter] = Query(None, description="Filter by source tag"),
    graduation_year: Optional[int] = Query(None, ge=1900, le=2100, description="Filter by class year"),
    state: Optional[str] = Query(None, description="Filter by state"),
    position: Optional[str] = Query(None, description="Filter by position abbreviation"),
    db: Session = Depends(get_db),
):
    """Get total count of ranking rows."""
    service = DataService(db)
    count = service.get_ranking_count(
        sport=sport, source=source, graduation_year=graduation_year, state=state, position=position
    )
    return {"count": count, "sport": sport, "source": source}


@router.get("/sources")
def get_sources_summary(db: Session = Depends(get_db)):
    """Row count and last update per source tag."""
    return DataService(db).get_sources_summary()
