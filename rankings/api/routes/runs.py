"""Run history routes - ingest observability."""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from rankings.api.deps import get_db
from rankings.models.runs import ScrapingRun
from rankings.schemas.api import RunOut
from rankings.services.data_service import DataService

router = APIRouter(prefix="/runs", tags=["runs"])


def _run_out(run: ScrapingRun) -> RunOut:
    return RunOut(
        run_id=str(run.id),
        sport=run.sport,
        status=run.status,
        initiated_by=run.initiated_by,
        sources_attempted=run.sources_attempted or [],
        sources_succeeded=run.sources_succeeded or [],
        athletes_scraped=run.athletes_scraped,
        athletes_imported=run.athletes_imported,
        athletes_skipped=run.athletes_skipped,
        errors=run.errors or [],
        metadata=run.meta,
        started_at=run.started_at,
        completed_at=run.completed_at,
    )


@router.get("", response_model=list[RunOut])
def get_runs(
    sport: Optional[str] = Query(None, description="Filter by sport"),
    status: Optional[Literal["pending", "completed", "failed"]] = Query(None, description="Filter by status"),
    limit: int = Query(10, ge=1, le=50, description="Number of runs to return"),
    db: Session = Depends(get_db),
):
    """
    Get recent ingest runs.

    Shows per-run source lists, scraped/imported/skipped counts and the
    error strings collected from failing sources.
    """
    service = DataService(db)
    return [_run_out(run) for run in service.get_runs(sport=sport, status=status, limit=limit)]


@router.get("/{run_id}", response_model=RunOut)
def get_run(run_id: str, db: Session = Depends(get_db)):
    run = DataService(db).get_run(run_id)
    if not run:
        raise HTTPException(status_code=404, detail=f"Run '{run_id}' not found")
    return _run_out(run)
