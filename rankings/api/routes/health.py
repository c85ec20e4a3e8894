"""Health routes - Database reachability and ingest freshness."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rankings.api.deps import get_db
from rankings.schemas.api import HealthResponse
from rankings.services.data_service import DataService

router = APIRouter(prefix="/health", tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("", response_model=HealthResponse)
def health(response: Response, db: Session = Depends(get_db)):
    """
    Database connectivity plus the outcome of the most recent ingest run.

    A `failed` last run does not make the service unhealthy; only an
    unreachable database returns 503.
    """
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        response.status_code = 503
        return HealthResponse(database=f"down: {e}", last_run_status=None)

    last_run = DataService(db).get_latest_run()
    if last_run is None:
        return HealthResponse(database="ok", last_run_status=None)
    return HealthResponse(
        database="ok",
        last_run_status=last_run.status,
        last_run_sport=last_run.sport,
        last_run_started_at=last_run.started_at,
    )


@router.get("/ready")
def readiness(response: Response, db: Session = Depends(get_db)):
    """Ready once the ranking store is queryable (database up, migrations applied)."""
    try:
        total = DataService(db).get_ranking_count()
    except SQLAlchemyError as e:
        response.status_code = 503
        return {"status": "not_ready", "error": str(e), "timestamp": _now()}
    return {"status": "ready", "rankings": total, "timestamp": _now()}
