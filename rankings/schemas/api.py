from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from rankings.core.config import settings


class IngestRequest(BaseModel):
    sport: str = Field(default=settings.DEFAULT_SPORT, min_length=1)
    year: Optional[int] = Field(default=None, ge=1900, le=2100)


class IngestResponse(BaseModel):
    success: bool
    athletes_imported: int
    by_source: dict[str, int] | None = None
    errors: list[str] | None = None
    run_id: str | None = None


class ErrorResponse(BaseModel):
    error: str


class RankingOut(BaseModel):
    """One row of the ranking store."""

    source: str
    athlete_name: str
    sport: str
    graduation_year: int
    position: Optional[str] = None
    state: Optional[str] = None
    high_school: Optional[str] = None
    overall_rank: Optional[int] = None
    position_rank: Optional[int] = None
    state_rank: Optional[int] = None
    rating: Optional[float] = None
    profile_url: Optional[str] = None
    image_url: Optional[str] = None
    committed_school_name: Optional[str] = None
    committed_school_logo_url: Optional[str] = None
    commitment_date: Optional[str] = None
    height_feet: Optional[int] = None
    height_inches: Optional[int] = None
    weight: Optional[int] = None
    last_updated: Optional[datetime] = None

    class Config:
        from_attributes = True


class RankingsResponse(BaseModel):
    request_id: str
    api_latency_ms: int
    total_count: int
    data: list[RankingOut]


class RunOut(BaseModel):
    run_id: str
    sport: str
    status: str
    initiated_by: str | None = None
    sources_attempted: list[str]
    sources_succeeded: list[str]
    athletes_scraped: int
    athletes_imported: int
    athletes_skipped: int
    errors: list[str]
    metadata: dict | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None


class HealthResponse(BaseModel):
    database: str
    last_run_status: str | None
    last_run_sport: str | None = None
    last_run_started_at: datetime | None = None
