"""Ingest routes - Trigger ranking ingestion for one sport."""

from typing import Optional

from fastapi import APIRouter, Depends

from rankings.api.deps import get_bearer_token, get_ingest_service
from rankings.core.logging import get_logger
from rankings.schemas.api import ErrorResponse, IngestRequest, IngestResponse
from rankings.services.ingest_service import RankingIngestService

router = APIRouter(prefix="/ingest", tags=["ingest"])
log = get_logger("ingest_routes")

ERROR_RESPONSES = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post("/scrape", response_model=IngestResponse, responses=ERROR_RESPONSES)
async def scrape_external_rankings(
    request: Optional[IngestRequest] = None,
    token: Optional[str] = Depends(get_bearer_token),
    service: RankingIngestService = Depends(get_ingest_service),
):
    """
    Scrape MaxPreps, 247Sports and the ESPN rankings page for one sport.

    Sources run concurrently and are isolated from each other: a failing
    source shows up in `errors` while the rest still import. Requires an
    admin bearer token.
    """
    request = request or IngestRequest()
    log.info(f"Scrape triggered for sport: {request.sport}")
    summary = await service.run(token, request.sport, request.year, pipeline="scrape")
    return IngestResponse(**summary.to_response())


@router.post("/espn", response_model=IngestResponse, responses=ERROR_RESPONSES)
async def fetch_espn_rankings(
    request: Optional[IngestRequest] = None,
    token: Optional[str] = Depends(get_bearer_token),
    service: RankingIngestService = Depends(get_ingest_service),
):
    """
    Pull ESPN recruiting rankings (overall + state endpoints) from its JSON API.

    Requires an admin bearer token.
    """
    request = request or IngestRequest()
    log.info(f"ESPN fetch triggered for sport: {request.sport} year: {request.year}")
    summary = await service.run(token, request.sport, request.year, pipeline="espn")
    return IngestResponse(**summary.to_response())
