"""Shared fixtures: in-memory repository, fake authorizer, canned sources, SQLite store."""

import uuid
from typing import Any, Dict, List, Optional, Sequence

import httpx
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rankings.core.errors import AuthorizationError
from rankings.ingestion.base import BaseSource, ExtractionResult
from rankings.models import Base
from rankings.schemas.candidate import CandidateRecord
from rankings.services.auth import Authorizer, Principal
from rankings.services.repository import RankingRepository, RunHandle, RunOutcome

ADMIN_TOKEN = "admin-token"
VIEWER_TOKEN = "viewer-token"


def make_candidate(name: str = "John Smith", source: str = "maxpreps", **overrides: Any) -> CandidateRecord:
    fields = {
        "source": source,
        "athlete_name": name,
        "sport": "football",
        "graduation_year": 2026,
    }
    fields.update(overrides)
    return CandidateRecord(**fields)


class FakeRepository(RankingRepository):
    """In-memory ranking store and run history."""

    def __init__(self, fail_upsert: bool = False, fail_create: bool = False):
        self.fail_upsert = fail_upsert
        self.fail_create = fail_create
        self.runs: Dict[RunHandle, Dict[str, Any]] = {}
        self.rows: Dict[tuple, CandidateRecord] = {}
        self.upsert_calls = 0

    def create_run(self, sport, initiated_by, sources_attempted, metadata=None) -> RunHandle:
        if self.fail_create:
            raise RuntimeError("run table unavailable")
        handle = uuid.uuid4()
        self.runs[handle] = {
            "sport": sport,
            "status": "pending",
            "initiated_by": initiated_by,
            "sources_attempted": list(sources_attempted),
            "metadata": dict(metadata or {}),
        }
        return handle

    def finalize_run(self, handle: RunHandle, outcome: RunOutcome) -> None:
        run = self.runs[handle]
        run.update(
            status=outcome.status,
            sources_succeeded=outcome.sources_succeeded,
            athletes_scraped=outcome.athletes_scraped,
            athletes_imported=outcome.athletes_imported,
            athletes_skipped=outcome.athletes_skipped,
            errors=outcome.errors,
        )
        run["metadata"].update(outcome.metadata)

    def upsert_candidates(self, batch: Sequence[CandidateRecord]) -> int:
        self.upsert_calls += 1
        if self.fail_upsert:
            raise RuntimeError("connection reset")
        for candidate in batch:
            key = (candidate.source, candidate.athlete_name, candidate.sport, candidate.graduation_year)
            self.rows[key] = candidate
        return len(batch)


class FakeAuthorizer(Authorizer):
    """Admin for ADMIN_TOKEN, viewer for VIEWER_TOKEN, anything else rejected."""

    def __init__(self):
        self.calls: List[Optional[str]] = []

    async def authorize(self, token: Optional[str]) -> Principal:
        self.calls.append(token)
        if not token:
            raise AuthorizationError("Missing authorization header")
        if token == ADMIN_TOKEN:
            return Principal(user_id="user-1", role="admin")
        if token == VIEWER_TOKEN:
            return Principal(user_id="user-2", role="viewer")
        raise AuthorizationError("Unauthorized")


class RecordingAudit:
    def __init__(self):
        self.entries: List[Dict[str, Any]] = []

    def log(self, action, metadata, actor=None, resource_type="external_rankings"):
        self.entries.append({"action": action, "metadata": metadata, "actor": actor})


class StaticSource(BaseSource):
    """Source that returns canned candidates or fails with a canned message."""

    def __init__(
        self,
        name: str,
        candidates: Sequence[CandidateRecord] = (),
        error: Optional[str] = None,
        discarded: int = 0,
        source: str = "maxpreps",
    ):
        super().__init__("football", 2026)
        self.name = name
        self.source = source
        self.candidates = list(candidates)
        self.error = error
        self.discarded = discarded

    async def fetch(self, client: httpx.AsyncClient) -> Any:
        if self.error:
            raise self.fail(self.error)
        return self.candidates

    def extract(self, raw: Any) -> ExtractionResult:
        return ExtractionResult(candidates=list(raw), discarded=self.discarded)


class ExplodingSource(StaticSource):
    """Source whose extractor raises something unexpected."""

    def extract(self, raw: Any) -> ExtractionResult:
        raise KeyError("athletes")


def failing(name: str, message: str = "HTTP 500 Internal Server Error") -> StaticSource:
    return StaticSource(name, error=message)


@pytest.fixture
def fake_repository():
    return FakeRepository()


@pytest.fixture
def fake_authorizer():
    return FakeAuthorizer()


@pytest.fixture
def audit():
    return RecordingAudit()


@pytest.fixture
def offline_client():
    """AsyncClient that must never be used for a real request."""

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError(f"unexpected request to {request.url}")

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.fixture
def sqlite_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    TestingSession = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)
        engine.dispose()

