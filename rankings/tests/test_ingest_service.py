"""Ingest orchestration: isolation, status rule, run recording, audit"""

import pytest

from conftest import (
    ADMIN_TOKEN,
    VIEWER_TOKEN,
    ExplodingSource,
    FakeRepository,
    StaticSource,
    failing,
    make_candidate,
)
from rankings.core.errors import AuthorizationError, PersistenceError
from rankings.services.ingest_service import RankingIngestService, resolve_status


def service_for(repository, authorizer, audit=None, client=None) -> RankingIngestService:
    return RankingIngestService(repository=repository, authorizer=authorizer, audit=audit, client=client)


class TestResolveStatus:
    """Test the run status rule"""

    def test_failed_only_when_errors_and_nothing_imported(self):
        assert resolve_status(["maxpreps: HTTP 500"], 0) == "failed"
        assert resolve_status(["maxpreps: HTTP 500"], 3) == "completed"
        assert resolve_status([], 0) == "completed"


class TestRankingIngestService:
    """Test end-to-end invocations against fakes"""

    @pytest.mark.asyncio
    async def test_all_sources_fail(self, fake_repository, fake_authorizer, offline_client):
        sources = [failing("maxpreps"), failing("247sports"), failing("espn-markdown")]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.status == "failed"
        assert summary.athletes_imported == 0
        assert len(summary.errors) == 3
        run = fake_repository.runs[summary.run_id]
        assert run["status"] == "failed"
        assert run["sources_succeeded"] == []

    @pytest.mark.asyncio
    async def test_partial_failure(self, fake_repository, fake_authorizer, offline_client):
        sources = [
            StaticSource("maxpreps", [make_candidate("Jordan Smith")]),
            failing("247sports", "HTTP 403 Forbidden"),
            StaticSource("espn-markdown", [make_candidate("Bryce Underwood", source="espn-markdown")]),
        ]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.status == "completed"
        assert summary.errors == ["247sports: HTTP 403 Forbidden"]
        assert summary.athletes_imported >= 2
        assert summary.by_source == {"maxpreps": 1, "espn-markdown": 1}
        run = fake_repository.runs[summary.run_id]
        assert run["sources_attempted"] == ["maxpreps", "247sports", "espn-markdown"]
        assert run["sources_succeeded"] == ["maxpreps", "espn-markdown"]

    @pytest.mark.asyncio
    async def test_unexpected_extractor_error_is_isolated(self, fake_repository, fake_authorizer, offline_client):
        sources = [
            ExplodingSource("espn-api-overall", [make_candidate()], source="espn-api"),
            StaticSource("espn-api-state", [make_candidate("Bryce Underwood", source="espn-api")], source="espn-api"),
        ]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.status == "completed"
        assert summary.athletes_imported == 1
        assert summary.errors == ["espn-api-overall: 'athletes'"]

    @pytest.mark.asyncio
    async def test_duplicates_resolved_by_source_order(self, fake_repository, fake_authorizer, offline_client):
        first = make_candidate("Jordan Smith", source="maxpreps", overall_rank=4)
        later = make_candidate("Jordan Smith", source="247sports", overall_rank=1)
        sources = [StaticSource("maxpreps", [first]), StaticSource("247sports", [later], source="247sports")]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.athletes_scraped == 2
        assert summary.athletes_imported == 1
        assert summary.athletes_skipped == 1
        assert list(fake_repository.rows.values()) == [first]

    @pytest.mark.asyncio
    async def test_discarded_count_recorded_separately(self, fake_repository, fake_authorizer, offline_client):
        sources = [StaticSource("maxpreps", [make_candidate()], discarded=4)]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.errors == []
        assert fake_repository.runs[summary.run_id]["metadata"]["records_discarded"] == 4

    @pytest.mark.asyncio
    async def test_run_metadata(self, fake_repository, fake_authorizer, offline_client):
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, pipeline="espn", sources=[StaticSource("a-b")])

        run = fake_repository.runs[summary.run_id]
        assert run["initiated_by"] == "user-1"
        assert run["metadata"]["year"] == 2026
        assert run["metadata"]["pipeline"] == "espn"
        assert run["metadata"]["endpoints_tried"] == 1

    @pytest.mark.asyncio
    async def test_missing_token_rejected_before_any_run(self, fake_repository, fake_authorizer):
        service = service_for(fake_repository, fake_authorizer)

        with pytest.raises(AuthorizationError) as exc_info:
            await service.run(None, "football", 2026, sources=[StaticSource("maxpreps")])

        assert exc_info.value.status_code == 401
        assert fake_repository.runs == {}
        assert fake_repository.upsert_calls == 0

    @pytest.mark.asyncio
    async def test_non_admin_rejected(self, fake_repository, fake_authorizer):
        service = service_for(fake_repository, fake_authorizer)

        with pytest.raises(AuthorizationError) as exc_info:
            await service.run(VIEWER_TOKEN, "football", 2026, sources=[StaticSource("maxpreps")])

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Admin access required"
        assert fake_repository.runs == {}

    @pytest.mark.asyncio
    async def test_persistence_failure_is_fatal(self, fake_authorizer, audit, offline_client):
        repository = FakeRepository(fail_upsert=True)
        service = service_for(repository, fake_authorizer, audit=audit, client=offline_client)

        with pytest.raises(PersistenceError) as exc_info:
            await service.run(ADMIN_TOKEN, "football", 2026, sources=[StaticSource("maxpreps", [make_candidate()])])

        assert exc_info.value.message == "Database: connection reset"
        run = next(iter(repository.runs.values()))
        assert run["status"] == "failed"
        assert run["errors"] == ["Database: connection reset"]
        assert audit.entries[0]["metadata"]["errors"] == ["Database: connection reset"]

    @pytest.mark.asyncio
    async def test_run_record_failure_does_not_abort(self, fake_authorizer, offline_client):
        repository = FakeRepository(fail_create=True)
        service = service_for(repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=[StaticSource("maxpreps", [make_candidate()])])

        assert summary.run_id is None
        assert summary.athletes_imported == 1
        assert summary.to_response()["run_id"] is None

    @pytest.mark.asyncio
    async def test_audit_entry(self, fake_repository, fake_authorizer, audit, offline_client):
        service = service_for(fake_repository, fake_authorizer, audit=audit, client=offline_client)

        summary = await service.run(
            ADMIN_TOKEN, "football", 2026, pipeline="espn", sources=[StaticSource("maxpreps", [make_candidate()])]
        )

        assert len(audit.entries) == 1
        entry = audit.entries[0]
        assert entry["action"] == "fetch_espn_rankings"
        assert entry["actor"] == "user-1"
        assert entry["metadata"] == {
            "sport": "football",
            "year": 2026,
            "athletes_count": 1,
            "errors": None,
            "run_id": str(summary.run_id),
        }

    @pytest.mark.asyncio
    async def test_year_defaults_to_current(self, fake_repository, fake_authorizer, offline_client, monkeypatch):
        monkeypatch.setattr("rankings.services.ingest_service.current_year", lambda: 2031)
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", sources=[StaticSource("maxpreps")])

        assert summary.year == 2031

    @pytest.mark.asyncio
    async def test_response_shape(self, fake_repository, fake_authorizer, offline_client):
        sources = [StaticSource("maxpreps", [make_candidate()]), failing("247sports")]
        service = service_for(fake_repository, fake_authorizer, client=offline_client)

        summary = await service.run(ADMIN_TOKEN, "football", 2026, sources=sources)

        assert summary.to_response() == {
            "success": True,
            "athletes_imported": 1,
            "by_source": {"maxpreps": 1},
            "errors": ["247sports: HTTP 500 Internal Server Error"],
            "run_id": str(summary.run_id),
        }
