"""Source fetchers against mocked HTTP"""

import json

import httpx
import pytest

from rankings.core.errors import ConfigurationError
from rankings.ingestion.espn_source import EspnApiSource, build_espn_sources
from rankings.ingestion.runner import IngestionRunner
from rankings.ingestion.scraped_source import (
    SCRAPE_TARGETS,
    FirecrawlClient,
    ScrapedRankingSource,
    build_scraped_sources,
)

SCRAPER = FirecrawlClient("fc-test-key", "https://firecrawl.test/v0/scrape")

MARKDOWN = "\n".join(["# Top Recruits", "1. Jordan Smith", "2. Bryce Underwood"])


def client_for(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def scraped_source(name: str = "maxpreps") -> ScrapedRankingSource:
    return ScrapedRankingSource(
        name=name,
        source=name,
        url=f"https://{name}.test/rankings/football/",
        scraper=SCRAPER,
        sport="football",
        year=2026,
    )


class TestScrapedSource:
    """Test the markdown scraping source"""

    @pytest.mark.asyncio
    async def test_successful_scrape(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "data": {"markdown": MARKDOWN}})

        async with client_for(handler) as client:
            result = await scraped_source().collect(client)

        assert result.ok
        assert [c.athlete_name for c in result.candidates] == ["Jordan Smith", "Bryce Underwood"]
        assert seen["auth"] == "Bearer fc-test-key"
        assert seen["body"] == {"url": "https://maxpreps.test/rankings/football/", "formats": ["markdown"]}

    @pytest.mark.asyncio
    async def test_non_2xx_becomes_error(self):
        async with client_for(lambda request: httpx.Response(500)) as client:
            result = await scraped_source().collect(client)

        assert not result.ok
        assert result.candidates == []
        assert str(result.error) == "maxpreps: HTTP 500 Internal Server Error"

    @pytest.mark.asyncio
    async def test_transport_error_becomes_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with client_for(handler) as client:
            result = await scraped_source("247sports").collect(client)

        assert str(result.error) == "247sports: connection refused"

    @pytest.mark.asyncio
    async def test_provider_error_message(self):
        payload = {"success": False, "error": "Rate limit exceeded"}
        async with client_for(lambda request: httpx.Response(200, json=payload)) as client:
            result = await scraped_source().collect(client)

        assert str(result.error) == "maxpreps: Rate limit exceeded"

    @pytest.mark.asyncio
    async def test_empty_markdown(self):
        payload = {"success": True, "data": {"markdown": "   "}}
        async with client_for(lambda request: httpx.Response(200, json=payload)) as client:
            result = await scraped_source().collect(client)

        assert str(result.error) == "maxpreps: No data returned"

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        async with client_for(lambda request: httpx.Response(200, text="<html>")) as client:
            result = await scraped_source().collect(client)

        assert str(result.error) == "maxpreps: Invalid JSON from scraping provider"


class TestEspnSource:
    """Test the ESPN JSON API source"""

    @pytest.mark.asyncio
    async def test_successful_fetch(self):
        document = {"athletes": [{"firstName": "Arch", "lastName": "Manning", "rankings": {"overall": 1}}]}
        source = EspnApiSource("espn-api-overall", "https://espn.test/rankings/2026", "football", 2026)

        async with client_for(lambda request: httpx.Response(200, json=document)) as client:
            result = await source.collect(client)

        assert result.ok
        assert result.source == "espn-api"
        assert result.candidates[0].athlete_name == "Arch Manning"

    @pytest.mark.asyncio
    async def test_not_found(self):
        source = EspnApiSource("espn-api-state", "https://espn.test/state/2026", "football", 2026)
        async with client_for(lambda request: httpx.Response(404)) as client:
            result = await source.collect(client)

        assert str(result.error) == "espn-api-state: HTTP 404 Not Found"

    def test_endpoint_order(self):
        sources = build_espn_sources("Football", 2026)
        assert [s.name for s in sources] == ["espn-api-overall", "espn-api-state"]
        assert "/football/recruiting/rankings/2026?limit=300" in sources[0].url
        assert sources[1].url.endswith("/football/recruiting/state-rankings/2026")


class TestScrapeTargets:
    """Test target configuration"""

    def test_tie_break_order(self):
        sources = build_scraped_sources("football", 2026, scraper=SCRAPER)
        assert [s.source for s in sources] == ["maxpreps", "247sports", "espn-markdown"]
        assert sources[1].url == (
            "https://247sports.com/season/2026-football/recruitrankings/?InstitutionGroup=HighSchool"
        )

    def test_missing_api_key(self, monkeypatch):
        from rankings.core.config import settings

        monkeypatch.setattr(settings, "FIRECRAWL_API_KEY", None)
        with pytest.raises(ConfigurationError):
            build_scraped_sources("football", 2026)

    def test_targets_have_unique_names(self):
        names = [t.name for t in SCRAPE_TARGETS]
        assert len(names) == len(set(names))


class TestRunner:
    """Test fan-out isolation"""

    @pytest.mark.asyncio
    async def test_one_failure_does_not_hide_siblings(self):
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "firecrawl.test" and b"247sports" in request.content:
                return httpx.Response(503)
            return httpx.Response(200, json={"success": True, "data": {"markdown": MARKDOWN}})

        sources = [scraped_source("maxpreps"), scraped_source("247sports"), scraped_source("espn-markdown")]
        async with client_for(handler) as client:
            results = await IngestionRunner(sources, client=client).run()

        assert [r.name for r in results] == ["maxpreps", "247sports", "espn-markdown"]
        assert [r.ok for r in results] == [True, False, True]
        assert str(results[1].error) == "247sports: HTTP 503 Service Unavailable"
