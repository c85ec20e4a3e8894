"""Ranking sites scraped to markdown through the Firecrawl provider."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from rankings.core.config import settings
from rankings.core.errors import ConfigurationError
from rankings.core.logging import get_logger
from rankings.ingestion.base import BaseSource, ExtractionResult
from rankings.ingestion.markdown_extractor import MarkdownExtractor
from rankings.schemas.candidate import SourceTag

log = get_logger("ingestion.scraped")


class FirecrawlClient:
    """``fetch(url) -> markdown`` through the scraping provider."""

    def __init__(self, api_key: str, api_url: str = settings.FIRECRAWL_API_URL):
        self.api_key = api_key
        self.api_url = api_url

    @classmethod
    def from_settings(cls) -> "FirecrawlClient":
        if not settings.FIRECRAWL_API_KEY:
            raise ConfigurationError("FIRECRAWL_API_KEY not configured")
        return cls(settings.FIRECRAWL_API_KEY, settings.FIRECRAWL_API_URL)

    def request_kwargs(self, url: str) -> Dict[str, Any]:
        return {
            "headers": {
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            "json": {"url": url, "formats": ["markdown"]},
        }

    @staticmethod
    def markdown_from(payload: Any) -> str | None:
        if not isinstance(payload, dict) or not payload.get("success"):
            return None
        data = payload.get("data") or {}
        markdown = data.get("markdown")
        return markdown if isinstance(markdown, str) and markdown.strip() else None


class ScrapedRankingSource(BaseSource):
    """One ranking page scraped to markdown and mined line by line."""

    def __init__(
        self,
        name: str,
        source: SourceTag,
        url: str,
        scraper: FirecrawlClient,
        sport: str,
        year: int,
        cap: Optional[int] = None,
    ):
        super().__init__(sport, year)
        self.name = name
        self.source = source
        self.url = url
        self.scraper = scraper
        self.extractor = MarkdownExtractor(source, cap=cap)

    async def fetch(self, client: httpx.AsyncClient) -> str:
        log.info(f"Scraping {self.name}: {self.url}")
        resp = await self.request(client, "POST", self.scraper.api_url, **self.scraper.request_kwargs(self.url))
        try:
            payload = resp.json()
        except ValueError as exc:
            raise self.fail("Invalid JSON from scraping provider") from exc

        markdown = FirecrawlClient.markdown_from(payload)
        if markdown is None:
            error = payload.get("error") if isinstance(payload, dict) else None
            raise self.fail(error or "No data returned")
        log.debug(f"{self.name}: markdown length {len(markdown)}")
        return markdown

    def extract(self, raw: str) -> ExtractionResult:
        return self.extractor.extract(raw, self.sport, self.year)


@dataclass(frozen=True)
class ScrapeTarget:
    name: str
    source: SourceTag
    url_template: str

    def url(self, sport: str, year: int) -> str:
        return self.url_template.format(sport=sport.lower(), year=year)


# Processing order is the dedup tie-break: earlier targets win.
SCRAPE_TARGETS: List[ScrapeTarget] = [
    ScrapeTarget("maxpreps", "maxpreps", "https://www.maxpreps.com/rankings/{sport}/"),
    ScrapeTarget(
        "247sports",
        "247sports",
        "https://247sports.com/season/{year}-{sport}/recruitrankings/?InstitutionGroup=HighSchool",
    ),
    ScrapeTarget("espn-markdown", "espn-markdown", "https://www.espn.com/college-sports/{sport}/recruiting/rankings/"),
]


def build_scraped_sources(sport: str, year: int, scraper: FirecrawlClient | None = None) -> List[BaseSource]:
    """Instantiate one source per scrape target, in tie-break order."""
    scraper = scraper or FirecrawlClient.from_settings()
    return [
        ScrapedRankingSource(
            name=target.name,
            source=target.source,
            url=target.url(sport, year),
            scraper=scraper,
            sport=sport,
            year=year,
        )
        for target in SCRAPE_TARGETS
    ]
