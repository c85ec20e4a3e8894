"""ESPN recruiting rankings from the site's undocumented JSON API."""

from __future__ import annotations

from typing import Any, List

import httpx

from rankings.core.config import settings
from rankings.core.logging import get_logger
from rankings.ingestion.base import BaseSource, ExtractionResult
from rankings.ingestion.json_extractor import JsonFieldExtractor

log = get_logger("ingestion.espn")

REQUEST_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "Mozilla/5.0 (compatible; RecruitingBot/1.0)",
}


class EspnApiSource(BaseSource):
    """One ESPN endpoint (overall or state rankings)."""

    source = "espn-api"

    def __init__(self, name: str, url: str, sport: str, year: int):
        super().__init__(sport, year)
        self.name = name
        self.url = url
        self.extractor = JsonFieldExtractor(self.source)

    async def fetch(self, client: httpx.AsyncClient) -> Any:
        log.info(f"Fetching from: {self.url}")
        resp = await self.request(client, "GET", self.url, headers=REQUEST_HEADERS)
        try:
            data = resp.json()
        except ValueError as exc:
            raise self.fail("Response was not valid JSON") from exc

        if isinstance(data, dict):
            log.debug(f"{self.name}: response keys {sorted(data.keys())}")
        return data

    def extract(self, raw: Any) -> ExtractionResult:
        return self.extractor.extract(raw, self.sport, self.year)


def build_espn_sources(sport: str, year: int) -> List[BaseSource]:
    """Overall rankings first, then state rankings; overall wins on conflict."""
    base = settings.ESPN_API_BASE_URL.rstrip("/")
    sport_slug = sport.lower()
    return [
        EspnApiSource(
            "espn-api-overall",
            f"{base}/{sport_slug}/recruiting/rankings/{year}?limit={settings.ESPN_RANKINGS_LIMIT}",
            sport,
            year,
        ),
        EspnApiSource(
            "espn-api-state",
            f"{base}/{sport_slug}/recruiting/state-rankings/{year}",
            sport,
            year,
        ),
    ]
