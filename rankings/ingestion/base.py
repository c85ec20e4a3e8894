"""Abstract source interface for ingestion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Optional

import httpx

from rankings.core.errors import SourceFetchError
from rankings.core.logging import get_logger
from rankings.schemas.candidate import CandidateRecord, SourceTag

log = get_logger("ingestion.base")


@dataclass
class ExtractionResult:
    """Candidates from one document plus the count of dropped noise."""

    candidates: List[CandidateRecord] = field(default_factory=list)
    discarded: int = 0


@dataclass
class SourceResult:
    """Outcome of one fetch+extract attempt. Exactly one of data/error is meaningful."""

    name: str
    source: SourceTag
    candidates: List[CandidateRecord] = field(default_factory=list)
    discarded: int = 0
    error: Optional[SourceFetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BaseSource(ABC):
    """One external endpoint: a single outbound request and its extractor.

    ``name`` labels the endpoint in errors and run history; ``source`` is the
    tag stamped on every candidate it yields. Several endpoints of the same
    vendor share a ``source`` but never a ``name``.
    """

    name: str
    source: SourceTag

    def __init__(self, sport: str, year: int):
        self.sport = sport
        self.year = year

    @abstractmethod
    async def fetch(self, client: httpx.AsyncClient) -> Any:
        """Perform the outbound request; raise SourceFetchError on failure."""

    @abstractmethod
    def extract(self, raw: Any) -> ExtractionResult:
        """Turn raw content into candidate records."""

    async def collect(self, client: httpx.AsyncClient) -> SourceResult:
        """Fetch and extract, converting every failure into an error value."""
        result = SourceResult(name=self.name, source=self.source)
        try:
            raw = await self.fetch(client)
            extracted = self.extract(raw)
        except SourceFetchError as exc:
            log.error(f"Source={self.name} failed: {exc.message}")
            result.error = exc
            return result
        except Exception as exc:  # noqa: BLE001
            log.exception(f"Source={self.name} raised while extracting")
            result.error = SourceFetchError(self.name, str(exc) or exc.__class__.__name__)
            return result

        result.candidates = extracted.candidates
        result.discarded = extracted.discarded
        log.info(f"Source={self.name} candidates={len(result.candidates)} discarded={result.discarded}")
        return result

    def fail(self, message: str) -> SourceFetchError:
        return SourceFetchError(self.name, message)

    async def request(self, client: httpx.AsyncClient, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Single attempt; non-2xx and transport failures become SourceFetchError."""
        try:
            resp = await client.request(method, url, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise self.fail(f"HTTP {status} {exc.response.reason_phrase}".strip()) from exc
        except httpx.HTTPError as exc:
            raise self.fail(str(exc) or exc.__class__.__name__) from exc
        return resp
