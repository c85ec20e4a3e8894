"""Fan-out of the fetch phase across configured sources."""

from __future__ import annotations

import asyncio
from typing import List, Optional, Sequence

import httpx

from rankings.core.config import settings
from rankings.core.logging import get_logger
from .base import BaseSource, SourceResult

log = get_logger("ingestion.runner")


class IngestionRunner:
    """Runs every source concurrently and returns results in configured order.

    Each source is isolated: its failure is captured in its own
    ``SourceResult`` and never cancels or hides its siblings.
    """

    def __init__(self, sources: Sequence[BaseSource], client: Optional[httpx.AsyncClient] = None):
        self.sources = list(sources)
        self.client = client

    async def run(self) -> List[SourceResult]:
        if self.client is not None:
            return await self._gather(self.client)

        async with httpx.AsyncClient(timeout=settings.FETCH_TIMEOUT_SECONDS, follow_redirects=True) as client:
            return await self._gather(client)

    async def _gather(self, client: httpx.AsyncClient) -> List[SourceResult]:
        results = await asyncio.gather(*(source.collect(client) for source in self.sources))
        for result in results:
            status = "ok" if result.ok else f"error={result.error}"
            log.info(f"Source={result.name} fetched={len(result.candidates)} {status}")
        return list(results)
