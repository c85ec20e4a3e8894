"""Cross-source deduplication on the canonical key."""

from __future__ import annotations

from typing import Iterable, List

from rankings.core.logging import get_logger
from rankings.schemas.candidate import CandidateRecord

log = get_logger("ingestion.dedup")


def deduplicate(candidates: Iterable[CandidateRecord]) -> List[CandidateRecord]:
    """Keep the first record seen for each canonical key.

    Input order is the tie-break: sources processed earlier win over later
    ones with conflicting data for the same athlete.
    """
    seen: set[str] = set()
    unique: List[CandidateRecord] = []
    total = 0

    for candidate in candidates:
        total += 1
        key = candidate.canonical_key
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)

    if total != len(unique):
        log.debug(f"Deduplicated candidates (input={total} output={len(unique)})")
    return unique
