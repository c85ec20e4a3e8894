"""Heuristic extraction of ranked athletes from scraped markdown.

Each non-blank line is tried against ``LINE_PATTERNS`` in order; the first
pattern that matches decides the name for that line. Matches whose name
fails the validity rules are dropped as parse noise. Survivors are ranked by
encounter order, and extraction stops hard at the candidate cap.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Sequence

from rankings.core.config import settings
from rankings.core.logging import get_logger
from rankings.ingestion.base import ExtractionResult
from rankings.ingestion.measurements import extract_class_year, parse_height_weight
from rankings.schemas.candidate import CandidateRecord, SourceTag, is_valid_athlete_name

log = get_logger("ingestion.markdown")

POSITIONS = (
    "QB", "RB", "FB", "WR", "TE", "OT", "OG", "IOL", "OL", "DL", "DE", "DT", "EDGE",
    "LB", "ILB", "OLB", "CB", "DB", "SAF", "ATH", "LS", "PG", "SG", "SF", "PF",
)

# Capitalized word: "Smith", "McDonald", "O'Neil", "Jr.", "José", "Ramírez"
_UPPER = r"[A-ZÀ-ÖØ-Þ]"
_LOWER = r"[a-zß-öø-ÿ']"
_WORD = rf"{_UPPER}{_LOWER}(?:[^\W\d_]|['.\-])*"
# Leading initials: "DJ", "C.J.", never a position label
_INITIALS = rf"(?!(?:{'|'.join(POSITIONS)})\b)[A-Z]\.?[A-Z]\.?"
_NAME = rf"(?:{_INITIALS}|{_WORD})(?:[ \t]+{_WORD})+"


@dataclass(frozen=True)
class LinePattern:
    label: str
    regex: Pattern[str]
    name_group: int

    def match(self, line: str) -> Optional[str]:
        found = self.regex.search(line)
        if not found:
            return None
        return found.group(self.name_group).strip()


LINE_PATTERNS: Sequence[LinePattern] = (
    LinePattern("bold", re.compile(rf"\*\*\s*({_NAME})\s*\*\*"), 1),
    LinePattern("ordinal", re.compile(rf"^\s*(?:#?\d+(?:st|nd|rd|th)?[.):]?\s+)?({_NAME})(?=[,\s]|$)"), 1),
    LinePattern("rank", re.compile(rf"^\s*(\d+)\s*({_NAME})"), 2),
)

# Headings and labels that look like names but never are
NOISE_PATTERNS: Sequence[Pattern[str]] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"fighting",
        r"recruits",
        r"rankings",
        r"top \d+",
        r"class of",
        r"notre dame",
        r"university",
        r"college",
        r"high school",
        r"composite",
        r"overall",
    )
)

POSITION_RE = re.compile(rf"\b({'|'.join(POSITIONS)})\b")
LINK_RE = re.compile(r"\]\((https?://[^)\s]+)\)")


def looks_like_person(name: str) -> bool:
    """Validity rules plus the noise filter for scraped headings."""
    if not is_valid_athlete_name(name):
        return False
    # Shouted headings ("TOP RECRUITS")
    if name == name.upper() and len(name) > 4:
        return False
    return not any(p.search(name) for p in NOISE_PATTERNS)


def match_line(line: str, patterns: Sequence[LinePattern] = LINE_PATTERNS) -> Optional[str]:
    """Return the name captured by the first matching pattern, if any."""
    for pattern in patterns:
        name = pattern.match(line)
        if name is not None:
            return name
    return None


class MarkdownExtractor:
    """Turns one source's markdown into ranked candidate records."""

    def __init__(self, source: SourceTag, cap: Optional[int] = None):
        self.source = source
        self.cap = cap if cap is not None else settings.MARKDOWN_CANDIDATE_CAP

    def extract(self, markdown: str, sport: str, year: int) -> ExtractionResult:
        result = ExtractionResult()

        for line in markdown.splitlines():
            if len(result.candidates) >= self.cap:
                break
            if not line.strip():
                continue

            name = match_line(line)
            if name is None:
                continue
            if not looks_like_person(name):
                result.discarded += 1
                log.debug(f"{self.source}: discarded {name!r}")
                continue

            result.candidates.append(
                self._build(line, name, sport, year, rank=len(result.candidates) + 1)
            )

        log.info(
            f"{self.source}: extracted={len(result.candidates)} discarded={result.discarded}"
        )
        return result

    def _build(self, line: str, name: str, sport: str, year: int, rank: int) -> CandidateRecord:
        fields = {
            "source": self.source,
            "athlete_name": name,
            "sport": sport,
            "graduation_year": extract_class_year(line, year) or year,
            "overall_rank": rank,
        }

        position = POSITION_RE.search(line)
        if position:
            fields["position"] = position.group(1)

        fields.update(parse_height_weight(line))

        link = LINK_RE.search(line)
        if link:
            fields["profile_url"] = link.group(1)

        return CandidateRecord(**fields)
