"""Field-mapping extraction of recruits from a vendor JSON document.

Every target field has an ordered tuple of accessors. An accessor reads one
dotted path out of the recruit object and coerces it to the target type,
returning ``None`` when the path is missing or the value does not fit; the
first non-``None`` result wins.
"""

from __future__ import annotations

import math
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from rankings.core.logging import get_logger
from rankings.ingestion.base import ExtractionResult
from rankings.ingestion.measurements import parse_height
from rankings.schemas.candidate import CandidateRecord, SourceTag, is_valid_athlete_name

log = get_logger("ingestion.json")

Accessor = Callable[[Mapping[str, Any]], Optional[Any]]


def lookup(obj: Any, path: str) -> Any:
    """Follow a dotted path through nested mappings; ``None`` when absent."""
    current = obj
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def text(path: str) -> Accessor:
    def read(obj: Mapping[str, Any]) -> Optional[str]:
        value = lookup(obj, path)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    read.__name__ = f"text({path})"
    return read


def positive_int(path: str) -> Accessor:
    def read(obj: Mapping[str, Any]) -> Optional[int]:
        value = lookup(obj, path)
        if isinstance(value, bool):
            return None
        try:
            number = int(value)
        except (TypeError, ValueError, OverflowError):
            return None
        return number if number > 0 else None

    read.__name__ = f"positive_int({path})"
    return read


def number(path: str) -> Accessor:
    def read(obj: Mapping[str, Any]) -> Optional[float]:
        value = lookup(obj, path)
        if isinstance(value, bool):
            return None
        try:
            result = float(value)
        except (TypeError, ValueError):
            return None
        return result if math.isfinite(result) and result > 0 else None

    read.__name__ = f"number({path})"
    return read


def raw(path: str) -> Accessor:
    def read(obj: Mapping[str, Any]) -> Optional[Any]:
        value = lookup(obj, path)
        return None if value in (None, "") else value

    read.__name__ = f"raw({path})"
    return read


def resolve(obj: Mapping[str, Any], chain: Sequence[Accessor]) -> Optional[Any]:
    """Return the first accessor result that is not ``None``."""
    for accessor in chain:
        value = accessor(obj)
        if value is not None:
            return value
    return None


FIRST_NAME: Tuple[Accessor, ...] = (text("firstName"), text("first_name"))
LAST_NAME: Tuple[Accessor, ...] = (text("lastName"), text("last_name"))
CLASS_YEAR: Tuple[Accessor, ...] = (positive_int("classYear"), positive_int("class_year"))
HEIGHT: Tuple[Accessor, ...] = (raw("height"), raw("measurements.height"))

FIELD_CHAINS: Dict[str, Tuple[Accessor, ...]] = {
    "position": (text("position.abbreviation"), text("position")),
    "state": (text("school.state"), text("hometown.state")),
    "high_school": (text("school.name"), text("highSchool.name")),
    "overall_rank": (positive_int("rankings.overall"), positive_int("rank")),
    "position_rank": (positive_int("rankings.position"), positive_int("position_rank")),
    "state_rank": (positive_int("rankings.state"), positive_int("state_rank")),
    "rating": (number("rating"), number("stars")),
    "profile_url": (text("links.profile"), text("url")),
    "image_url": (text("imageUrl"), text("image"), text("headshot.href")),
    "committed_school_name": (text("commitment.school"), text("commitment.name")),
    "committed_school_logo_url": (text("commitment.logo"), text("commitment.logoUrl")),
    "commitment_date": (text("commitment.date"),),
    "weight": (positive_int("weight"), positive_int("measurements.weight")),
}

# Where the recruit list lives in the document, in priority order
RECRUIT_LIST_KEYS: Tuple[str, ...] = ("athletes", "items", "recruits")


def recruit_list(document: Any) -> List[Any]:
    if isinstance(document, list):
        return document
    if not isinstance(document, Mapping):
        return []
    for key in RECRUIT_LIST_KEYS:
        value = document.get(key)
        if isinstance(value, list):
            return value
    return []


class JsonFieldExtractor:
    """Maps vendor recruit objects onto candidate records."""

    def __init__(self, source: SourceTag, field_chains: Optional[Dict[str, Tuple[Accessor, ...]]] = None):
        self.source = source
        self.field_chains = field_chains or FIELD_CHAINS

    def extract(self, document: Any, sport: str, year: int) -> ExtractionResult:
        result = ExtractionResult()
        for index, recruit in enumerate(recruit_list(document)):
            try:
                candidate = self.parse_recruit(recruit, sport, year)
            except (ValueError, OverflowError, ValidationError) as exc:
                log.warning(f"{self.source}: skipping recruit #{index}: {exc}")
                candidate = None
            if candidate is None:
                result.discarded += 1
                continue
            result.candidates.append(candidate)
        return result

    def parse_recruit(self, recruit: Any, sport: str, year: int) -> Optional[CandidateRecord]:
        if not isinstance(recruit, Mapping):
            return None

        first = resolve(recruit, FIRST_NAME) or ""
        last = resolve(recruit, LAST_NAME) or ""
        full_name = f"{first} {last}".strip()
        if not is_valid_athlete_name(full_name):
            return None

        fields: Dict[str, Any] = {
            "source": self.source,
            "athlete_name": full_name,
            "sport": sport,
            "graduation_year": resolve(recruit, CLASS_YEAR) or year,
        }
        for target, chain in self.field_chains.items():
            value = resolve(recruit, chain)
            if value is not None:
                fields[target] = value

        fields.update(
            {k: v for k, v in parse_height(resolve(recruit, HEIGHT)).items() if v is not None}
        )
        return CandidateRecord(**fields)
