"""Candidate record - one athlete observation extracted from one source."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

SourceTag = Literal["maxpreps", "247sports", "espn-markdown", "espn-api"]

MIN_NAME_LENGTH = 5
MIN_NAME_TOKENS = 2


def is_valid_athlete_name(name: Optional[str]) -> bool:
    """At least five characters and at least two whitespace-separated tokens."""
    if not name:
        return False
    stripped = name.strip()
    return len(stripped) >= MIN_NAME_LENGTH and len(stripped.split()) >= MIN_NAME_TOKENS


class CandidateRecord(BaseModel):
    """Transient athlete observation; lives until the run's upsert."""

    source: SourceTag
    athlete_name: str = Field(min_length=1)
    sport: str = Field(min_length=1)
    graduation_year: int

    position: Optional[str] = None
    state: Optional[str] = None
    high_school: Optional[str] = None

    overall_rank: Optional[int] = Field(default=None, ge=1)
    position_rank: Optional[int] = Field(default=None, ge=1)
    state_rank: Optional[int] = Field(default=None, ge=1)
    rating: Optional[float] = None

    profile_url: Optional[str] = None
    image_url: Optional[str] = None

    committed_school_name: Optional[str] = None
    committed_school_logo_url: Optional[str] = None
    commitment_date: Optional[str] = None

    height_feet: Optional[int] = None
    height_inches: Optional[int] = None
    weight: Optional[int] = None

    @property
    def canonical_key(self) -> str:
        return f"{self.athlete_name.lower()}_{self.graduation_year}_{self.sport}"

    def to_row(self) -> dict:
        """Column mapping used by the upsert writer."""
        return self.model_dump()
