"""Canonical ranking store - one row per (source, athlete, sport, class year)."""

import uuid

from sqlalchemy import DateTime, Integer, Numeric, String, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from rankings.models.base import Base

# Conflict target of the upsert; also the uniqueness guarantee across runs.
CONFLICT_COLUMNS = ("source", "athlete_name", "sport", "graduation_year")


class ExternalRanking(Base):
    """Athlete observation published by an external ranking source.

    Rows are written only through the bulk upsert, which overwrites every
    mapped column on conflict so the latest run always wins.
    """

    __tablename__ = "external_rankings"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    source: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    athlete_name: Mapped[str] = mapped_column(String(200), nullable=False)
    sport: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    graduation_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    position: Mapped[str | None] = mapped_column(String(20), nullable=True)
    state: Mapped[str | None] = mapped_column(String(50), nullable=True)
    high_school: Mapped[str | None] = mapped_column(String(200), nullable=True)

    overall_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    state_rank: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating: Mapped[float | None] = mapped_column(Numeric, nullable=True)

    profile_url: Mapped[str | None] = mapped_column(String, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)

    committed_school_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    committed_school_logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    commitment_date: Mapped[str | None] = mapped_column(String(50), nullable=True)

    height_feet: Mapped[int | None] = mapped_column(Integer, nullable=True)
    height_inches: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[int | None] = mapped_column(Integer, nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    last_updated: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        UniqueConstraint(*CONFLICT_COLUMNS, name="uq_external_rankings_identity"),
    )
