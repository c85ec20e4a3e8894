"""Run history for the ingest pipeline; backs /runs and /health."""

import uuid

from sqlalchemy import DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from rankings.models.base import Base, JSONType


class ScrapingRun(Base):
    __tablename__ = "scraping_history"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    sport: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,  # pending | completed | failed
        default="pending",
    )

    initiated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    sources_attempted: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    sources_succeeded: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    athletes_scraped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    athletes_imported: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    athletes_skipped: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    errors: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    # "metadata" attribute name is reserved by SQLAlchemy; use column name metadata with safe attribute.
    meta: Mapped[dict | None] = mapped_column("metadata", JSONType, nullable=True)

    started_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    completed_at: Mapped[DateTime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
