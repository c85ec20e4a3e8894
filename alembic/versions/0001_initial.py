"""create ranking store, run history and audit tables

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "external_rankings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("athlete_name", sa.String(length=200), nullable=False),
        sa.Column("sport", sa.String(length=50), nullable=False),
        sa.Column("graduation_year", sa.Integer(), nullable=False),
        sa.Column("position", sa.String(length=20), nullable=True),
        sa.Column("state", sa.String(length=50), nullable=True),
        sa.Column("high_school", sa.String(length=200), nullable=True),
        sa.Column("overall_rank", sa.Integer(), nullable=True),
        sa.Column("position_rank", sa.Integer(), nullable=True),
        sa.Column("state_rank", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Numeric(), nullable=True),
        sa.Column("profile_url", sa.String(), nullable=True),
        sa.Column("image_url", sa.String(), nullable=True),
        sa.Column("committed_school_name", sa.String(length=200), nullable=True),
        sa.Column("committed_school_logo_url", sa.String(), nullable=True),
        sa.Column("commitment_date", sa.String(length=50), nullable=True),
        sa.Column("height_feet", sa.Integer(), nullable=True),
        sa.Column("height_inches", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source", "athlete_name", "sport", "graduation_year", name="uq_external_rankings_identity"),
    )
    op.create_index("ix_external_rankings_source", "external_rankings", ["source"])
    op.create_index("ix_external_rankings_sport", "external_rankings", ["sport"])
    op.create_index("ix_external_rankings_graduation_year", "external_rankings", ["graduation_year"])

    op.create_table(
        "scraping_history",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("sport", sa.String(length=50), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("initiated_by", sa.String(length=100), nullable=True),
        sa.Column("sources_attempted", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("sources_succeeded", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("athletes_scraped", sa.Integer(), nullable=False),
        sa.Column("athletes_imported", sa.Integer(), nullable=False),
        sa.Column("athletes_skipped", sa.Integer(), nullable=False),
        sa.Column("errors", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scraping_history_sport", "scraping_history", ["sport"])

    op.create_table(
        "audit_logs",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("action", sa.String(length=100), nullable=False),
        sa.Column("resource_type", sa.String(length=100), nullable=False),
        sa.Column("actor", sa.String(length=100), nullable=True),
        sa.Column("metadata", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_logs_action", "audit_logs", ["action"])


def downgrade() -> None:
    op.drop_index("ix_audit_logs_action", table_name="audit_logs")
    op.drop_table("audit_logs")
    op.drop_index("ix_scraping_history_sport", table_name="scraping_history")
    op.drop_table("scraping_history")
    op.drop_index("ix_external_rankings_graduation_year", table_name="external_rankings")
    op.drop_index("ix_external_rankings_sport", table_name="external_rankings")
    op.drop_index("ix_external_rankings_source", table_name="external_rankings")
    op.drop_table("external_rankings")
