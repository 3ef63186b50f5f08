"""Initial schema: scouting records, official match snapshots, validation results.

Revision ID: 0001_initial
Revises:
Create Date: 2025-03-01 00:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from scoutrecon.adapters.sqlalchemy.mappings import UTCDateTime
from scoutrecon.domain.model import COUNTER_FIELDS, FLAG_FIELDS

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "scouting_record",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("event_key", sa.String(64), nullable=False),
        sa.Column("match_number", sa.String(32), nullable=False),
        sa.Column("team_number", sa.String(32), nullable=False),
        sa.Column(
            "alliance",
            sa.Enum("RED", "BLUE", name="alliance", native_enum=False),
            nullable=True,
        ),
        sa.Column("scout_name", sa.String(255), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        *(sa.Column(name, sa.Integer, nullable=False) for name in COUNTER_FIELDS),
        *(sa.Column(name, sa.Boolean, nullable=False) for name in FLAG_FIELDS),
        sa.Column("comment", sa.Text, nullable=False),
        sa.Column("is_corrected", sa.Boolean, nullable=False),
        sa.Column("correction_count", sa.Integer, nullable=False),
        sa.Column("last_corrected_at", UTCDateTime(), nullable=True),
        sa.Column("last_corrected_by", sa.String(255), nullable=True),
        sa.Column("correction_notes", sa.Text, nullable=True),
        sa.Column("original_scout_name", sa.String(255), nullable=True),
    )
    op.create_index(
        "ix_scouting_record_key",
        "scouting_record",
        ["event_key", "match_number", "team_number"],
    )

    op.create_table(
        "validation_result",
        sa.Column("id", sa.String(255), primary_key=True),
        sa.Column("event_key", sa.String(64), nullable=False),
        sa.Column("match_key", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("payload", sa.Text, nullable=False),
        sa.Column("validated_at", UTCDateTime(), nullable=False),
    )
    op.create_index("ix_validation_result_event_key", "validation_result", ["event_key"])
    op.create_index(
        "ix_validation_result_match",
        "validation_result",
        ["event_key", "match_key"],
        unique=True,
    )

    op.create_table(
        "official_match",
        sa.Column("match_key", sa.String(64), primary_key=True),
        sa.Column("event_key", sa.String(64), nullable=False),
        sa.Column("payload", sa.Text, nullable=False),
        sa.Column("fetched_at", UTCDateTime(), nullable=False),
    )
    op.create_index("ix_official_match_event_key", "official_match", ["event_key"])


def downgrade() -> None:
    op.drop_index("ix_official_match_event_key", table_name="official_match")
    op.drop_table("official_match")
    op.drop_index("ix_validation_result_match", table_name="validation_result")
    op.drop_index("ix_validation_result_event_key", table_name="validation_result")
    op.drop_table("validation_result")
    op.drop_index("ix_scouting_record_key", table_name="scouting_record")
    op.drop_table("scouting_record")
