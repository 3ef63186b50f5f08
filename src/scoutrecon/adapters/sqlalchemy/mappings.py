"""SQLAlchemy mapping metadata for scouting records, official snapshots and verdicts."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    inspect,
    orm,
)

from scoutrecon.domain.model import COUNTER_FIELDS, FLAG_FIELDS, Alliance, ScoutingRecord

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


mapper_registry = orm.registry()

scouting_record_table = Table(
    "scouting_record",
    mapper_registry.metadata,
    Column("id", String(255), primary_key=True),
    Column("event_key", String(64), nullable=False),
    Column("match_number", String(32), nullable=False),
    Column("team_number", String(32), nullable=False),
    Column("alliance", Enum(Alliance, native_enum=False), nullable=True),
    Column("scout_name", String(255), nullable=False, default=""),
    Column("created_at", UTCDateTime(), nullable=False),
    *(Column(name, Integer, nullable=False, default=0) for name in COUNTER_FIELDS),
    *(Column(name, Boolean, nullable=False, default=False) for name in FLAG_FIELDS),
    Column("comment", Text, nullable=False, default=""),
    Column("is_corrected", Boolean, nullable=False, default=False),
    Column("correction_count", Integer, nullable=False, default=0),
    Column("last_corrected_at", UTCDateTime(), nullable=True),
    Column("last_corrected_by", String(255), nullable=True),
    Column("correction_notes", Text, nullable=True),
    Column("original_scout_name", String(255), nullable=True),
    Index("ix_scouting_record_key", "event_key", "match_number", "team_number"),
)

validation_result_table = Table(
    "validation_result",
    mapper_registry.metadata,
    Column("id", String(255), primary_key=True),
    Column("event_key", String(64), nullable=False, index=True),
    Column("match_key", String(64), nullable=False),
    Column("status", String(32), nullable=False),
    Column("payload", Text, nullable=False),
    Column("validated_at", UTCDateTime(), nullable=False),
    Index("ix_validation_result_match", "event_key", "match_key", unique=True),
)

official_match_table = Table(
    "official_match",
    mapper_registry.metadata,
    Column("match_key", String(64), primary_key=True),
    Column("event_key", String(64), nullable=False, index=True),
    Column("payload", Text, nullable=False),
    Column("fetched_at", UTCDateTime(), nullable=False),
)


def start_mappers() -> orm.registry:
    """Map :class:`ScoutingRecord` onto its table; calling twice is harmless."""

    if inspect(ScoutingRecord, raiseerr=False) is not None:
        return mapper_registry

    log.info("Starting SQLAlchemy mappers")
    mapper_registry.map_imperatively(ScoutingRecord, scouting_record_table)
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
