"""SQLAlchemy adapter package for scoutrecon."""

from __future__ import annotations

from .mappings import (
    create_all_tables,
    mapper_registry,
    official_match_table,
    scouting_record_table,
    start_mappers,
    validation_result_table,
)
from .repositories import (
    SqlAlchemyOfficialMatchRepository,
    SqlAlchemyScoutingRecordRepository,
    SqlAlchemyValidationResultRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, shutdown, startup

__all__ = [
    "SqlAlchemyOfficialMatchRepository",
    "SqlAlchemyScoutingRecordRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyValidationResultRepository",
    "StartupError",
    "create_all_tables",
    "mapper_registry",
    "official_match_table",
    "scouting_record_table",
    "shutdown",
    "start_mappers",
    "startup",
    "validation_result_table",
]
