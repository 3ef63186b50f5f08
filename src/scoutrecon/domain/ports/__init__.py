"""Domain port definitions for adapters."""

from __future__ import annotations

from .config_store import ValidationConfigStore
from .official_data import OfficialDataProvider, OfficialDataUnavailableError
from .persistence import (
    OfficialMatchRepository,
    Repository,
    ScoutingRecordRepository,
    ValidationResultRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    ScoutingRepositories,
    ScoutingUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "OfficialDataProvider",
    "OfficialDataUnavailableError",
    "OfficialMatchRepository",
    "Repository",
    "RepositoryCollection",
    "ScoutingRecordRepository",
    "ScoutingRepositories",
    "ScoutingUnitOfWork",
    "UnitOfWork",
    "ValidationConfigStore",
    "ValidationResultRepository",
]
