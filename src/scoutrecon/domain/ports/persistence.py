"""Ports for persisting scouting records, official snapshots and verdicts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scoutrecon.domain.model import (
        MatchValidationResult,
        OfficialMatch,
        RecordKey,
        ScoutingRecord,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class ScoutingRecordRepository(Repository["ScoutingRecord"], Protocol):
    """Canonical record store. Several records per key are tolerated."""

    def get(self, record_id: str) -> ScoutingRecord | None: ...

    def list_all(self) -> list[ScoutingRecord]: ...

    def list_for_event(self, event_key: str) -> list[ScoutingRecord]: ...

    def list_for_match(self, event_key: str, match_number: str) -> list[ScoutingRecord]: ...

    def list_for_key(self, key: RecordKey) -> list[ScoutingRecord]: ...

    def delete(self, record_id: str) -> None: ...

    def delete_key(self, key: RecordKey) -> list[ScoutingRecord]:
        """Remove every record stored under ``key`` and return what was removed."""
        ...

    def clear(self) -> int: ...


@runtime_checkable
class ValidationResultRepository(Protocol):
    """Verdicts keyed by (event, match key); saving replaces any earlier verdict."""

    def save(self, result: MatchValidationResult) -> None: ...

    def get(self, event_key: str, match_key: str) -> MatchValidationResult | None: ...

    def list_for_event(self, event_key: str) -> list[MatchValidationResult]: ...

    def clear_event(self, event_key: str) -> int: ...


@runtime_checkable
class OfficialMatchRepository(Protocol):
    """Snapshots of official results. Snapshots are upserted and never deleted."""

    def upsert(self, match: OfficialMatch) -> None: ...

    def upsert_many(self, matches: Iterable[OfficialMatch]) -> None: ...

    def get(self, match_key: str) -> OfficialMatch | None: ...

    def list_for_event(self, event_key: str) -> list[OfficialMatch]: ...
