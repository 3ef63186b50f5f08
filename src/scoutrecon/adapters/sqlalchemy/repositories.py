"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import TypeAdapter
from sqlalchemy import delete, insert, select

from scoutrecon.adapters.sqlalchemy.mappings import (
    official_match_table,
    scouting_record_table,
    validation_result_table,
)
from scoutrecon.domain.model import MatchValidationResult, OfficialMatch, ScoutingRecord

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.orm import Session

    from scoutrecon.domain.model import RecordKey

_RESULT_ADAPTER = TypeAdapter(MatchValidationResult)
_MATCH_ADAPTER = TypeAdapter(OfficialMatch)


def _transient_copy(record: ScoutingRecord) -> ScoutingRecord:
    return ScoutingRecord(**record.copy_data())


class SqlAlchemyScoutingRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: ScoutingRecord) -> None:
        # A record with a known id overwrites the stored one instead of colliding.
        self.session.merge(_transient_copy(entity))

    def get(self, record_id: str) -> ScoutingRecord | None:
        return self.session.get(ScoutingRecord, record_id)

    def list_all(self) -> list[ScoutingRecord]:
        stmt = select(ScoutingRecord).order_by(scouting_record_table.c.created_at)
        return list(self.session.scalars(stmt))

    def list_for_event(self, event_key: str) -> list[ScoutingRecord]:
        stmt = (
            select(ScoutingRecord)
            .where(scouting_record_table.c.event_key == event_key)
            .order_by(scouting_record_table.c.created_at)
        )
        return list(self.session.scalars(stmt))

    def list_for_match(self, event_key: str, match_number: str) -> list[ScoutingRecord]:
        stmt = (
            select(ScoutingRecord)
            .where(scouting_record_table.c.event_key == event_key)
            .where(scouting_record_table.c.match_number == match_number)
            .order_by(scouting_record_table.c.created_at)
        )
        return list(self.session.scalars(stmt))

    def list_for_key(self, key: RecordKey) -> list[ScoutingRecord]:
        stmt = (
            select(ScoutingRecord)
            .where(scouting_record_table.c.event_key == key.event_key)
            .where(scouting_record_table.c.match_number == key.match_number)
            .where(scouting_record_table.c.team_number == key.team_number)
            .order_by(scouting_record_table.c.created_at)
        )
        return list(self.session.scalars(stmt))

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        if record is not None:
            self.session.delete(record)
            self.session.flush()

    def delete_key(self, key: RecordKey) -> list[ScoutingRecord]:
        stored = self.list_for_key(key)
        removed = [_transient_copy(record) for record in stored]
        for record in stored:
            self.session.delete(record)
        self.session.flush()
        return removed

    def clear(self) -> int:
        result = self.session.execute(delete(scouting_record_table))
        self.session.expunge_all()
        return result.rowcount or 0


class SqlAlchemyValidationResultRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def save(self, result: MatchValidationResult) -> None:
        self.session.execute(
            delete(validation_result_table)
            .where(validation_result_table.c.event_key == result.event_key)
            .where(validation_result_table.c.match_key == result.match_key)
        )
        self.session.execute(
            insert(validation_result_table).values(
                id=result.id,
                event_key=result.event_key,
                match_key=result.match_key,
                status=str(result.status),
                payload=_RESULT_ADAPTER.dump_json(result).decode(),
                validated_at=result.validated_at,
            )
        )

    def get(self, event_key: str, match_key: str) -> MatchValidationResult | None:
        stmt = (
            select(validation_result_table.c.payload)
            .where(validation_result_table.c.event_key == event_key)
            .where(validation_result_table.c.match_key == match_key)
        )
        payload = self.session.execute(stmt).scalar_one_or_none()
        if payload is None:
            return None
        return _RESULT_ADAPTER.validate_json(payload)

    def list_for_event(self, event_key: str) -> list[MatchValidationResult]:
        stmt = (
            select(validation_result_table.c.payload)
            .where(validation_result_table.c.event_key == event_key)
            .order_by(validation_result_table.c.validated_at)
        )
        return [_RESULT_ADAPTER.validate_json(payload) for payload in self.session.scalars(stmt)]

    def clear_event(self, event_key: str) -> int:
        result = self.session.execute(
            delete(validation_result_table).where(validation_result_table.c.event_key == event_key)
        )
        return result.rowcount or 0


class SqlAlchemyOfficialMatchRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, match: OfficialMatch) -> None:
        self.upsert_many((match,))

    def upsert_many(self, matches: Iterable[OfficialMatch]) -> None:
        fetched_at = datetime.now(UTC)
        for match in matches:
            self.session.execute(
                delete(official_match_table).where(official_match_table.c.match_key == match.key)
            )
            self.session.execute(
                insert(official_match_table).values(
                    match_key=match.key,
                    event_key=match.event_key,
                    payload=_MATCH_ADAPTER.dump_json(match).decode(),
                    fetched_at=fetched_at,
                )
            )

    def get(self, match_key: str) -> OfficialMatch | None:
        stmt = select(official_match_table.c.payload).where(
            official_match_table.c.match_key == match_key
        )
        payload = self.session.execute(stmt).scalar_one_or_none()
        if payload is None:
            return None
        return _MATCH_ADAPTER.validate_json(payload)

    def list_for_event(self, event_key: str) -> list[OfficialMatch]:
        stmt = select(official_match_table.c.payload).where(
            official_match_table.c.event_key == event_key
        )
        return [_MATCH_ADAPTER.validate_json(payload) for payload in self.session.scalars(stmt)]
