"""Normalise every accepted scouting import payload into canonical records.

Three shapes are accepted:

* ``{"entries": [{"id": ..., "data": {...}, "timestamp": ...}, ...]}``: the
  current export. Composite ids (``event::match::team::alliance::ms``) are kept;
  older hash ids are replaced.
* ``{"data": [{...}, ...]}``: raw entries without ids.
* ``[[...], [...]]``: tabular rows, optionally led by a header row.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Final, cast

from pydantic import ValidationError

from scoutrecon.domain.model import (
    COUNTER_FIELDS,
    FLAG_FIELDS,
    Alliance,
    ScoutingRecord,
    make_record_id,
)
from scoutrecon.domain.model.scouting import RECORD_ID_SEPARATOR

from .schema import ScoutingEntryPayload

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

log = getLogger(__name__)

# Column order of headerless tabular exports.
TABLE_COLUMNS: Final[tuple[str, ...]] = (
    "event_key",
    "match_number",
    "team_number",
    "alliance",
    "scout_name",
    *COUNTER_FIELDS,
    *FLAG_FIELDS,
    "comment",
)

HEADER_MARKERS: Final[tuple[str, ...]] = ("match", "team")


class PayloadShape(StrEnum):
    ENTRIES = "entries"
    RAW_DATA = "raw-data"
    TABLE = "table"


class PayloadFormatError(ValueError):
    """The payload matches none of the accepted import shapes."""


@dataclass(frozen=True, slots=True)
class ParsedPayload:
    shape: PayloadShape
    records: list[ScoutingRecord]
    skipped: int = 0


def detect_shape(payload: object) -> PayloadShape:
    if isinstance(payload, dict):
        if isinstance(payload.get("entries"), list):
            return PayloadShape.ENTRIES
        if isinstance(payload.get("data"), list):
            return PayloadShape.RAW_DATA
    if isinstance(payload, list):
        return PayloadShape.TABLE
    raise PayloadFormatError(
        "Expected an object with 'entries' or 'data', or an array of rows"
    )


def is_header_row(row: object) -> bool:
    if not isinstance(row, list) or not row or not isinstance(row[0], str):
        return False
    return any(
        isinstance(cell, str) and any(marker in cell.lower() for marker in HEADER_MARKERS)
        for cell in row
    )


def _row_to_mapping(row: Sequence[object], columns: Sequence[str]) -> dict[str, object]:
    return {column: value for column, value in zip(columns, row, strict=False) if column}


def _created_at_from_id(record_id: str) -> datetime | None:
    tail = record_id.rsplit(RECORD_ID_SEPARATOR, 1)[-1]
    if not tail.isdigit():
        return None
    return datetime.fromtimestamp(int(tail) / 1000, tz=UTC)


def _created_at_from_timestamp(value: object) -> datetime | None:
    if isinstance(value, int | float) and not isinstance(value, bool):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    return None


def _build_record(
    entry: ScoutingEntryPayload,
    *,
    created_at: datetime,
    record_id: str | None = None,
) -> ScoutingRecord:
    alliance = Alliance.parse(entry.alliance)
    data = entry.model_dump(exclude={"alliance"})
    return ScoutingRecord(
        **data,
        alliance=alliance,
        created_at=created_at,
        id=record_id
        or make_record_id(
            event_key=entry.event_key,
            match_number=entry.match_number,
            team_number=entry.team_number,
            alliance=alliance,
            created_at=created_at,
        ),
    )


def _validate_entry(raw: object, position: int) -> ScoutingEntryPayload | None:
    if isinstance(raw, list):
        raw = _row_to_mapping(raw, TABLE_COLUMNS)
    if not isinstance(raw, dict):
        log.warning(f"Skipping import row {position}: not an object")
        return None
    try:
        entry = ScoutingEntryPayload.model_validate(raw)
    except ValidationError as exc:
        log.warning(f"Skipping import row {position}: {exc.error_count()} invalid field(s)")
        return None
    if not entry.has_identity:
        log.warning(f"Skipping import row {position}: no match or team number")
        return None
    return entry


class _Parser:
    def __init__(self, now: datetime) -> None:
        self._now = now
        self._generated = 0
        self.skipped = 0
        self.records: list[ScoutingRecord] = []

    def _next_timestamp(self) -> datetime:
        # Distinct milliseconds keep regenerated ids unique within one import.
        stamp = self._now + timedelta(milliseconds=self._generated)
        self._generated += 1
        return stamp

    def add(
        self,
        raw: object,
        position: int,
        *,
        envelope: Mapping[str, object] | None = None,
    ) -> None:
        entry = _validate_entry(raw, position)
        if entry is None:
            self.skipped += 1
            return

        record_id = envelope.get("id") if envelope is not None else None
        if isinstance(record_id, str) and RECORD_ID_SEPARATOR in record_id:
            created_at = (
                _created_at_from_id(record_id)
                or _created_at_from_timestamp(envelope.get("timestamp") if envelope else None)
                or self._next_timestamp()
            )
            self.records.append(_build_record(entry, created_at=created_at, record_id=record_id))
            return

        created_at = self._next_timestamp()
        self.records.append(_build_record(entry, created_at=created_at))


def parse_payload(payload: object, *, now: datetime | None = None) -> ParsedPayload:
    """Parse a decoded JSON payload into :class:`ScoutingRecord` instances.

    Rows without a match or team number are skipped and counted; a payload
    that matches no shape raises :class:`PayloadFormatError`.
    """

    shape = detect_shape(payload)
    parser = _Parser(now or datetime.now(UTC))

    if shape is PayloadShape.ENTRIES:
        entries = cast("dict[str, list[object]]", payload)["entries"]
        for position, envelope in enumerate(entries):
            if isinstance(envelope, dict) and isinstance(envelope.get("data"), dict | list):
                parser.add(envelope["data"], position, envelope=envelope)
            else:
                parser.add(envelope, position)
    elif shape is PayloadShape.RAW_DATA:
        raw_rows = cast("dict[str, list[object]]", payload)["data"]
        for position, raw in enumerate(raw_rows):
            parser.add(raw, position)
    else:
        rows = list(cast("list[object]", payload))
        columns: Sequence[str] = TABLE_COLUMNS
        if rows and is_header_row(rows[0]):
            header = cast("list[object]", rows.pop(0))
            columns = [str(cell).strip() for cell in header]
        for position, row in enumerate(rows):
            if isinstance(row, list):
                parser.add(_row_to_mapping(row, columns), position)
            else:
                parser.add(row, position)

    if parser.skipped:
        log.warning(f"Skipped {parser.skipped} unusable row(s) in {shape} payload")
    return ParsedPayload(shape=shape, records=parser.records, skipped=parser.skipped)


def load_payload(path: Path) -> object:
    """Read and decode a JSON import file."""

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise PayloadFormatError(f"{path} is not valid JSON: {exc.msg}") from exc
