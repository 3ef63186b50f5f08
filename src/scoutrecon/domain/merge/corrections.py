"""Save a re-scouted record over whatever is stored for its key."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from scoutrecon.domain.model import make_record_id

from .contracts import MergeApplyError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scoutrecon.domain.model import ScoutingRecord
    from scoutrecon.domain.ports.unit_of_work import ScoutingUnitOfWork

log = logging.getLogger(__name__)


def _latest(records: Sequence[ScoutingRecord]) -> ScoutingRecord | None:
    if not records:
        return None
    return max(records, key=lambda record: record.created_at)


def build_correction(
    record: ScoutingRecord,
    previous: ScoutingRecord | None,
    *,
    corrected_by: str,
    notes: str | None = None,
    corrected_at: datetime | None = None,
) -> ScoutingRecord:
    """Return ``record`` stamped with correction metadata relative to ``previous``."""

    timestamp = corrected_at or datetime.now(UTC)
    original_scout = None
    prior_count = 0
    if previous is not None:
        original_scout = previous.original_scout_name or previous.scout_name
        prior_count = previous.correction_count
    return replace(
        record,
        id=make_record_id(
            event_key=record.event_key,
            match_number=record.match_number,
            team_number=record.team_number,
            alliance=record.alliance,
            created_at=timestamp,
        ),
        created_at=timestamp,
        is_corrected=True,
        correction_count=prior_count + 1,
        last_corrected_at=timestamp,
        last_corrected_by=corrected_by,
        correction_notes=notes or None,
        original_scout_name=original_scout,
    )


def save_correction(
    unit_of_work_factory: Callable[[], ScoutingUnitOfWork],
    record: ScoutingRecord,
    *,
    corrected_by: str,
    notes: str | None = None,
    corrected_at: datetime | None = None,
) -> ScoutingRecord:
    """Replace every record at ``record.key`` with a corrected copy, atomically."""

    try:
        with unit_of_work_factory() as uow:
            records = uow.repositories.records
            previous = _latest(records.list_for_key(record.key))
            corrected = build_correction(
                record,
                previous,
                corrected_by=corrected_by,
                notes=notes,
                corrected_at=corrected_at,
            )
            removed = records.delete_key(record.key)
            records.add(corrected)
            uow.commit()
    except Exception as exc:
        raise MergeApplyError(f"Correction for {tuple(record.key)} was not saved") from exc

    log.info(
        "Saved correction #%s for team %s match %s (replaced %s record(s))",
        corrected.correction_count,
        record.team_number,
        record.match_number,
        len(removed),
    )
    return corrected
