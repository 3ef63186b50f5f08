"""Apply conflict detection to the store and drive interactive resolution.

States::

    IDLE -> IMPORTING -> [BATCH_REVIEW_PENDING] -> CONFLICT_PENDING(i) ... -> IDLE

``begin()`` applies every auto-import and auto-replace in a single unit of
work. What remains is resolved one conflict at a time (``resolve``), all at
once (``resolve_all``) or, for the batch-review bucket, in bulk
(``decide_batch``). Each conflict decision can be rewound with ``undo``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from scoutrecon.domain.model import ScoutingRecord

from .contracts import (
    BatchDecision,
    ConflictInfo,
    DetectionResult,
    MergeApplyError,
    MergeStateError,
    MergeSummary,
    Resolution,
    UploadMode,
    UploadOutcome,
)
from .detect import DEFAULT_BATCH_REVIEW_THRESHOLD, detect_conflicts

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scoutrecon.domain.ports.persistence import ScoutingRecordRepository
    from scoutrecon.domain.ports.unit_of_work import ScoutingUnitOfWork

log = logging.getLogger(__name__)


class MergeState(StrEnum):
    IDLE = "idle"
    IMPORTING = "importing"
    BATCH_REVIEW_PENDING = "batch-review-pending"
    CONFLICT_PENDING = "conflict-pending"


@dataclass(frozen=True, slots=True)
class _UndoEntry:
    index: int
    resolution: Resolution
    removed: tuple[ScoutingRecord, ...] = ()


def _detached_copy(record: ScoutingRecord) -> ScoutingRecord:
    return ScoutingRecord(**record.copy_data())


def _replace_key(
    records: ScoutingRecordRepository,
    incoming: ScoutingRecord,
) -> tuple[ScoutingRecord, ...]:
    removed = tuple(_detached_copy(record) for record in records.delete_key(incoming.key))
    records.add(incoming)
    return removed


class MergeOrchestrator:
    def __init__(
        self,
        unit_of_work_factory: Callable[[], ScoutingUnitOfWork],
        *,
        batch_review_threshold: int = DEFAULT_BATCH_REVIEW_THRESHOLD,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self.batch_review_threshold = batch_review_threshold
        self.state = MergeState.IDLE
        self.summary = MergeSummary()
        self.batch_review: list[ConflictInfo] = []
        self.pending: list[ConflictInfo] = []
        self.index = 0
        self._undo: list[_UndoEntry] = []

    @property
    def current_conflict(self) -> ConflictInfo | None:
        if self.state is not MergeState.CONFLICT_PENDING:
            return None
        return self.pending[self.index]

    @property
    def remaining(self) -> int:
        if self.state is not MergeState.CONFLICT_PENDING:
            return 0
        return len(self.pending) - self.index

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    def begin(self, incoming: Sequence[ScoutingRecord]) -> UploadOutcome:
        """Import ``incoming`` and return what was applied and what awaits a decision."""

        if self.state is not MergeState.IDLE:
            raise MergeStateError(f"Cannot start an import while {self.state}")

        self.state = MergeState.IMPORTING
        self.summary = MergeSummary()
        self.batch_review = []
        self.pending = []
        self.index = 0
        self._undo = []

        try:
            detection = self._detect_and_apply(incoming)
        except Exception:
            self.state = MergeState.IDLE
            raise

        self.summary.auto_imported = len(detection.auto_import)
        self.summary.auto_replaced = len(detection.auto_replace)
        self.summary.duplicates_skipped = len(detection.duplicates)
        self.batch_review = list(detection.batch_review)
        self.pending = list(detection.conflicts)
        log.info(
            "Merged %s incoming records: imported=%s, replaced=%s, duplicates=%s, "
            "batch_review=%s, conflicts=%s",
            len(incoming),
            self.summary.auto_imported,
            self.summary.auto_replaced,
            self.summary.duplicates_skipped,
            len(self.batch_review),
            len(self.pending),
        )
        self._advance_state()

        return UploadOutcome(
            mode=UploadMode.SMART_MERGE,
            added=self.summary.auto_imported,
            replaced=self.summary.auto_replaced,
            duplicates_skipped=self.summary.duplicates_skipped,
            batch_review=tuple(self.batch_review),
            conflicts=tuple(self.pending),
        )

    def _detect_and_apply(self, incoming: Sequence[ScoutingRecord]) -> DetectionResult:
        matches = {(record.event_key, record.match_number) for record in incoming}
        try:
            with self._uow_factory() as uow:
                records = uow.repositories.records
                existing = [
                    record
                    for event_key, match_number in sorted(matches)
                    for record in records.list_for_match(event_key, match_number)
                ]
                detection = detect_conflicts(
                    incoming,
                    existing,
                    batch_review_threshold=self.batch_review_threshold,
                )
                for record in detection.auto_import:
                    records.add(record)
                for replacement in detection.auto_replace:
                    _replace_key(records, replacement.incoming)
                uow.commit()
        except Exception as exc:
            raise MergeApplyError("Import failed; no records were written") from exc
        return detection

    def decide_batch(self, decision: BatchDecision) -> None:
        """Apply one decision to every record in the batch-review bucket."""

        if self.state is not MergeState.BATCH_REVIEW_PENDING:
            raise MergeStateError(f"No batch review pending (state={self.state})")

        staged = self.batch_review
        if decision is BatchDecision.REVIEW_EACH:
            self.pending = [*staged, *self.pending]
        elif decision is BatchDecision.REPLACE_ALL:
            self._apply_replacements([conflict.incoming for conflict in staged])
            self.summary.user_replaced += len(staged)
        else:
            self.summary.user_skipped += len(staged)
        self.batch_review = []
        self._advance_state()

    def resolve(self, resolution: Resolution) -> None:
        """Decide the current conflict and move to the next one."""

        conflict = self.current_conflict
        if conflict is None:
            raise MergeStateError(f"No conflict pending (state={self.state})")

        removed: tuple[ScoutingRecord, ...] = ()
        if resolution is Resolution.REPLACE:
            removed = self._apply_replacements([conflict.incoming])
            self.summary.user_replaced += 1
        else:
            self.summary.user_skipped += 1

        self._undo.append(_UndoEntry(index=self.index, resolution=resolution, removed=removed))
        self.index += 1
        self._advance_state()

    def resolve_all(self, resolution: Resolution) -> None:
        while self.current_conflict is not None:
            self.resolve(resolution)

    def undo(self) -> bool:
        """Rewind the most recent conflict decision. Returns False when there is none."""

        if not self._undo:
            return False
        entry = self._undo[-1]
        conflict = self.pending[entry.index]
        if entry.resolution is Resolution.REPLACE:
            try:
                with self._uow_factory() as uow:
                    records = uow.repositories.records
                    records.delete_key(conflict.key)
                    for record in entry.removed:
                        records.add(_detached_copy(record))
                    uow.commit()
            except Exception as exc:
                raise MergeApplyError(f"Undo failed for {conflict.key}") from exc
            self.summary.user_replaced -= 1
        else:
            self.summary.user_skipped -= 1

        self._undo.pop()
        self.index = entry.index
        self.state = MergeState.CONFLICT_PENDING
        return True

    def _apply_replacements(
        self, incoming: Sequence[ScoutingRecord]
    ) -> tuple[ScoutingRecord, ...]:
        removed: list[ScoutingRecord] = []
        try:
            with self._uow_factory() as uow:
                for record in incoming:
                    removed.extend(_replace_key(uow.repositories.records, _detached_copy(record)))
                uow.commit()
        except Exception as exc:
            keys = ", ".join(str(tuple(record.key)) for record in incoming)
            raise MergeApplyError(f"Replace failed for {keys}; store unchanged") from exc
        return tuple(removed)

    def _advance_state(self) -> None:
        if self.batch_review:
            self.state = MergeState.BATCH_REVIEW_PENDING
        elif self.index < len(self.pending):
            self.state = MergeState.CONFLICT_PENDING
        else:
            if self.state is not MergeState.IDLE:
                log.info("Merge finished: %s", self.summary)
            self.state = MergeState.IDLE
