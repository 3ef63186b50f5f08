"""Classify incoming scouting records against the canonical store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .contracts import (
    ConflictInfo,
    ConflictKind,
    DetectionResult,
    MergeClassification,
    Replacement,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoutrecon.domain.model import RecordKey, ScoutingRecord

DEFAULT_BATCH_REVIEW_THRESHOLD = 20


def classify_against(existing: ScoutingRecord | None) -> MergeClassification:
    """Decide an incoming record's fate from the canonical record it would displace.

    Only a corrected canonical record can stop an import; whether the incoming
    record is itself corrected only matters for the resulting ``ConflictKind``.
    """

    if existing is None:
        return MergeClassification.AUTO_IMPORT
    if not existing.is_corrected:
        return MergeClassification.AUTO_REPLACE
    return MergeClassification.NEEDS_REVIEW


def _canonical(candidates: Sequence[ScoutingRecord]) -> ScoutingRecord:
    # concurrent devices can leave several records per key; a corrected one wins
    return max(candidates, key=lambda record: (record.is_corrected, record.created_at))


def canonical_by_key(records: Iterable[ScoutingRecord]) -> dict[RecordKey, ScoutingRecord]:
    grouped: dict[RecordKey, list[ScoutingRecord]] = {}
    for record in records:
        grouped.setdefault(record.key, []).append(record)
    return {key: _canonical(candidates) for key, candidates in grouped.items()}


def detect_conflicts(
    incoming: Sequence[ScoutingRecord],
    existing: Iterable[ScoutingRecord],
    *,
    batch_review_threshold: int = DEFAULT_BATCH_REVIEW_THRESHOLD,
) -> DetectionResult:
    """Split ``incoming`` into auto-import, auto-replace and review buckets.

    Records are matched on (event, match, team); alliance never takes part in
    matching and shows up as a changed field instead. Incoming records are
    processed in order, and an accepted record becomes the canonical one for
    later records in the same batch.
    """

    view = canonical_by_key(existing)
    large_batch = len(incoming) >= batch_review_threshold
    result = DetectionResult()

    for record in incoming:
        current = view.get(record.key)
        classification = classify_against(current)
        if current is None or classification is MergeClassification.AUTO_IMPORT:
            result.auto_import.append(record)
            view[record.key] = record
            continue
        if classification is MergeClassification.AUTO_REPLACE:
            result.auto_replace.append(Replacement(existing=current, incoming=record))
            view[record.key] = record
            continue

        kind = (
            ConflictKind.CORRECTED_VS_CORRECTED
            if record.is_corrected
            else ConflictKind.CORRECTED_VS_UNCORRECTED
        )
        conflict = ConflictInfo(
            local=current,
            incoming=record,
            kind=kind,
            changed_fields=current.changed_fields(record),
        )
        if not conflict.changed_fields:
            result.duplicates.append(conflict)
        elif large_batch and kind is ConflictKind.CORRECTED_VS_UNCORRECTED:
            result.batch_review.append(conflict)
        else:
            result.conflicts.append(conflict)

    return result
