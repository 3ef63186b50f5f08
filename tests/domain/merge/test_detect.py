from __future__ import annotations

from datetime import timedelta

from scoutrecon.domain.merge import (
    ConflictKind,
    MergeClassification,
    canonical_by_key,
    classify_against,
    detect_conflicts,
)
from scoutrecon.domain.model import Alliance
from tests.helpers.records import BASE_TIME, corrected, make_batch, make_record

LATER = BASE_TIME + timedelta(hours=2)


def test_classification_matrix() -> None:
    plain = make_record()
    fixed = corrected(make_record())

    assert classify_against(None) is MergeClassification.AUTO_IMPORT
    assert classify_against(plain) is MergeClassification.AUTO_REPLACE
    assert classify_against(fixed) is MergeClassification.NEEDS_REVIEW


def test_corrected_incoming_record_replaces_uncorrected_one() -> None:
    plain = make_record()
    fixed = corrected(make_record(created_at=LATER))

    result = detect_conflicts([fixed], [plain])

    assert [item.incoming for item in result.auto_replace] == [fixed]
    assert result.conflicts == []


def test_new_records_are_all_imported() -> None:
    incoming = make_batch(10)

    result = detect_conflicts(incoming, [])

    assert result.auto_import == incoming
    assert result.auto_replace == []
    assert result.needs_review == []


def test_uncorrected_local_is_replaced_by_corrected_incoming() -> None:
    local = make_record(teleop_coral_place_l2_count=1)
    incoming = corrected(make_record(created_at=LATER, teleop_coral_place_l2_count=3))

    result = detect_conflicts([incoming], [local])

    assert [(item.existing, item.incoming) for item in result.auto_replace] == [(local, incoming)]
    assert result.needs_review == []


def test_corrected_local_needs_review_against_uncorrected_incoming() -> None:
    local = corrected(make_record(teleop_coral_place_l2_count=3))
    incoming = make_record(created_at=LATER, teleop_coral_place_l2_count=1)

    result = detect_conflicts([incoming], [local])

    [conflict] = result.conflicts
    assert conflict.kind is ConflictKind.CORRECTED_VS_UNCORRECTED
    assert conflict.local is local
    assert conflict.incoming is incoming
    assert conflict.changed_fields == ("teleop_coral_place_l2_count",)


def test_alliance_change_is_a_changed_field_not_a_new_key() -> None:
    local = corrected(make_record(alliance=Alliance.RED))
    incoming = make_record(alliance=Alliance.BLUE, created_at=LATER)

    result = detect_conflicts([incoming], [local])

    assert result.auto_import == []
    [conflict] = result.conflicts
    assert conflict.changed_fields == ("alliance",)


def test_identical_incoming_is_a_duplicate() -> None:
    local = corrected(make_record(auto_coral_place_l1_count=2))
    incoming = make_record(auto_coral_place_l1_count=2, created_at=LATER)

    result = detect_conflicts([incoming], [local])

    assert [item.incoming for item in result.duplicates] == [incoming]
    assert result.conflicts == []


def test_corrected_vs_corrected_is_never_batched() -> None:
    locals_ = [corrected(record) for record in make_batch(3)]
    incoming = [
        make_record(record.team_number, match_number="1", created_at=LATER, comment="x")
        for record in locals_
    ]
    incoming[0] = corrected(incoming[0])

    result = detect_conflicts(incoming, locals_, batch_review_threshold=3)

    assert [item.kind for item in result.conflicts] == [ConflictKind.CORRECTED_VS_CORRECTED]
    assert len(result.batch_review) == 2
    assert all(item.kind is ConflictKind.CORRECTED_VS_UNCORRECTED for item in result.batch_review)


def test_small_batch_conflicts_are_reviewed_one_by_one() -> None:
    locals_ = [corrected(record) for record in make_batch(3)]
    incoming = [
        make_record(record.team_number, match_number="1", created_at=LATER, comment="x")
        for record in locals_
    ]

    result = detect_conflicts(incoming, locals_, batch_review_threshold=20)

    assert result.batch_review == []
    assert len(result.conflicts) == 3


def test_corrected_record_is_canonical_for_its_key() -> None:
    fixed = corrected(make_record())
    newer = make_record(created_at=LATER)

    canonical = canonical_by_key([fixed, newer])

    assert canonical[fixed.key] is fixed


def test_accepted_incoming_becomes_canonical_within_batch() -> None:
    first = make_record(teleop_coral_place_l1_count=1)
    second = make_record(created_at=LATER, teleop_coral_place_l1_count=2)

    result = detect_conflicts([first, second], [])

    assert result.auto_import == [first]
    assert [item.existing for item in result.auto_replace] == [first]
