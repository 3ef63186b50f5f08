from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import pytest

from scoutrecon.domain.merge import (
    BatchDecision,
    MergeApplyError,
    MergeOrchestrator,
    MergeState,
    MergeStateError,
    Resolution,
    UploadMode,
)
from tests.helpers.records import BASE_TIME, corrected, make_batch, make_record

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scoutrecon.domain.model import ScoutingRecord
    from tests.helpers.fakes import FakeUnitOfWork, InMemoryStore

LATER = BASE_TIME + timedelta(hours=2)


def _seed(store: InMemoryStore, records: Sequence[ScoutingRecord]) -> None:
    for record in records:
        store.records[record.id] = record


def _stored_ids(store: InMemoryStore) -> set[str]:
    return set(store.records)


def _conflicting(count: int) -> tuple[list[ScoutingRecord], list[ScoutingRecord]]:
    """Corrected local records and uncorrected incoming ones that differ."""

    local = [corrected(record) for record in make_batch(count)]
    incoming = [
        make_record(record.team_number, match_number="1", created_at=LATER, comment="late")
        for record in local
    ]
    return local, incoming


def test_begin_imports_new_records_in_one_commit(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    incoming = make_batch(5)
    orchestrator = MergeOrchestrator(memory_unit_of_work)

    outcome = orchestrator.begin(incoming)

    assert outcome.mode is UploadMode.SMART_MERGE
    assert outcome.added == 5
    assert not outcome.has_conflicts
    assert orchestrator.state is MergeState.IDLE
    assert _stored_ids(memory_store) == {record.id for record in incoming}
    assert memory_store.commits == 1


def test_begin_replaces_uncorrected_records(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local = make_record(teleop_coral_place_l1_count=1)
    _seed(memory_store, [local])
    incoming = make_record(created_at=LATER, teleop_coral_place_l1_count=4)

    outcome = MergeOrchestrator(memory_unit_of_work).begin([incoming])

    assert outcome.replaced == 1
    assert _stored_ids(memory_store) == {incoming.id}


def test_conflict_is_resolved_by_replacing(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(1)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work)

    outcome = orchestrator.begin(incoming)

    assert outcome.has_conflicts
    assert orchestrator.state is MergeState.CONFLICT_PENDING
    conflict = orchestrator.current_conflict
    assert conflict is not None
    assert conflict.changed_fields == ("comment",)
    assert orchestrator.remaining == 1

    orchestrator.resolve(Resolution.REPLACE)

    assert orchestrator.state is MergeState.IDLE
    assert orchestrator.summary.user_replaced == 1
    assert _stored_ids(memory_store) == {incoming[0].id}
    assert memory_store.records[incoming[0].id].comment == "late"


def test_resolve_all_skip_leaves_store_untouched(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(2)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work)
    orchestrator.begin(incoming)

    orchestrator.resolve_all(Resolution.SKIP)

    assert orchestrator.state is MergeState.IDLE
    assert orchestrator.summary.user_skipped == 2
    assert _stored_ids(memory_store) == {record.id for record in local}


def test_undo_restores_replaced_record(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(2)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work)
    orchestrator.begin(incoming)
    orchestrator.resolve(Resolution.REPLACE)

    assert orchestrator.undo()

    assert orchestrator.state is MergeState.CONFLICT_PENDING
    assert orchestrator.index == 0
    assert orchestrator.summary.user_replaced == 0
    assert _stored_ids(memory_store) == {record.id for record in local}
    assert memory_store.records[local[0].id].is_corrected


def test_undo_after_last_decision_reopens_the_queue(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(1)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work)
    orchestrator.begin(incoming)
    orchestrator.resolve(Resolution.SKIP)
    assert orchestrator.state is MergeState.IDLE

    assert orchestrator.undo()

    assert orchestrator.state is MergeState.CONFLICT_PENDING
    assert orchestrator.summary.user_skipped == 0
    assert orchestrator.current_conflict is not None


def test_undo_with_no_decisions_returns_false(
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    orchestrator = MergeOrchestrator(memory_unit_of_work)

    assert not orchestrator.can_undo
    assert orchestrator.undo() is False


def test_operations_outside_their_state_are_rejected(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    orchestrator = MergeOrchestrator(memory_unit_of_work)
    with pytest.raises(MergeStateError):
        orchestrator.resolve(Resolution.SKIP)
    with pytest.raises(MergeStateError):
        orchestrator.decide_batch(BatchDecision.SKIP_ALL)

    local, incoming = _conflicting(1)
    _seed(memory_store, local)
    orchestrator.begin(incoming)
    with pytest.raises(MergeStateError):
        orchestrator.begin(incoming)


def test_failed_replace_keeps_state_and_store(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(2)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work)
    orchestrator.begin(incoming)
    memory_store.fail_writes = True

    with pytest.raises(MergeApplyError):
        orchestrator.resolve(Resolution.REPLACE)

    assert orchestrator.state is MergeState.CONFLICT_PENDING
    assert orchestrator.index == 0
    assert orchestrator.summary.user_replaced == 0
    assert _stored_ids(memory_store) == {record.id for record in local}


def test_failed_import_writes_nothing(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    memory_store.fail_writes = True
    orchestrator = MergeOrchestrator(memory_unit_of_work)

    with pytest.raises(MergeApplyError):
        orchestrator.begin(make_batch(3))

    assert orchestrator.state is MergeState.IDLE
    assert memory_store.records == {}
    assert memory_store.commits == 0


@pytest.mark.parametrize(
    ("decision", "expected_replaced", "expected_skipped"),
    [
        (BatchDecision.REPLACE_ALL, 3, 0),
        (BatchDecision.SKIP_ALL, 0, 3),
    ],
)
def test_batch_decision_applies_to_whole_bucket(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
    decision: BatchDecision,
    expected_replaced: int,
    expected_skipped: int,
) -> None:
    local, incoming = _conflicting(3)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work, batch_review_threshold=3)

    outcome = orchestrator.begin(incoming)
    assert len(outcome.batch_review) == 3
    assert orchestrator.state is MergeState.BATCH_REVIEW_PENDING

    orchestrator.decide_batch(decision)

    assert orchestrator.state is MergeState.IDLE
    assert orchestrator.summary.user_replaced == expected_replaced
    assert orchestrator.summary.user_skipped == expected_skipped
    expected = incoming if decision is BatchDecision.REPLACE_ALL else local
    assert _stored_ids(memory_store) == {record.id for record in expected}


def test_review_each_moves_batch_into_conflict_queue(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    local, incoming = _conflicting(3)
    _seed(memory_store, local)
    orchestrator = MergeOrchestrator(memory_unit_of_work, batch_review_threshold=3)
    orchestrator.begin(incoming)

    orchestrator.decide_batch(BatchDecision.REVIEW_EACH)

    assert orchestrator.state is MergeState.CONFLICT_PENDING
    assert orchestrator.remaining == 3
    assert orchestrator.batch_review == []
