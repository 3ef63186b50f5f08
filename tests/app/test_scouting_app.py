from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from scoutrecon import app
from scoutrecon.domain.merge import MergeApplyError, UploadMode
from scoutrecon.domain.model import DEFAULT_VALIDATION_CONFIG, Alliance, ValidationStatus
from scoutrecon.domain.validation import SkipReason, ValidationPhase
from tests.helpers.records import (
    BLUE_TEAMS,
    EVENT_KEY,
    make_alliance_records,
    make_match,
    make_record,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from scoutrecon.domain.model import OfficialMatch, ScoutingRecord, ValidationConfig
    from scoutrecon.domain.validation import ValidationProgress
    from tests.helpers.fakes import FakeUnitOfWork, InMemoryStore

VALIDATED_AT = datetime(2025, 3, 1, 18, 0, tzinfo=UTC)


@dataclass
class FakeProvider:
    matches: list[OfficialMatch] = field(default_factory=list)

    def get_match(self, event_key: str, match_key: str) -> OfficialMatch | None:
        _ = event_key
        return next((match for match in self.matches if match.key == match_key), None)

    def get_event_matches(self, event_key: str) -> list[OfficialMatch]:
        return [match for match in self.matches if match.event_key == event_key]


@dataclass
class FixedConfigStore:
    config: ValidationConfig

    def load(self) -> ValidationConfig:
        return self.config


def _device_entry(team: str, match: str = "10", **fields: object) -> dict[str, object]:
    return {
        "eventName": EVENT_KEY,
        "matchNumber": match,
        "selectTeam": team,
        "alliance": "red",
        "scoutName": f"scout-{team}",
        **fields,
    }


def _full_match(match_number: str = "10") -> list[ScoutingRecord]:
    return [
        *make_alliance_records(match_number=match_number),
        *make_alliance_records(BLUE_TEAMS, alliance=Alliance.BLUE, match_number=match_number),
    ]


def _store_records(store: InMemoryStore, records: list[ScoutingRecord]) -> None:
    for record in records:
        store.records[record.id] = record


def test_smart_merge_import_reports_new_records(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    payload = {"data": [_device_entry("100"), _device_entry("200"), _device_entry("")]}

    result = app.import_scouting_payload(payload, unit_of_work_factory=memory_unit_of_work)

    assert result.parsed.skipped == 1
    assert result.outcome.added == 2
    assert not result.outcome.has_conflicts
    assert result.orchestrator is not None
    assert len(memory_store.records) == 2


def test_overwrite_replaces_whole_store(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, [make_record("999", match_number="1")])

    result = app.import_scouting_payload(
        {"data": [_device_entry("100")]},
        mode=UploadMode.OVERWRITE,
        unit_of_work_factory=memory_unit_of_work,
    )

    assert result.outcome.added == 1
    assert result.orchestrator is None
    assert [record.team_number for record in memory_store.records.values()] == ["100"]


def test_append_keeps_existing_records(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, [make_record("100")])

    app.import_scouting_payload(
        {"data": [_device_entry("100", autoCoralPlaceL1Count=2)]},
        mode=UploadMode.APPEND,
        unit_of_work_factory=memory_unit_of_work,
    )

    assert len(memory_store.records) == 2


@pytest.mark.parametrize("mode", [UploadMode.APPEND, UploadMode.OVERWRITE])
def test_failed_bulk_import_writes_nothing(
    mode: UploadMode,
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    existing = make_record("300")
    _store_records(memory_store, [existing])
    memory_store.fail_writes = True

    with pytest.raises(MergeApplyError):
        app.import_scouting_payload(
            {"data": [_device_entry("100")]}, mode=mode, unit_of_work_factory=memory_unit_of_work
        )

    assert list(memory_store.records) == [existing.id]


def test_correction_through_app(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    record = make_record()
    _store_records(memory_store, [record])

    saved = app.save_scouting_correction(
        record, corrected_by="Lead", unit_of_work_factory=memory_unit_of_work
    )

    assert saved.is_corrected
    assert list(memory_store.records) == [saved.id]


def test_validate_match_stores_verdict(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, _full_match())
    provider = FakeProvider([make_match(10)])

    outcome = app.validate_match(
        EVENT_KEY,
        "10",
        provider=provider,
        unit_of_work_factory=memory_unit_of_work,
        config=app.load_validation_config(FixedConfigStore(DEFAULT_VALIDATION_CONFIG)),
        validated_at=VALIDATED_AT,
    )

    assert outcome.match_key == f"{EVENT_KEY}_qm10"
    assert outcome.skipped is None
    assert outcome.result is not None
    assert outcome.result.status is ValidationStatus.PASSED
    assert memory_store.results == {(EVENT_KEY, outcome.match_key): outcome.result}


def test_validate_match_skips_without_official_or_scouted_data(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    unplayed = make_match(11, red_score=-1, blue_score=-1, with_breakdown=False)
    provider = FakeProvider([make_match(10), unplayed])

    def run(match_number: str) -> app.MatchValidationOutcome:
        return app.validate_match(
            EVENT_KEY,
            match_number,
            provider=provider,
            unit_of_work_factory=memory_unit_of_work,
            config=DEFAULT_VALIDATION_CONFIG,
        )

    no_records, not_played, unknown = run("10"), run("11"), run("12")

    assert no_records.skipped is SkipReason.NO_SCOUTED_DATA
    assert not_played.skipped is SkipReason.NO_OFFICIAL_DATA
    assert unknown.skipped is SkipReason.NO_OFFICIAL_DATA
    assert memory_store.results == {}


def test_validate_event_stores_each_verdict_and_reports_phases(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, _full_match("1"))
    provider = FakeProvider(
        [make_match(1), make_match(2), make_match(1, comp_level="sf", set_number=1)]
    )
    phases: list[ValidationPhase] = []
    runs: list[object] = []

    def on_progress(progress: ValidationProgress) -> None:
        if not phases or phases[-1] is not progress.phase:
            phases.append(progress.phase)

    report = app.validate_event(
        EVENT_KEY,
        provider=provider,
        unit_of_work_factory=memory_unit_of_work,
        config=DEFAULT_VALIDATION_CONFIG,
        on_progress=on_progress,
        run_hook=runs.append,
    )

    assert report.validated == 1
    assert report.skipped_no_scouted == [f"{EVENT_KEY}_qm2"]
    assert len(runs) == 1
    assert list(memory_store.results) == [(EVENT_KEY, f"{EVENT_KEY}_qm1")]
    assert phases[:2] == [ValidationPhase.FETCHING_SCOUTED, ValidationPhase.FETCHING_OFFICIAL]
    assert phases[-1] is ValidationPhase.COMPLETE


def test_validate_event_survives_a_failed_result_write(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, [*_full_match("1"), *_full_match("2")])
    memory_store.failing_result_keys.add(f"{EVENT_KEY}_qm1")

    report = app.validate_event(
        EVENT_KEY,
        provider=FakeProvider([make_match(1), make_match(2)]),
        unit_of_work_factory=memory_unit_of_work,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    assert list(report.errors) == [f"{EVENT_KEY}_qm1"]
    assert [result.match_key for result in report.results] == [f"{EVENT_KEY}_qm2"]
    assert list(memory_store.results) == [(EVENT_KEY, f"{EVENT_KEY}_qm2")]


def test_summary_completeness_and_clear(
    memory_store: InMemoryStore,
    memory_unit_of_work: Callable[[], FakeUnitOfWork],
) -> None:
    _store_records(memory_store, _full_match("1"))
    _store_records(memory_store, make_alliance_records(match_number="2"))
    provider = FakeProvider([make_match(1), make_match(2)])
    app.validate_event(
        EVENT_KEY,
        provider=provider,
        unit_of_work_factory=memory_unit_of_work,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    event_summary = app.summarize_event(EVENT_KEY, unit_of_work_factory=memory_unit_of_work)
    completeness = app.event_completeness(
        EVENT_KEY, provider=provider, unit_of_work_factory=memory_unit_of_work
    )

    assert event_summary.summary.total_matches == 2
    results = app.load_results(EVENT_KEY, unit_of_work_factory=memory_unit_of_work)
    assert [result.match_key for result in results] == [f"{EVENT_KEY}_qm1", f"{EVENT_KEY}_qm2"]
    assert completeness.complete_matches == 1
    assert completeness.incomplete_matches == (f"{EVENT_KEY}_qm2",)
    assert completeness.missing_records == 3
    assert app.clear_results(EVENT_KEY, unit_of_work_factory=memory_unit_of_work) == 2
    assert memory_store.results == {}


def test_offline_provider_has_no_client(memory_unit_of_work: Callable[[], FakeUnitOfWork]) -> None:
    provider = app.build_official_provider(memory_unit_of_work, offline=True)

    assert getattr(provider, "client", "missing") is None
