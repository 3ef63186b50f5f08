from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from scoutrecon.domain.model import DEFAULT_VALIDATION_CONFIG, Alliance
from scoutrecon.domain.validation import (
    EventValidationRun,
    SkipReason,
    ValidationPhase,
    ValidationProgress,
)
from tests.helpers.records import BLUE_TEAMS, EVENT_KEY, make_alliance_records, make_match

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from scoutrecon.domain.model import MatchValidationResult, OfficialMatch, ScoutingRecord


def _records_for(match_number: int) -> list[ScoutingRecord]:
    number = str(match_number)
    return make_alliance_records(match_number=number) + make_alliance_records(
        BLUE_TEAMS, alliance=Alliance.BLUE, match_number=number
    )


def _event_matches() -> list[OfficialMatch]:
    return [
        make_match(3),
        make_match(1, comp_level="qf", set_number=1),
        make_match(2, with_breakdown=False, red_score=-1, blue_score=-1),
        make_match(1),
    ]


def _loader(
    scouted: dict[int, list[ScoutingRecord]],
) -> Callable[[OfficialMatch], Sequence[ScoutingRecord]]:
    def load(match: OfficialMatch) -> Sequence[ScoutingRecord]:
        return scouted.get(match.match_number, [])

    return load


def test_run_validates_qualification_matches_in_order() -> None:
    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=_event_matches(),
        load_records=_loader({1: _records_for(1)}),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    report = run.run()

    assert [match.key for match in run.selected_matches()] == [
        f"{EVENT_KEY}_qm1",
        f"{EVENT_KEY}_qm2",
        f"{EVENT_KEY}_qm3",
    ]
    assert [result.match_key for result in report.results] == [f"{EVENT_KEY}_qm1"]
    assert report.skipped_no_official == [f"{EVENT_KEY}_qm2"]
    assert report.skipped_no_scouted == [f"{EVENT_KEY}_qm3"]
    assert report.validated == 1
    assert report.skipped == 2
    assert not report.cancelled


def test_playoff_match_never_borrows_qualification_records() -> None:
    loaded: list[str] = []

    def load(match: OfficialMatch) -> Sequence[ScoutingRecord]:
        loaded.append(match.key)
        return _records_for(match.match_number)

    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=[make_match(1, comp_level="sf", set_number=1), make_match(1)],
        load_records=load,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    report = run.run()

    assert loaded == [f"{EVENT_KEY}_qm1"]
    assert [result.match_key for result in report.results] == [f"{EVENT_KEY}_qm1"]


def test_one_failing_match_does_not_abort_the_run() -> None:
    def load(match: OfficialMatch) -> Sequence[ScoutingRecord]:
        if match.match_number == 1:
            raise RuntimeError("store unavailable")
        return _records_for(match.match_number)

    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=_event_matches(),
        load_records=load,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    report = run.run()

    assert report.errors == {f"{EVENT_KEY}_qm1": "store unavailable"}
    assert [result.match_key for result in report.results] == [f"{EVENT_KEY}_qm3"]


def test_cancel_stops_before_next_match() -> None:
    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=_event_matches(),
        load_records=_loader({1: _records_for(1), 3: _records_for(3)}),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    steps = run.steps()
    first = next(steps)
    run.cancel()

    assert first.result is not None
    assert list(steps) == []
    assert run.cancelled


def test_progress_and_results_are_reported() -> None:
    progress: list[ValidationProgress] = []
    stored: list[MatchValidationResult] = []
    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=_event_matches(),
        load_records=_loader({1: _records_for(1), 3: _records_for(3)}),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    report = run.run(on_progress=progress.append, on_result=stored.append)

    assert stored == report.results
    validating = [item for item in progress if item.phase is ValidationPhase.VALIDATING]
    storing = [item for item in progress if item.phase is ValidationPhase.STORING]
    assert [(item.current, item.total) for item in validating] == [(1, 3), (2, 3), (3, 3)]
    assert [item.match_key for item in storing] == [f"{EVENT_KEY}_qm1", f"{EVENT_KEY}_qm3"]


def test_unplayed_match_is_skipped_without_loading_records() -> None:
    loaded: list[str] = []

    def load(match: OfficialMatch) -> Sequence[ScoutingRecord]:
        loaded.append(match.key)
        return []

    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=[make_match(2, with_breakdown=False, red_score=-1, blue_score=-1)],
        load_records=load,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    step = next(run.steps())

    assert step.skipped is SkipReason.NO_OFFICIAL_DATA
    assert loaded == []


def test_failed_result_write_is_recorded_and_the_run_continues(
    caplog: pytest.LogCaptureFixture,
) -> None:
    stored: list[str] = []

    def store(result: MatchValidationResult) -> None:
        if result.match_key == f"{EVENT_KEY}_qm1":
            raise RuntimeError("disk full")
        stored.append(result.match_key)

    run = EventValidationRun(
        event_key=EVENT_KEY,
        matches=_event_matches(),
        load_records=_loader({1: _records_for(1), 3: _records_for(3)}),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    report = run.run(on_result=store)

    assert report.errors == {f"{EVENT_KEY}_qm1": "disk full"}
    assert [result.match_key for result in report.results] == [f"{EVENT_KEY}_qm3"]
    assert stored == [f"{EVENT_KEY}_qm3"]
    assert "Storing the result of" in caplog.text
