from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from scoutrecon.domain.model import (
    DEFAULT_VALIDATION_CONFIG,
    Alliance,
    ConfidenceLevel,
    DataCategory,
    Severity,
    ValidationStatus,
)
from scoutrecon.domain.validation import (
    aggregate_alliance,
    compare_alliance,
    extract_alliance,
    validate_match,
    validate_match_records,
)
from scoutrecon.domain.validation.match import NO_DATA_NOTE, split_by_alliance
from tests.helpers.records import (
    BLUE_TEAMS,
    EVENT_KEY,
    RED_TEAMS,
    make_alliance_records,
    make_breakdown,
    make_match,
    make_record,
    reef,
)

if TYPE_CHECKING:
    from scoutrecon.domain.model import OfficialMatch, ScoutingRecord

VALIDATED_AT = datetime(2025, 3, 1, 18, 0, tzinfo=UTC)


def _perfect_red_breakdown() -> dict[str, object]:
    return {
        "auto_reef": reef(l4=3),
        "teleop_reef": reef(l4=3),
        "auto_coral_count": 3,
        "auto_coral_points": 21,
    }


def test_perfect_scouting_passes_with_high_confidence() -> None:
    match = make_match(red=make_breakdown(**_perfect_red_breakdown()))

    result = validate_match(
        event_key=EVENT_KEY,
        match_number="10",
        red_records=make_alliance_records(auto_coral_place_l4_count=1),
        blue_records=make_alliance_records(BLUE_TEAMS, alliance=Alliance.BLUE),
        official=match,
        config=DEFAULT_VALIDATION_CONFIG,
        validated_at=VALIDATED_AT,
    )

    assert result.id == f"{EVENT_KEY}_{match.key}"
    assert result.status is ValidationStatus.PASSED
    assert result.confidence is ConfidenceLevel.HIGH
    assert result.total_discrepancies == 0
    assert not result.flagged_for_review
    assert not result.requires_rescout
    assert result.validated_at == VALIDATED_AT
    assert result.red.total_scouted_points == result.red.total_official_points == 21
    assert result.red.score_difference == 0
    assert [team.team_number for team in result.teams] == [*RED_TEAMS, *BLUE_TEAMS]
    assert all(team.has_scouted_data for team in result.teams)


def test_missing_team_lowers_confidence() -> None:
    match = make_match(red=make_breakdown(**_perfect_red_breakdown()))
    red_records = make_alliance_records(RED_TEAMS[:2], auto_coral_place_l4_count=1)

    result = validate_match(
        event_key=EVENT_KEY,
        match_number="10",
        red_records=red_records,
        blue_records=make_alliance_records(BLUE_TEAMS, alliance=Alliance.BLUE),
        official=match,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    assert result.red.scouted.missing_teams == ("300",)
    assert result.red.confidence is ConfidenceLevel.LOW
    assert result.confidence is ConfidenceLevel.LOW
    missing = next(team for team in result.teams if team.team_number == "300")
    assert not missing.has_scouted_data
    assert missing.flag_for_review
    assert missing.notes == (NO_DATA_NOTE,)
    assert missing.scoring_breakdown is None


def _both_alliances() -> list[ScoutingRecord]:
    return make_alliance_records() + make_alliance_records(BLUE_TEAMS, alliance=Alliance.BLUE)


def _failing_red_match(*, with_climbs: bool) -> OfficialMatch:
    end_game = ("DeepCage", "DeepCage", "DeepCage") if with_climbs else ("None",) * 3
    return make_match(
        red=make_breakdown(
            auto_reef=reef(l4=4),
            teleop_reef=reef(l4=4),
            auto_coral_count=4,
            end_game_robots=end_game,
        )
    )


def test_failed_alliance_keeps_match_from_passing() -> None:
    result = validate_match_records(
        event_key=EVENT_KEY,
        match_number="10",
        records=_both_alliances(),
        official=_failing_red_match(with_climbs=False),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    assert result.red.status is ValidationStatus.FAILED
    assert result.red.critical_count == 2
    assert result.blue.status is ValidationStatus.PASSED
    assert result.status is ValidationStatus.FLAGGED
    assert result.flagged_for_review
    assert not result.requires_rescout
    assert all(team.flag_for_review for team in result.teams if team.alliance is Alliance.RED)
    assert not any(team.flag_for_review for team in result.teams if team.alliance is Alliance.BLUE)


def test_many_critical_discrepancies_require_rescout() -> None:
    result = validate_match_records(
        event_key=EVENT_KEY,
        match_number="10",
        records=_both_alliances(),
        official=_failing_red_match(with_climbs=True),
        config=DEFAULT_VALIDATION_CONFIG,
    )

    assert result.critical_discrepancies == 3
    assert result.status is ValidationStatus.FAILED
    assert result.requires_rescout
    fields = {item.field for item in result.discrepancies}
    assert {"Auto Coral L4", "Auto Coral Total", "Deep Climbs"} <= fields


def test_single_warning_flags_alliance() -> None:
    match = make_match(red=make_breakdown(net_algae_count=6))
    records = make_alliance_records(teleop_algae_place_net_shot=1)

    scouted = aggregate_alliance(records, Alliance.RED, expected_teams=RED_TEAMS)
    official = extract_alliance(match, Alliance.RED)
    validation = compare_alliance(scouted, official, DEFAULT_VALIDATION_CONFIG)

    assert validation.status is ValidationStatus.FLAGGED
    algae = [item for item in validation.discrepancies if item.category is DataCategory.ALGAE]
    assert {item.field for item in algae} == {"Total Algae Net", "Total Algae"}
    assert all(item.severity is Severity.WARNING for item in algae)


def test_disabled_checks_are_not_compared() -> None:
    config = replace(DEFAULT_VALIDATION_CONFIG, check_algae=False)
    match = make_match(red=make_breakdown(net_algae_count=6))

    scouted = aggregate_alliance(make_alliance_records(), Alliance.RED)
    validation = compare_alliance(scouted, extract_alliance(match, Alliance.RED), config)

    assert validation.discrepancies == ()
    assert validation.status is ValidationStatus.PASSED


def test_match_without_breakdown_compares_against_zeroes() -> None:
    match = make_match(with_breakdown=False)

    result = validate_match_records(
        event_key=EVENT_KEY,
        match_number="10",
        records=make_alliance_records(),
        official=match,
        config=DEFAULT_VALIDATION_CONFIG,
    )

    assert not result.red.official.has_breakdown
    assert result.red.official.total_points == 50
    assert result.blue.scouted.record_count == 0
    assert result.blue.confidence is ConfidenceLevel.LOW


def test_records_without_alliance_use_official_roster(caplog: pytest.LogCaptureFixture) -> None:
    match = make_match()
    records = [
        make_record("400", alliance=None),
        make_record("100", alliance=Alliance.RED),
        make_record("999", alliance=None),
    ]

    with caplog.at_level(logging.WARNING):
        grouped = split_by_alliance(records, match)

    assert [record.team_number for record in grouped[Alliance.BLUE]] == ["400"]
    assert [record.team_number for record in grouped[Alliance.RED]] == ["100"]
    assert "999" in caplog.text
