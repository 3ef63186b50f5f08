"""Combine both alliance comparisons into one match-level verdict."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from scoutrecon.domain.model import (
    Alliance,
    ConfidenceLevel,
    MatchValidationResult,
    Severity,
    TeamScoringBreakdown,
    TeamValidation,
    ValidationStatus,
)

from .aggregate import aggregate_alliance
from .compare import compare_alliance
from .extract import extract_alliance

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoutrecon.domain.model import (
        AllianceValidation,
        Discrepancy,
        OfficialMatch,
        ScoutingRecord,
        ValidationConfig,
    )

log = logging.getLogger(__name__)

UNKNOWN_SCOUT = "Unknown"
NO_DATA_NOTE = "No scouted data for this team"
MANY_MINORS = 6


def split_by_alliance(
    records: Iterable[ScoutingRecord],
    official: OfficialMatch,
) -> dict[Alliance, list[ScoutingRecord]]:
    """Group records by their recorded alliance, falling back to the official roster."""

    grouped: dict[Alliance, list[ScoutingRecord]] = {Alliance.RED: [], Alliance.BLUE: []}
    for record in records:
        alliance = record.alliance or official.alliance_of(record.team_number)
        if alliance is None:
            log.warning(
                "Ignoring record %s: alliance unknown and team %s not on the roster",
                record.id,
                record.team_number,
            )
            continue
        grouped[alliance].append(record)
    return grouped


def match_status(
    discrepancies: Sequence[Discrepancy],
    alliances: Sequence[AllianceValidation],
    config: ValidationConfig,
) -> ValidationStatus:
    critical = sum(1 for item in discrepancies if item.severity is Severity.CRITICAL)
    warning = sum(1 for item in discrepancies if item.severity is Severity.WARNING)
    minor = sum(1 for item in discrepancies if item.severity is Severity.MINOR)

    if critical >= config.match_fail_threshold:
        return ValidationStatus.FAILED
    if critical >= config.match_flag_threshold or warning > 0 or minor > MANY_MINORS:
        return ValidationStatus.FLAGGED
    # the match-level thresholds never hide an alliance that already needs attention
    if any(item.status is not ValidationStatus.PASSED for item in alliances):
        return ValidationStatus.FLAGGED
    return ValidationStatus.PASSED


def _scoring_breakdown(record: ScoutingRecord) -> TeamScoringBreakdown:
    return TeamScoringBreakdown(
        auto_coral=record.auto_coral,
        auto_algae_net=record.auto_algae_place_net_shot,
        auto_algae_processor=record.auto_algae_place_processor,
        mobility=record.auto_passed_start_line,
        teleop_coral=record.teleop_coral,
        teleop_algae_net=record.teleop_algae_place_net_shot,
        teleop_algae_processor=record.teleop_algae_place_processor,
        deep_climb=record.deep_climb_attempted,
        shallow_climb=record.shallow_climb_attempted,
        park=record.park_attempted,
    )


def _team_validations(
    alliance: AllianceValidation,
    records: Sequence[ScoutingRecord],
) -> list[TeamValidation]:
    by_team: dict[str, ScoutingRecord] = {}
    for record in records:
        by_team.setdefault(record.team_number, record)

    needs_review = alliance.status in {ValidationStatus.FLAGGED, ValidationStatus.FAILED}
    teams: list[TeamValidation] = []
    for team_number in alliance.official.teams:
        record = by_team.get(team_number)
        if record is None:
            teams.append(
                TeamValidation(
                    team_number=team_number,
                    alliance=alliance.alliance,
                    scout_name=UNKNOWN_SCOUT,
                    has_scouted_data=False,
                    confidence=ConfidenceLevel.LOW,
                    flag_for_review=True,
                    notes=(NO_DATA_NOTE,),
                )
            )
            continue
        teams.append(
            TeamValidation(
                team_number=team_number,
                alliance=alliance.alliance,
                scout_name=record.scout_name or UNKNOWN_SCOUT,
                has_scouted_data=True,
                confidence=alliance.confidence,
                flag_for_review=needs_review,
                is_corrected=record.is_corrected,
                correction_count=record.correction_count,
                last_corrected_at=record.last_corrected_at,
                last_corrected_by=record.last_corrected_by,
                correction_notes=record.correction_notes,
                original_scout_name=record.original_scout_name,
                scoring_breakdown=_scoring_breakdown(record),
            )
        )
    return teams


def validate_match(
    *,
    event_key: str,
    match_number: str,
    red_records: Sequence[ScoutingRecord],
    blue_records: Sequence[ScoutingRecord],
    official: OfficialMatch,
    config: ValidationConfig,
    validated_at: datetime | None = None,
) -> MatchValidationResult:
    """Validate one match. Both alliances are compared independently first."""

    records = {Alliance.RED: red_records, Alliance.BLUE: blue_records}
    alliances: list[AllianceValidation] = []
    for alliance in (Alliance.RED, Alliance.BLUE):
        official_data = extract_alliance(official, alliance)
        scouted = aggregate_alliance(
            records[alliance], alliance, expected_teams=official_data.teams
        )
        alliances.append(compare_alliance(scouted, official_data, config))
    red, blue = alliances

    discrepancies = red.discrepancies + blue.discrepancies
    status = match_status(discrepancies, alliances, config)
    critical = sum(1 for item in discrepancies if item.severity is Severity.CRITICAL)
    warning = sum(1 for item in discrepancies if item.severity is Severity.WARNING)

    teams = _team_validations(red, red_records) + _team_validations(blue, blue_records)

    return MatchValidationResult(
        id=f"{event_key}_{official.key}",
        event_key=event_key,
        match_key=official.key,
        match_number=match_number,
        comp_level=official.comp_level,
        set_number=official.set_number,
        status=status,
        confidence=ConfidenceLevel.worst(red.confidence, blue.confidence),
        red=red,
        blue=blue,
        teams=tuple(teams),
        total_discrepancies=len(discrepancies),
        critical_discrepancies=critical,
        warning_discrepancies=warning,
        flagged_for_review=status in {ValidationStatus.FLAGGED, ValidationStatus.FAILED},
        requires_rescout=status is ValidationStatus.FAILED,
        validated_at=validated_at or datetime.now(UTC),
    )


def validate_match_records(
    *,
    event_key: str,
    match_number: str,
    records: Iterable[ScoutingRecord],
    official: OfficialMatch,
    config: ValidationConfig,
    validated_at: datetime | None = None,
) -> MatchValidationResult:
    """Validate a match from an unsplit list of records."""

    grouped = split_by_alliance(records, official)
    return validate_match(
        event_key=event_key,
        match_number=match_number,
        red_records=grouped[Alliance.RED],
        blue_records=grouped[Alliance.BLUE],
        official=official,
        config=config,
        validated_at=validated_at,
    )
