"""Event-level views over validation results."""

from __future__ import annotations

from collections import defaultdict
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Protocol

from scoutrecon.domain.model import (
    ConfidenceLevel,
    DataCompleteness,
    ValidationStatus,
    ValidationSummary,
)
from scoutrecon.domain.model.validation import FULL_ALLIANCE_SIZE

from .match import UNKNOWN_SCOUT

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoutrecon.domain.model import MatchValidationResult, OfficialMatch, ScoutingRecord

_COMP_LEVEL_ORDER = {"qm": 0, "ef": 1, "qf": 2, "sf": 3, "f": 4}
_UNKNOWN_LEVEL = len(_COMP_LEVEL_ORDER)


class _Sortable(Protocol):
    @property
    def comp_level(self) -> str: ...

    @property
    def set_number(self) -> int: ...


def _match_number(item: object) -> int:
    value = getattr(item, "match_number", 0)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def match_sort_key(item: _Sortable) -> tuple[int, int, int]:
    """Order qualifications first, then playoff rounds, then by set and match number."""

    level = _COMP_LEVEL_ORDER.get(item.comp_level, _UNKNOWN_LEVEL)
    return (level, item.set_number, _match_number(item))


def sort_results(results: Iterable[MatchValidationResult]) -> list[MatchValidationResult]:
    return sorted(results, key=match_sort_key)


def results_needing_review(
    results: Iterable[MatchValidationResult],
) -> list[MatchValidationResult]:
    return sort_results(result for result in results if result.flagged_for_review)


def results_requiring_rescout(
    results: Iterable[MatchValidationResult],
) -> list[MatchValidationResult]:
    return sort_results(result for result in results if result.requires_rescout)


def summarize(
    results: Sequence[MatchValidationResult],
    *,
    generated_at: datetime | None = None,
) -> ValidationSummary:
    by_status: dict[ValidationStatus, int] = defaultdict(int)
    for result in results:
        by_status[result.status] += 1

    total = sum(result.total_discrepancies for result in results)
    critical = sum(result.critical_discrepancies for result in results)
    warning = sum(result.warning_discrepancies for result in results)

    # no results scores 0, i.e. low confidence
    scores = [result.confidence.score for result in results]
    confidence = ConfidenceLevel.from_average(sum(scores) / len(scores) if scores else 0.0)

    return ValidationSummary(
        total_matches=len(results),
        passed=by_status[ValidationStatus.PASSED],
        flagged=by_status[ValidationStatus.FLAGGED],
        failed=by_status[ValidationStatus.FAILED],
        pending=by_status[ValidationStatus.PENDING],
        no_official_data=by_status[ValidationStatus.NO_OFFICIAL_DATA],
        total_discrepancies=total,
        critical_discrepancies=critical,
        warning_discrepancies=warning,
        minor_discrepancies=total - critical - warning,
        average_confidence=confidence,
        requires_rescout=sum(1 for result in results if result.requires_rescout),
        generated_at=generated_at or datetime.now(UTC),
    )


def data_completeness(
    event_key: str,
    matches: Iterable[OfficialMatch],
    records: Iterable[ScoutingRecord],
) -> DataCompleteness:
    """Count how many played matches have a scouting record for every rostered team."""

    teams_by_match: dict[str, set[str]] = defaultdict(set)
    for record in records:
        if record.event_key == event_key:
            teams_by_match[record.match_number].add(record.team_number)

    total = 0
    complete = 0
    missing_records = 0
    incomplete: list[str] = []
    for match in sorted(matches, key=match_sort_key):
        if not match.has_result:
            continue
        total += 1
        seen = teams_by_match.get(str(match.match_number), set())
        roster = match.red.team_numbers + match.blue.team_numbers
        if roster:
            missing = sum(1 for team in roster if team not in seen)
        else:
            missing = max(0, FULL_ALLIANCE_SIZE * 2 - len(seen))
        if missing:
            missing_records += missing
            incomplete.append(match.key)
        else:
            complete += 1

    percent = round(complete / total * 100, 1) if total else 0.0
    return DataCompleteness(
        event_key=event_key,
        total_matches=total,
        complete_matches=complete,
        incomplete_matches=tuple(incomplete),
        missing_records=missing_records,
        completeness_percent=percent,
    )


def scout_assignments(records: Iterable[ScoutingRecord]) -> dict[str, str]:
    """Map team number to the scout who recorded it; a later record wins."""

    return {
        record.team_number: record.scout_name.strip() or UNKNOWN_SCOUT
        for record in records
        if record.team_number
    }
