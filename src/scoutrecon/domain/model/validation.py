"""Aggregates, discrepancies and verdicts produced by match validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .counts import ReefCounts
from .enums import Alliance, ConfidenceLevel, DataCategory, Severity, ValidationStatus
from .official import OfficialAllianceData

FULL_ALLIANCE_SIZE = 3


@dataclass(frozen=True, slots=True, kw_only=True)
class AllianceAggregate:
    """Scouted figures for one alliance in one match, summed across its records."""

    alliance: Alliance
    teams: tuple[str, ...] = ()
    scout_names: tuple[str, ...] = ()
    missing_teams: tuple[str, ...] = ()
    record_count: int = 0

    auto_coral: ReefCounts = field(default_factory=ReefCounts)
    auto_coral_missed: int = 0
    auto_algae_net: int = 0
    auto_algae_processor: int = 0
    auto_mobility: int = 0

    teleop_coral: ReefCounts = field(default_factory=ReefCounts)
    teleop_coral_missed: int = 0
    teleop_algae_net: int = 0
    teleop_algae_processor: int = 0

    deep_climb_attempts: int = 0
    shallow_climb_attempts: int = 0
    park_attempts: int = 0
    deep_climbs: int = 0
    shallow_climbs: int = 0
    parks: int = 0
    climb_failures: int = 0
    no_endgame: int = 0

    broke_down: int = 0
    played_defense: int = 0

    @property
    def is_complete(self) -> bool:
        return self.record_count == FULL_ALLIANCE_SIZE

    @property
    def auto_coral_total(self) -> int:
        return self.auto_coral.total

    @property
    def teleop_coral_total(self) -> int:
        return self.teleop_coral.total

    @property
    def coral_by_level(self) -> ReefCounts:
        return self.auto_coral + self.teleop_coral

    @property
    def total_coral(self) -> int:
        return self.auto_coral.total + self.teleop_coral.total

    @property
    def algae_net(self) -> int:
        return self.auto_algae_net + self.teleop_algae_net

    @property
    def algae_processor(self) -> int:
        return self.auto_algae_processor + self.teleop_algae_processor

    @property
    def algae_total(self) -> int:
        return self.algae_net + self.algae_processor


@dataclass(frozen=True, slots=True, kw_only=True)
class Discrepancy:
    category: DataCategory
    field: str
    scouted_value: int
    official_value: int
    difference: int
    percent_diff: float
    severity: Severity
    message: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ScoutedPoints:
    auto_coral: int = 0
    auto_algae: int = 0
    mobility: int = 0
    teleop_coral: int = 0
    teleop_algae: int = 0
    endgame: int = 0

    @property
    def total(self) -> int:
        return (
            self.auto_coral
            + self.auto_algae
            + self.mobility
            + self.teleop_coral
            + self.teleop_algae
            + self.endgame
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class OfficialPoints:
    auto_coral: int = 0
    teleop_coral: int = 0
    algae: int = 0
    mobility: int = 0
    endgame: int = 0

    @property
    def total(self) -> int:
        return self.auto_coral + self.teleop_coral + self.algae + self.mobility + self.endgame


@dataclass(frozen=True, slots=True, kw_only=True)
class CalculationBreakdown:
    scouted: ScoutedPoints
    official: OfficialPoints


def _count(discrepancies: tuple[Discrepancy, ...], severity: Severity) -> int:
    return sum(1 for item in discrepancies if item.severity is severity)


@dataclass(frozen=True, slots=True, kw_only=True)
class AllianceValidation:
    alliance: Alliance
    status: ValidationStatus
    confidence: ConfidenceLevel
    discrepancies: tuple[Discrepancy, ...]
    total_scouted_points: int
    total_official_points: int
    score_difference: int
    score_percent_diff: float
    scouted: AllianceAggregate
    official: OfficialAllianceData
    calculation: CalculationBreakdown

    @property
    def critical_count(self) -> int:
        return _count(self.discrepancies, Severity.CRITICAL)

    @property
    def warning_count(self) -> int:
        return _count(self.discrepancies, Severity.WARNING)

    @property
    def minor_count(self) -> int:
        return _count(self.discrepancies, Severity.MINOR)


@dataclass(frozen=True, slots=True, kw_only=True)
class TeamScoringBreakdown:
    auto_coral: ReefCounts = field(default_factory=ReefCounts)
    auto_algae_net: int = 0
    auto_algae_processor: int = 0
    mobility: bool = False
    teleop_coral: ReefCounts = field(default_factory=ReefCounts)
    teleop_algae_net: int = 0
    teleop_algae_processor: int = 0
    deep_climb: bool = False
    shallow_climb: bool = False
    park: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class TeamValidation:
    team_number: str
    alliance: Alliance
    scout_name: str
    has_scouted_data: bool
    confidence: ConfidenceLevel
    flag_for_review: bool
    notes: tuple[str, ...] = ()
    is_corrected: bool | None = None
    correction_count: int | None = None
    last_corrected_at: datetime | None = None
    last_corrected_by: str | None = None
    correction_notes: str | None = None
    original_scout_name: str | None = None
    scoring_breakdown: TeamScoringBreakdown | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchValidationResult:
    id: str
    event_key: str
    match_key: str
    match_number: str
    comp_level: str
    set_number: int
    status: ValidationStatus
    confidence: ConfidenceLevel
    red: AllianceValidation
    blue: AllianceValidation
    teams: tuple[TeamValidation, ...]
    total_discrepancies: int
    critical_discrepancies: int
    warning_discrepancies: int
    flagged_for_review: bool
    requires_rescout: bool
    validated_at: datetime

    @property
    def minor_discrepancies(self) -> int:
        return self.total_discrepancies - self.critical_discrepancies - self.warning_discrepancies

    def alliance(self, alliance: Alliance) -> AllianceValidation:
        return self.red if alliance is Alliance.RED else self.blue

    @property
    def discrepancies(self) -> tuple[Discrepancy, ...]:
        return self.red.discrepancies + self.blue.discrepancies


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationSummary:
    total_matches: int = 0
    passed: int = 0
    flagged: int = 0
    failed: int = 0
    pending: int = 0
    no_official_data: int = 0
    total_discrepancies: int = 0
    critical_discrepancies: int = 0
    warning_discrepancies: int = 0
    minor_discrepancies: int = 0
    average_confidence: ConfidenceLevel = ConfidenceLevel.LOW
    requires_rescout: int = 0
    generated_at: datetime | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class DataCompleteness:
    """How much of an event's expected scouting coverage is present."""

    event_key: str
    total_matches: int = 0
    complete_matches: int = 0
    incomplete_matches: tuple[str, ...] = ()
    missing_records: int = 0
    completeness_percent: float = 0.0
