"""Official match results as published by the results feed."""

from __future__ import annotations

from dataclasses import dataclass, field

from .counts import ReefCounts
from .enums import Alliance, CompLevel

DEEP_CAGE = "DeepCage"
SHALLOW_CAGE = "ShallowCage"
PARKED = "Parked"


@dataclass(frozen=True, slots=True, kw_only=True)
class AllianceBreakdown:
    """Per-alliance score breakdown.

    ``teleop_reef`` holds final reef counts, so it already includes every piece
    scored during the autonomous period. Algae counts are match totals with no
    period split.
    """

    auto_reef: ReefCounts = field(default_factory=ReefCounts)
    teleop_reef: ReefCounts = field(default_factory=ReefCounts)
    auto_coral_count: int = 0
    auto_coral_points: int = 0
    teleop_coral_count: int = 0
    teleop_coral_points: int = 0
    net_algae_count: int = 0
    wall_algae_count: int = 0
    algae_points: int = 0
    auto_line_robots: tuple[bool, ...] = ()
    end_game_robots: tuple[str, ...] = ()
    auto_mobility_points: int = 0
    end_game_barge_points: int = 0
    auto_points: int = 0
    teleop_points: int = 0
    foul_points: int = 0
    auto_bonus_achieved: bool = False
    coral_bonus_achieved: bool = False
    barge_bonus_achieved: bool = False
    foul_count: int = 0
    tech_foul_count: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class OfficialAlliance:
    team_numbers: tuple[str, ...] = ()
    score: int = 0
    breakdown: AllianceBreakdown | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class OfficialMatch:
    key: str
    event_key: str
    comp_level: str = CompLevel.QUALIFICATION
    set_number: int = 1
    match_number: int = 0
    red: OfficialAlliance = field(default_factory=OfficialAlliance)
    blue: OfficialAlliance = field(default_factory=OfficialAlliance)

    def alliance(self, alliance: Alliance) -> OfficialAlliance:
        return self.red if alliance is Alliance.RED else self.blue

    def alliance_of(self, team_number: str) -> Alliance | None:
        if team_number in self.red.team_numbers:
            return Alliance.RED
        if team_number in self.blue.team_numbers:
            return Alliance.BLUE
        return None

    @property
    def has_breakdown(self) -> bool:
        return self.red.breakdown is not None or self.blue.breakdown is not None

    @property
    def has_result(self) -> bool:
        """Whether the match has been played; unplayed matches carry negative scores."""

        return self.has_breakdown or (self.red.score >= 0 and self.blue.score >= 0)


@dataclass(frozen=True, slots=True, kw_only=True)
class OfficialAllianceData:
    """One alliance's official figures, normalised for comparison.

    When the feed published no breakdown every derived figure is zero and only
    ``total_points`` carries the raw final score.
    """

    alliance: Alliance
    teams: tuple[str, ...] = ()
    has_breakdown: bool = False
    total_points: int = 0
    auto_points: int = 0
    teleop_points: int = 0
    foul_points: int = 0
    auto_coral: ReefCounts = field(default_factory=ReefCounts)
    auto_coral_total: int = 0
    auto_coral_points: int = 0
    teleop_coral_cumulative: ReefCounts = field(default_factory=ReefCounts)
    teleop_coral_total: int = 0
    teleop_coral_points: int = 0
    algae_net: int = 0
    algae_processor: int = 0
    algae_points: int = 0
    mobility_count: int = 0
    mobility_points: int = 0
    deep_climbs: int = 0
    shallow_climbs: int = 0
    parks: int = 0
    endgame_points: int = 0
    auto_bonus_achieved: bool = False
    coral_bonus_achieved: bool = False
    barge_bonus_achieved: bool = False
    foul_count: int = 0
    tech_foul_count: int = 0

    @property
    def teleop_coral_only(self) -> ReefCounts:
        """Teleop-period coral per level, recovered from the cumulative counts."""

        return self.teleop_coral_cumulative.minus_clamped(self.auto_coral)

    @property
    def algae_total(self) -> int:
        return self.algae_net + self.algae_processor
