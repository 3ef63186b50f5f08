"""Validation configuration value objects.

A ``ValidationConfig`` is passed explicitly into every classifier, comparator
and validator call; nothing in the engine reads configuration from module
globals, so several configurations (or seasons) can be used side by side.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .enums import DataCategory


@dataclass(frozen=True, slots=True, kw_only=True)
class SeverityThresholds:
    """Piece-count cutoffs for each severity."""

    minor_absolute: int = 2
    warning_absolute: int = 3
    critical_absolute: int = 5


@dataclass(frozen=True, slots=True, kw_only=True)
class PointValues:
    """Season point table used to estimate an alliance score from scouted counts."""

    auto_coral_l1: int
    auto_coral_l2: int
    auto_coral_l3: int
    auto_coral_l4: int
    auto_algae_net: int
    auto_algae_processor: int
    auto_mobility: int
    teleop_coral_l1: int
    teleop_coral_l2: int
    teleop_coral_l3: int
    teleop_coral_l4: int
    teleop_algae_net: int
    teleop_algae_processor: int
    endgame_park: int
    endgame_shallow: int
    endgame_deep: int


REEFSCAPE_2025_POINTS = PointValues(
    auto_coral_l1=3,
    auto_coral_l2=4,
    auto_coral_l3=6,
    auto_coral_l4=7,
    auto_algae_net=4,
    auto_algae_processor=6,
    auto_mobility=3,
    teleop_coral_l1=2,
    teleop_coral_l2=3,
    teleop_coral_l3=4,
    teleop_coral_l4=5,
    teleop_algae_net=4,
    teleop_algae_processor=6,
    endgame_park=2,
    endgame_shallow=6,
    endgame_deep=12,
)


def _default_category_thresholds() -> dict[DataCategory, SeverityThresholds]:
    low_count = SeverityThresholds(minor_absolute=1, warning_absolute=2, critical_absolute=3)
    return {
        DataCategory.AUTO_CORAL: SeverityThresholds(
            minor_absolute=2, warning_absolute=3, critical_absolute=4
        ),
        DataCategory.MOBILITY: low_count,
        DataCategory.ENDGAME: low_count,
    }


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationConfig:
    thresholds: SeverityThresholds = field(default_factory=SeverityThresholds)
    category_thresholds: dict[DataCategory, SeverityThresholds] = field(
        default_factory=_default_category_thresholds
    )

    check_auto_scoring: bool = True
    check_teleop_scoring: bool = True
    check_algae: bool = True
    check_mobility: bool = True
    check_endgame: bool = True

    # Critical discrepancies needed before one alliance is marked failed.
    alliance_fail_threshold: int = 2
    # Combined critical discrepancies (both alliances) that flag / fail a match.
    match_flag_threshold: int = 2
    match_fail_threshold: int = 3

    points: PointValues = REEFSCAPE_2025_POINTS

    def thresholds_for(self, category: DataCategory | None) -> SeverityThresholds:
        if category is not None and category in self.category_thresholds:
            return self.category_thresholds[category]
        return self.thresholds


DEFAULT_VALIDATION_CONFIG = ValidationConfig()
