"""Compare one alliance's scouted aggregate with its official figures."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from scoutrecon.domain.model import (
    AllianceValidation,
    CalculationBreakdown,
    ConfidenceLevel,
    DataCategory,
    OfficialPoints,
    ScoutedPoints,
    Severity,
    ValidationStatus,
)

from .severity import build_discrepancy

if TYPE_CHECKING:
    from collections.abc import Iterator

    from scoutrecon.domain.model import (
        AllianceAggregate,
        Discrepancy,
        OfficialAllianceData,
        PointValues,
        ReefCounts,
        ValidationConfig,
    )

log = logging.getLogger(__name__)

SCORE_DIVERGENCE_LOG_THRESHOLD = 10
MANY_WARNINGS = 2
MANY_MINORS = 3

type FieldComparison = tuple[DataCategory, str, int, int]


def _reef_comparisons(
    category: DataCategory,
    prefix: str,
    scouted: ReefCounts,
    official: ReefCounts,
    official_total: int,
) -> Iterator[FieldComparison]:
    for level, (mine, theirs) in enumerate(
        zip(scouted.levels(), official.levels(), strict=True), start=1
    ):
        yield category, f"{prefix} L{level}", mine, theirs
    yield category, f"{prefix} Total", scouted.total, official_total


def iter_field_comparisons(
    scouted: AllianceAggregate,
    official: OfficialAllianceData,
    config: ValidationConfig,
) -> Iterator[FieldComparison]:
    """Yield ``(category, label, scouted, official)`` for every enabled field."""

    if config.check_auto_scoring:
        yield from _reef_comparisons(
            DataCategory.AUTO_CORAL,
            "Auto Coral",
            scouted.auto_coral,
            official.auto_coral,
            official.auto_coral_total,
        )
    if config.check_teleop_scoring:
        teleop_only = official.teleop_coral_only
        yield from _reef_comparisons(
            DataCategory.TELEOP_CORAL,
            "Teleop Coral",
            scouted.teleop_coral,
            teleop_only,
            teleop_only.total,
        )
    if config.check_algae:
        yield DataCategory.ALGAE, "Total Algae Net", scouted.algae_net, official.algae_net
        yield (
            DataCategory.ALGAE,
            "Total Algae Processor",
            scouted.algae_processor,
            official.algae_processor,
        )
        yield DataCategory.ALGAE, "Total Algae", scouted.algae_total, official.algae_total
    if config.check_mobility:
        yield (
            DataCategory.MOBILITY,
            "Mobility Count",
            scouted.auto_mobility,
            official.mobility_count,
        )
    if config.check_endgame:
        yield DataCategory.ENDGAME, "Deep Climbs", scouted.deep_climbs, official.deep_climbs
        yield (
            DataCategory.ENDGAME,
            "Shallow Climbs",
            scouted.shallow_climbs,
            official.shallow_climbs,
        )
        yield DataCategory.ENDGAME, "Parks", scouted.parks, official.parks


def estimate_scouted_points(scouted: AllianceAggregate, points: PointValues) -> ScoutedPoints:
    auto, teleop = scouted.auto_coral, scouted.teleop_coral
    return ScoutedPoints(
        auto_coral=(
            auto.l1 * points.auto_coral_l1
            + auto.l2 * points.auto_coral_l2
            + auto.l3 * points.auto_coral_l3
            + auto.l4 * points.auto_coral_l4
        ),
        auto_algae=(
            scouted.auto_algae_net * points.auto_algae_net
            + scouted.auto_algae_processor * points.auto_algae_processor
        ),
        mobility=scouted.auto_mobility * points.auto_mobility,
        teleop_coral=(
            teleop.l1 * points.teleop_coral_l1
            + teleop.l2 * points.teleop_coral_l2
            + teleop.l3 * points.teleop_coral_l3
            + teleop.l4 * points.teleop_coral_l4
        ),
        teleop_algae=(
            scouted.teleop_algae_net * points.teleop_algae_net
            + scouted.teleop_algae_processor * points.teleop_algae_processor
        ),
        endgame=(
            scouted.parks * points.endgame_park
            + scouted.shallow_climbs * points.endgame_shallow
            + scouted.deep_climbs * points.endgame_deep
        ),
    )


def official_breakdown_points(official: OfficialAllianceData) -> OfficialPoints:
    return OfficialPoints(
        auto_coral=official.auto_coral_points,
        teleop_coral=official.teleop_coral_points,
        algae=official.algae_points,
        mobility=official.mobility_points,
        endgame=official.endgame_points,
    )


def alliance_status(
    critical: int,
    warning: int,
    minor: int,
    config: ValidationConfig,
) -> ValidationStatus:
    if critical >= config.alliance_fail_threshold:
        return ValidationStatus.FAILED
    if critical > 0 or warning > 0 or minor > MANY_MINORS:
        return ValidationStatus.FLAGGED
    return ValidationStatus.PASSED


def alliance_confidence(
    scouted: AllianceAggregate,
    critical: int,
    warning: int,
) -> ConfidenceLevel:
    if scouted.missing_teams or not scouted.is_complete or critical > 0:
        return ConfidenceLevel.LOW
    if warning > MANY_WARNINGS:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.HIGH


def compare_alliance(
    scouted: AllianceAggregate,
    official: OfficialAllianceData,
    config: ValidationConfig,
) -> AllianceValidation:
    """Classify every enabled field and derive the alliance verdict.

    Pure apart from a debug log line when the estimated and official point
    totals diverge noticeably.
    """

    discrepancies: list[Discrepancy] = []
    for category, label, mine, theirs in iter_field_comparisons(scouted, official, config):
        discrepancy = build_discrepancy(category, label, mine, theirs, config)
        if discrepancy is not None:
            discrepancies.append(discrepancy)

    scouted_points = estimate_scouted_points(scouted, config.points)
    official_points = official_breakdown_points(official)
    estimated = scouted_points.total
    official_total = official_points.total
    score_difference = abs(estimated - official_total)
    score_percent = score_difference / official_total * 100 if official_total else 0.0

    if score_difference > SCORE_DIVERGENCE_LOG_THRESHOLD:
        log.debug(
            "Score divergence for %s alliance: scouted=%s official=%s (%s vs %s)",
            scouted.alliance,
            estimated,
            official_total,
            scouted_points,
            official_points,
        )

    critical = sum(1 for item in discrepancies if item.severity is Severity.CRITICAL)
    warning = sum(1 for item in discrepancies if item.severity is Severity.WARNING)
    minor = len(discrepancies) - critical - warning

    return AllianceValidation(
        alliance=scouted.alliance,
        status=alliance_status(critical, warning, minor, config),
        confidence=alliance_confidence(scouted, critical, warning),
        discrepancies=tuple(discrepancies),
        total_scouted_points=estimated,
        total_official_points=official_total,
        score_difference=score_difference,
        score_percent_diff=round(score_percent, 1),
        scouted=scouted,
        official=official,
        calculation=CalculationBreakdown(scouted=scouted_points, official=official_points),
    )
