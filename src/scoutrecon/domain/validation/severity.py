"""Classify the gap between a scouted and an official value."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoutrecon.domain.model import Discrepancy, Severity

if TYPE_CHECKING:
    from scoutrecon.domain.model import DataCategory, SeverityThresholds, ValidationConfig


def percent_difference(scouted: int, official: int) -> float:
    """Difference relative to the larger of the two values, as a percentage."""

    largest = max(scouted, official)
    if largest == 0:
        return 0.0
    return abs(scouted - official) / largest * 100


def classify_difference(difference: int, thresholds: SeverityThresholds) -> Severity:
    """Return the severity for an absolute difference.

    Piece-count cutoffs decide on their own, so ``0 vs 1`` (100%) stays quiet
    and a wider gap from the same official value is never rated lower,
    whichever side of it the scouted value falls on. The percentage is
    reported with each discrepancy but never escalates it: once
    ``warning_absolute`` is reached an absolute tier has already fired.
    """

    if difference >= thresholds.critical_absolute:
        return Severity.CRITICAL
    if difference >= thresholds.warning_absolute:
        return Severity.WARNING
    if difference >= thresholds.minor_absolute:
        return Severity.MINOR
    return Severity.NONE


def classify(
    scouted: int,
    official: int,
    config: ValidationConfig,
    category: DataCategory | None = None,
) -> Severity:
    return classify_difference(abs(scouted - official), config.thresholds_for(category))


def build_discrepancy(
    category: DataCategory,
    label: str,
    scouted: int,
    official: int,
    config: ValidationConfig,
) -> Discrepancy | None:
    """Return a discrepancy for the pair, or ``None`` when the gap is not worth reporting."""

    difference = abs(scouted - official)
    severity = classify_difference(difference, config.thresholds_for(category))
    if severity is Severity.NONE:
        return None

    percent = percent_difference(scouted, official)
    sign = "+" if scouted > official else "-"
    return Discrepancy(
        category=category,
        field=label,
        scouted_value=scouted,
        official_value=official,
        difference=difference,
        percent_diff=round(percent, 1),
        severity=severity,
        message=(
            f"{label}: Scouted {scouted}, Official {official} "
            f"({sign}{difference}, {round(percent)}%)"
        ),
    )
