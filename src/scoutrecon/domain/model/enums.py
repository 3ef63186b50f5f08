"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class Alliance(StrEnum):
    RED = "red"
    BLUE = "blue"

    @classmethod
    def parse(cls, value: object) -> Alliance | None:
        """Return the alliance named by ``value`` or ``None`` when unrecognised.

        Devices record the colour in several spellings (``"red"``, ``"Red"``,
        ``"redAlliance"``); all of them collapse to the same member.
        """

        if isinstance(value, Alliance):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().removesuffix("alliance").strip()
        try:
            return cls(normalized)
        except ValueError:
            return None

    @property
    def opponent(self) -> Alliance:
        return Alliance.BLUE if self is Alliance.RED else Alliance.RED


class Severity(StrEnum):
    NONE = "none"
    MINOR = "minor"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.NONE: 0,
    Severity.MINOR: 1,
    Severity.WARNING: 2,
    Severity.CRITICAL: 3,
}


class ValidationStatus(StrEnum):
    PASSED = "passed"
    FLAGGED = "flagged"
    FAILED = "failed"
    PENDING = "pending"
    NO_OFFICIAL_DATA = "no-official-data"


class ConfidenceLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def score(self) -> int:
        return _CONFIDENCE_SCORE[self]

    @classmethod
    def worst(cls, *levels: ConfidenceLevel) -> ConfidenceLevel:
        return min(levels, key=lambda level: level.score)

    @classmethod
    def from_average(cls, average: float) -> ConfidenceLevel:
        if average >= 2.5:  # noqa: PLR2004
            return cls.HIGH
        if average >= 1.5:  # noqa: PLR2004
            return cls.MEDIUM
        return cls.LOW


_CONFIDENCE_SCORE = {
    ConfidenceLevel.HIGH: 3,
    ConfidenceLevel.MEDIUM: 2,
    ConfidenceLevel.LOW: 1,
}


class DataCategory(StrEnum):
    """Field groups compared between scouted and official data."""

    AUTO_CORAL = "auto-coral"
    TELEOP_CORAL = "teleop-coral"
    ALGAE = "algae"
    MOBILITY = "mobility"
    ENDGAME = "endgame"


class CompLevel(StrEnum):
    QUALIFICATION = "qm"
    EIGHTH_FINAL = "ef"
    QUARTER_FINAL = "qf"
    SEMI_FINAL = "sf"
    FINAL = "f"
