"""Public domain model surface."""

from __future__ import annotations

from scoutrecon.domain.model.config import (
    DEFAULT_VALIDATION_CONFIG,
    REEFSCAPE_2025_POINTS,
    PointValues,
    SeverityThresholds,
    ValidationConfig,
)
from scoutrecon.domain.model.counts import ReefCounts
from scoutrecon.domain.model.enums import (
    Alliance,
    CompLevel,
    ConfidenceLevel,
    DataCategory,
    Severity,
    ValidationStatus,
)
from scoutrecon.domain.model.official import (
    AllianceBreakdown,
    OfficialAlliance,
    OfficialAllianceData,
    OfficialMatch,
)
from scoutrecon.domain.model.scouting import (
    COMPARED_FIELDS,
    COUNTER_FIELDS,
    FLAG_FIELDS,
    RecordKey,
    ScoutingRecord,
    make_record_id,
)
from scoutrecon.domain.model.validation import (
    AllianceAggregate,
    AllianceValidation,
    CalculationBreakdown,
    DataCompleteness,
    Discrepancy,
    MatchValidationResult,
    OfficialPoints,
    ScoutedPoints,
    TeamScoringBreakdown,
    TeamValidation,
    ValidationSummary,
)

__all__ = [
    "COMPARED_FIELDS",
    "COUNTER_FIELDS",
    "DEFAULT_VALIDATION_CONFIG",
    "FLAG_FIELDS",
    "REEFSCAPE_2025_POINTS",
    "Alliance",
    "AllianceAggregate",
    "AllianceBreakdown",
    "AllianceValidation",
    "CalculationBreakdown",
    "CompLevel",
    "ConfidenceLevel",
    "DataCategory",
    "DataCompleteness",
    "Discrepancy",
    "MatchValidationResult",
    "OfficialAlliance",
    "OfficialAllianceData",
    "OfficialMatch",
    "OfficialPoints",
    "PointValues",
    "RecordKey",
    "ReefCounts",
    "ScoutedPoints",
    "ScoutingRecord",
    "SeverityThresholds",
    "Severity",
    "TeamScoringBreakdown",
    "TeamValidation",
    "ValidationConfig",
    "ValidationStatus",
    "make_record_id",
]
