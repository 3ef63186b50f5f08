"""Scouted-versus-official validation engine."""

from __future__ import annotations

from .aggregate import aggregate_alliance, with_missing_teams
from .batch import (
    EventValidationReport,
    EventValidationRun,
    SkipReason,
    ValidationPhase,
    ValidationProgress,
    ValidationStep,
)
from .compare import compare_alliance, estimate_scouted_points, official_breakdown_points
from .extract import extract_alliance
from .match import split_by_alliance, validate_match, validate_match_records
from .severity import build_discrepancy, classify, classify_difference, percent_difference
from .summary import (
    data_completeness,
    match_sort_key,
    results_needing_review,
    results_requiring_rescout,
    scout_assignments,
    sort_results,
    summarize,
)

__all__ = [
    "EventValidationReport",
    "EventValidationRun",
    "SkipReason",
    "ValidationPhase",
    "ValidationProgress",
    "ValidationStep",
    "aggregate_alliance",
    "build_discrepancy",
    "classify",
    "classify_difference",
    "compare_alliance",
    "data_completeness",
    "estimate_scouted_points",
    "extract_alliance",
    "match_sort_key",
    "official_breakdown_points",
    "percent_difference",
    "results_needing_review",
    "results_requiring_rescout",
    "scout_assignments",
    "sort_results",
    "split_by_alliance",
    "summarize",
    "validate_match",
    "validate_match_records",
    "with_missing_teams",
]
