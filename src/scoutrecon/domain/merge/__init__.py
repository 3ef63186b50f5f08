"""Multi-device scouting record merge and conflict resolution."""

from __future__ import annotations

from .contracts import (
    BatchDecision,
    ConflictInfo,
    ConflictKind,
    DetectionResult,
    MergeApplyError,
    MergeClassification,
    MergeStateError,
    MergeSummary,
    Replacement,
    Resolution,
    UploadMode,
    UploadOutcome,
)
from .corrections import build_correction, save_correction
from .detect import (
    DEFAULT_BATCH_REVIEW_THRESHOLD,
    canonical_by_key,
    classify_against,
    detect_conflicts,
)
from .orchestrator import MergeOrchestrator, MergeState

__all__ = [
    "DEFAULT_BATCH_REVIEW_THRESHOLD",
    "BatchDecision",
    "ConflictInfo",
    "ConflictKind",
    "DetectionResult",
    "MergeApplyError",
    "MergeClassification",
    "MergeOrchestrator",
    "MergeState",
    "MergeStateError",
    "MergeSummary",
    "Replacement",
    "Resolution",
    "UploadMode",
    "UploadOutcome",
    "build_correction",
    "canonical_by_key",
    "classify_against",
    "detect_conflicts",
    "save_correction",
]
