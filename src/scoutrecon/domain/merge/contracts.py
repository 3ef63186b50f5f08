"""Shared merge contract components: classifications, conflicts and outcomes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scoutrecon.domain.model import RecordKey, ScoutingRecord


class MergeClassification(StrEnum):
    AUTO_IMPORT = "auto-import"
    AUTO_REPLACE = "auto-replace"
    NEEDS_REVIEW = "needs-review"


class ConflictKind(StrEnum):
    CORRECTED_VS_UNCORRECTED = "corrected-vs-uncorrected"
    CORRECTED_VS_CORRECTED = "corrected-vs-corrected"


class Resolution(StrEnum):
    REPLACE = "replace"
    SKIP = "skip"


class BatchDecision(StrEnum):
    REPLACE_ALL = "replace-all"
    SKIP_ALL = "skip-all"
    REVIEW_EACH = "review-each"


class UploadMode(StrEnum):
    APPEND = "append"
    OVERWRITE = "overwrite"
    SMART_MERGE = "smart-merge"


class MergeApplyError(RuntimeError):
    """Raised when a store write fails while applying a merge decision.

    The unit of work has been rolled back; the merge session did not advance.
    """


class MergeStateError(RuntimeError):
    """Raised when an operation is not allowed in the session's current state."""


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictInfo:
    """A canonical (local) record and an incoming record competing for one key."""

    local: ScoutingRecord
    incoming: ScoutingRecord
    kind: ConflictKind
    changed_fields: tuple[str, ...] = ()

    @property
    def key(self) -> RecordKey:
        return self.incoming.key


@dataclass(frozen=True, slots=True, kw_only=True)
class Replacement:
    existing: ScoutingRecord
    incoming: ScoutingRecord


@dataclass(slots=True, kw_only=True)
class DetectionResult:
    auto_import: list[ScoutingRecord] = field(default_factory=list)
    auto_replace: list[Replacement] = field(default_factory=list)
    duplicates: list[ConflictInfo] = field(default_factory=list)
    batch_review: list[ConflictInfo] = field(default_factory=list)
    conflicts: list[ConflictInfo] = field(default_factory=list)

    @property
    def needs_review(self) -> list[ConflictInfo]:
        return [*self.duplicates, *self.batch_review, *self.conflicts]


@dataclass(slots=True, kw_only=True)
class MergeSummary:
    auto_imported: int = 0
    auto_replaced: int = 0
    duplicates_skipped: int = 0
    user_replaced: int = 0
    user_skipped: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class UploadOutcome:
    """What an import did straight away and what it left for the user to decide."""

    mode: UploadMode
    added: int = 0
    replaced: int = 0
    duplicates_skipped: int = 0
    batch_review: tuple[ConflictInfo, ...] = ()
    conflicts: tuple[ConflictInfo, ...] = ()

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts) or bool(self.batch_review)
