"""Validate every official match of an event, one step at a time.

``EventValidationRun.steps()`` is a generator: each ``next()`` validates one
match and yields a ``ValidationStep`` carrying progress. Cancellation is
cooperative; ``cancel()`` takes effect before the next match starts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TYPE_CHECKING

from scoutrecon.domain.model import CompLevel

from .match import validate_match_records
from .summary import match_sort_key

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from scoutrecon.domain.model import (
        MatchValidationResult,
        OfficialMatch,
        ScoutingRecord,
        ValidationConfig,
    )

log = logging.getLogger(__name__)

class ValidationPhase(StrEnum):
    FETCHING_SCOUTED = "fetching-scouted"
    FETCHING_OFFICIAL = "fetching-official"
    VALIDATING = "validating"
    STORING = "storing"
    COMPLETE = "complete"


class SkipReason(StrEnum):
    NO_OFFICIAL_DATA = "no_official_data"
    NO_SCOUTED_DATA = "no_scouted_data"


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationProgress:
    current: int
    total: int
    match_key: str | None
    phase: ValidationPhase


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationStep:
    progress: ValidationProgress
    match_key: str
    result: MatchValidationResult | None = None
    skipped: SkipReason | None = None
    error: str | None = None


@dataclass(slots=True, kw_only=True)
class EventValidationReport:
    """Outcome of a batch run; partial success is the normal case."""

    event_key: str
    results: list[MatchValidationResult] = field(default_factory=list)
    skipped_no_official: list[str] = field(default_factory=list)
    skipped_no_scouted: list[str] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)
    cancelled: bool = False

    @property
    def validated(self) -> int:
        return len(self.results)

    @property
    def skipped(self) -> int:
        return len(self.skipped_no_official) + len(self.skipped_no_scouted)

    def record(self, step: ValidationStep) -> None:
        if step.result is not None:
            self.results.append(step.result)
        elif step.skipped is SkipReason.NO_OFFICIAL_DATA:
            self.skipped_no_official.append(step.match_key)
        elif step.skipped is SkipReason.NO_SCOUTED_DATA:
            self.skipped_no_scouted.append(step.match_key)
        elif step.error is not None:
            self.errors[step.match_key] = step.error


type RecordLoader = Callable[[OfficialMatch], Sequence[ScoutingRecord]]
type ProgressCallback = Callable[[ValidationProgress], None]
type ResultSink = Callable[[MatchValidationResult], None]


@dataclass(slots=True, kw_only=True)
class EventValidationRun:
    event_key: str
    matches: Sequence[OfficialMatch]
    load_records: RecordLoader
    config: ValidationConfig
    _cancelled: bool = field(default=False, init=False)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def selected_matches(self) -> list[OfficialMatch]:
        """Qualification matches in play order.

        Scouting records name only a match number, so playoff matches cannot be
        told apart from the qualification match with the same number.
        """

        qualification = [
            match for match in self.matches if match.comp_level == CompLevel.QUALIFICATION
        ]
        return sorted(qualification, key=match_sort_key)

    def steps(self) -> Iterator[ValidationStep]:
        matches = self.selected_matches()
        total = len(matches)
        for index, match in enumerate(matches, start=1):
            if self._cancelled:
                log.info("Validation of %s cancelled after %s/%s", self.event_key, index - 1, total)
                return
            yield self._validate_one(match, index, total)

    def _validate_one(self, match: OfficialMatch, index: int, total: int) -> ValidationStep:
        progress = ValidationProgress(
            current=index, total=total, match_key=match.key, phase=ValidationPhase.VALIDATING
        )
        if not match.has_result:
            log.debug("Skipping %s: no official result yet", match.key)
            return ValidationStep(
                progress=progress, match_key=match.key, skipped=SkipReason.NO_OFFICIAL_DATA
            )
        try:
            records = self.load_records(match)
            if not records:
                log.debug("Skipping %s: no scouted data", match.key)
                return ValidationStep(
                    progress=progress, match_key=match.key, skipped=SkipReason.NO_SCOUTED_DATA
                )
            result = validate_match_records(
                event_key=self.event_key,
                match_number=str(match.match_number),
                records=records,
                official=match,
                config=self.config,
            )
        except Exception as exc:  # noqa: BLE001
            log.exception("Validation of %s failed", match.key)
            return ValidationStep(progress=progress, match_key=match.key, error=str(exc))
        return ValidationStep(progress=progress, match_key=match.key, result=result)

    @staticmethod
    def _store(
        step: ValidationStep, result: MatchValidationResult, on_result: ResultSink
    ) -> ValidationStep:
        """Hand ``result`` to ``on_result``; a failed write becomes the step's error."""

        try:
            on_result(result)
        except Exception as exc:  # noqa: BLE001
            log.exception("Storing the result of %s failed", step.match_key)
            return replace(step, result=None, error=str(exc))
        return step

    def run(
        self,
        *,
        on_progress: ProgressCallback | None = None,
        on_result: ResultSink | None = None,
    ) -> EventValidationReport:
        """Drive ``steps()`` to completion (or cancellation) and collect a report."""

        report = EventValidationReport(event_key=self.event_key)
        for validated in self.steps():
            step = validated
            if on_progress is not None:
                on_progress(step.progress)
            if step.result is not None and on_result is not None:
                if on_progress is not None:
                    on_progress(
                        ValidationProgress(
                            current=step.progress.current,
                            total=step.progress.total,
                            match_key=step.match_key,
                            phase=ValidationPhase.STORING,
                        )
                    )
                step = self._store(step, step.result, on_result)
            report.record(step)
        report.cancelled = self._cancelled
        log.info(
            "Validated %s: %s validated, %s skipped, %s failed",
            self.event_key,
            report.validated,
            report.skipped,
            len(report.errors),
        )
        return report
