"""Application orchestration entry points."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from scoutrecon.adapters.config_store import JsonValidationConfigStore
from scoutrecon.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from scoutrecon.adapters.tba import CachingOfficialDataProvider, TbaClient
from scoutrecon.adapters.transfer import ParsedPayload, parse_payload
from scoutrecon.domain.merge import (
    DEFAULT_BATCH_REVIEW_THRESHOLD,
    MergeApplyError,
    MergeOrchestrator,
    UploadMode,
    UploadOutcome,
    save_correction,
)
from scoutrecon.domain.model import CompLevel
from scoutrecon.domain.validation import (
    EventValidationReport,
    EventValidationRun,
    SkipReason,
    ValidationPhase,
    ValidationProgress,
    data_completeness,
    results_needing_review,
    results_requiring_rescout,
    sort_results,
    summarize,
    validate_match_records,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from datetime import datetime

    from scoutrecon.domain.model import (
        DataCompleteness,
        MatchValidationResult,
        OfficialMatch,
        ScoutingRecord,
        ValidationConfig,
        ValidationSummary,
    )
    from scoutrecon.domain.ports.config_store import ValidationConfigStore
    from scoutrecon.domain.ports.official_data import OfficialDataProvider
    from scoutrecon.domain.ports.unit_of_work import ScoutingUnitOfWork
    from scoutrecon.domain.validation.batch import ProgressCallback

type UnitOfWorkFactory = Callable[[], ScoutingUnitOfWork]

log = getLogger(__name__)


def default_unit_of_work_factory() -> UnitOfWorkFactory:
    """Start the SQLAlchemy adapter on first use and return its unit of work."""

    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_official_provider(
    unit_of_work_factory: UnitOfWorkFactory,
    *,
    offline: bool = False,
    client: TbaClient | None = None,
) -> OfficialDataProvider:
    if client is None and not offline:
        client = TbaClient()
    return CachingOfficialDataProvider(
        client=None if offline else client,
        unit_of_work_factory=unit_of_work_factory,
    )


def qualification_match_key(event_key: str, match_number: str | int) -> str:
    return f"{event_key}_{CompLevel.QUALIFICATION}{match_number}"


@dataclass(frozen=True, slots=True)
class ImportResult:
    parsed: ParsedPayload
    outcome: UploadOutcome
    orchestrator: MergeOrchestrator | None = None


def _append(unit_of_work_factory: UnitOfWorkFactory, records: Sequence[ScoutingRecord]) -> None:
    try:
        with unit_of_work_factory() as uow:
            for record in records:
                uow.repositories.records.add(record)
            uow.commit()
    except Exception as exc:
        raise MergeApplyError("Append failed; no records were written") from exc


def _overwrite(unit_of_work_factory: UnitOfWorkFactory, records: Sequence[ScoutingRecord]) -> int:
    try:
        with unit_of_work_factory() as uow:
            removed = uow.repositories.records.clear()
            for record in records:
                uow.repositories.records.add(record)
            uow.commit()
    except Exception as exc:
        raise MergeApplyError("Overwrite failed; the store is unchanged") from exc
    return removed


def import_scouting_payload(
    payload: object,
    *,
    mode: UploadMode = UploadMode.SMART_MERGE,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    batch_review_threshold: int = DEFAULT_BATCH_REVIEW_THRESHOLD,
) -> ImportResult:
    """Parse ``payload`` and store it according to ``mode``.

    In smart-merge mode the returned orchestrator holds whatever still needs a
    decision (batch review bucket, then the conflict queue).
    """

    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    parsed = parse_payload(payload)
    records = parsed.records
    log.info(f"Importing {len(records)} record(s) from {parsed.shape} payload in {mode} mode")

    if mode is UploadMode.APPEND:
        _append(effective_uow, records)
        return ImportResult(parsed=parsed, outcome=UploadOutcome(mode=mode, added=len(records)))

    if mode is UploadMode.OVERWRITE:
        removed = _overwrite(effective_uow, records)
        log.info(f"Overwrite removed {removed} stored record(s)")
        return ImportResult(parsed=parsed, outcome=UploadOutcome(mode=mode, added=len(records)))

    orchestrator = MergeOrchestrator(effective_uow, batch_review_threshold=batch_review_threshold)
    outcome = orchestrator.begin(records)
    return ImportResult(parsed=parsed, outcome=outcome, orchestrator=orchestrator)


def save_scouting_correction(
    record: ScoutingRecord,
    *,
    corrected_by: str,
    notes: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> ScoutingRecord:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    return save_correction(effective_uow, record, corrected_by=corrected_by, notes=notes)


@dataclass(frozen=True, slots=True)
class MatchValidationOutcome:
    match_key: str
    result: MatchValidationResult | None = None
    skipped: SkipReason | None = None


def load_validation_config(store: ValidationConfigStore | None = None) -> ValidationConfig:
    return (store or JsonValidationConfigStore()).load()


def validate_match(
    event_key: str,
    match_number: str,
    *,
    provider: OfficialDataProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ValidationConfig | None = None,
    validated_at: datetime | None = None,
) -> MatchValidationOutcome:
    """Validate one qualification match and store the verdict.

    Missing official data or missing scouted records are reported as a skip,
    never as a verdict.
    """

    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    effective_provider = provider or build_official_provider(effective_uow)
    effective_config = config or load_validation_config()
    match_key = qualification_match_key(event_key, match_number)

    official = effective_provider.get_match(event_key, match_key)
    if official is None or not official.has_result:
        log.info(f"Skipping {match_key}: no official result")
        return MatchValidationOutcome(match_key=match_key, skipped=SkipReason.NO_OFFICIAL_DATA)

    with effective_uow() as uow:
        records = uow.repositories.records.list_for_match(event_key, str(match_number))
    if not records:
        log.info(f"Skipping {match_key}: no scouted records")
        return MatchValidationOutcome(match_key=match_key, skipped=SkipReason.NO_SCOUTED_DATA)

    result = validate_match_records(
        event_key=event_key,
        match_number=str(match_number),
        records=records,
        official=official,
        config=effective_config,
        validated_at=validated_at,
    )
    store_result(result, unit_of_work_factory=effective_uow)
    return MatchValidationOutcome(match_key=match_key, result=result)


def store_result(
    result: MatchValidationResult, *, unit_of_work_factory: UnitOfWorkFactory
) -> None:
    with unit_of_work_factory() as uow:
        uow.repositories.results.save(result)
        uow.commit()


def _progress(
    callback: ProgressCallback | None, phase: ValidationPhase, event_key: str
) -> None:
    if callback is not None:
        callback(ValidationProgress(current=0, total=0, match_key=None, phase=phase))
    log.debug(f"{event_key}: {phase}")


def validate_event(
    event_key: str,
    *,
    provider: OfficialDataProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ValidationConfig | None = None,
    on_progress: ProgressCallback | None = None,
    run_hook: Callable[[EventValidationRun], None] | None = None,
) -> EventValidationReport:
    """Validate every qualification match of ``event_key`` and store each verdict.

    ``run_hook`` receives the run before it starts, so a caller can keep a
    handle for :meth:`EventValidationRun.cancel`.
    """

    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    effective_provider = provider or build_official_provider(effective_uow)
    effective_config = config or load_validation_config()

    _progress(on_progress, ValidationPhase.FETCHING_SCOUTED, event_key)
    with effective_uow() as uow:
        event_records = uow.repositories.records.list_for_event(event_key)
    by_match: dict[str, list[ScoutingRecord]] = defaultdict(list)
    for record in event_records:
        by_match[record.match_number].append(record)

    _progress(on_progress, ValidationPhase.FETCHING_OFFICIAL, event_key)
    matches = effective_provider.get_event_matches(event_key)

    def load_records(match: OfficialMatch) -> list[ScoutingRecord]:
        return by_match.get(str(match.match_number), [])

    def on_result(result: MatchValidationResult) -> None:
        store_result(result, unit_of_work_factory=effective_uow)

    run = EventValidationRun(
        event_key=event_key,
        matches=matches,
        load_records=load_records,
        config=effective_config,
    )
    if run_hook is not None:
        run_hook(run)
    report = run.run(on_progress=on_progress, on_result=on_result)
    _progress(on_progress, ValidationPhase.COMPLETE, event_key)
    return report


@dataclass(frozen=True, slots=True)
class EventSummary:
    summary: ValidationSummary
    needing_review: list[MatchValidationResult]
    requiring_rescout: list[MatchValidationResult]


def load_results(
    event_key: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> list[MatchValidationResult]:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    with effective_uow() as uow:
        results = uow.repositories.results.list_for_event(event_key)
    return sort_results(results)


def summarize_event(
    event_key: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> EventSummary:
    results = load_results(event_key, unit_of_work_factory=unit_of_work_factory)
    return EventSummary(
        summary=summarize(results),
        needing_review=results_needing_review(results),
        requiring_rescout=results_requiring_rescout(results),
    )


def clear_results(
    event_key: str, *, unit_of_work_factory: UnitOfWorkFactory | None = None
) -> int:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    with effective_uow() as uow:
        removed = uow.repositories.results.clear_event(event_key)
        uow.commit()
    log.info(f"Cleared {removed} validation result(s) for {event_key}")
    return removed


def event_completeness(
    event_key: str,
    *,
    provider: OfficialDataProvider | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DataCompleteness:
    effective_uow = unit_of_work_factory or default_unit_of_work_factory()
    effective_provider = provider or build_official_provider(effective_uow)
    matches = [
        match
        for match in effective_provider.get_event_matches(event_key)
        if match.comp_level == CompLevel.QUALIFICATION
    ]
    with effective_uow() as uow:
        records = uow.repositories.records.list_for_event(event_key)
    return data_completeness(event_key, matches, records)
