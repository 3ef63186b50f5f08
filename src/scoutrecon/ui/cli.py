# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from scoutrecon.adapters.config_store import JsonValidationConfigStore
from scoutrecon.adapters.transfer import load_payload
from scoutrecon.app import (
    build_official_provider,
    clear_results,
    default_unit_of_work_factory,
    event_completeness,
    import_scouting_payload,
    summarize_event,
    validate_event,
    validate_match,
)
from scoutrecon.config import configure_logging
from scoutrecon.domain.merge import BatchDecision, MergeState, Resolution, UploadMode

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from scoutrecon.domain.merge import ConflictInfo, MergeOrchestrator
    from scoutrecon.domain.model import MatchValidationResult
    from scoutrecon.domain.validation import ValidationProgress

log = logging.getLogger(__name__)

CONFLICT_CHOICES = ("ask", "replace", "skip")


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reconcile scouting records against official match results"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import a scouting data JSON file")
    importer.add_argument("path", type=Path, help="JSON payload exported by scouting devices")
    importer.add_argument(
        "--mode",
        type=UploadMode,
        choices=list(UploadMode),
        default=UploadMode.SMART_MERGE,
        help="How to combine the payload with stored records (default: %(default)s)",
    )
    importer.add_argument(
        "--on-conflict",
        choices=CONFLICT_CHOICES,
        default="ask",
        help="Decision for records that conflict with stored ones (default: %(default)s)",
    )
    importer.add_argument(
        "--batch",
        type=BatchDecision,
        choices=list(BatchDecision),
        default=BatchDecision.REVIEW_EACH,
        help="Decision for a large batch replacing corrected records (default: %(default)s)",
    )

    match = subparsers.add_parser("validate-match", help="Validate one qualification match")
    match.add_argument("event_key", help="Event key, e.g. 2025mrcmp")
    match.add_argument("match_number", help="Qualification match number")
    match.add_argument("--offline", action="store_true", help="Use stored official data only")

    event = subparsers.add_parser(
        "validate-event", help="Validate every qualification match of an event"
    )
    event.add_argument("event_key", help="Event key, e.g. 2025mrcmp")
    event.add_argument("--offline", action="store_true", help="Use stored official data only")

    summary = subparsers.add_parser("summary", help="Summarise stored validation results")
    summary.add_argument("event_key", help="Event key, e.g. 2025mrcmp")

    completeness = subparsers.add_parser(
        "completeness", help="Report how many played matches are fully scouted"
    )
    completeness.add_argument("event_key", help="Event key, e.g. 2025mrcmp")
    completeness.add_argument(
        "--offline", action="store_true", help="Use stored official data only"
    )

    clear = subparsers.add_parser("clear-results", help="Delete stored results for an event")
    clear.add_argument("event_key", help="Event key, e.g. 2025mrcmp")

    config = subparsers.add_parser("config", help="Validation threshold configuration")
    config_sub = config.add_subparsers(dest="config_command", required=True)
    config_sub.add_parser("show", help="Print the active configuration as JSON")
    config_sub.add_parser("reset", help="Restore the default configuration")

    return parser.parse_args(list(argv))


def _describe_conflict(conflict: ConflictInfo) -> str:
    key = conflict.key
    changed = ", ".join(conflict.changed_fields) or "none"
    return (
        f"{key.event_key} match {key.match_number} team {key.team_number} ({conflict.kind}): "
        f"local by {conflict.local.scout_name or '?'}, "
        f"incoming by {conflict.incoming.scout_name or '?'}; changed: {changed}"
    )


def _prompt_resolution(
    orchestrator: MergeOrchestrator, read: Callable[[str], str]
) -> None:
    while (conflict := orchestrator.current_conflict) is not None:
        print(_describe_conflict(conflict))
        answer = read("[r]eplace, [s]kip, [R]eplace all, [S]kip all, [u]ndo? ").strip()
        if answer == "r":
            orchestrator.resolve(Resolution.REPLACE)
        elif answer == "s":
            orchestrator.resolve(Resolution.SKIP)
        elif answer == "R":
            orchestrator.resolve_all(Resolution.REPLACE)
        elif answer == "S":
            orchestrator.resolve_all(Resolution.SKIP)
        elif answer == "u":
            if not orchestrator.undo():
                print("Nothing to undo")
        else:
            print(f"Unrecognised answer: {answer!r}")


def _finish_merge(
    orchestrator: MergeOrchestrator,
    *,
    on_conflict: str,
    batch: BatchDecision,
    read: Callable[[str], str] = input,
) -> None:
    if orchestrator.state is MergeState.BATCH_REVIEW_PENDING:
        print(f"{len(orchestrator.batch_review)} record(s) would replace corrected data: {batch}")
        orchestrator.decide_batch(batch)
    if orchestrator.current_conflict is None:
        return
    if on_conflict == "replace":
        orchestrator.resolve_all(Resolution.REPLACE)
    elif on_conflict == "skip":
        orchestrator.resolve_all(Resolution.SKIP)
    else:
        _prompt_resolution(orchestrator, read)


def _print_result(result: MatchValidationResult) -> None:
    print(
        f"{result.match_key}: {result.status} (confidence {result.confidence}), "
        f"{result.total_discrepancies} discrepancies "
        f"({result.critical_discrepancies} critical, {result.warning_discrepancies} warning)"
    )
    for alliance in (result.red, result.blue):
        print(
            f"  {alliance.alliance}: {alliance.status}, scouted {alliance.total_scouted_points} "
            f"vs official {alliance.total_official_points} pts "
            f"({alliance.critical_count} critical, {alliance.warning_count} warning, "
            f"{alliance.minor_count} minor)"
        )
        for discrepancy in alliance.discrepancies:
            print(f"  [{discrepancy.severity}] {alliance.alliance}: {discrepancy.message}")
    for team in result.teams:
        if team.flag_for_review:
            notes = "; ".join(team.notes)
            print(f"  team {team.team_number} ({team.alliance}): {notes or 'review'}")


def _log_progress(progress: ValidationProgress) -> None:
    log.debug(f"{progress.phase} {progress.current}/{progress.total} {progress.match_key or ''}")


def _run_import(args: argparse.Namespace) -> None:
    payload = load_payload(args.path)
    imported = import_scouting_payload(payload, mode=args.mode)
    outcome = imported.outcome
    print(
        f"Parsed {len(imported.parsed.records)} record(s) ({imported.parsed.skipped} skipped); "
        f"added {outcome.added}, replaced {outcome.replaced}, "
        f"duplicates {outcome.duplicates_skipped}"
    )
    orchestrator = imported.orchestrator
    if orchestrator is not None and orchestrator.state is not MergeState.IDLE:
        _finish_merge(orchestrator, on_conflict=args.on_conflict, batch=args.batch)
        summary = orchestrator.summary
        print(
            f"Resolved conflicts: replaced {summary.user_replaced}, "
            f"skipped {summary.user_skipped}"
        )


def _run_validate_match(args: argparse.Namespace) -> None:
    uow = default_unit_of_work_factory()
    outcome = validate_match(
        args.event_key,
        args.match_number,
        provider=build_official_provider(uow, offline=args.offline),
        unit_of_work_factory=uow,
    )
    if outcome.result is None:
        print(f"{outcome.match_key}: skipped ({outcome.skipped})")
        return
    _print_result(outcome.result)


def _run_validate_event(args: argparse.Namespace) -> None:
    uow = default_unit_of_work_factory()
    report = validate_event(
        args.event_key,
        provider=build_official_provider(uow, offline=args.offline),
        unit_of_work_factory=uow,
        on_progress=_log_progress,
    )
    for result in report.results:
        _print_result(result)
    print(
        f"{report.event_key}: validated {report.validated}, "
        f"no official data {len(report.skipped_no_official)}, "
        f"no scouted data {len(report.skipped_no_scouted)}, errors {len(report.errors)}"
    )
    for match_key, error in report.errors.items():
        print(f"  {match_key}: {error}")


def _run_summary(args: argparse.Namespace) -> None:
    event = summarize_event(args.event_key)
    summary = event.summary
    print(
        f"{args.event_key}: {summary.total_matches} match(es); passed {summary.passed}, "
        f"flagged {summary.flagged}, failed {summary.failed}; "
        f"average confidence {summary.average_confidence}"
    )
    print(
        f"Discrepancies: {summary.total_discrepancies} total, "
        f"{summary.critical_discrepancies} critical, {summary.warning_discrepancies} warning, "
        f"{summary.minor_discrepancies} minor"
    )
    for result in event.needing_review:
        marker = "RESCOUT" if result.requires_rescout else "review"
        print(f"  {result.match_key}: {marker}")


def _run_completeness(args: argparse.Namespace) -> None:
    uow = default_unit_of_work_factory()
    report = event_completeness(
        args.event_key,
        provider=build_official_provider(uow, offline=args.offline),
        unit_of_work_factory=uow,
    )
    print(
        f"{report.event_key}: {report.complete_matches}/{report.total_matches} complete "
        f"({report.completeness_percent}%), {report.missing_records} record(s) missing"
    )
    for match_key in report.incomplete_matches:
        print(f"  incomplete: {match_key}")


def _run_config(args: argparse.Namespace) -> None:
    store = JsonValidationConfigStore()
    config = store.reset() if args.config_command == "reset" else store.load()
    print(store.dump(config))


COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "import": _run_import,
    "validate-match": _run_validate_match,
    "validate-event": _run_validate_event,
    "summary": _run_summary,
    "completeness": _run_completeness,
    "clear-results": lambda args: print(f"Removed {clear_results(args.event_key)} result(s)"),
    "config": _run_config,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(verbose=parsed_args.verbose)

    try:
        COMMANDS[parsed_args.command](parsed_args)
    except ValueError as exc:
        log.error(f"Invalid input: {exc}")  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception(f"Fatal error during {parsed_args.command}")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
