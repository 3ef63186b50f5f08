"""Reduce per-team scouting records into one alliance-level aggregate."""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from scoutrecon.domain.model import AllianceAggregate, ReefCounts

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence

    from scoutrecon.domain.model import Alliance, ScoutingRecord


def _sum(records: Sequence[ScoutingRecord], getter: Callable[[ScoutingRecord], int]) -> int:
    return sum(getter(record) for record in records)


def _count(records: Sequence[ScoutingRecord], predicate: Callable[[ScoutingRecord], bool]) -> int:
    return sum(1 for record in records if predicate(record))


def aggregate_alliance(
    records: Sequence[ScoutingRecord],
    alliance: Alliance,
    *,
    expected_teams: Iterable[str] | None = None,
) -> AllianceAggregate:
    """Sum counters and count flags across ``records``.

    An empty sequence yields an all-zero, incomplete aggregate. When
    ``expected_teams`` is given (the official roster), teams named there but
    absent from ``records`` are reported in ``missing_teams``.
    """

    teams = tuple(record.team_number for record in records)
    aggregate = AllianceAggregate(
        alliance=alliance,
        teams=teams,
        scout_names=tuple(record.scout_name for record in records),
        record_count=len(records),
        auto_coral=sum((record.auto_coral for record in records), ReefCounts()),
        auto_coral_missed=_sum(records, lambda r: r.auto_coral_place_drop_miss_count),
        auto_algae_net=_sum(records, lambda r: r.auto_algae_place_net_shot),
        auto_algae_processor=_sum(records, lambda r: r.auto_algae_place_processor),
        auto_mobility=_count(records, lambda r: r.auto_passed_start_line),
        teleop_coral=sum((record.teleop_coral for record in records), ReefCounts()),
        teleop_coral_missed=_sum(records, lambda r: r.teleop_coral_place_drop_miss_count),
        teleop_algae_net=_sum(records, lambda r: r.teleop_algae_place_net_shot),
        teleop_algae_processor=_sum(records, lambda r: r.teleop_algae_place_processor),
        deep_climb_attempts=_count(records, lambda r: r.deep_climb_attempted),
        shallow_climb_attempts=_count(records, lambda r: r.shallow_climb_attempted),
        park_attempts=_count(records, lambda r: r.park_attempted),
        deep_climbs=_count(records, lambda r: r.deep_climb_succeeded),
        shallow_climbs=_count(records, lambda r: r.shallow_climb_succeeded),
        parks=_count(records, lambda r: r.park_attempted),
        climb_failures=_count(records, lambda r: r.climb_failed),
        no_endgame=_count(records, lambda r: not r.has_endgame_action),
        broke_down=_count(records, lambda r: r.broke_down),
        played_defense=_count(records, lambda r: r.played_defense),
    )
    if expected_teams is None:
        return aggregate
    return with_missing_teams(aggregate, expected_teams)


def with_missing_teams(aggregate: AllianceAggregate, expected: Iterable[str]) -> AllianceAggregate:
    present = set(aggregate.teams)
    missing = tuple(team for team in expected if team not in present)
    return replace(aggregate, missing_teams=missing)
