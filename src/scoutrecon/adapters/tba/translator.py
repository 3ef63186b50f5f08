"""Translate The Blue Alliance payloads into official match entities."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from scoutrecon.domain.model import AllianceBreakdown, OfficialAlliance, OfficialMatch, ReefCounts

from .schema import MatchPayload

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import AllianceBreakdownPayload, MatchAlliancePayload, ReefPayload

log = getLogger(__name__)

TEAM_KEY_PREFIX = "frc"
AUTO_LINE_CROSSED = "Yes"


def team_number_from_key(team_key: str) -> str:
    """``"frc254"`` becomes ``"254"``; anything else is returned stripped."""

    value = team_key.strip()
    if value.lower().startswith(TEAM_KEY_PREFIX):
        return value[len(TEAM_KEY_PREFIX) :]
    return value


def _reef(payload: ReefPayload) -> ReefCounts:
    return ReefCounts(
        l1=payload.trough,
        l2=payload.bot_row_count,
        l3=payload.mid_row_count,
        l4=payload.top_row_count,
    )


def _breakdown(payload: AllianceBreakdownPayload) -> AllianceBreakdown:
    return AllianceBreakdown(
        auto_reef=_reef(payload.auto_reef),
        teleop_reef=_reef(payload.teleop_reef),
        auto_coral_count=payload.auto_coral_count,
        auto_coral_points=payload.auto_coral_points,
        teleop_coral_count=payload.teleop_coral_count,
        teleop_coral_points=payload.teleop_coral_points,
        net_algae_count=payload.net_algae_count,
        wall_algae_count=payload.wall_algae_count,
        algae_points=payload.algae_points,
        auto_line_robots=tuple(state == AUTO_LINE_CROSSED for state in payload.auto_line_robots),
        end_game_robots=tuple(state or "None" for state in payload.end_game_robots),
        auto_mobility_points=payload.auto_mobility_points,
        end_game_barge_points=payload.end_game_barge_points,
        auto_points=payload.auto_points,
        teleop_points=payload.teleop_points,
        foul_points=payload.foul_points,
        auto_bonus_achieved=payload.auto_bonus_achieved,
        coral_bonus_achieved=payload.coral_bonus_achieved,
        barge_bonus_achieved=payload.barge_bonus_achieved,
        foul_count=payload.foul_count,
        tech_foul_count=payload.tech_foul_count,
    )


def _alliance(
    payload: MatchAlliancePayload, breakdown: AllianceBreakdownPayload | None
) -> OfficialAlliance:
    return OfficialAlliance(
        team_numbers=tuple(team_number_from_key(key) for key in payload.team_keys),
        score=payload.score,
        breakdown=_breakdown(breakdown) if breakdown is not None else None,
    )


def parse_match(payload: MatchPayload | dict[str, object]) -> OfficialMatch:
    """Build an :class:`OfficialMatch` from a raw or validated match payload."""

    match = payload if isinstance(payload, MatchPayload) else MatchPayload.model_validate(payload)
    breakdown = match.score_breakdown
    if breakdown is None:
        log.debug("Match %s has no score breakdown yet", match.key)
    return OfficialMatch(
        key=match.key,
        event_key=match.event_key,
        comp_level=match.comp_level,
        set_number=match.set_number,
        match_number=match.match_number,
        red=_alliance(match.alliances.red, breakdown.red if breakdown else None),
        blue=_alliance(match.alliances.blue, breakdown.blue if breakdown else None),
    )


def parse_matches(payloads: Iterable[MatchPayload | dict[str, object]]) -> list[OfficialMatch]:
    return [parse_match(payload) for payload in payloads]
