"""Normalise one alliance of an official match into comparable figures."""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoutrecon.domain.model import OfficialAllianceData
from scoutrecon.domain.model.official import DEEP_CAGE, PARKED, SHALLOW_CAGE

if TYPE_CHECKING:
    from scoutrecon.domain.model import Alliance, OfficialMatch


def extract_alliance(match: OfficialMatch, alliance: Alliance) -> OfficialAllianceData:
    """Return the official figures for ``alliance``.

    A match published without a score breakdown yields zeroed figures and keeps
    only the final score; this never raises.
    """

    official = match.alliance(alliance)
    breakdown = official.breakdown
    if breakdown is None:
        return OfficialAllianceData(
            alliance=alliance,
            teams=official.team_numbers,
            total_points=official.score,
        )

    end_states = breakdown.end_game_robots
    return OfficialAllianceData(
        alliance=alliance,
        teams=official.team_numbers,
        has_breakdown=True,
        total_points=official.score,
        auto_points=breakdown.auto_points,
        teleop_points=breakdown.teleop_points,
        foul_points=breakdown.foul_points,
        auto_coral=breakdown.auto_reef,
        auto_coral_total=breakdown.auto_coral_count,
        auto_coral_points=breakdown.auto_coral_points,
        teleop_coral_cumulative=breakdown.teleop_reef,
        teleop_coral_total=breakdown.teleop_coral_count,
        teleop_coral_points=breakdown.teleop_coral_points,
        algae_net=breakdown.net_algae_count,
        algae_processor=breakdown.wall_algae_count,
        algae_points=breakdown.algae_points,
        mobility_count=sum(1 for crossed in breakdown.auto_line_robots if crossed),
        mobility_points=breakdown.auto_mobility_points,
        deep_climbs=end_states.count(DEEP_CAGE),
        shallow_climbs=end_states.count(SHALLOW_CAGE),
        parks=end_states.count(PARKED),
        endgame_points=breakdown.end_game_barge_points,
        auto_bonus_achieved=breakdown.auto_bonus_achieved,
        coral_bonus_achieved=breakdown.coral_bonus_achieved,
        barge_bonus_achieved=breakdown.barge_bonus_achieved,
        foul_count=breakdown.foul_count,
        tech_foul_count=breakdown.tech_foul_count,
    )
