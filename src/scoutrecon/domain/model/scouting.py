"""Scouting records: one team's performance in one match as seen by one scout."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Final, NamedTuple

from .counts import ReefCounts
from .enums import Alliance

RECORD_ID_SEPARATOR: Final[str] = "::"

COUNTER_FIELDS: Final[tuple[str, ...]] = (
    "auto_coral_place_l1_count",
    "auto_coral_place_l2_count",
    "auto_coral_place_l3_count",
    "auto_coral_place_l4_count",
    "auto_coral_place_drop_miss_count",
    "auto_coral_pick_preload_count",
    "auto_coral_pick_station_count",
    "auto_coral_pick_mark1_count",
    "auto_coral_pick_mark2_count",
    "auto_coral_pick_mark3_count",
    "auto_algae_place_net_shot",
    "auto_algae_place_processor",
    "auto_algae_place_drop_miss",
    "auto_algae_place_remove",
    "auto_algae_pick_reef_count",
    "auto_algae_pick_mark1_count",
    "auto_algae_pick_mark2_count",
    "auto_algae_pick_mark3_count",
    "teleop_coral_place_l1_count",
    "teleop_coral_place_l2_count",
    "teleop_coral_place_l3_count",
    "teleop_coral_place_l4_count",
    "teleop_coral_place_drop_miss_count",
    "teleop_coral_pick_station_count",
    "teleop_coral_pick_carpet_count",
    "teleop_algae_place_net_shot",
    "teleop_algae_place_processor",
    "teleop_algae_place_drop_miss",
    "teleop_algae_place_remove",
    "teleop_algae_pick_reef_count",
    "teleop_algae_pick_carpet_count",
)

FLAG_FIELDS: Final[tuple[str, ...]] = (
    "start_pose_0",
    "start_pose_1",
    "start_pose_2",
    "start_pose_3",
    "start_pose_4",
    "start_pose_5",
    "auto_passed_start_line",
    "shallow_climb_attempted",
    "deep_climb_attempted",
    "park_attempted",
    "climb_failed",
    "played_defense",
    "broke_down",
)

# Fields compared when deciding whether two records for one key say the same thing.
COMPARED_FIELDS: Final[tuple[str, ...]] = (
    "alliance",
    "scout_name",
    *COUNTER_FIELDS,
    *FLAG_FIELDS,
    "comment",
)


class RecordKey(NamedTuple):
    """Logical identity of a scouting record. Alliance is deliberately absent."""

    event_key: str
    match_number: str
    team_number: str


def _utcnow() -> datetime:
    return datetime.now(UTC)


def make_record_id(
    *,
    event_key: str,
    match_number: str,
    team_number: str,
    alliance: Alliance | None,
    created_at: datetime,
) -> str:
    """Build the composite storage id ``event::match::team::alliance::epoch_ms``."""

    created_ms = int(created_at.timestamp() * 1000)
    alliance_part = alliance.value if alliance is not None else "unknown"
    return RECORD_ID_SEPARATOR.join(
        (event_key, match_number, team_number, alliance_part, str(created_ms))
    )


@dataclass(eq=False, kw_only=True)
class ScoutingRecord:
    event_key: str
    match_number: str
    team_number: str
    alliance: Alliance | None = None
    scout_name: str = ""
    id: str = ""
    created_at: datetime = field(default_factory=_utcnow)

    auto_coral_place_l1_count: int = 0
    auto_coral_place_l2_count: int = 0
    auto_coral_place_l3_count: int = 0
    auto_coral_place_l4_count: int = 0
    auto_coral_place_drop_miss_count: int = 0
    auto_coral_pick_preload_count: int = 0
    auto_coral_pick_station_count: int = 0
    auto_coral_pick_mark1_count: int = 0
    auto_coral_pick_mark2_count: int = 0
    auto_coral_pick_mark3_count: int = 0
    auto_algae_place_net_shot: int = 0
    auto_algae_place_processor: int = 0
    auto_algae_place_drop_miss: int = 0
    auto_algae_place_remove: int = 0
    auto_algae_pick_reef_count: int = 0
    auto_algae_pick_mark1_count: int = 0
    auto_algae_pick_mark2_count: int = 0
    auto_algae_pick_mark3_count: int = 0
    teleop_coral_place_l1_count: int = 0
    teleop_coral_place_l2_count: int = 0
    teleop_coral_place_l3_count: int = 0
    teleop_coral_place_l4_count: int = 0
    teleop_coral_place_drop_miss_count: int = 0
    teleop_coral_pick_station_count: int = 0
    teleop_coral_pick_carpet_count: int = 0
    teleop_algae_place_net_shot: int = 0
    teleop_algae_place_processor: int = 0
    teleop_algae_place_drop_miss: int = 0
    teleop_algae_place_remove: int = 0
    teleop_algae_pick_reef_count: int = 0
    teleop_algae_pick_carpet_count: int = 0

    start_pose_0: bool = False
    start_pose_1: bool = False
    start_pose_2: bool = False
    start_pose_3: bool = False
    start_pose_4: bool = False
    start_pose_5: bool = False
    auto_passed_start_line: bool = False
    shallow_climb_attempted: bool = False
    deep_climb_attempted: bool = False
    park_attempted: bool = False
    climb_failed: bool = False
    played_defense: bool = False
    broke_down: bool = False

    comment: str = ""

    is_corrected: bool = False
    correction_count: int = 0
    last_corrected_at: datetime | None = None
    last_corrected_by: str | None = None
    correction_notes: str | None = None
    original_scout_name: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            self.id = make_record_id(
                event_key=self.event_key,
                match_number=self.match_number,
                team_number=self.team_number,
                alliance=self.alliance,
                created_at=self.created_at,
            )

    def __repr__(self) -> str:
        return (
            f"ScoutingRecord(id={self.id!r}, team={self.team_number!r}, "
            f"alliance={self.alliance!s}, corrected={self.is_corrected})"
        )

    @property
    def key(self) -> RecordKey:
        return RecordKey(self.event_key, self.match_number, self.team_number)

    @property
    def auto_coral(self) -> ReefCounts:
        return ReefCounts(
            l1=self.auto_coral_place_l1_count,
            l2=self.auto_coral_place_l2_count,
            l3=self.auto_coral_place_l3_count,
            l4=self.auto_coral_place_l4_count,
        )

    @property
    def teleop_coral(self) -> ReefCounts:
        return ReefCounts(
            l1=self.teleop_coral_place_l1_count,
            l2=self.teleop_coral_place_l2_count,
            l3=self.teleop_coral_place_l3_count,
            l4=self.teleop_coral_place_l4_count,
        )

    @property
    def has_endgame_action(self) -> bool:
        return self.deep_climb_attempted or self.shallow_climb_attempted or self.park_attempted

    @property
    def deep_climb_succeeded(self) -> bool:
        return self.deep_climb_attempted and not self.climb_failed

    @property
    def shallow_climb_succeeded(self) -> bool:
        return self.shallow_climb_attempted and not self.climb_failed

    def compared_values(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in COMPARED_FIELDS}

    def changed_fields(self, other: ScoutingRecord) -> tuple[str, ...]:
        """Return the compared fields whose values differ between the two records."""

        mine = self.compared_values()
        theirs = other.compared_values()
        return tuple(name for name in COMPARED_FIELDS if mine[name] != theirs[name])

    def copy_data(self) -> dict[str, object]:
        """Return every dataclass field value, suitable for ``ScoutingRecord(**...)``."""

        return {item.name: getattr(self, item.name) for item in fields(self)}
