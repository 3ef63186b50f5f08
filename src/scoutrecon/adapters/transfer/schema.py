"""Pydantic model for one scouting entry as exported by the scouting devices.

Devices use camelCase keys; snake_case keys are accepted as well. Counters that
are absent, null or not numeric become zero and flags become ``False``.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

TRUTHY_STRINGS = frozenset({"true", "yes", "y", "1", "on"})


def _to_int(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return 0
    return 0


def _to_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int | float):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY_STRINGS
    return False


def _to_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _to_datetime(value: object) -> datetime | None:
    """Accept epoch milliseconds or ISO-8601 strings; anything else is ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000, tz=UTC)
    if isinstance(value, str) and value.strip():
        text = value.strip()
        if text.isdigit():
            return datetime.fromtimestamp(int(text) / 1000, tz=UTC)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    return None


class ScoutingEntryPayload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, alias_generator=to_camel)

    event_key: str = Field(
        default="", validation_alias=AliasChoices("eventName", "eventKey", "event_key")
    )
    match_number: str = Field(
        default="", validation_alias=AliasChoices("matchNumber", "match_number")
    )
    team_number: str = Field(
        default="",
        validation_alias=AliasChoices("selectTeam", "teamNumber", "team_number"),
    )
    alliance: str = ""
    scout_name: str = Field(default="", validation_alias=AliasChoices("scoutName", "scout_name"))

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

    start_pose_0: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses0", "startPose0", "start_pose_0")
    )
    start_pose_1: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses1", "startPose1", "start_pose_1")
    )
    start_pose_2: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses2", "startPose2", "start_pose_2")
    )
    start_pose_3: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses3", "startPose3", "start_pose_3")
    )
    start_pose_4: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses4", "startPose4", "start_pose_4")
    )
    start_pose_5: bool = Field(
        default=False, validation_alias=AliasChoices("startPoses5", "startPose5", "start_pose_5")
    )
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

    @field_validator("*", mode="before")
    @classmethod
    def _coerce(cls, value: object, info: ValidationInfo) -> object:
        name = info.field_name
        annotation = cls.model_fields[name].annotation if name else None
        if annotation is int:
            return _to_int(value)
        if annotation is bool:
            return _to_bool(value)
        if annotation is str:
            return _to_text(value)
        if name == "last_corrected_at":
            return _to_datetime(value)
        if value is None or value == "":
            return None
        return str(value)

    @property
    def has_identity(self) -> bool:
        return bool(self.match_number and self.team_number)
