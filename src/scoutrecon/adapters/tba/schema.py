"""Pydantic models describing The Blue Alliance v3 match payloads (2025 season)."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _none_to_zero(value: object) -> object:
    return 0 if value is None else value


def _none_to_false(value: object) -> object:
    return False if value is None else value


def _none_to_empty(value: object) -> object:
    return {} if value is None else value


class TbaBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ReefPayload(TbaBaseModel):
    trough: int = 0
    bot_row_count: int = Field(default=0, alias="tba_botRowCount")
    mid_row_count: int = Field(default=0, alias="tba_midRowCount")
    top_row_count: int = Field(default=0, alias="tba_topRowCount")

    _zero_counts = field_validator(
        "trough", "bot_row_count", "mid_row_count", "top_row_count", mode="before"
    )(_none_to_zero)


class AllianceBreakdownPayload(TbaBaseModel):
    auto_reef: ReefPayload = Field(default_factory=ReefPayload, alias="autoReef")
    teleop_reef: ReefPayload = Field(default_factory=ReefPayload, alias="teleopReef")
    auto_coral_count: int = Field(default=0, alias="autoCoralCount")
    auto_coral_points: int = Field(default=0, alias="autoCoralPoints")
    teleop_coral_count: int = Field(default=0, alias="teleopCoralCount")
    teleop_coral_points: int = Field(default=0, alias="teleopCoralPoints")
    net_algae_count: int = Field(default=0, alias="netAlgaeCount")
    wall_algae_count: int = Field(default=0, alias="wallAlgaeCount")
    algae_points: int = Field(default=0, alias="algaePoints")
    auto_line_robot1: str | None = Field(default=None, alias="autoLineRobot1")
    auto_line_robot2: str | None = Field(default=None, alias="autoLineRobot2")
    auto_line_robot3: str | None = Field(default=None, alias="autoLineRobot3")
    end_game_robot1: str | None = Field(default=None, alias="endGameRobot1")
    end_game_robot2: str | None = Field(default=None, alias="endGameRobot2")
    end_game_robot3: str | None = Field(default=None, alias="endGameRobot3")
    auto_mobility_points: int = Field(default=0, alias="autoMobilityPoints")
    end_game_barge_points: int = Field(default=0, alias="endGameBargePoints")
    auto_points: int = Field(default=0, alias="autoPoints")
    teleop_points: int = Field(default=0, alias="teleopPoints")
    foul_points: int = Field(default=0, alias="foulPoints")
    auto_bonus_achieved: bool = Field(default=False, alias="autoBonusAchieved")
    coral_bonus_achieved: bool = Field(default=False, alias="coralBonusAchieved")
    barge_bonus_achieved: bool = Field(default=False, alias="bargeBonusAchieved")
    foul_count: int = Field(default=0, alias="foulCount")
    tech_foul_count: int = Field(default=0, alias="techFoulCount")

    _empty_reefs = field_validator("auto_reef", "teleop_reef", mode="before")(_none_to_empty)
    _zero_counts = field_validator(
        "auto_coral_count",
        "auto_coral_points",
        "teleop_coral_count",
        "teleop_coral_points",
        "net_algae_count",
        "wall_algae_count",
        "algae_points",
        "auto_mobility_points",
        "end_game_barge_points",
        "auto_points",
        "teleop_points",
        "foul_points",
        "foul_count",
        "tech_foul_count",
        mode="before",
    )(_none_to_zero)
    _false_flags = field_validator(
        "auto_bonus_achieved", "coral_bonus_achieved", "barge_bonus_achieved", mode="before"
    )(_none_to_false)

    @property
    def auto_line_robots(self) -> tuple[str | None, ...]:
        return (self.auto_line_robot1, self.auto_line_robot2, self.auto_line_robot3)

    @property
    def end_game_robots(self) -> tuple[str | None, ...]:
        return (self.end_game_robot1, self.end_game_robot2, self.end_game_robot3)


class ScoreBreakdownPayload(TbaBaseModel):
    red: AllianceBreakdownPayload | None = None
    blue: AllianceBreakdownPayload | None = None


class MatchAlliancePayload(TbaBaseModel):
    team_keys: list[str] = Field(default_factory=list)
    score: int = -1

    @field_validator("score", mode="before")
    @classmethod
    def _missing_score(cls, value: object) -> object:
        return -1 if value is None else value


class MatchAlliancesPayload(TbaBaseModel):
    red: MatchAlliancePayload = Field(default_factory=MatchAlliancePayload)
    blue: MatchAlliancePayload = Field(default_factory=MatchAlliancePayload)


class MatchPayload(TbaBaseModel):
    key: str
    event_key: str
    comp_level: str = "qm"
    set_number: int = 1
    match_number: int = 0
    alliances: MatchAlliancesPayload = Field(default_factory=MatchAlliancesPayload)
    score_breakdown: ScoreBreakdownPayload | None = None
    winning_alliance: str | None = None
    time: int | None = None
    actual_time: int | None = None
    post_result_time: int | None = None
