from __future__ import annotations

import pytest


def _alliance_breakdown(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "autoLineRobot1": "Yes",
        "autoLineRobot2": "No",
        "autoLineRobot3": "Yes",
        "autoMobilityPoints": 6,
        "autoReef": {
            "topRow": {"nodeA": True},
            "trough": 1,
            "tba_botRowCount": 0,
            "tba_midRowCount": 1,
            "tba_topRowCount": 2,
        },
        "autoCoralCount": 4,
        "autoCoralPoints": 23,
        "autoPoints": 29,
        "teleopReef": {
            "trough": 3,
            "tba_botRowCount": 2,
            "tba_midRowCount": 1,
            "tba_topRowCount": 6,
        },
        "teleopCoralCount": 8,
        "teleopCoralPoints": 38,
        "netAlgaeCount": 3,
        "wallAlgaeCount": 2,
        "algaePoints": 24,
        "endGameRobot1": "DeepCage",
        "endGameRobot2": "Parked",
        "endGameRobot3": "None",
        "endGameBargePoints": 14,
        "teleopPoints": 76,
        "foulPoints": 0,
        "foulCount": 1,
        "techFoulCount": 0,
        "autoBonusAchieved": False,
        "coralBonusAchieved": None,
        "bargeBonusAchieved": False,
        "totalPoints": 105,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def match_payload() -> dict[str, object]:
    return {
        "key": "2025test_qm7",
        "event_key": "2025test",
        "comp_level": "qm",
        "set_number": 1,
        "match_number": 7,
        "winning_alliance": "red",
        "time": 1740830400,
        "actual_time": 1740830460,
        "post_result_time": 1740830700,
        "videos": [],
        "alliances": {
            "red": {
                "team_keys": ["frc254", "frc1678", "frc971"],
                "score": 105,
                "surrogate_team_keys": [],
                "dq_team_keys": [],
            },
            "blue": {"team_keys": ["frc118", "frc148", "frc2056"], "score": 88},
        },
        "score_breakdown": {
            "red": _alliance_breakdown(),
            "blue": _alliance_breakdown(
                autoLineRobot1="No",
                endGameRobot1="ShallowCage",
                netAlgaeCount=None,
            ),
        },
    }


@pytest.fixture
def unplayed_payload() -> dict[str, object]:
    return {
        "key": "2025test_qm40",
        "event_key": "2025test",
        "comp_level": "qm",
        "set_number": 1,
        "match_number": 40,
        "alliances": {
            "red": {"team_keys": ["frc1", "frc2", "frc3"], "score": None},
            "blue": {"team_keys": ["frc4", "frc5", "frc6"], "score": -1},
        },
        "score_breakdown": None,
    }
