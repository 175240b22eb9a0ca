from datetime import date

import pytest

from journal_graph.dashboard import build_dashboard, clamp_days, compute_streak, normalize_date
from journal_graph.types import Conversation

TODAY = date(2024, 5, 10)


def _conv(day: str, score: float, label: str, ended: bool = True) -> Conversation:
    return Conversation(date=day, mood_score=score, mood_label=label, is_ended=ended)


def test_empty_dashboard_has_onboarding_insight():
    dash = build_dashboard([], TODAY)
    assert dash.summary.total_tracked_days == 0
    assert len(dash.insights) == 1
    assert dash.mood_breakdown == {"great": 0, "good": 0, "neutral": 0, "low": 0, "tough": 0}


def test_dashboard_summary():
    convs = [
        _conv("2024-05-10", 2, "great"),
        _conv("2024-05-09", 1, "good"),
        _conv("2024-05-07", -1, "low", ended=False),
        _conv("2024-04-20", 0, "neutral", ended=False),
    ]
    dash = build_dashboard(convs, TODAY)

    assert dash.summary.total_tracked_days == 4
    assert dash.summary.average_mood_score == 0.5
    assert dash.summary.average_mood_label == "good"
    assert dash.summary.completion_rate == 50.0
    assert dash.summary.check_ins_last_7_days == 3
    assert dash.summary.streak_days == 2
    assert dash.mood_breakdown["low"] == 1
    assert [t["date"] for t in dash.trend] == ["2024-04-20", "2024-05-07", "2024-05-09", "2024-05-10"]
    assert dash.insights[1].startswith("Many days were left open")


def test_compute_streak():
    assert compute_streak([]) == 0
    assert compute_streak(["2024-05-03", "2024-05-02", "2024-05-01", "2024-04-28"]) == 3
    assert compute_streak(["2024-05-03", "2024-05-01"]) == 1


@pytest.mark.parametrize("value, expected", [(None, 30), ("abc", 30), (3, 7), ("60", 60), (500, 120)])
def test_clamp_days(value, expected):
    assert clamp_days(value) == expected


def test_normalize_date():
    assert normalize_date("2024-02-29", TODAY) == "2024-02-29"
    assert normalize_date("2023-02-29", TODAY) == "2024-05-10"
    assert normalize_date("yesterday", TODAY) == "2024-05-10"
    assert normalize_date(None, TODAY) == "2024-05-10"
