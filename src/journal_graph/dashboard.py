from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date as Date
from datetime import datetime
from typing import Any, Sequence

from .mood import MOOD_LABELS, mood_label_from_score
from .types import Conversation

MIN_DAYS = 7
MAX_DAYS = 120
DEFAULT_DAYS = 30


def clamp_days(value: Any) -> int:
    try:
        days = int(float(value))
    except (TypeError, ValueError):
        return DEFAULT_DAYS
    return max(MIN_DAYS, min(MAX_DAYS, days))


def normalize_date(value: Any = None, today: Date | None = None) -> str:
    """Return ``value`` as YYYY-MM-DD, or today's date when it is missing or invalid."""
    fallback = (today or Date.today()).isoformat()
    candidate = str(value or "").strip()
    if not candidate:
        return fallback
    try:
        return datetime.strptime(candidate, "%Y-%m-%d").date().isoformat()
    except ValueError:
        return fallback


@dataclass
class DashboardSummary:
    total_tracked_days: int = 0
    average_mood_score: float = 0.0
    average_mood_label: str = "neutral"
    completion_rate: float = 0.0
    check_ins_last_7_days: int = 0
    streak_days: int = 0


@dataclass
class Dashboard:
    summary: DashboardSummary = field(default_factory=DashboardSummary)
    mood_breakdown: dict[str, int] = field(default_factory=lambda: {label: 0 for label in MOOD_LABELS})
    trend: list[dict[str, Any]] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


def compute_streak(dates_desc: Sequence[str]) -> int:
    """Length of the run of consecutive days starting at the most recent date."""
    if not dates_desc:
        return 0
    streak = 1
    previous = Date.fromisoformat(dates_desc[0])
    for value in dates_desc[1:]:
        current = Date.fromisoformat(value)
        if (previous - current).days != 1:
            break
        streak += 1
        previous = current
    return streak


def build_insights(summary: DashboardSummary, breakdown: dict[str, int]) -> list[str]:
    if summary.total_tracked_days == 0:
        return ["No check-ins yet. End your first daily conversation to start filling the dashboard."]

    insights: list[str] = []
    if summary.average_mood_score <= -0.5:
        insights.append("Your recent mood is below neutral. Shorter check-ins with small recovery goals may help.")
    elif summary.average_mood_score >= 0.5:
        insights.append("Your recent mood is trending up. Keep the routines that show up on your better days.")
    else:
        insights.append("Your mood has been steady. More detail in your messages makes patterns easier to spot.")

    if summary.completion_rate < 60:
        insights.append("Many days were left open. Ending each conversation gives cleaner trends.")
    else:
        insights.append("You close most of your days, so your trends are getting more reliable.")

    if breakdown.get("tough", 0) >= 3:
        insights.append("There were several tough days. Smaller goals for tomorrow might take some pressure off.")
    if summary.streak_days >= 3:
        insights.append(f"You're on a {summary.streak_days}-day check-in streak.")
    return insights[:3]


def build_dashboard(conversations: Sequence[Conversation], today: Date | None = None) -> Dashboard:
    """Summarize conversations, which must be ordered newest date first."""
    today = today or Date.today()
    dashboard = Dashboard()
    if not conversations:
        dashboard.insights = build_insights(dashboard.summary, dashboard.mood_breakdown)
        return dashboard

    total_score = 0.0
    ended = 0
    for conv in conversations:
        if conv.mood_label in dashboard.mood_breakdown:
            dashboard.mood_breakdown[conv.mood_label] += 1
        total_score += conv.mood_score
        ended += int(conv.is_ended)

    total = len(conversations)
    average = round(total_score / total, 2)
    summary = dashboard.summary
    summary.total_tracked_days = total
    summary.average_mood_score = average
    summary.average_mood_label = mood_label_from_score(average)
    summary.completion_rate = round(ended / total * 100, 1)
    summary.check_ins_last_7_days = sum(
        1 for c in conversations if 0 <= (today - Date.fromisoformat(c.date)).days <= 6
    )
    summary.streak_days = compute_streak([c.date for c in conversations])

    dashboard.trend = [
        {
            "date": c.date,
            "mood_label": c.mood_label,
            "mood_score": round(c.mood_score, 2),
            "is_ended": c.is_ended,
            "user_message_count": c.user_message_count,
        }
        for c in reversed(conversations)
    ]
    dashboard.insights = build_insights(summary, dashboard.mood_breakdown)
    return dashboard
