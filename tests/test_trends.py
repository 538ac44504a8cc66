"""Tests for score trend calculation."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from history import calculate_trend, trend_from_history, trend_history

BASE = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def analysis(score, days_after_base=0):
    return SimpleNamespace(overall_score=score, created_at=BASE + timedelta(days=days_after_base))


@pytest.mark.parametrize(
    "previous,current,trend,delta,percentage",
    [
        (50, 60, "up", 10, 20),
        (80, 60, "down", 20, 25),
        (70, 70, "same", 0, 0),
        (0, 40, "up", 40, 0),
        (8, 7, "down", 1, 12),
    ],
)
def test_calculate_trend(previous, current, trend, delta, percentage):
    result = calculate_trend(analysis(current, 3), analysis(previous))

    assert result["hasPreviousAnalysis"] is True
    assert result["trend"] == trend
    assert result["delta"] == delta
    assert result["percentage"] == percentage
    assert result["daysSince"] == 3
    assert result["previousScore"] == previous
    assert result["currentScore"] == current
    assert result["previousDate"] == BASE.isoformat()


def test_no_previous_analysis():
    assert calculate_trend(analysis(50), None) == {
        "hasPreviousAnalysis": False,
        "message": "No previous analysis for comparison",
    }


def test_trend_from_history_uses_two_newest():
    newest_first = [analysis(90, 10), analysis(60, 5), analysis(10, 0)]

    result = trend_from_history(newest_first)

    assert result["currentScore"] == 90
    assert result["previousScore"] == 60
    assert result["daysSince"] == 5


def test_trend_from_single_analysis():
    assert trend_from_history([analysis(50)])["hasPreviousAnalysis"] is False
    assert trend_from_history([])["hasPreviousAnalysis"] is False


def test_history_is_chronological():
    points = trend_history([analysis(90, 2), analysis(50, 0), analysis(70, 1)])

    assert [p["score"] for p in points] == [50, 70, 90]
    assert points[0]["date"] == BASE.isoformat()
