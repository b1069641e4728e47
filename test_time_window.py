#!/usr/bin/env python3
"""
Test time-window feed filtering and the slider policies
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

sys.path.append(os.path.dirname(os.path.abspath(__file__)))

from risk_engine.models import FloodReport, GeoLocation, RiskLevel
from risk_engine.time_window import TimeMode, get_policy, parse_risk_filter, select_active
from utils.time_labels import format_time_ago, render_time_label

NOW = datetime(2026, 10, 19, 8, 0, tzinfo=timezone.utc)
AGES = [5, 45, 180, 480, 1200, 2880]
RISKS = [RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.LOW, RiskLevel.HIGH, RiskLevel.LOW]


def feed():
    return [
        FloodReport(
            id=f"rep-{i}",
            location=GeoLocation(10.885, 106.781),
            risk=risk,
            depth="0.5m",
            timestamp=NOW - timedelta(minutes=age),
        )
        for i, (age, risk) in enumerate(zip(AGES, RISKS))
    ]


def ages_of(reports):
    return [int((NOW - r.timestamp).total_seconds() // 60) for r in reports]


def test_urgent_four_hours():
    active = select_active(feed(), "urgent", 240, "All", now=NOW)
    assert ages_of(active) == [5, 45, 180]


def test_day_uses_same_rule():
    assert ages_of(select_active(feed(), TimeMode.DAY, 720, now=NOW)) == [5, 45, 180, 480]
    # Same window, same result regardless of urgent/day
    assert select_active(feed(), TimeMode.DAY, 240, now=NOW) == select_active(feed(), TimeMode.URGENT, 240, now=NOW)


def test_boundary_is_inclusive():
    assert ages_of(select_active(feed(), "urgent", 180, now=NOW)) == [5, 45, 180]
    assert ages_of(select_active(feed(), "urgent", 179, now=NOW)) == [5, 45]


def test_history_ignores_window():
    assert len(select_active(feed(), "history", 5, now=NOW)) == len(AGES)


def test_risk_filter_then_time():
    active = select_active(feed(), "urgent", 240, RiskLevel.HIGH, now=NOW)
    assert [r.id for r in active] == ["rep-0", "rep-2"]
    assert [r.id for r in select_active(feed(), "history", 0, "Low", now=NOW)] == ["rep-3", "rep-5"]


def test_order_is_preserved_not_resorted():
    reversed_feed = list(reversed(feed()))
    active = select_active(reversed_feed, "history", 0, now=NOW)
    assert [r.id for r in active] == [r.id for r in reversed_feed]


def test_growing_window_never_drops_reports():
    previous = set()
    for window in range(5, 3000, 5):
        current = {r.id for r in select_active(feed(), "day", window, now=NOW)}
        assert previous <= current
        previous = current
    assert previous <= {r.id for r in select_active(feed(), "history", 0, now=NOW)}


def test_invalid_mode_or_filter():
    with pytest.raises(ValueError):
        select_active(feed(), "weekly", 60, now=NOW)
    with pytest.raises(ValueError):
        parse_risk_filter("Extreme")
    assert parse_risk_filter(None) == "All"
    assert parse_risk_filter("Medium") == RiskLevel.MEDIUM


def test_slider_policies():
    urgent = get_policy("urgent")
    day = get_policy(TimeMode.DAY)
    assert (urgent.default_minutes, urgent.max_minutes, urgent.step_minutes) == (240, 240, 5)
    assert (day.default_minutes, day.max_minutes, day.step_minutes) == (720, 720, 30)
    assert get_policy("history") is None

    assert urgent.check(62) == 62
    assert day.check(720) == 720
    # Off the 30-minute grid but inside the range: used as given
    assert day.check(240) == 240
    for policy, minutes in [(urgent, 1), (urgent, 241), (day, 999)]:
        with pytest.raises(ValueError):
            policy.check(minutes)


def test_time_labels():
    assert render_time_label("history", 240) == "All History"
    assert render_time_label("urgent", 45) == "Last 45 mins"
    assert render_time_label("urgent", 240) == "Last 4h"
    assert render_time_label("day", 150) == "Last 2h 30m"

    assert format_time_ago(NOW - timedelta(seconds=20), NOW) == "Just now"
    assert format_time_ago(NOW - timedelta(minutes=45), NOW) == "45m ago"
    assert format_time_ago(NOW - timedelta(hours=20), NOW) == "20h ago"


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
