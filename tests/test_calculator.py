"""Tests for reminder timing and notification text."""

from datetime import datetime, timedelta, timezone

import pytest

from domains.notifications.calculator import compute_fire_time, delay_until, format_lead_time
from domains.notifications.messages import (
    event_message,
    priority_title,
    task_deadline_message,
    task_start_message,
)


class TestFormatLeadTime:
    """Lead times read as whole days, hours or minutes."""

    @pytest.mark.parametrize("minutes,expected", [
        (90, "1 hour"),
        (1500, "1 day"),
        (45, "45 minutes"),
        (2880, "2 days"),
        (60, "1 hour"),
        (180, "3 hours"),
        (1439, "23 hours"),
        (1440, "1 day"),
        (15, "15 minutes"),
    ])
    def test_format(self, minutes, expected):
        assert format_lead_time(minutes) == expected


class TestFireTime:

    def test_fire_time_is_lead_before_anchor(self):
        anchor = datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
        assert compute_fire_time(anchor, 10) == datetime(2026, 3, 2, 9, 50, tzinfo=timezone.utc)

    def test_fire_time_not_clamped(self):
        """A lead longer than the time left gives a fire time in the past."""
        now = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
        fire = compute_fire_time(now + timedelta(minutes=1), 2)
        assert delay_until(fire, now) == timedelta(minutes=-1)


class TestMessages:

    def test_priority_titles(self):
        assert priority_title("urgent", is_deadline=True) == "🚨 URGENT: Deadline Approaching!"
        assert priority_title("urgent", is_deadline=False) == "🚨 URGENT Task Reminder"
        assert priority_title("high", is_deadline=True) == "🔴 High Priority Deadline!"
        assert priority_title("high", is_deadline=False) == "🔴 High Priority Task"
        assert priority_title("medium", is_deadline=True) == "⏰ Task Due Soon"
        assert priority_title("low", is_deadline=False) == "🔔 Task Reminder"

    def test_task_start_message(self):
        assert task_start_message("Write report", "medium", 90) == (
            "🔔 Task Reminder",
            "📅 Write report starts in 1 hour",
        )

    def test_task_deadline_message(self):
        assert task_deadline_message("Tax return", "urgent", 2880) == (
            "🚨 URGENT: Deadline Approaching!",
            "⚠️ Tax return - only 2 days left!",
        )

    def test_event_message(self):
        assert event_message("Standup", 15) == ("📅 Upcoming Event", "Standup starts in 15 minutes!")
