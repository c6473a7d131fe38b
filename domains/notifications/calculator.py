"""Reminder timing: when a reminder fires and how its lead time reads."""

from datetime import datetime, timedelta

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def compute_fire_time(anchor: datetime, lead_minutes: int) -> datetime:
    """Return the moment a reminder fires: lead_minutes before anchor.

    Not clamped; the result may already be in the past.
    """
    return anchor - timedelta(minutes=lead_minutes)


def delay_until(fire_time: datetime, now: datetime) -> timedelta:
    """Time left until fire_time. Zero or negative means already due."""
    return fire_time - now


def format_lead_time(minutes: int) -> str:
    """Render a lead time for notification text.

    >>> format_lead_time(90)
    '1 hour'
    >>> format_lead_time(2880)
    '2 days'
    """
    if minutes >= MINUTES_PER_DAY:
        days = minutes // MINUTES_PER_DAY
        return f"{days} day{'s' if days > 1 else ''}"
    if minutes >= MINUTES_PER_HOUR:
        hours = minutes // MINUTES_PER_HOUR
        return f"{hours} hour{'s' if hours > 1 else ''}"
    return f"{minutes} minutes"
