"""Notification titles and bodies for task and event reminders."""

from .calculator import format_lead_time

PRIORITY_EMOJI = {
    "urgent": "🚨",
    "high": "🔴",
    "medium": "🟡",
}
DEFAULT_PRIORITY_EMOJI = "🔵"

EVENT_TITLE = "📅 Upcoming Event"


def priority_emoji(priority: str) -> str:
    return PRIORITY_EMOJI.get(priority, DEFAULT_PRIORITY_EMOJI)


def priority_title(priority: str, is_deadline: bool) -> str:
    """Title for a task reminder; urgent and high priorities stand out."""
    emoji = priority_emoji(priority)
    if priority == "urgent":
        return f"{emoji} URGENT: Deadline Approaching!" if is_deadline else f"{emoji} URGENT Task Reminder"
    if priority == "high":
        return f"{emoji} High Priority Deadline!" if is_deadline else f"{emoji} High Priority Task"
    return "⏰ Task Due Soon" if is_deadline else "🔔 Task Reminder"


def task_start_message(title: str, priority: str, lead_minutes: int) -> tuple[str, str]:
    return (
        priority_title(priority, is_deadline=False),
        f"📅 {title} starts in {format_lead_time(lead_minutes)}",
    )


def task_deadline_message(title: str, priority: str, lead_minutes: int) -> tuple[str, str]:
    return (
        priority_title(priority, is_deadline=True),
        f"⚠️ {title} - only {format_lead_time(lead_minutes)} left!",
    )


def event_message(title: str, lead_minutes: int) -> tuple[str, str]:
    return EVENT_TITLE, f"{title} starts in {format_lead_time(lead_minutes)}!"
