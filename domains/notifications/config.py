"""Configuration constants for notification scheduling."""

from typing import Final

# Reminder defaults
DEFAULT_EVENT_REMINDER_MINUTES: Final[int] = 15

# Deep links opened when a notification is tapped
TASKS_LINK: Final[str] = "/tasks"
EVENTS_LINK: Final[str] = "/calendar"

# Storage
HTTP_TIMEOUT_SECONDS: Final[int] = 10
NOTIFICATION_LOG_LIMIT: Final[int] = 50

# Web Push
PUSH_ICON: Final[str] = "/favicon.png"
PUSH_TTL_SECONDS: Final[int] = 24 * 60 * 60
PUSH_REMINDER_HEADERS: Final[dict[str, str]] = {"Urgency": "high", "Topic": "reminder"}
PUSH_GONE_STATUS_CODES: Final[tuple[int, ...]] = (404, 410)
