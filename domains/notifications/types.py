"""Type definitions for tasks, events and notification records."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from dateutil.parser import parse as parse_datetime


class NotificationType(str, Enum):
    """Which reminder slot produced a notification."""
    TASK_START = "task_start"
    TASK_DEADLINE = "task_deadline"
    EVENT_REMINDER = "event_reminder"


class DeliveryStatus(str, Enum):
    """Outcome of a push delivery, recorded on the notification log."""
    SENT = "sent"                          # At least one device accepted it
    FAILED = "failed"                      # Every device rejected it
    NO_SUBSCRIPTIONS = "no_subscriptions"  # User has no registered devices
    DISABLED = "disabled"                  # VAPID keys not configured


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse a database timestamp into an aware UTC datetime.

    Naive values are assumed to be UTC.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _optional_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


@dataclass
class Workspace:
    """A user-scoped container; resolves to the owner who receives pushes."""
    id: str
    user_id: Optional[str] = None
    name: Optional[str] = None

    @classmethod
    def from_db_row(cls, row: dict) -> "Workspace":
        return cls(
            id=str(row["id"]),
            user_id=str(row["user_id"]) if row.get("user_id") else None,
            name=row.get("name"),
        )


@dataclass
class Task:
    """A task with up to two reminders: before start and before due."""
    id: str
    workspace_id: Optional[str] = None
    title: str = ""
    priority: str = "medium"
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    reminder_minutes: Optional[int] = None
    reminder2_minutes: Optional[int] = None
    reminder_sent: bool = False
    reminder2_sent: bool = False

    @classmethod
    def from_db_row(cls, row: dict) -> "Task":
        """Create Task from database row."""
        return cls(
            id=str(row["id"]),
            workspace_id=str(row["workspace_id"]) if row.get("workspace_id") else None,
            title=row.get("title") or "",
            priority=row.get("priority") or "medium",
            start_date=parse_timestamp(row.get("start_date")),
            due_date=parse_timestamp(row.get("due_date")),
            reminder_minutes=_optional_int(row.get("reminder_minutes")),
            reminder2_minutes=_optional_int(row.get("reminder2_minutes")),
            reminder_sent=bool(row.get("reminder_sent", False)),
            reminder2_sent=bool(row.get("reminder2_sent", False)),
        )


@dataclass
class Event:
    """A calendar event with a single reminder before it starts."""
    id: str
    workspace_id: Optional[str] = None
    title: str = ""
    start_time: Optional[datetime] = None
    reminder_minutes: Optional[int] = None
    reminder_sent: bool = False

    @classmethod
    def from_db_row(cls, row: dict) -> "Event":
        """Create Event from database row."""
        return cls(
            id=str(row["id"]),
            workspace_id=str(row["workspace_id"]) if row.get("workspace_id") else None,
            title=row.get("title") or "",
            start_time=parse_timestamp(row.get("start_time")),
            reminder_minutes=_optional_int(row.get("reminder_minutes")),
            reminder_sent=bool(row.get("reminder_sent", False)),
        )


@dataclass
class NotificationLogEntry:
    """Append-only record of a fired reminder."""
    user_id: str
    workspace_id: str
    title: str
    body: str
    type: NotificationType
    related_id: str
    delivery_status: DeliveryStatus = DeliveryStatus.SENT
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_db_row(self) -> dict:
        return {
            "user_id": self.user_id,
            "workspace_id": self.workspace_id,
            "title": self.title,
            "body": self.body,
            "type": self.type.value,
            "related_id": self.related_id,
            "delivery_status": self.delivery_status.value,
            "sent_at": self.sent_at.isoformat(),
        }

    @classmethod
    def from_db_row(cls, row: dict) -> "NotificationLogEntry":
        return cls(
            user_id=str(row["user_id"]),
            workspace_id=str(row["workspace_id"]),
            title=row["title"],
            body=row["body"],
            type=NotificationType(row["type"]),
            related_id=str(row["related_id"]),
            delivery_status=DeliveryStatus(row.get("delivery_status", "sent")),
            sent_at=parse_timestamp(row.get("sent_at")) or datetime.now(timezone.utc),
        )


@dataclass
class PushSubscription:
    """A browser push endpoint registered by one of a user's devices."""
    user_id: str
    endpoint: str
    p256dh: str
    auth: str

    @classmethod
    def from_db_row(cls, row: dict) -> "PushSubscription":
        return cls(
            user_id=str(row["user_id"]),
            endpoint=row["endpoint"],
            p256dh=row["p256dh"],
            auth=row["auth"],
        )

    def to_subscription_info(self) -> dict:
        """Shape expected by pywebpush."""
        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }


@dataclass
class DeliveryResult:
    """How many of a user's devices a push reached."""
    attempted: int = 0
    delivered: int = 0
    configured: bool = True

    @property
    def status(self) -> DeliveryStatus:
        if not self.configured:
            return DeliveryStatus.DISABLED
        if self.attempted == 0:
            return DeliveryStatus.NO_SUBSCRIPTIONS
        if self.delivered == 0:
            return DeliveryStatus.FAILED
        return DeliveryStatus.SENT
