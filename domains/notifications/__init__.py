"""Notifications - push reminders for tasks and events.

Timers are one-off APScheduler jobs held in memory; the reminder_sent flags
in Supabase are the only persisted state, and the timers are rebuilt from
them on every start.
"""

from .types import (
    Task,
    Event,
    Workspace,
    NotificationLogEntry,
    NotificationType,
    DeliveryStatus,
    DeliveryResult,
    PushSubscription,
)
from .errors import NotificationError, StorageError, PushDeliveryError
from .calculator import compute_fire_time, format_lead_time
from .clock import Clock, SchedulerClock
from .registry import TimerRegistry
from .store import NotificationStore
from .push import WebPushSender
from .scheduler import NotificationScheduler
from .recovery import initialize_notification_scheduler, RecoveryReport

__all__ = [
    "Task",
    "Event",
    "Workspace",
    "NotificationLogEntry",
    "NotificationType",
    "DeliveryStatus",
    "DeliveryResult",
    "PushSubscription",
    "NotificationError",
    "StorageError",
    "PushDeliveryError",
    "compute_fire_time",
    "format_lead_time",
    "Clock",
    "SchedulerClock",
    "TimerRegistry",
    "NotificationStore",
    "WebPushSender",
    "NotificationScheduler",
    "initialize_notification_scheduler",
    "RecoveryReport",
]
