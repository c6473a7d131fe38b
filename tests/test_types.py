"""Tests for database row mapping."""

from datetime import datetime, timezone

from domains.notifications import (
    DeliveryResult,
    DeliveryStatus,
    Event,
    NotificationLogEntry,
    NotificationType,
    Task,
    Workspace,
)


def test_task_from_db_row():
    task = Task.from_db_row({
        "id": "task-1",
        "workspace_id": "ws-1",
        "title": "Write report",
        "priority": "high",
        "start_date": "2026-03-02T10:00:00",
        "due_date": "2026-03-03T17:00:00+01:00",
        "reminder_minutes": 15,
        "reminder2_minutes": None,
        "reminder_sent": False,
        "reminder2_sent": True,
    })

    assert task.start_date == datetime(2026, 3, 2, 10, 0, tzinfo=timezone.utc)
    assert task.due_date == datetime(2026, 3, 3, 16, 0, tzinfo=timezone.utc)
    assert task.reminder_minutes == 15
    assert task.reminder2_minutes is None
    assert task.reminder2_sent is True
    assert task.priority == "high"


def test_task_defaults_for_missing_columns():
    task = Task.from_db_row({"id": "task-1"})
    assert task.workspace_id is None
    assert task.priority == "medium"
    assert task.start_date is None
    assert task.reminder_sent is False


def test_event_from_db_row():
    event = Event.from_db_row({
        "id": "event-1",
        "workspace_id": "ws-1",
        "title": "Standup",
        "start_time": "2026-03-02T09:30:00Z",
        "reminder_minutes": None,
    })
    assert event.start_time == datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)
    assert event.reminder_minutes is None
    assert event.reminder_sent is False


def test_workspace_without_user():
    assert Workspace.from_db_row({"id": "ws-1", "user_id": None}).user_id is None


def test_log_entry_to_db_row():
    entry = NotificationLogEntry(
        user_id="user-1",
        workspace_id="ws-1",
        title="🔔 Task Reminder",
        body="📅 Write report starts in 10 minutes",
        type=NotificationType.TASK_START,
        related_id="task-1",
        delivery_status=DeliveryStatus.FAILED,
        sent_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc),
    )
    row = entry.to_db_row()

    assert row["type"] == "task_start"
    assert row["delivery_status"] == "failed"
    assert row["sent_at"] == "2026-03-02T09:00:00+00:00"
    assert NotificationLogEntry.from_db_row(row) == entry


def test_delivery_status():
    assert DeliveryResult(configured=False).status == DeliveryStatus.DISABLED
    assert DeliveryResult().status == DeliveryStatus.NO_SUBSCRIPTIONS
    assert DeliveryResult(attempted=2, delivered=0).status == DeliveryStatus.FAILED
    assert DeliveryResult(attempted=2, delivered=1).status == DeliveryStatus.SENT
