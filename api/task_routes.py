"""Task and Event mutation routes.

Every edit or delete cancels armed reminders before anything is persisted,
then creates/edits schedule again from the stored row. If the write fails
the reminders are re-armed from the unchanged row before the error is
returned. Changing a reminder's anchor or lead time re-arms it by clearing
its sent flag.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from domains.notifications import Event, NotificationScheduler, NotificationStore, StorageError, Task
from logger import logger
from .dependencies import get_notifier, get_store

router = APIRouter(tags=["Tasks & Events"])

# Fields that, when changed, make a reminder slot eligible again
TASK_START_FIELDS = ("start_date", "reminder_minutes")
TASK_DEADLINE_FIELDS = ("due_date", "reminder2_minutes")
EVENT_FIELDS = ("start_time", "reminder_minutes")


# ============================================================
# Pydantic Models
# ============================================================

class TaskPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


class TaskCreate(BaseModel):
    """Create a new task."""
    workspace_id: str
    title: str
    priority: TaskPriority = TaskPriority.medium
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    reminder_minutes: Optional[int] = Field(default=None, ge=0)
    reminder2_minutes: Optional[int] = Field(default=None, ge=0)


class TaskUpdate(BaseModel):
    """Update an existing task. Explicit nulls clear a field."""
    title: Optional[str] = None
    priority: Optional[TaskPriority] = None
    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    reminder_minutes: Optional[int] = Field(default=None, ge=0)
    reminder2_minutes: Optional[int] = Field(default=None, ge=0)


class EventCreate(BaseModel):
    """Create a new calendar event."""
    workspace_id: str
    title: str
    start_time: datetime
    end_time: Optional[datetime] = None
    reminder_minutes: Optional[int] = Field(default=None, ge=0)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    reminder_minutes: Optional[int] = Field(default=None, ge=0)


# ============================================================
# Helper Functions
# ============================================================

def reset_sent_flags(data: dict, fields: tuple[str, ...], flag: str) -> None:
    """Clear a reminder's sent flag when its timing fields are in the update."""
    if any(f in data for f in fields):
        data[flag] = False


def task_update_data(update: TaskUpdate) -> dict:
    data = update.model_dump(exclude_unset=True, mode="json")
    if not data:
        raise HTTPException(400, "No fields to update")
    reset_sent_flags(data, TASK_START_FIELDS, "reminder_sent")
    reset_sent_flags(data, TASK_DEADLINE_FIELDS, "reminder2_sent")
    return data


def event_update_data(update: EventUpdate) -> dict:
    data = update.model_dump(exclude_unset=True, mode="json")
    if not data:
        raise HTTPException(400, "No fields to update")
    reset_sent_flags(data, EVENT_FIELDS, "reminder_sent")
    return data


async def restore_task_reminders(
    task_id: str, store: NotificationStore, notifier: NotificationScheduler
) -> None:
    """Re-arm a task from its stored row after a write to it failed.

    Errors here are logged so the original write error reaches the client.
    """
    try:
        task = await store.get_task(task_id)
        if task is not None:
            await notifier.schedule_task(task)
    except StorageError as e:
        logger.error(f"Could not restore reminders for task {task_id}: {e}")


async def restore_event_reminders(
    event_id: str, store: NotificationStore, notifier: NotificationScheduler
) -> None:
    """Re-arm an event from its stored row after a write to it failed."""
    try:
        event = await store.get_event(event_id)
        if event is not None:
            await notifier.schedule_event(event)
    except StorageError as e:
        logger.error(f"Could not restore reminders for event {event_id}: {e}")


# ============================================================
# Tasks
# ============================================================

@router.post("/tasks", status_code=201)
async def create_task(
    task: TaskCreate,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
) -> Task:
    """Create a task and schedule its reminders."""
    created = await store.create_task(task.model_dump(exclude_none=True, mode="json"))
    await notifier.schedule_task(created)
    return created


@router.patch("/tasks/{task_id}")
async def update_task(
    task_id: str,
    update: TaskUpdate,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
) -> Task:
    """Update a task and reschedule its reminders."""
    data = task_update_data(update)

    notifier.cancel_task_notifications(task_id)
    try:
        updated = await store.update_task(task_id, data)
    except StorageError:
        await restore_task_reminders(task_id, store, notifier)
        raise
    if updated is None:
        raise HTTPException(404, "Task not found")

    await notifier.schedule_task(updated)
    return updated


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
):
    """Delete a task."""
    notifier.cancel_task_notifications(task_id)
    try:
        await store.delete_task(task_id)
    except StorageError:
        await restore_task_reminders(task_id, store, notifier)
        raise
    return {"status": "deleted", "id": task_id}


# ============================================================
# Events
# ============================================================

@router.post("/events", status_code=201)
async def create_event(
    event: EventCreate,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
) -> Event:
    """Create an event and schedule its reminder."""
    created = await store.create_event(event.model_dump(exclude_none=True, mode="json"))
    await notifier.schedule_event(created)
    return created


@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    update: EventUpdate,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
) -> Event:
    data = event_update_data(update)

    notifier.cancel_event_notifications(event_id)
    try:
        updated = await store.update_event(event_id, data)
    except StorageError:
        await restore_event_reminders(event_id, store, notifier)
        raise
    if updated is None:
        raise HTTPException(404, "Event not found")

    await notifier.schedule_event(updated)
    return updated


@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    store: NotificationStore = Depends(get_store),
    notifier: NotificationScheduler = Depends(get_notifier),
):
    notifier.cancel_event_notifications(event_id)
    try:
        await store.delete_event(event_id)
    except StorageError:
        await restore_event_reminders(event_id, store, notifier)
        raise
    return {"status": "deleted", "id": event_id}
