"""Arm, fire and cancel reminder timers for tasks and events."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Awaitable, Callable, Optional

from logger import logger
from .calculator import compute_fire_time, delay_until
from .clock import Clock, TimerHandle
from .config import DEFAULT_EVENT_REMINDER_MINUTES, EVENTS_LINK, TASKS_LINK
from .messages import event_message, task_deadline_message, task_start_message
from .push import WebPushSender
from .registry import TimerRegistry
from .store import NotificationStore
from .types import Event, NotificationLogEntry, NotificationType, Task


@dataclass
class ReminderSlot:
    """One independently scheduled reminder of a task or event."""
    type: NotificationType
    anchor: Optional[datetime]
    lead_minutes: Optional[int]
    sent: bool
    link: str
    render: Callable[[int], tuple[str, str]]
    mark_sent: Callable[[str], Awaitable[None]]

    @property
    def eligible(self) -> bool:
        return self.anchor is not None and self.lead_minutes is not None and not self.sent


class NotificationScheduler:
    """Schedules push reminders for tasks and events.

    Each task has two slots (before start, before due); each event has one.
    A slot whose fire time has already passed is marked sent without
    notifying. Otherwise a timer is armed that delivers the push, appends a
    notification log entry and marks the slot sent.

    Call cancel_task_notifications / cancel_event_notifications before
    persisting any edit or delete, then schedule again with the new data.
    """

    def __init__(
        self,
        store: NotificationStore,
        push: WebPushSender,
        clock: Clock,
        registry: Optional[TimerRegistry] = None,
    ):
        self.store = store
        self.push = push
        self.clock = clock
        self.registry = registry if registry is not None else TimerRegistry(clock)

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    async def schedule_task(self, task: Task) -> int:
        """(Re)schedule both reminders of a task.

        Any timers already armed for the task are cancelled first.

        Args:
            task: The task as currently stored

        Returns:
            Number of timers armed (0-2)

        Raises:
            StorageError: If the workspace lookup or marking a passed reminder fails
        """
        self.registry.cancel(task.id)

        user_id = await self._resolve_user(task.workspace_id, f"Task {task.id}")
        if not user_id:
            return 0

        slots = [
            ReminderSlot(
                type=NotificationType.TASK_START,
                anchor=task.start_date,
                # A zero lead time means no reminder was configured
                lead_minutes=task.reminder_minutes or None,
                sent=task.reminder_sent,
                link=TASKS_LINK,
                render=lambda lead: task_start_message(task.title, task.priority, lead),
                mark_sent=self.store.mark_task_reminder_sent,
            ),
            ReminderSlot(
                type=NotificationType.TASK_DEADLINE,
                anchor=task.due_date,
                lead_minutes=task.reminder2_minutes or None,
                sent=task.reminder2_sent,
                link=TASKS_LINK,
                render=lambda lead: task_deadline_message(task.title, task.priority, lead),
                mark_sent=self.store.mark_task_reminder2_sent,
            ),
        ]
        return await self._schedule_slots(
            task.id, f'task "{task.title}"', task.workspace_id, user_id, slots
        )

    async def schedule_event(self, event: Event) -> int:
        """(Re)schedule an event's reminder.

        Args:
            event: The event as currently stored. A null reminder_minutes
                uses the default lead time.

        Returns:
            Number of timers armed (0 or 1)
        """
        self.registry.cancel(event.id)

        user_id = await self._resolve_user(event.workspace_id, f"Event {event.id}")
        if not user_id:
            return 0

        lead_minutes = event.reminder_minutes
        if lead_minutes is None:
            lead_minutes = DEFAULT_EVENT_REMINDER_MINUTES

        slot = ReminderSlot(
            type=NotificationType.EVENT_REMINDER,
            anchor=event.start_time,
            lead_minutes=lead_minutes,
            sent=event.reminder_sent,
            link=EVENTS_LINK,
            render=lambda lead: event_message(event.title, lead),
            mark_sent=self.store.mark_event_reminder_sent,
        )
        return await self._schedule_slots(
            event.id, f'event "{event.title}"', event.workspace_id, user_id, [slot]
        )

    def cancel(self, entity_id: str) -> int:
        """Cancel every armed timer for a task or event.

        Does not interrupt a reminder that is already being delivered.

        Args:
            entity_id: Task or event ID

        Returns:
            Number of timers cancelled
        """
        count = self.registry.cancel(entity_id)
        if count:
            logger.info(f"[NotifyScheduler] Cancelled {count} notification(s) for {entity_id}")
        return count

    def cancel_task_notifications(self, task_id: str) -> int:
        """Cancel a task's reminders. Call before persisting an edit or delete."""
        return self.cancel(task_id)

    def cancel_event_notifications(self, event_id: str) -> int:
        """Cancel an event's reminder. Call before persisting an edit or delete."""
        return self.cancel(event_id)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _resolve_user(self, workspace_id: Optional[str], label: str) -> Optional[str]:
        if not workspace_id:
            logger.info(f"[NotifyScheduler] {label} has no workspace, skipping")
            return None

        workspace = await self.store.get_workspace(workspace_id)
        if workspace is None or not workspace.user_id:
            logger.info(f"[NotifyScheduler] {label} workspace {workspace_id} has no user, skipping")
            return None
        return workspace.user_id

    async def _schedule_slots(
        self,
        entity_id: str,
        label: str,
        workspace_id: str,
        user_id: str,
        slots: list[ReminderSlot],
    ) -> int:
        """Mark passed slots sent, then arm a timer for each remaining eligible slot.

        Returns:
            Number of timers armed
        """
        now = self.clock.now()
        pending: list[tuple[ReminderSlot, timedelta]] = []

        for slot in slots:
            if not slot.eligible:
                continue

            fire_time = compute_fire_time(slot.anchor, slot.lead_minutes)
            delay = delay_until(fire_time, now)

            if delay <= timedelta(0):
                # Passed while we weren't watching: record it, don't notify late
                logger.info(
                    f"[NotifyScheduler] {label} {slot.type.value} reminder time already passed, marking as sent"
                )
                await slot.mark_sent(entity_id)
                continue

            pending.append((slot, delay))

        # Arm and register with no await in between, so a cancel can't slip through
        handles: list[TimerHandle] = []
        for slot, delay in pending:
            timer_id = f"{entity_id}:{slot.type.value}:{uuid.uuid4().hex[:8]}"
            fire = self._make_fire(entity_id, timer_id, label, workspace_id, user_id, slot)
            handles.append(self.clock.after(delay, fire, timer_id))
            logger.info(
                f"[NotifyScheduler] Scheduling {slot.type.value} reminder for {label} "
                f"in {round(delay.total_seconds() / 60)} minutes"
            )

        if handles:
            self.registry.arm(entity_id, handles)
        return len(handles)

    def _make_fire(
        self,
        entity_id: str,
        timer_id: str,
        label: str,
        workspace_id: str,
        user_id: str,
        slot: ReminderSlot,
    ) -> Callable[[], Awaitable[None]]:
        async def fire() -> None:
            self.registry.release(entity_id, timer_id)
            try:
                await self._deliver(entity_id, label, workspace_id, user_id, slot)
            except Exception:
                # Flag stays unsent; recovery on next start is the only retry
                logger.exception(f"[NotifyScheduler] Failed to send {slot.type.value} reminder for {label}")

        return fire

    async def _deliver(
        self,
        entity_id: str,
        label: str,
        workspace_id: str,
        user_id: str,
        slot: ReminderSlot,
    ) -> None:
        title, body = slot.render(slot.lead_minutes)

        result = await self.push.send(user_id, title, body, slot.link)

        await self.store.create_notification_log(
            NotificationLogEntry(
                user_id=user_id,
                workspace_id=workspace_id,
                title=title,
                body=body,
                type=slot.type,
                related_id=entity_id,
                delivery_status=result.status,
            )
        )

        await slot.mark_sent(entity_id)

        logger.info(f"[NotifyScheduler] Sent {slot.type.value} reminder for {label} ({result.status.value})")
