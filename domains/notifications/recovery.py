"""Rebuild armed reminder timers from persisted state at process start."""

from dataclasses import dataclass

from logger import logger
from .scheduler import NotificationScheduler


@dataclass
class RecoveryReport:
    """Counts from one startup recovery pass."""
    tasks: int = 0
    events: int = 0
    armed: int = 0
    failed: int = 0


async def initialize_notification_scheduler(notifier: NotificationScheduler) -> RecoveryReport:
    """Re-schedule every task and event that still has an unsent reminder.

    Call once on startup. Reminders that came due while the process was
    down are marked sent rather than delivered late. Never raises: a fetch
    or a single entity failing is logged and the rest carry on.
    """
    logger.info("[NotifyScheduler] Initializing notification scheduler...")
    report = RecoveryReport()

    try:
        tasks = await notifier.store.get_all_tasks_with_pending_reminders()
    except Exception as e:
        logger.error(f"[NotifyScheduler] Failed to fetch tasks with pending reminders: {e}")
        tasks = []

    for task in tasks:
        report.tasks += 1
        try:
            report.armed += await notifier.schedule_task(task)
        except Exception as e:
            report.failed += 1
            logger.error(f"[NotifyScheduler] Failed to schedule task {task.id}: {e}")

    try:
        events = await notifier.store.get_all_events_with_pending_reminders()
    except Exception as e:
        logger.error(f"[NotifyScheduler] Failed to fetch events with pending reminders: {e}")
        events = []

    for event in events:
        report.events += 1
        try:
            report.armed += await notifier.schedule_event(event)
        except Exception as e:
            report.failed += 1
            logger.error(f"[NotifyScheduler] Failed to schedule event {event.id}: {e}")

    logger.info(
        f"[NotifyScheduler] Scheduled {report.tasks} task and {report.events} event reminders "
        f"({report.armed} timers armed, {report.failed} failed)"
    )
    return report
