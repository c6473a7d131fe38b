"""Clock and timer primitives backed by APScheduler."""

from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Protocol

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from logger import logger

TimerCallback = Callable[[], Awaitable[None]]
TimerHandle = str


class Clock(Protocol):
    """What the scheduler needs from time: read it, and act later."""

    def now(self) -> datetime: ...

    def after(self, delay: timedelta, callback: TimerCallback, timer_id: str) -> TimerHandle: ...

    def cancel(self, handle: TimerHandle) -> None: ...


class SchedulerClock:
    """Wall-clock timers as one-off APScheduler date jobs.

    Jobs run on the scheduler's asyncio loop. misfire_grace_time=None makes
    a late loop fire the job rather than silently skip it.
    """

    def __init__(self, scheduler: AsyncIOScheduler):
        self._scheduler = scheduler

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def after(self, delay: timedelta, callback: TimerCallback, timer_id: str) -> TimerHandle:
        job = self._scheduler.add_job(
            callback,
            trigger=DateTrigger(run_date=self.now() + delay),
            id=timer_id,
            name=f"notify:{timer_id}",
            misfire_grace_time=None,
            replace_existing=True,
        )
        return job.id

    def cancel(self, handle: TimerHandle) -> None:
        try:
            self._scheduler.remove_job(handle)
        except JobLookupError:
            # Already fired or already removed
            logger.debug(f"Timer {handle} not pending, nothing to cancel")
