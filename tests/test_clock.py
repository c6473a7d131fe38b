"""Tests for APScheduler-backed timers."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from freezegun import freeze_time

from domains.notifications import SchedulerClock


@pytest_asyncio.fixture
async def scheduler():
    scheduler = AsyncIOScheduler(timezone=timezone.utc)
    scheduler.start()
    yield scheduler
    scheduler.shutdown(wait=False)


def test_now_is_aware_utc():
    clock = SchedulerClock(AsyncIOScheduler(timezone=timezone.utc))
    with freeze_time("2026-03-02 09:00:00"):
        assert clock.now() == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_after_fires_on_the_loop(scheduler):
    clock = SchedulerClock(scheduler)
    fired = asyncio.Event()

    async def callback():
        fired.set()

    handle = clock.after(timedelta(milliseconds=50), callback, "task-1:task_start:abc")

    assert handle == "task-1:task_start:abc"
    await asyncio.wait_for(fired.wait(), timeout=5)
    assert scheduler.get_job(handle) is None


@pytest.mark.asyncio
async def test_cancel_removes_pending_job(scheduler):
    clock = SchedulerClock(scheduler)

    async def callback():
        raise AssertionError("cancelled timer fired")

    handle = clock.after(timedelta(hours=1), callback, "event-1:event_reminder:abc")
    assert scheduler.get_job(handle) is not None

    clock.cancel(handle)
    assert scheduler.get_job(handle) is None

    # Cancelling twice is not an error
    clock.cancel(handle)
