"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

from domains.notifications import (
    DeliveryResult,
    NotificationScheduler,
    NotificationStore,
    TimerRegistry,
    WebPushSender,
    Workspace,
)

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:
    """Manually advanced clock; timers fire only on advance()."""

    def __init__(self, start: datetime = NOW):
        self._now = start
        self.timers = {}
        self.cancelled = []

    def now(self) -> datetime:
        return self._now

    def after(self, delay, callback, timer_id):
        self.timers[timer_id] = (self._now + delay, callback)
        return timer_id

    def cancel(self, handle):
        if self.timers.pop(handle, None) is not None:
            self.cancelled.append(handle)

    def delay_of(self, handle) -> timedelta:
        return self.timers[handle][0] - self._now

    async def advance(self, delta: timedelta) -> None:
        self._now += delta
        due = sorted((when, timer_id) for timer_id, (when, _) in self.timers.items() if when <= self._now)
        for _, timer_id in due:
            entry = self.timers.pop(timer_id, None)
            if entry is not None:
                await entry[1]()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def workspaces():
    return {
        "ws-1": Workspace(id="ws-1", user_id="user-1", name="Personal"),
        "ws-orphan": Workspace(id="ws-orphan", user_id=None, name="Orphan"),
    }


@pytest.fixture
def mock_store(workspaces):
    """NotificationStore double backed by a dict of workspaces."""
    store = AsyncMock(spec=NotificationStore)
    store.get_workspace.side_effect = lambda workspace_id: workspaces.get(workspace_id)
    store.get_all_tasks_with_pending_reminders.return_value = []
    store.get_all_events_with_pending_reminders.return_value = []
    return store


@pytest.fixture
def mock_push():
    push = AsyncMock(spec=WebPushSender)
    push.send.return_value = DeliveryResult(attempted=1, delivered=1)
    return push


@pytest.fixture
def registry(clock):
    return TimerRegistry(clock)


@pytest.fixture
def notifier(mock_store, mock_push, clock, registry):
    return NotificationScheduler(mock_store, mock_push, clock, registry)


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    with patch('httpx.AsyncClient') as mock:
        client = AsyncMock()
        mock.return_value.__aenter__.return_value = client
        yield client


def _json_response(data, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.content = b"" if data is None else b"x"
    response.json = Mock(return_value=data)
    response.raise_for_status = Mock()
    return response


@pytest.fixture
def json_response():
    """Factory for fake httpx responses carrying a JSON body."""
    return _json_response
