"""Supabase persistence for tasks, events, workspaces and notification records."""

from typing import Any, Optional

import httpx

from config import SUPABASE_URL, SUPABASE_KEY
from logger import logger
from .config import HTTP_TIMEOUT_SECONDS, NOTIFICATION_LOG_LIMIT
from .errors import StorageError
from .types import Event, NotificationLogEntry, PushSubscription, Task, Workspace

PENDING_TASKS_FILTER = (
    "(and(reminder_sent.is.false,start_date.not.is.null,reminder_minutes.not.is.null),"
    "and(reminder2_sent.is.false,due_date.not.is.null,reminder2_minutes.not.is.null))"
)


class NotificationStore:
    """Record store reached over Supabase's PostgREST API.

    Failures are logged and re-raised as StorageError; nothing is retried here.
    """

    def __init__(
        self,
        url: Optional[str] = SUPABASE_URL,
        key: Optional[str] = SUPABASE_KEY,
        timeout: float = HTTP_TIMEOUT_SECONDS,
    ):
        self.url = url
        self.key = key
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)

    def _headers(self, prefer: str = "return=representation") -> dict[str, str]:
        """Get headers for Supabase API calls."""
        return {
            "apikey": self.key,
            "Authorization": f"Bearer {self.key}",
            "Content-Type": "application/json",
            "Prefer": prefer,
        }

    def _rest_url(self, table: str) -> str:
        return f"{self.url}/rest/v1/{table}"

    async def _request(
        self,
        method: str,
        table: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
        prefer: str = "return=representation",
    ) -> Any:
        if not self.configured:
            raise StorageError("Supabase not configured")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.request(
                    method,
                    self._rest_url(table),
                    headers=self._headers(prefer),
                    params=params,
                    json=json,
                    timeout=self.timeout,
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise StorageError(f"{method} {table} failed: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def _first(self, table: str, params: dict[str, Any]) -> Optional[dict]:
        rows = await self._request("GET", table, params={**params, "select": "*"})
        return rows[0] if rows else None

    # =========================================================================
    # WORKSPACES
    # =========================================================================

    async def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        """Look up a workspace, which carries the owning user.

        Args:
            workspace_id: Workspace ID

        Returns:
            The workspace, or None if it does not exist
        """
        row = await self._first("workspaces", {"id": f"eq.{workspace_id}"})
        return Workspace.from_db_row(row) if row else None

    # =========================================================================
    # REMINDER FLAGS
    # =========================================================================

    async def mark_task_reminder_sent(self, task_id: str) -> None:
        """Mark a task's start reminder sent (prevents re-fire on restart)."""
        await self._mark("tasks", task_id, "reminder_sent")

    async def mark_task_reminder2_sent(self, task_id: str) -> None:
        """Mark a task's deadline reminder sent."""
        await self._mark("tasks", task_id, "reminder2_sent")

    async def mark_event_reminder_sent(self, event_id: str) -> None:
        """Mark an event's reminder sent."""
        await self._mark("events", event_id, "reminder_sent")

    async def _mark(self, table: str, record_id: str, column: str) -> None:
        await self._request(
            "PATCH",
            table,
            params={"id": f"eq.{record_id}"},
            json={column: True},
            prefer="return=minimal",
        )
        logger.debug(f"Marked {table} {record_id} {column}")

    async def get_all_tasks_with_pending_reminders(self) -> list[Task]:
        """Tasks with at least one configured reminder not yet sent.

        Passed reminders are included so recovery can mark them sent.

        Returns:
            List of Task objects
        """
        rows = await self._request("GET", "tasks", params={"select": "*", "or": PENDING_TASKS_FILTER})
        return [Task.from_db_row(r) for r in rows or []]

    async def get_all_events_with_pending_reminders(self) -> list[Event]:
        """Events with a start time whose reminder has not been sent.

        Returns:
            List of Event objects
        """
        rows = await self._request(
            "GET",
            "events",
            params={"select": "*", "reminder_sent": "is.false", "start_time": "not.is.null"},
        )
        return [Event.from_db_row(r) for r in rows or []]

    # =========================================================================
    # NOTIFICATION LOG
    # =========================================================================

    async def create_notification_log(self, entry: NotificationLogEntry) -> None:
        """Append an entry to the user's notification history."""
        await self._request("POST", "notification_logs", json=entry.to_db_row(), prefer="return=minimal")

    async def get_notification_logs(
        self, user_id: str, limit: int = NOTIFICATION_LOG_LIMIT
    ) -> list[NotificationLogEntry]:
        """Most recent notifications sent to a user.

        Args:
            user_id: Owning user
            limit: Maximum entries to return

        Returns:
            Entries, newest first
        """
        rows = await self._request(
            "GET",
            "notification_logs",
            params={"select": "*", "user_id": f"eq.{user_id}", "order": "sent_at.desc", "limit": limit},
        )
        return [NotificationLogEntry.from_db_row(r) for r in rows or []]

    async def clear_notification_logs(self, user_id: str) -> None:
        await self._request(
            "DELETE", "notification_logs", params={"user_id": f"eq.{user_id}"}, prefer="return=minimal"
        )

    # =========================================================================
    # PUSH SUBSCRIPTIONS
    # =========================================================================

    async def get_push_subscriptions(self, user_id: str) -> list[PushSubscription]:
        """All of a user's devices."""
        rows = await self._request(
            "GET", "push_subscriptions", params={"select": "*", "user_id": f"eq.{user_id}"}
        )
        return [PushSubscription.from_db_row(r) for r in rows or []]

    async def save_push_subscription(self, subscription: PushSubscription) -> None:
        """Upsert by endpoint, so a device re-subscribing replaces its keys."""
        await self._request(
            "POST",
            "push_subscriptions",
            params={"on_conflict": "endpoint"},
            json={
                "user_id": subscription.user_id,
                "endpoint": subscription.endpoint,
                "p256dh": subscription.p256dh,
                "auth": subscription.auth,
            },
            prefer="resolution=merge-duplicates,return=minimal",
        )
        logger.info(f"Saved push subscription for user {subscription.user_id}")

    async def delete_push_subscription(self, endpoint: str) -> None:
        """Remove a device by its push endpoint."""
        await self._request(
            "DELETE", "push_subscriptions", params={"endpoint": f"eq.{endpoint}"}, prefer="return=minimal"
        )

    # =========================================================================
    # TASKS AND EVENTS
    # =========================================================================

    async def get_task(self, task_id: str) -> Optional[Task]:
        """Fetch a task by ID, or None if it does not exist."""
        row = await self._first("tasks", {"id": f"eq.{task_id}"})
        return Task.from_db_row(row) if row else None

    async def create_task(self, data: dict) -> Task:
        """Insert a task.

        Args:
            data: Column values for the new row

        Returns:
            The stored task, including generated columns
        """
        rows = await self._request("POST", "tasks", json=data)
        return Task.from_db_row(rows[0])

    async def update_task(self, task_id: str, data: dict) -> Optional[Task]:
        """Patch a task.

        Args:
            task_id: Task to update
            data: Columns to change

        Returns:
            The updated task, or None if no row matched
        """
        rows = await self._request("PATCH", "tasks", params={"id": f"eq.{task_id}"}, json=data)
        return Task.from_db_row(rows[0]) if rows else None

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", "tasks", params={"id": f"eq.{task_id}"}, prefer="return=minimal")

    async def get_event(self, event_id: str) -> Optional[Event]:
        """Fetch an event by ID, or None if it does not exist."""
        row = await self._first("events", {"id": f"eq.{event_id}"})
        return Event.from_db_row(row) if row else None

    async def create_event(self, data: dict) -> Event:
        rows = await self._request("POST", "events", json=data)
        return Event.from_db_row(rows[0])

    async def update_event(self, event_id: str, data: dict) -> Optional[Event]:
        """Patch an event. Returns None if no row matched."""
        rows = await self._request("PATCH", "events", params={"id": f"eq.{event_id}"}, json=data)
        return Event.from_db_row(rows[0]) if rows else None

    async def delete_event(self, event_id: str) -> None:
        await self._request("DELETE", "events", params={"id": f"eq.{event_id}"}, prefer="return=minimal")
