"""Deliver Web Push notifications to every device a user has registered."""

import asyncio
import json
from typing import Optional

from pywebpush import WebPushException, webpush

from config import VAPID_PUBLIC_KEY, VAPID_PRIVATE_KEY, VAPID_SUBJECT
from logger import logger
from .config import PUSH_GONE_STATUS_CODES, PUSH_ICON, PUSH_REMINDER_HEADERS, PUSH_TTL_SECONDS
from .errors import PushDeliveryError, StorageError
from .store import NotificationStore
from .types import DeliveryResult, PushSubscription


class WebPushSender:
    """Best-effort push delivery signed with the app's VAPID keys.

    Per-device failures are logged and counted, never raised. Subscriptions
    the push service reports as gone (404/410) are deleted. If the user's
    subscriptions can't be loaded, PushDeliveryError is raised.
    """

    def __init__(
        self,
        store: NotificationStore,
        public_key: Optional[str] = VAPID_PUBLIC_KEY,
        private_key: Optional[str] = VAPID_PRIVATE_KEY,
        subject: str = VAPID_SUBJECT,
    ):
        self.store = store
        self.public_key = public_key
        self.private_key = private_key
        self.subject = subject

    @property
    def configured(self) -> bool:
        return bool(self.public_key and self.private_key)

    async def send(self, user_id: str, title: str, body: str, link: str = "/") -> DeliveryResult:
        """Push a notification to all of a user's devices.

        Args:
            user_id: Owner of the subscriptions
            title: Notification title
            body: Notification body
            link: URL the notification opens when clicked

        Returns:
            DeliveryResult with attempted/delivered device counts
        """
        logger.info(f"[PUSH] Sending to user {user_id}: {title} - {body}")

        if not self.configured:
            logger.warning("[PUSH] VAPID keys not configured, push disabled")
            return DeliveryResult(configured=False)

        try:
            subscriptions = await self.store.get_push_subscriptions(user_id)
        except StorageError as e:
            raise PushDeliveryError(f"Could not load subscriptions for user {user_id}") from e

        if not subscriptions:
            logger.info(f"[PUSH] No subscriptions found for user {user_id}")
            return DeliveryResult()

        payload = json.dumps({
            "title": title,
            "body": body,
            "url": link,
            "icon": PUSH_ICON,
            "badge": PUSH_ICON,
        })

        results = await asyncio.gather(
            *(asyncio.to_thread(self._send_one, sub, payload) for sub in subscriptions),
            return_exceptions=True,
        )

        delivered = 0
        for sub, outcome in zip(subscriptions, results):
            if not isinstance(outcome, BaseException):
                delivered += 1
            elif isinstance(outcome, WebPushException) and _is_gone(outcome):
                logger.warning(f"[PUSH] Deleting expired subscription {sub.endpoint}")
                try:
                    await self.store.delete_push_subscription(sub.endpoint)
                except StorageError as e:
                    logger.warning(f"[PUSH] Could not delete expired subscription {sub.endpoint}: {e}")
            else:
                logger.error(f"[PUSH] Delivery to {sub.endpoint} failed: {outcome}")

        failed = len(subscriptions) - delivered
        logger.info(f"[PUSH] Sent to {delivered}/{len(subscriptions)} devices ({failed} failed)")
        return DeliveryResult(attempted=len(subscriptions), delivered=delivered)

    def _send_one(self, subscription: PushSubscription, payload: str) -> None:
        webpush(
            subscription_info=subscription.to_subscription_info(),
            data=payload,
            vapid_private_key=self.private_key,
            vapid_claims={"sub": self.subject},
            ttl=PUSH_TTL_SECONDS,
            headers=dict(PUSH_REMINDER_HEADERS),
        )


def _is_gone(exc: WebPushException) -> bool:
    response = getattr(exc, "response", None)
    return response is not None and response.status_code in PUSH_GONE_STATUS_CODES
