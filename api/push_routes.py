"""Push subscription and notification history routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from domains.notifications import NotificationStore, PushSubscription, WebPushSender
from domains.notifications.config import NOTIFICATION_LOG_LIMIT
from logger import logger
from .dependencies import get_push, get_store

router = APIRouter(tags=["Push"])


class SubscriptionKeys(BaseModel):
    p256dh: str
    auth: str


class BrowserSubscription(BaseModel):
    """PushSubscription.toJSON() as sent by the browser."""
    endpoint: str
    keys: SubscriptionKeys


class SubscribeRequest(BaseModel):
    user_id: str
    subscription: BrowserSubscription


class UnsubscribeRequest(BaseModel):
    endpoint: str


class TestPushRequest(BaseModel):
    user_id: str


@router.get("/push/vapid-public-key")
async def vapid_public_key(push: WebPushSender = Depends(get_push)):
    """Public key the client needs to subscribe."""
    if not push.configured:
        raise HTTPException(503, "Push notifications not configured")
    return {"public_key": push.public_key}


@router.post("/push/subscribe")
async def subscribe(request: SubscribeRequest, store: NotificationStore = Depends(get_store)):
    sub = request.subscription
    logger.info(f"Push subscribe for user {request.user_id} endpoint {sub.endpoint}")
    await store.save_push_subscription(
        PushSubscription(
            user_id=request.user_id,
            endpoint=sub.endpoint,
            p256dh=sub.keys.p256dh,
            auth=sub.keys.auth,
        )
    )
    return {"status": "subscribed"}


@router.post("/push/unsubscribe")
async def unsubscribe(request: UnsubscribeRequest, store: NotificationStore = Depends(get_store)):
    await store.delete_push_subscription(request.endpoint)
    return {"status": "unsubscribed"}


@router.post("/push/test")
async def send_test_push(request: TestPushRequest, push: WebPushSender = Depends(get_push)):
    """Send a test notification to all of a user's devices."""
    result = await push.send(request.user_id, "Test push", "This is a test push notification.", "/")
    return {
        "attempted": result.attempted,
        "delivered": result.delivered,
        "status": result.status.value,
    }


@router.get("/notifications")
async def list_notifications(
    user_id: str,
    limit: int = Query(default=NOTIFICATION_LOG_LIMIT, ge=1, le=200),
    store: NotificationStore = Depends(get_store),
):
    """Most recent notifications sent to a user."""
    return await store.get_notification_logs(user_id, limit=limit)


@router.delete("/notifications")
async def clear_notifications(user_id: str, store: NotificationStore = Depends(get_store)):
    await store.clear_notification_logs(user_id)
    return {"status": "cleared"}
