"""Request-scoped access to the services built in the app lifespan."""

from fastapi import Request

from domains.notifications import NotificationScheduler, NotificationStore, WebPushSender


def get_notifier(request: Request) -> NotificationScheduler:
    return request.app.state.notifier


def get_store(request: Request) -> NotificationStore:
    return request.app.state.store


def get_push(request: Request) -> WebPushSender:
    return request.app.state.push
