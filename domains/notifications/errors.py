"""Exceptions raised by the notification subsystem."""


class NotificationError(Exception):
    """Base class for notification failures."""


class StorageError(NotificationError):
    """A record store call failed or the store is not configured."""


class PushDeliveryError(NotificationError):
    """Push delivery could not be attempted."""
