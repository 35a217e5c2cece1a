"""Notification sinks."""

from partsync.config import get_settings
from partsync.core.interfaces.notifier import INotifier
from partsync.infrastructure.notifications.logging_notifier import LoggingNotifier
from partsync.infrastructure.notifications.webhook import WebhookNotifier

_notifier: INotifier | None = None


def get_notifier() -> INotifier:
    """Webhook notifier when NOTIFY_WEBHOOK_URL is set, logging notifier otherwise."""
    global _notifier
    if _notifier is None:
        url = get_settings().notifications.webhook_url
        _notifier = WebhookNotifier(url) if url else LoggingNotifier()
    return _notifier


def reset_notifier() -> None:
    global _notifier
    _notifier = None


__all__ = [
    "LoggingNotifier",
    "WebhookNotifier",
    "get_notifier",
    "reset_notifier",
]
