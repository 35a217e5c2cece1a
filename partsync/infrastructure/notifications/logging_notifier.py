"""Notifier that only writes structured log lines."""

from partsync.config import get_logger
from partsync.core.interfaces.notifier import INotifier, NotificationEvent

logger = get_logger(__name__)


class LoggingNotifier(INotifier):
    """Default sink when no webhook is configured."""

    async def notify(self, event: NotificationEvent) -> None:
        log = logger.info if event.success else logger.warning
        log(
            "notification",
            event_type=event.event_type,
            title=event.title,
            message=event.message,
            success=event.success,
            payload=event.payload,
        )
