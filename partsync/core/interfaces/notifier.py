"""Notification port."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class NotificationEvent:
    """Something operators may want to hear about."""

    event_type: str  # e.g. "mrp.run", "order.created", "stock.low"
    title: str
    message: str
    success: bool = True
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event_type": self.event_type,
            "title": self.title,
            "message": self.message,
            "success": self.success,
            "payload": self.payload,
            "created_at": self.created_at.isoformat(),
        }


class INotifier(ABC):
    """Fire-and-forget notification sink. Implementations must never raise."""

    @abstractmethod
    async def notify(self, event: NotificationEvent) -> None:
        """Emit an event."""
        pass
