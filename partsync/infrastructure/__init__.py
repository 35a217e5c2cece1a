"""Infrastructure layer implementations."""

from partsync.infrastructure import notifications, storage

__all__ = ["storage", "notifications"]
