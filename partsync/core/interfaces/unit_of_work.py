"""Transaction boundary and document-code sequence ports."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class IUnitOfWork(ABC):
    """
    Atomic unit spanning several store calls.

    Store calls made inside ``transaction()`` commit together or not at all.
    Nested ``transaction()`` blocks join the outer one.
    """

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Open (or join) a write transaction."""
        pass


class ICodeSequenceStore(ABC):
    """Monotonic counters for human-readable document codes."""

    @abstractmethod
    async def next_value(self, prefix: str, period: str) -> int:
        """Allocate the next sequence number for ``prefix`` in ``period`` (YYMM)."""
        pass
