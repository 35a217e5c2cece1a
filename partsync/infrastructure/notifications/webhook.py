"""
Webhook notifier.

POSTs events as JSON to a configured URL. Delivery runs in the background
with retry and exponential backoff; failures are logged and never reach the
caller.
"""

import asyncio
from typing import Any

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from partsync.config import get_logger, get_settings
from partsync.core.interfaces.notifier import INotifier, NotificationEvent

logger = get_logger(__name__)


class WebhookNotifier(INotifier):
    """Fire-and-forget HTTP delivery of notification events."""

    def __init__(
        self,
        url: str,
        timeout: float | None = None,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        background: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings().notifications
        self.url = url
        self.timeout = timeout if timeout is not None else settings.timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_delay = retry_delay if retry_delay is not None else settings.retry_delay
        self.background = background
        self._transport = transport
        self._pending: set[asyncio.Task[None]] = set()

    async def notify(self, event: NotificationEvent) -> None:
        if not self.background:
            await self._deliver(event)
            return
        task = asyncio.create_task(self._deliver(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight deliveries; used on shutdown."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(
                multiplier=self.retry_delay,
                min=self.retry_delay,
                max=self.retry_delay * 8,
            ),
            retry=retry_if_exception_type(httpx.HTTPError),
            before_sleep=self._log_retry,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        """Log retry attempts."""
        logger.warning(
            "webhook_retry",
            attempt=retry_state.attempt_number,
            error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
        )

    async def _post(self, body: dict[str, Any]) -> None:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, json=body)
            response.raise_for_status()

    async def _deliver(self, event: NotificationEvent) -> None:
        try:
            async for attempt in self._retrying():
                with attempt:
                    await self._post(event.to_dict())
        except RetryError as e:
            logger.error(
                "webhook_delivery_failed",
                event_type=event.event_type,
                url=self.url,
                attempts=self.max_retries,
                error=str(e.last_attempt.exception()),
            )
            return
        except Exception as e:
            # Errors outside HTTP (bad payload, handler bugs) are not retried
            logger.error(
                "webhook_delivery_error",
                event_type=event.event_type,
                url=self.url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        logger.info("webhook_delivered", event_type=event.event_type)
