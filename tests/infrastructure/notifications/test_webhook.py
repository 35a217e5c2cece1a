"""Tests for notification sinks."""

import json

import httpx
import pytest

from partsync.config import reset_settings
from partsync.core.interfaces.notifier import NotificationEvent
from partsync.infrastructure.notifications import (
    LoggingNotifier,
    WebhookNotifier,
    get_notifier,
    reset_notifier,
)


@pytest.fixture
def event():
    return NotificationEvent(
        event_type="order.created",
        title="Purchase order created",
        message="PO2501-0001 for Acme Components",
        payload={"order_code": "PO2501-0001"},
    )


class Recorder:
    """MockTransport handler answering with a fixed status sequence."""

    def __init__(self, *statuses: int):
        self.statuses = list(statuses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return httpx.Response(status)


def _notifier(handler, background=False, max_retries=3):
    return WebhookNotifier(
        "http://hooks.test/partsync",
        max_retries=max_retries,
        retry_delay=0,
        background=background,
        transport=httpx.MockTransport(handler),
    )


class TestWebhookNotifier:
    async def test_posts_event_json(self, event):
        """The event is posted as JSON."""
        recorder = Recorder(200)

        await _notifier(recorder).notify(event)

        assert len(recorder.requests) == 1
        request = recorder.requests[0]
        assert request.method == "POST"
        assert str(request.url) == "http://hooks.test/partsync"
        body = json.loads(request.content)
        assert body["event_type"] == "order.created"
        assert body["payload"] == {"order_code": "PO2501-0001"}
        assert body["success"] is True

    async def test_retries_then_succeeds(self, event):
        """Server errors are retried."""
        recorder = Recorder(503, 500, 200)

        await _notifier(recorder).notify(event)

        assert len(recorder.requests) == 3

    async def test_gives_up_without_raising(self, event):
        """Exhausted retries are logged, not raised."""
        recorder = Recorder(500)

        await _notifier(recorder, max_retries=2).notify(event)

        assert len(recorder.requests) == 2

    async def test_connection_errors_do_not_raise(self, event):
        """Transport failures are retried and swallowed."""
        attempts = []

        def refuse(request):
            attempts.append(request)
            raise httpx.ConnectError("refused", request=request)

        await _notifier(refuse, max_retries=2).notify(event)

        assert len(attempts) == 2

    async def test_unserializable_payload_does_not_raise(self, event):
        """A payload that cannot be encoded is logged and dropped."""
        recorder = Recorder(200)
        event.payload = {"when": object()}

        await _notifier(recorder).notify(event)

        assert recorder.requests == []

    async def test_unexpected_error_is_not_retried(self, event):
        """Non-HTTP failures end delivery after one attempt."""
        attempts = []

        def broken(request):
            attempts.append(request)
            raise RuntimeError("handler bug")

        notifier = _notifier(broken, background=True)
        await notifier.notify(event)
        await notifier.drain()

        assert len(attempts) == 1
        assert not notifier._pending

    async def test_background_delivery_drains(self, event):
        """Background deliveries complete on drain."""
        recorder = Recorder(200)
        notifier = _notifier(recorder, background=True)

        await notifier.notify(event)
        await notifier.drain()

        assert len(recorder.requests) == 1
        assert not notifier._pending


class TestLoggingNotifier:
    async def test_notify_does_not_raise(self, event):
        """The logging sink accepts success and failure events."""
        notifier = LoggingNotifier()
        await notifier.notify(event)
        event.success = False
        await notifier.notify(event)


class TestGetNotifier:
    @pytest.fixture(autouse=True)
    def _reset(self):
        reset_settings()
        reset_notifier()
        yield
        reset_notifier()
        reset_settings()

    def test_logging_without_url(self, monkeypatch):
        monkeypatch.delenv("NOTIFY_WEBHOOK_URL", raising=False)
        assert isinstance(get_notifier(), LoggingNotifier)

    def test_webhook_with_url(self, monkeypatch):
        monkeypatch.setenv("NOTIFY_WEBHOOK_URL", "http://hooks.test/partsync")
        reset_settings()

        notifier = get_notifier()

        assert isinstance(notifier, WebhookNotifier)
        assert notifier.url == "http://hooks.test/partsync"
        assert get_notifier() is notifier
