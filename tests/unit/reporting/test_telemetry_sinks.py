"""Unit tests for the telemetry sinks."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from downloadmonitor.enums import EnumErrorKind
from downloadmonitor.models import ModelErrorEvent
from downloadmonitor.reporting import (
    FanOutTelemetrySink,
    HttpTelemetrySink,
    InMemoryTelemetrySink,
)

SINK_URL = "http://telemetry.test/v1/errors"


@pytest.fixture
def event() -> ModelErrorEvent:
    return ModelErrorEvent(
        error_kind=EnumErrorKind.TRANSPORT,
        error_type="TransportError",
        message="Network error",
        tags={"api_endpoint": "/health", "trace_id": "a" * 32},
        trace_id="a" * 32,
        environment="production",
    )


@pytest.mark.unit
class TestInMemoryTelemetrySink:
    async def test_keeps_most_recent_events(self, event: ModelErrorEvent) -> None:
        sink = InMemoryTelemetrySink(max_events=2)
        older = event.model_copy(update={"message": "older"})
        newest = event.model_copy(update={"message": "newest"})

        for item in (older, event, newest):
            await sink.capture(item)

        assert [item.message for item in sink.events()] == ["Network error", "newest"]

    async def test_clear(self, event: ModelErrorEvent) -> None:
        sink = InMemoryTelemetrySink()
        await sink.capture(event)

        sink.clear()

        assert len(sink) == 0

    def test_rejects_empty_buffer(self) -> None:
        with pytest.raises(ValueError):
            InMemoryTelemetrySink(max_events=0)


@pytest.mark.unit
class TestHttpTelemetrySink:
    async def test_posts_event_as_json(self, event: ModelErrorEvent) -> None:
        received: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append(request)
            return httpx.Response(202)

        sink = HttpTelemetrySink(SINK_URL, transport=httpx.MockTransport(handler))

        await sink.capture(event)

        (request,) = received
        assert request.method == "POST"
        assert str(request.url) == SINK_URL
        body = json.loads(request.content)
        assert body["event_id"] == str(event.event_id)
        assert body["error_kind"] == "TRANSPORT"
        assert body["tags"]["trace_id"] == "a" * 32
        assert "traceparent" not in request.headers

    async def test_raises_on_rejected_event(self, event: ModelErrorEvent) -> None:
        sink = HttpTelemetrySink(
            SINK_URL,
            transport=httpx.MockTransport(lambda request: httpx.Response(500)),
        )

        with pytest.raises(httpx.HTTPStatusError):
            await sink.capture(event)


@pytest.mark.unit
class TestFanOutTelemetrySink:
    async def test_delivers_to_every_sink(self, event: ModelErrorEvent) -> None:
        first, second = InMemoryTelemetrySink(), InMemoryTelemetrySink()

        await FanOutTelemetrySink(first, second).capture(event)

        assert first.events() == [event]
        assert second.events() == [event]

    async def test_failing_sink_does_not_block_later_sinks(
        self, event: ModelErrorEvent
    ) -> None:
        failing = AsyncMock()
        failing.capture.side_effect = RuntimeError("down")
        survivor = InMemoryTelemetrySink()
        fan_out = FanOutTelemetrySink(failing, survivor)

        with pytest.raises(RuntimeError, match="down"):
            await fan_out.capture(event)

        assert survivor.events() == [event]
