# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Telemetry sinks receiving error events from the error reporter."""

from __future__ import annotations

import logging
from collections import deque

import httpx

from downloadmonitor.models import ModelErrorEvent
from downloadmonitor.protocols import ProtocolTelemetrySink

logger = logging.getLogger(__name__)


class InMemoryTelemetrySink:
    """Bounded buffer of recent error events (newest last)."""

    def __init__(self, max_events: int = 200) -> None:
        if max_events < 1:
            raise ValueError("max_events must be >= 1")
        self._events: deque[ModelErrorEvent] = deque(maxlen=max_events)

    async def capture(self, event: ModelErrorEvent) -> None:
        self._events.append(event)

    def events(self) -> list[ModelErrorEvent]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class HttpTelemetrySink:
    """POSTs each error event as JSON to an ingest endpoint.

    Uses its own short-lived httpx client, never the traced request pipeline,
    so a failing sink cannot report into itself.

    Raises:
        httpx.HTTPError: From ``capture`` on transport failure or non-2xx.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout_seconds = timeout_seconds
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    async def capture(self, event: ModelErrorEvent) -> None:
        async with httpx.AsyncClient(
            timeout=self._timeout_seconds, transport=self._transport
        ) as client:
            response = await client.post(self._url, json=event.model_dump(mode="json"))
            response.raise_for_status()
        logger.debug("Error event delivered | event_id=%s", event.event_id)


class FanOutTelemetrySink:
    """Forwards every event to each wrapped sink in order.

    A failing sink does not stop delivery to the ones after it; the first
    failure is re-raised once all sinks have been tried.
    """

    def __init__(self, *sinks: ProtocolTelemetrySink) -> None:
        self._sinks = sinks

    @property
    def sinks(self) -> tuple[ProtocolTelemetrySink, ...]:
        return self._sinks

    async def capture(self, event: ModelErrorEvent) -> None:
        first_error: Exception | None = None
        for sink in self._sinks:
            try:
                await sink.capture(event)
            except Exception as exc:
                logger.warning(
                    "Telemetry sink %s failed: %s", type(sink).__name__, exc
                )
                if first_error is None:
                    first_error = exc
        if first_error is not None:
            raise first_error


__all__ = ["FanOutTelemetrySink", "HttpTelemetrySink", "InMemoryTelemetrySink"]
