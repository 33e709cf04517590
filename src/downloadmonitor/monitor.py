# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Composition root.

Creates the single ``TraceContextManager`` for the process and threads it
explicitly through the span runner, the error reporter and the HTTP
client, then wires the job poller on top.

Usage:
    async with DownloadMonitor() as monitor:
        job = await monitor.poller.start(70000)
        final = await monitor.poller.wait(job.job_id)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

import httpx

from downloadmonitor.clients import DownloadServiceClient
from downloadmonitor.models import ModelDownloadMonitorSettings
from downloadmonitor.polling import JobPoller, JobStore
from downloadmonitor.polling.job_poller import Sleep
from downloadmonitor.protocols import ProtocolTelemetrySink
from downloadmonitor.reporting import (
    ErrorReporter,
    FanOutTelemetrySink,
    HttpTelemetrySink,
    InMemoryTelemetrySink,
)
from downloadmonitor.tracing import (
    InMemorySpanExporter,
    TraceContextManager,
    TracedOperationRunner,
)

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)


def build_telemetry_sink(
    settings: ModelDownloadMonitorSettings,
    error_log: InMemoryTelemetrySink,
) -> ProtocolTelemetrySink:
    """Local error log, plus the HTTP sink when errors may leave the process."""
    if settings.forward_errors and settings.error_sink_url:
        return FanOutTelemetrySink(error_log, HttpTelemetrySink(settings.error_sink_url))
    if settings.error_sink_url:
        logger.info(
            "Error forwarding disabled in %s; set DOWNLOAD_MONITOR_ERROR_REPORTING_DEBUG=true to enable",
            settings.environment,
        )
    return error_log


class DownloadMonitor:
    """Owns one trace context and every component that shares it."""

    def __init__(
        self,
        settings: ModelDownloadMonitorSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleep = asyncio.sleep,
        trace_context: TraceContextManager | None = None,
    ) -> None:
        self.settings = settings or ModelDownloadMonitorSettings()
        self.trace_context = trace_context or TraceContextManager()
        self.span_exporter = InMemorySpanExporter(self.settings.span_buffer_size)
        self.error_log = InMemoryTelemetrySink(self.settings.error_buffer_size)
        self.error_reporter = ErrorReporter(
            build_telemetry_sink(self.settings, self.error_log),
            self.trace_context,
            environment=self.settings.environment,
        )
        self.tracer = TracedOperationRunner(self.trace_context, self.span_exporter)
        self.client = DownloadServiceClient(
            self.settings,
            self.trace_context,
            self.tracer,
            self.error_reporter,
            transport=transport,
        )
        self.poller = JobPoller(
            self.client,
            JobStore(),
            poll_interval_seconds=self.settings.poll_interval_seconds,
            error_backoff_seconds=self.settings.poll_error_backoff_seconds,
            sleep=sleep,
        )

    async def open(self) -> None:
        await self.client.connect()

    async def close(self) -> None:
        """Stop every poll loop, then close the connection pool."""
        await self.poller.close()
        await self.client.close()

    async def __aenter__(self) -> DownloadMonitor:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()


__all__ = ["DownloadMonitor", "build_telemetry_sink"]
