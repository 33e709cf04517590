# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Traced operation wrapper.

Runs one unit of asynchronous work inside a span. The span is acquired on
entry and finalized exactly once on every exit path: normal return, raised
exception, or task cancellation. The wrapper only observes; results and
exceptions pass through unchanged.

Usage:
    runner = TracedOperationRunner(trace_context, exporter)

    status = await runner.run(
        "api.getDownloadStatus",
        "http.client",
        lambda: client.fetch_status(job_id),
    )

    async with runner.span("dashboard.refresh", "internal") as span:
        ...
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TypeVar

from downloadmonitor.enums import EnumSpanStatus
from downloadmonitor.errors import SpanLifecycleError
from downloadmonitor.models import ModelSpan
from downloadmonitor.protocols import ProtocolSpanExporter
from downloadmonitor.tracing.trace_context import TraceContextManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ActiveSpan:
    """Span handle for an operation in progress.

    ``set_status``, ``record_exception`` and ``end`` each accept exactly one
    call; a second call raises ``SpanLifecycleError``.
    """

    def __init__(
        self,
        name: str,
        operation: str,
        trace_id: str,
        span_id: str,
        on_end: Callable[[ModelSpan], None],
    ) -> None:
        self.name = name
        self.operation = operation
        self.trace_id = trace_id
        self.span_id = span_id
        self.start_time = datetime.now(UTC)
        self.status: EnumSpanStatus | None = None
        self.status_message: str | None = None
        self.exception_type: str | None = None
        self._record: ModelSpan | None = None
        self._on_end = on_end

    @property
    def is_ended(self) -> bool:
        return self._record is not None

    def set_status(self, status: EnumSpanStatus, message: str | None = None) -> None:
        if self.status is not None:
            raise SpanLifecycleError(f"span {self.name} already has a status")
        self.status = status
        self.status_message = message

    def record_exception(self, exc: BaseException) -> None:
        if self.exception_type is not None:
            raise SpanLifecycleError(f"span {self.name} already recorded an exception")
        self.exception_type = type(exc).__name__
        logger.debug("Span exception | name=%s error=%s", self.name, exc)

    def end(self) -> ModelSpan:
        """Finalize the span and hand the record to the exporter."""
        if self._record is not None:
            raise SpanLifecycleError(f"span {self.name} already ended")
        if self.status is None:
            raise SpanLifecycleError(f"span {self.name} ended without a status")
        self._record = ModelSpan(
            name=self.name,
            operation=self.operation,
            trace_id=self.trace_id,
            span_id=self.span_id,
            start_time=self.start_time,
            end_time=datetime.now(UTC),
            status=self.status,
            status_message=self.status_message,
            exception_type=self.exception_type,
        )
        self._on_end(self._record)
        return self._record


class TracedOperationRunner:
    """Creates spans bound to the process trace id and exports them."""

    def __init__(
        self,
        trace_context: TraceContextManager,
        exporter: ProtocolSpanExporter,
    ) -> None:
        self._trace_context = trace_context
        self._exporter = exporter

    @property
    def trace_context(self) -> TraceContextManager:
        return self._trace_context

    @asynccontextmanager
    async def span(self, name: str, operation: str) -> AsyncIterator[ActiveSpan]:
        """Open a span for the duration of the ``async with`` block.

        If the block sets no status itself, OK is recorded on normal exit and
        ERROR (with the exception message) on any exception. A block that
        ends the span itself takes over finalization.
        """
        context = self._trace_context.new_context()
        active = ActiveSpan(
            name=name,
            operation=operation,
            trace_id=context.trace_id,
            span_id=context.span_id,
            on_end=self._export,
        )
        logger.debug(
            "Span started | name=%s operation=%s trace_id=%s span_id=%s",
            name,
            operation,
            active.trace_id,
            active.span_id,
        )
        try:
            yield active
        except asyncio.CancelledError as exc:
            _fail(active, exc, "cancelled")
            raise
        except BaseException as exc:
            _fail(active, exc, str(exc) or type(exc).__name__)
            raise
        else:
            if active.status is None:
                active.set_status(EnumSpanStatus.OK)
        finally:
            if not active.is_ended:
                record = active.end()
                logger.debug(
                    "Span ended | name=%s status=%s duration_ms=%.2f",
                    name,
                    record.status.value,
                    record.duration_ms,
                )

    async def run(
        self,
        name: str,
        operation: str,
        fn: Callable[[], Awaitable[T]],
    ) -> T:
        """Await ``fn()`` inside a span and return its result unchanged."""
        async with self.span(name, operation):
            return await fn()

    def _export(self, record: ModelSpan) -> None:
        try:
            self._exporter.export(record)
        except Exception:
            logger.exception("Span exporter failed | name=%s", record.name)


def _fail(active: ActiveSpan, exc: BaseException, message: str) -> None:
    if active.status is None:
        active.set_status(EnumSpanStatus.ERROR, message)
    if active.exception_type is None:
        active.record_exception(exc)


__all__ = ["ActiveSpan", "TracedOperationRunner"]
