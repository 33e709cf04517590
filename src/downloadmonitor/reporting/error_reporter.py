# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error reporter.

Turns an exception plus contextual tags into a trace-correlated
``ModelErrorEvent`` and hands it to a telemetry sink. Reporting observes
errors; it never raises on behalf of the sink and never alters the error
it was given.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from downloadmonitor.errors import DownloadMonitorError
from downloadmonitor.models import ModelErrorEvent
from downloadmonitor.protocols import ProtocolTelemetrySink
from downloadmonitor.tracing import TraceContextManager

logger = logging.getLogger(__name__)

TRACE_ID_TAG = "trace_id"


class ErrorReporter:
    """Reports errors with the active trace id attached.

    Validation errors are local to the caller and are never reported.
    """

    def __init__(
        self,
        sink: ProtocolTelemetrySink,
        trace_context: TraceContextManager,
        *,
        environment: str = "development",
    ) -> None:
        self._sink = sink
        self._trace_context = trace_context
        self._environment = environment

    @property
    def sink(self) -> ProtocolTelemetrySink:
        return self._sink

    async def report(
        self,
        error: BaseException,
        context: Mapping[str, object] | None = None,
    ) -> ModelErrorEvent | None:
        """Report ``error`` with ``context`` as tags.

        Args:
            error: The exception to report.
            context: Extra tags; None values are dropped, others stringified.

        Returns:
            The event handed to the sink, or None if the error is not reportable.
        """
        if isinstance(error, DownloadMonitorError) and not error.is_reportable:
            logger.debug("Not reporting %s: %s", error.error_kind.value, error)
            return None

        tags = {
            key: str(value)
            for key, value in (context or {}).items()
            if value is not None
        }
        trace_id = self._trace_context.current_trace_id()
        if trace_id is not None:
            tags[TRACE_ID_TAG] = trace_id

        event = ModelErrorEvent(
            error_kind=(
                error.error_kind if isinstance(error, DownloadMonitorError) else None
            ),
            error_type=type(error).__name__,
            message=str(error),
            tags=tags,
            trace_id=trace_id,
            environment=self._environment,
        )
        logger.error(
            "Reported error | type=%s message=%s tags=%s",
            event.error_type,
            event.message,
            tags,
        )

        try:
            await self._sink.capture(event)
        except Exception as exc:
            logger.warning(
                "Telemetry sink rejected event %s: %s", event.event_id, exc
            )
        return event


__all__ = ["TRACE_ID_TAG", "ErrorReporter"]
