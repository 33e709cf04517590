# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Trace context propagation and span instrumentation."""

from downloadmonitor.tracing.span_exporters import InMemorySpanExporter
from downloadmonitor.tracing.trace_context import (
    TraceContextManager,
    TraceparentFormatError,
    format_traceparent,
    parse_traceparent,
)
from downloadmonitor.tracing.traced_operation import ActiveSpan, TracedOperationRunner

__all__ = [
    "ActiveSpan",
    "InMemorySpanExporter",
    "TraceContextManager",
    "TraceparentFormatError",
    "TracedOperationRunner",
    "format_traceparent",
    "parse_traceparent",
]
