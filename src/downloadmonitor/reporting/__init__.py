# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error reporting and telemetry sinks."""

from downloadmonitor.reporting.error_reporter import TRACE_ID_TAG, ErrorReporter
from downloadmonitor.reporting.telemetry_sinks import (
    FanOutTelemetrySink,
    HttpTelemetrySink,
    InMemoryTelemetrySink,
)

__all__ = [
    "TRACE_ID_TAG",
    "ErrorReporter",
    "FanOutTelemetrySink",
    "HttpTelemetrySink",
    "InMemoryTelemetrySink",
]
