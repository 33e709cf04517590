# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Shared Constants for the download monitor.

Wire-level values shared by the trace pipeline, the HTTP client and the
job poller. Timing values here are defaults; runtime values come from
``ModelDownloadMonitorSettings``.

Usage:
    from downloadmonitor.constants import FILE_ID_MIN, FILE_ID_MAX
"""

# =============================================================================
# File Identifier Domain
# =============================================================================

FILE_ID_MIN: int = 10_000
"""Smallest file id accepted by a start request (inclusive)."""

FILE_ID_MAX: int = 100_000_000
"""Largest file id accepted by a start request (inclusive)."""

# =============================================================================
# Polling
# =============================================================================

DEFAULT_POLL_INTERVAL_SECONDS: float = 2.0
"""
Delay before every status poll, including the first one after start.
"""

DEFAULT_POLL_ERROR_BACKOFF_SECONDS: float = 5.0
"""
Delay after a status poll that failed at the transport or HTTP level.

Failed polls are retried without limit; only a terminal job status or an
explicit cancellation ends a poll loop.
"""

DEFAULT_HTTP_TIMEOUT_SECONDS: float = 30.0

# =============================================================================
# Trace Propagation (W3C traceparent)
# =============================================================================

TRACEPARENT_HEADER: str = "traceparent"
TRACE_ID_HEADER: str = "x-trace-id"

TRACEPARENT_VERSION: str = "00"
TRACE_FLAGS_SAMPLED: str = "01"
TRACE_FLAGS_NOT_SAMPLED: str = "00"

TRACE_ID_BYTES: int = 16
"""128-bit trace id, rendered as 32 lowercase hex characters."""

SPAN_ID_BYTES: int = 8
"""64-bit span id, rendered as 16 lowercase hex characters."""

SPAN_OPERATION_HTTP_CLIENT: str = "http.client"

# =============================================================================
# Backend Endpoints
# =============================================================================

ENDPOINT_HEALTH: str = "/health"
ENDPOINT_DOWNLOAD_START: str = "/v1/download/start"
ENDPOINT_DOWNLOAD_STATUS: str = "/v1/download/status/{job_id}"
ENDPOINT_DOWNLOAD_CHECK: str = "/v1/download/check"

ERROR_PROBE_QUERY_PARAM: str = "sentry_test"
"""Query flag that makes the check endpoint raise a deliberate test error."""

__all__ = [
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "DEFAULT_POLL_ERROR_BACKOFF_SECONDS",
    "DEFAULT_POLL_INTERVAL_SECONDS",
    "ENDPOINT_DOWNLOAD_CHECK",
    "ENDPOINT_DOWNLOAD_START",
    "ENDPOINT_DOWNLOAD_STATUS",
    "ENDPOINT_HEALTH",
    "ERROR_PROBE_QUERY_PARAM",
    "FILE_ID_MAX",
    "FILE_ID_MIN",
    "SPAN_ID_BYTES",
    "SPAN_OPERATION_HTTP_CLIENT",
    "TRACEPARENT_HEADER",
    "TRACEPARENT_VERSION",
    "TRACE_FLAGS_NOT_SAMPLED",
    "TRACE_FLAGS_SAMPLED",
    "TRACE_ID_BYTES",
    "TRACE_ID_HEADER",
]
