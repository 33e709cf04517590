# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Pydantic models for the download monitor."""

from downloadmonitor.models.model_download_api_contracts import (
    ModelErrorProbeResult,
    ModelFileCheckRequest,
    ModelFileCheckResponse,
    ModelHealthCheckResponse,
    ModelHealthChecks,
    ModelStartDownloadRequest,
    ModelStartDownloadResponse,
)
from downloadmonitor.models.model_download_job import (
    ModelDownloadJob,
    ModelJobResult,
    ModelJobStatusResponse,
)
from downloadmonitor.models.model_error_event import ModelErrorEvent
from downloadmonitor.models.model_monitor_settings import ModelDownloadMonitorSettings
from downloadmonitor.models.model_span import ModelSpan
from downloadmonitor.models.model_trace_context import ModelTraceContext

__all__ = [
    "ModelDownloadJob",
    "ModelDownloadMonitorSettings",
    "ModelErrorEvent",
    "ModelErrorProbeResult",
    "ModelFileCheckRequest",
    "ModelFileCheckResponse",
    "ModelHealthCheckResponse",
    "ModelHealthChecks",
    "ModelJobResult",
    "ModelJobStatusResponse",
    "ModelSpan",
    "ModelStartDownloadRequest",
    "ModelStartDownloadResponse",
    "ModelTraceContext",
]
