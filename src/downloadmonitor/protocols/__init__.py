# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Shared protocol definitions for the download monitor.

These protocols define the seams between the poller, the HTTP client, the
span exporter and the telemetry sink so each can be replaced by a test
double or an alternative implementation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from downloadmonitor.models import (
        ModelErrorEvent,
        ModelJobStatusResponse,
        ModelSpan,
        ModelStartDownloadResponse,
    )


@runtime_checkable
class ProtocolTelemetrySink(Protocol):
    """Destination for reported error events."""

    async def capture(self, event: ModelErrorEvent) -> None:
        """Accept one error event."""
        ...


@runtime_checkable
class ProtocolSpanExporter(Protocol):
    """Destination for finished spans."""

    def export(self, span: ModelSpan) -> None:
        """Accept one finished span. Must not raise."""
        ...


@runtime_checkable
class ProtocolDownloadService(Protocol):
    """The two backend operations the job poller depends on."""

    async def start_download(self, file_id: int) -> ModelStartDownloadResponse:
        """Start a job for ``file_id``."""
        ...

    async def get_download_status(self, job_id: str) -> ModelJobStatusResponse:
        """Fetch the current status of ``job_id``."""
        ...


__all__ = [
    "ProtocolDownloadService",
    "ProtocolSpanExporter",
    "ProtocolTelemetrySink",
]
