# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error family for the download monitor.

All errors raised by this package derive from ``DownloadMonitorError`` and
carry an ``EnumErrorKind`` plus a structured ``details`` payload. The HTTP
client classifies raw httpx exceptions into this family exactly once; the
instance it reports to the error reporter is the instance it raises.
"""

from __future__ import annotations

from typing import Any

from downloadmonitor.enums import EnumErrorKind


class DownloadMonitorError(Exception):
    """Base exception for download monitor errors."""

    def __init__(
        self,
        message: str,
        error_kind: EnumErrorKind,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.error_kind = error_kind
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    @property
    def is_reportable(self) -> bool:
        """Validation errors stay local; every other kind is reported."""
        return self.error_kind is not EnumErrorKind.VALIDATION


class FileIdValidationError(DownloadMonitorError):
    """Raised when a file id is outside the accepted domain."""

    def __init__(self, file_id: object, minimum: int, maximum: int) -> None:
        super().__init__(
            f"Please enter a valid file ID ({minimum:,} - {maximum:,})",
            error_kind=EnumErrorKind.VALIDATION,
            details={"file_id": file_id, "minimum": minimum, "maximum": maximum},
            status_code=422,
        )
        self.file_id = file_id


class TransportError(DownloadMonitorError):
    """Raised when a request produced no HTTP response (network, timeout)."""

    def __init__(
        self,
        message: str,
        endpoint: str,
        method: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        details.update({"endpoint": endpoint, "method": method})
        super().__init__(
            message,
            error_kind=EnumErrorKind.TRANSPORT,
            details=details,
        )
        self.endpoint = endpoint
        self.method = method


class PipelineHTTPError(DownloadMonitorError):
    """Raised when the backend answered with a non-2xx status."""

    def __init__(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        response_text: str = "",
        message: str | None = None,
    ) -> None:
        super().__init__(
            message or f"{method} {endpoint} failed with status {status_code}",
            error_kind=EnumErrorKind.PIPELINE_HTTP,
            details={
                "endpoint": endpoint,
                "method": method,
                "status_code": status_code,
                "response_text": response_text[:500],
            },
            status_code=status_code,
        )
        self.endpoint = endpoint
        self.method = method


class ResponseDecodeError(PipelineHTTPError):
    """Raised when a 2xx body is not valid JSON or does not match its schema."""

    def __init__(
        self,
        endpoint: str,
        method: str,
        status_code: int,
        reason: str,
        response_text: str = "",
    ) -> None:
        super().__init__(
            endpoint,
            method,
            status_code,
            response_text=response_text,
            message=f"Failed to decode response from {method} {endpoint}: {reason}",
        )
        self.details["reason"] = reason


class JobFailedError(DownloadMonitorError):
    """Raised when a caller asks for a job result and the server failed it."""

    def __init__(self, job_id: str, error_message: str) -> None:
        super().__init__(
            f"Job {job_id} failed: {error_message}",
            error_kind=EnumErrorKind.SERVER_FAILURE,
            details={"job_id": job_id, "error": error_message},
        )
        self.job_id = job_id
        self.error_message = error_message


class InvalidJobTransitionError(Exception):
    """Raised when a status update would move a job backwards or out of a
    terminal state."""

    def __init__(self, job_id: str, current: str, proposed: str) -> None:
        super().__init__(
            f"Job {job_id}: illegal status transition {current} -> {proposed}"
        )
        self.job_id = job_id
        self.current = current
        self.proposed = proposed


class JobStoreError(Exception):
    """Raised on an illegal write to the job snapshot store."""


class SpanLifecycleError(RuntimeError):
    """Raised when a span is given a second status or a second end."""


__all__ = [
    "DownloadMonitorError",
    "FileIdValidationError",
    "InvalidJobTransitionError",
    "JobFailedError",
    "JobStoreError",
    "PipelineHTTPError",
    "ResponseDecodeError",
    "SpanLifecycleError",
    "TransportError",
]
