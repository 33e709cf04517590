# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Download Monitor - trace-correlated client for the file download service.

Starts download jobs, polls them to completion and reports every backend
failure with the trace id the backend saw on the request.

Quick Start:
    >>> from downloadmonitor import DownloadMonitor
    >>> async with DownloadMonitor() as monitor:
    ...     job = await monitor.poller.start(70000)
    ...     final = await monitor.poller.wait(job.job_id)
    >>> final.status
    <EnumJobStatus.COMPLETED: 'completed'>
"""

from downloadmonitor.enums import EnumErrorKind, EnumJobStatus, EnumSpanStatus
from downloadmonitor.errors import (
    DownloadMonitorError,
    FileIdValidationError,
    JobFailedError,
    PipelineHTTPError,
    ResponseDecodeError,
    TransportError,
)
from downloadmonitor.models import ModelDownloadJob, ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor
from downloadmonitor.validation import validate_file_id

__version__ = "0.1.0"

__all__ = [
    "DownloadMonitor",
    "DownloadMonitorError",
    "EnumErrorKind",
    "EnumJobStatus",
    "EnumSpanStatus",
    "FileIdValidationError",
    "JobFailedError",
    "ModelDownloadJob",
    "ModelDownloadMonitorSettings",
    "PipelineHTTPError",
    "ResponseDecodeError",
    "TransportError",
    "__version__",
    "validate_file_id",
]
