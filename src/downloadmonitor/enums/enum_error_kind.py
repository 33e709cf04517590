# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error kinds for the download monitor error family.

Every ``DownloadMonitorError`` carries exactly one of these kinds. The
kind decides how the error is handled:

    VALIDATION      rejected locally, before any network call; never reported
    TRANSPORT       no HTTP response (connect failure, timeout); reported
    SERVER_FAILURE  the backend reported the job as failed; terminal
    PIPELINE_HTTP   non-2xx response or undecodable body; reported
"""

from enum import Enum


class EnumErrorKind(str, Enum):
    """Fixed set of error kinds."""

    VALIDATION = "VALIDATION"
    TRANSPORT = "TRANSPORT"
    SERVER_FAILURE = "SERVER_FAILURE"
    PIPELINE_HTTP = "PIPELINE_HTTP"


__all__ = ["EnumErrorKind"]
