# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""
Download Monitor Enums Package.

    from downloadmonitor.enums import EnumJobStatus, EnumSpanStatus, EnumErrorKind
"""

from downloadmonitor.enums.enum_error_kind import EnumErrorKind
from downloadmonitor.enums.enum_job_status import EnumJobStatus
from downloadmonitor.enums.enum_span_status import EnumSpanStatus

__all__ = [
    "EnumErrorKind",
    "EnumJobStatus",
    "EnumSpanStatus",
]
