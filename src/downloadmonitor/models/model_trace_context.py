# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Trace context model.

Identity carried on every outbound call: a process-wide trace id plus a
per-call span id, encoded on the wire as a W3C ``traceparent`` header.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from downloadmonitor.constants import TRACE_FLAGS_NOT_SAMPLED, TRACE_FLAGS_SAMPLED

_TRACE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")
_SPAN_ID_PATTERN = re.compile(r"^[0-9a-f]{16}$")


class ModelTraceContext(BaseModel):
    """Trace identity for one outbound call.

    Attributes:
        trace_id: 128-bit trace id, 32 lowercase hex characters, never all zero.
        span_id: 64-bit span id, 16 lowercase hex characters, never all zero.
        sampled: Sampling decision; encoded as trace flags ``01``/``00``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    trace_id: str = Field(description="128-bit trace id (32 hex chars)")
    span_id: str = Field(description="64-bit span id (16 hex chars)")
    sampled: bool = Field(default=True, description="Sampling decision")

    @field_validator("trace_id")
    @classmethod
    def _validate_trace_id(cls, value: str) -> str:
        if not _TRACE_ID_PATTERN.match(value) or set(value) == {"0"}:
            raise ValueError(f"invalid trace id: {value!r}")
        return value

    @field_validator("span_id")
    @classmethod
    def _validate_span_id(cls, value: str) -> str:
        if not _SPAN_ID_PATTERN.match(value) or set(value) == {"0"}:
            raise ValueError(f"invalid span id: {value!r}")
        return value

    @property
    def trace_flags(self) -> str:
        """Two-hex-digit flags field of the traceparent header."""
        return TRACE_FLAGS_SAMPLED if self.sampled else TRACE_FLAGS_NOT_SAMPLED


__all__ = ["ModelTraceContext"]
