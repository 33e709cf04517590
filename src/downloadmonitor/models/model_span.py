# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Finished span record emitted by the traced operation wrapper."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from downloadmonitor.enums import EnumSpanStatus


class ModelSpan(BaseModel):
    """Immutable record of one traced operation.

    A record only exists once the span has been finalized, so ``end_time``
    and ``status`` are always present.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(description="Span name, e.g. api.getDownloadStatus")
    operation: str = Field(description="Operation category, e.g. http.client")
    trace_id: str = Field(description="Trace id the span belongs to")
    span_id: str = Field(description="Span id unique within the trace")
    start_time: datetime = Field(description="UTC time the span was opened")
    end_time: datetime = Field(description="UTC time the span was finalized")
    status: EnumSpanStatus = Field(description="Recorded outcome")
    status_message: str | None = Field(default=None, description="Error message")
    exception_type: str | None = Field(
        default=None, description="Class name of the recorded exception"
    )

    @property
    def duration_ms(self) -> float:
        return (self.end_time - self.start_time).total_seconds() * 1000


__all__ = ["ModelSpan"]
