# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Error event forwarded by the error reporter to a telemetry sink."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from downloadmonitor.enums import EnumErrorKind


class ModelErrorEvent(BaseModel):
    """Trace-correlated description of one reported error.

    Attributes:
        event_id: Unique id of this event.
        timestamp: UTC time the error was reported.
        error_kind: Kind from the error family, or None for foreign exceptions.
        error_type: Exception class name.
        message: Exception message.
        tags: Flat string tags (api_endpoint, api_method, api_status, trace_id).
        trace_id: Trace id active when the error was reported, if any.
        environment: Deployment environment tag.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    error_kind: EnumErrorKind | None = None
    error_type: str
    message: str
    tags: dict[str, str] = Field(default_factory=dict)
    trace_id: str | None = None
    environment: str = "development"


__all__ = ["ModelErrorEvent"]
