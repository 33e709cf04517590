# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Response and request models for the dashboard read API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from downloadmonitor.models import ModelDownloadJob, ModelErrorEvent, ModelSpan


class ModelStartDownloadBody(BaseModel):
    """Body of ``POST /api/v1/downloads``."""

    model_config = ConfigDict(extra="forbid")

    file_id: int = Field(description="File to download")


class ModelDownloadList(BaseModel):
    """Known jobs and the subset still being polled."""

    active_job_ids: list[str] = Field(default_factory=list)
    jobs: list[ModelDownloadJob] = Field(default_factory=list)


class ModelCancelResult(BaseModel):
    job_id: str
    cancelled: bool = Field(
        description="False when the poll loop had already finished"
    )


class ModelTraceView(BaseModel):
    """Current trace id and the most recent spans."""

    trace_id: str | None = None
    spans: list[ModelSpan] = Field(default_factory=list)


class ModelErrorLog(BaseModel):
    """Most recent reported errors, newest first."""

    events: list[ModelErrorEvent] = Field(default_factory=list)
    total: int = 0


__all__ = [
    "ModelCancelResult",
    "ModelDownloadList",
    "ModelErrorLog",
    "ModelStartDownloadBody",
    "ModelTraceView",
]
