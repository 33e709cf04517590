# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Request/response contracts for the download service endpoints.

    GET  /health               -> ModelHealthCheckResponse
    POST /v1/download/start    ModelStartDownloadRequest -> ModelStartDownloadResponse
    POST /v1/download/check    ModelFileCheckRequest -> ModelFileCheckResponse

The status endpoint's payload lives in ``model_download_job``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from downloadmonitor.enums import EnumErrorKind, EnumJobStatus


class ModelHealthChecks(BaseModel):
    """Per-dependency health of the backend."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    storage: Literal["ok", "error"]


class ModelHealthCheckResponse(BaseModel):
    """Backend health payload."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    status: Literal["healthy", "unhealthy"]
    checks: ModelHealthChecks

    @property
    def is_healthy(self) -> bool:
        return self.status == "healthy"


class ModelStartDownloadRequest(BaseModel):
    """Body of a start request."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_id: int


class ModelStartDownloadResponse(BaseModel):
    """Acknowledgement of a queued job."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    job_id: str = Field(alias="jobId", min_length=1)
    status: EnumJobStatus = EnumJobStatus.QUEUED
    file_id: int
    message: str = ""
    status_url: str | None = Field(default=None, alias="statusUrl")


class ModelFileCheckRequest(BaseModel):
    """Body of an availability probe."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_id: int


class ModelFileCheckResponse(BaseModel):
    """Availability of a file in storage."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    file_id: int
    available: bool
    s3_key: str | None = Field(default=None, alias="s3Key")
    size: int | None = None


class ModelErrorProbeResult(BaseModel):
    """Outcome of a deliberate backend error probe.

    ``success`` is True when the backend raised the expected error (which the
    pipeline has already reported), False when the probe unexpectedly passed.
    """

    model_config = ConfigDict(frozen=True)

    success: bool
    error_kind: EnumErrorKind | None = None
    message: str | None = None
    status_code: int | None = None


__all__ = [
    "ModelErrorProbeResult",
    "ModelFileCheckRequest",
    "ModelFileCheckResponse",
    "ModelHealthCheckResponse",
    "ModelHealthChecks",
    "ModelStartDownloadRequest",
    "ModelStartDownloadResponse",
]
