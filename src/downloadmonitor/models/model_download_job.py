# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Download job models.

Two views of a job live here:

- ``ModelJobStatusResponse`` is the lenient wire payload of
  ``GET /v1/download/status/{jobId}``. The backend may omit any field but
  ``status``.
- ``ModelDownloadJob`` is the client-side snapshot. It enforces the job
  invariants: ``progress`` only while processing, ``result`` iff completed,
  ``error`` iff failed. Snapshots are immutable and replaced wholesale.

Field names are snake_case; aliases carry the backend's camelCase names so
``model_dump(by_alias=True)`` reproduces the wire format.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from downloadmonitor.enums import EnumJobStatus


class ModelJobResult(BaseModel):
    """Result attached to a completed job."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    file_id: int | None = Field(default=None, description="File the result is for")
    status: EnumJobStatus | None = Field(default=None, description="Result status")
    download_url: str | None = Field(
        default=None, alias="downloadUrl", description="Presigned download URL"
    )
    size: int | float | None = Field(
        default=None, ge=0, description="File size in bytes"
    )
    processing_time_ms: int | float | None = Field(
        default=None, alias="processingTimeMs", description="Server processing time"
    )
    message: str | None = Field(default=None, description="Human-readable summary")


class ModelJobStatusResponse(BaseModel):
    """Wire payload returned by the status endpoint."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    job_id: str | None = Field(default=None, alias="jobId")
    status: EnumJobStatus
    file_id: int | None = None
    progress: float | None = None
    start_time: int | None = Field(default=None, alias="startTime")
    end_time: int | None = Field(default=None, alias="endTime")
    processing_time_ms: int | float | None = Field(
        default=None, alias="processingTimeMs"
    )
    result: ModelJobResult | None = None
    error: str | None = None


class ModelDownloadJob(BaseModel):
    """Client-side snapshot of one download job.

    Attributes:
        job_id: Opaque job identity issued by the backend.
        status: Current lifecycle status.
        file_id: File being prepared.
        progress: Percent complete (0-100); only present while processing.
        start_time: Epoch milliseconds when the job was started.
        end_time: Epoch milliseconds when a terminal status was first seen.
        processing_time_ms: Server-reported processing time, if any.
        result: Present iff status is COMPLETED.
        error: Present iff status is FAILED.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    job_id: str = Field(alias="jobId", min_length=1)
    status: EnumJobStatus
    file_id: int
    progress: float | None = Field(default=None, ge=0, le=100)
    start_time: int = Field(alias="startTime")
    end_time: int | None = Field(default=None, alias="endTime")
    processing_time_ms: int | float | None = Field(
        default=None, alias="processingTimeMs"
    )
    result: ModelJobResult | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _check_status_payload(self) -> Self:
        if self.progress is not None and self.status is not EnumJobStatus.PROCESSING:
            raise ValueError("progress is only meaningful while processing")
        if (self.result is not None) != (self.status is EnumJobStatus.COMPLETED):
            raise ValueError("result must be present iff status is completed")
        if (self.error is not None) != (self.status is EnumJobStatus.FAILED):
            raise ValueError("error must be present iff status is failed")
        return self

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


__all__ = ["ModelDownloadJob", "ModelJobResult", "ModelJobStatusResponse"]
