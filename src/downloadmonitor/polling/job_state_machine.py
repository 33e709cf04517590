# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Download job state machine.

Transition table (self-loops on non-terminal states carry progress
refreshes; forward skips are allowed because polling can miss a state)::

    (not started) --start--> QUEUED
    QUEUED      -> QUEUED | PROCESSING | COMPLETED | FAILED
    PROCESSING  -> PROCESSING | COMPLETED | FAILED
    COMPLETED   -> (none)
    FAILED      -> (none)

``merge`` folds a status response into the current snapshot and returns a
new snapshot that satisfies the ``ModelDownloadJob`` invariants.
"""

from __future__ import annotations

from downloadmonitor.enums import EnumJobStatus
from downloadmonitor.errors import InvalidJobTransitionError
from downloadmonitor.models import (
    ModelDownloadJob,
    ModelJobResult,
    ModelJobStatusResponse,
    ModelStartDownloadResponse,
)

DEFAULT_FAILURE_MESSAGE = "Job failed without an error message"

_ALLOWED_TRANSITIONS: dict[EnumJobStatus, frozenset[EnumJobStatus]] = {
    EnumJobStatus.QUEUED: frozenset(EnumJobStatus),
    EnumJobStatus.PROCESSING: frozenset(
        {EnumJobStatus.PROCESSING, EnumJobStatus.COMPLETED, EnumJobStatus.FAILED}
    ),
    EnumJobStatus.COMPLETED: frozenset(),
    EnumJobStatus.FAILED: frozenset(),
}


class JobStateMachine:
    """Pure transition logic; holds no state of its own."""

    @staticmethod
    def can_transition(current: EnumJobStatus, proposed: EnumJobStatus) -> bool:
        return proposed in _ALLOWED_TRANSITIONS[current]

    @staticmethod
    def initial_job(
        response: ModelStartDownloadResponse, now_ms: int
    ) -> ModelDownloadJob:
        """Snapshot for a job the backend just accepted (always QUEUED)."""
        return ModelDownloadJob(
            job_id=response.job_id,
            status=EnumJobStatus.QUEUED,
            file_id=response.file_id,
            start_time=now_ms,
        )

    @classmethod
    def merge(
        cls,
        job: ModelDownloadJob,
        response: ModelJobStatusResponse,
        now_ms: int,
    ) -> ModelDownloadJob:
        """Apply a status response to ``job``.

        Raises:
            InvalidJobTransitionError: The response moves the job backwards
                or out of a terminal state.
        """
        status = response.status
        if not cls.can_transition(job.status, status):
            raise InvalidJobTransitionError(job.job_id, job.status.value, status.value)

        progress: float | None = None
        if status is EnumJobStatus.PROCESSING:
            progress = response.progress if response.progress is not None else job.progress
            if progress is not None:
                progress = min(max(progress, 0.0), 100.0)

        result: ModelJobResult | None = None
        if status is EnumJobStatus.COMPLETED:
            result = response.result or ModelJobResult()

        error: str | None = None
        if status is EnumJobStatus.FAILED:
            error = response.error or DEFAULT_FAILURE_MESSAGE

        end_time: int | None = None
        if status.is_terminal:
            end_time = response.end_time or now_ms

        processing_time_ms = response.processing_time_ms
        if processing_time_ms is None and result is not None:
            processing_time_ms = result.processing_time_ms
        if processing_time_ms is None:
            processing_time_ms = job.processing_time_ms

        return ModelDownloadJob(
            job_id=job.job_id,
            status=status,
            file_id=job.file_id,
            progress=progress,
            start_time=response.start_time or job.start_time,
            end_time=end_time,
            processing_time_ms=processing_time_ms,
            result=result,
            error=error,
        )


__all__ = ["DEFAULT_FAILURE_MESSAGE", "JobStateMachine"]
