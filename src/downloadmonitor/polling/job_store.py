# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Job snapshot store.

Holds the latest snapshot per job id plus the set of jobs still being
polled. Each entry has exactly one writer, the poll loop for that id.
Snapshots are immutable and replaced wholesale, so readers never see a
partial update. Once a job is released (terminal or cancelled) its entry
is read-only.
"""

from __future__ import annotations

from downloadmonitor.errors import JobStoreError
from downloadmonitor.models import ModelDownloadJob


class JobStore:
    """Latest-known snapshot per job id and the active-polling set."""

    def __init__(self) -> None:
        self._jobs: dict[str, ModelDownloadJob] = {}
        self._active: set[str] = set()

    def register(self, job: ModelDownloadJob) -> None:
        """Add a newly started job and mark it active.

        Raises:
            JobStoreError: The job id was already issued in this session.
        """
        if job.job_id in self._jobs:
            raise JobStoreError(f"job id {job.job_id} was already issued")
        self._jobs[job.job_id] = job
        self._active.add(job.job_id)

    def put(self, job: ModelDownloadJob) -> None:
        """Replace the snapshot of an active job.

        Raises:
            JobStoreError: The job is unknown or already released.
        """
        if job.job_id not in self._jobs:
            raise JobStoreError(f"unknown job {job.job_id}")
        if job.job_id not in self._active:
            raise JobStoreError(f"job {job.job_id} is released and read-only")
        self._jobs[job.job_id] = job

    def release(self, job_id: str) -> bool:
        """Remove ``job_id`` from the active set.

        Returns:
            True on the first call for an active job, False afterwards.
        """
        if job_id not in self._active:
            return False
        self._active.discard(job_id)
        return True

    def get(self, job_id: str) -> ModelDownloadJob | None:
        return self._jobs.get(job_id)

    def is_active(self, job_id: str) -> bool:
        return job_id in self._active

    @property
    def active_job_ids(self) -> frozenset[str]:
        return frozenset(self._active)

    def snapshots(self) -> dict[str, ModelDownloadJob]:
        return dict(self._jobs)

    def __contains__(self, job_id: object) -> bool:
        return job_id in self._jobs

    def __len__(self) -> int:
        return len(self._jobs)


__all__ = ["JobStore"]
