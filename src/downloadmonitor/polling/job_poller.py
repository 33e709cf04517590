# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Job poller.

Drives each started job from QUEUED to a terminal status by polling the
status endpoint:

- the first poll happens ``poll_interval_seconds`` after start, and every
  later poll the same delay after the previous one completed;
- a poll that fails (transport or HTTP error) is retried after
  ``error_backoff_seconds``, without limit;
- the loop stops the first time it sees COMPLETED or FAILED, and the job
  leaves the active set exactly once;
- the job owner can cancel at any time through its ``CancellationToken``;
  the loop exits at its next suspension point and releases the job with
  its last known snapshot.

Polls for one job are strictly sequential. Loops for different jobs run
as independent asyncio tasks and share nothing but the store, where each
entry is written only by its own loop.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from downloadmonitor.constants import (
    DEFAULT_POLL_ERROR_BACKOFF_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
)
from downloadmonitor.enums import EnumJobStatus
from downloadmonitor.errors import (
    DownloadMonitorError,
    InvalidJobTransitionError,
    JobFailedError,
)
from downloadmonitor.models import ModelDownloadJob, ModelJobStatusResponse
from downloadmonitor.polling.cancellation import (
    CancellationToken,
    OperationCancelledError,
    run_until_cancelled,
)
from downloadmonitor.polling.job_state_machine import JobStateMachine
from downloadmonitor.polling.job_store import JobStore
from downloadmonitor.protocols import ProtocolDownloadService
from downloadmonitor.validation import validate_file_id

logger = logging.getLogger(__name__)

JobListener = Callable[[ModelDownloadJob], None]
Sleep = Callable[[float], Awaitable[None]]


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class _PollHandle:
    job_id: str
    token: CancellationToken
    task: asyncio.Task[ModelDownloadJob]


class JobPoller:
    """Starts download jobs and polls each one to a terminal status.

    Example:
        >>> poller = JobPoller(client, JobStore())
        >>> job = await poller.start(70000)
        >>> final = await poller.wait(job.job_id)
        >>> final.status
        <EnumJobStatus.COMPLETED: 'completed'>
    """

    def __init__(
        self,
        service: ProtocolDownloadService,
        store: JobStore | None = None,
        *,
        poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        error_backoff_seconds: float = DEFAULT_POLL_ERROR_BACKOFF_SECONDS,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """
        Args:
            service: Backend operations (start and status).
            store: Snapshot store shared with readers; a new one if omitted.
            poll_interval_seconds: Delay before every status poll.
            error_backoff_seconds: Delay after a failed status poll.
            sleep: Delay primitive; tests inject a recording fake.
            clock: Epoch-milliseconds clock for start/end stamps.
        """
        self._service = service
        self._store = store if store is not None else JobStore()
        self._poll_interval = poll_interval_seconds
        self._error_backoff = error_backoff_seconds
        self._sleep = sleep
        self._clock = clock
        self._handles: dict[str, _PollHandle] = {}
        self._listeners: list[JobListener] = []

    @property
    def store(self) -> JobStore:
        return self._store

    @property
    def active_job_ids(self) -> frozenset[str]:
        return self._store.active_job_ids

    def snapshot(self, job_id: str) -> ModelDownloadJob | None:
        """Latest known snapshot for ``job_id``."""
        return self._store.get(job_id)

    def subscribe(self, listener: JobListener) -> Callable[[], None]:
        """Call ``listener`` with every snapshot the poller applies.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ========================================================================
    # Job Lifecycle
    # ========================================================================

    async def start(
        self,
        file_id: object,
        cancel_token: CancellationToken | None = None,
    ) -> ModelDownloadJob:
        """Start a job and begin polling it in the background.

        Args:
            file_id: File to download; validated before any network call.
            cancel_token: Token the caller keeps to stop polling early.

        Returns:
            The QUEUED snapshot of the new job.

        Raises:
            FileIdValidationError: Invalid file id; nothing was sent.
            DownloadMonitorError: The start call failed; the job was never
                registered and the call is not retried.
        """
        valid_file_id = validate_file_id(file_id)
        response = await self._service.start_download(valid_file_id)

        job = JobStateMachine.initial_job(response, self._clock())
        self._store.register(job)
        token = cancel_token or CancellationToken()
        task = asyncio.create_task(
            self._poll_loop(job.job_id, token), name=f"poll-job-{job.job_id}"
        )
        handle = _PollHandle(job.job_id, token, task)
        self._handles[job.job_id] = handle
        task.add_done_callback(lambda _: self._forget(handle))

        logger.info(
            "Download job started | job_id=%s file_id=%s", job.job_id, job.file_id
        )
        self._notify(job)
        return job

    def cancel(self, job_id: str) -> bool:
        """Stop polling ``job_id``.

        Returns:
            True if a running loop was signalled, False if the job is unknown
            or its loop already finished.
        """
        handle = self._handles.get(job_id)
        if handle is None or handle.task.done():
            return False
        handle.token.cancel()
        return True

    async def wait(
        self, job_id: str, *, raise_on_failure: bool = False
    ) -> ModelDownloadJob:
        """Wait for the poll loop of ``job_id`` to finish.

        A finished loop is not retained; its final snapshot comes from the
        store.

        Cancelling the waiting task does not cancel the poll loop.

        Returns:
            The last snapshot: terminal, or the last known one if cancelled.

        Raises:
            KeyError: ``job_id`` is unknown to this poller and its store.
            JobFailedError: ``raise_on_failure`` is set and the job failed.
        """
        handle = self._handles.get(job_id)
        if handle is not None:
            job = await asyncio.shield(handle.task)
        else:
            job = self._last_snapshot(job_id)
        if raise_on_failure and job.status is EnumJobStatus.FAILED:
            raise JobFailedError(job.job_id, job.error or "")
        return job

    async def close(self) -> None:
        """Cancel every running loop and wait for all of them to exit."""
        handles = list(self._handles.values())
        for handle in handles:
            handle.token.cancel()
        tasks = [handle.task for handle in handles]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ========================================================================
    # Poll Loop
    # ========================================================================

    async def _poll_loop(
        self, job_id: str, token: CancellationToken
    ) -> ModelDownloadJob:
        delay = self._poll_interval
        consecutive_failures = 0
        try:
            while True:
                await run_until_cancelled(self._sleep(delay), token)
                try:
                    response = await run_until_cancelled(
                        self._service.get_download_status(job_id), token
                    )
                except DownloadMonitorError as exc:
                    consecutive_failures += 1
                    delay = self._error_backoff
                    logger.warning(
                        "Status poll failed | job_id=%s failures=%d retry_in=%.1fs error=%s",
                        job_id,
                        consecutive_failures,
                        delay,
                        exc,
                    )
                    continue

                consecutive_failures = 0
                delay = self._poll_interval
                job = self._apply(job_id, response)
                if job.is_terminal:
                    logger.info(
                        "Download job finished | job_id=%s status=%s",
                        job_id,
                        job.status.value,
                    )
                    return job
        except OperationCancelledError:
            logger.info("Polling cancelled | job_id=%s", job_id)
            return self._last_snapshot(job_id)
        except Exception:
            logger.exception("Poll loop crashed | job_id=%s", job_id)
            raise
        finally:
            self._store.release(job_id)

    def _apply(
        self, job_id: str, response: ModelJobStatusResponse
    ) -> ModelDownloadJob:
        current = self._last_snapshot(job_id)
        try:
            job = JobStateMachine.merge(current, response, self._clock())
        except InvalidJobTransitionError as exc:
            logger.warning("Discarding status update: %s", exc)
            return current

        self._store.put(job)
        if job.status is not current.status:
            logger.info(
                "Job status changed | job_id=%s %s -> %s",
                job_id,
                current.status.value,
                job.status.value,
            )
        self._notify(job)
        return job

    def _forget(self, handle: _PollHandle) -> None:
        # Finished jobs stay readable through the store.
        if self._handles.get(handle.job_id) is handle:
            del self._handles[handle.job_id]

    def _last_snapshot(self, job_id: str) -> ModelDownloadJob:
        job = self._store.get(job_id)
        if job is None:
            raise KeyError(job_id)
        return job

    def _notify(self, job: ModelDownloadJob) -> None:
        for listener in list(self._listeners):
            try:
                listener(job)
            except Exception:
                logger.exception("Job listener failed | job_id=%s", job.job_id)


__all__ = ["JobListener", "JobPoller"]
