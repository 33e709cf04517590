# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Job polling: state machine, snapshot store, cancellation and poller."""

from downloadmonitor.polling.cancellation import (
    CancellationToken,
    OperationCancelledError,
    run_until_cancelled,
)
from downloadmonitor.polling.job_poller import JobListener, JobPoller
from downloadmonitor.polling.job_state_machine import (
    DEFAULT_FAILURE_MESSAGE,
    JobStateMachine,
)
from downloadmonitor.polling.job_store import JobStore

__all__ = [
    "DEFAULT_FAILURE_MESSAGE",
    "CancellationToken",
    "JobListener",
    "JobPoller",
    "JobStateMachine",
    "JobStore",
    "OperationCancelledError",
    "run_until_cancelled",
]
