# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Download job status enum.

String values match the backend wire format exactly (lowercase).
"""

from enum import Enum


class EnumJobStatus(str, Enum):
    """Status of a server-side download job.

    Lifecycle Flow:
        QUEUED → PROCESSING → (COMPLETED | FAILED)

    COMPLETED and FAILED are terminal: no transition leaves them.

    Attributes:
        QUEUED: Accepted by the backend, not yet picked up.
        PROCESSING: Being worked on; ``progress`` may be reported.
        COMPLETED: Finished successfully; a result is attached.
        FAILED: Finished unsuccessfully; an error message is attached.
    """

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for COMPLETED and FAILED."""
        return self in (EnumJobStatus.COMPLETED, EnumJobStatus.FAILED)

    @property
    def rank(self) -> int:
        """Position along the lifecycle; both terminal states share a rank."""
        return _RANKS[self]


_RANKS: dict[EnumJobStatus, int] = {
    EnumJobStatus.QUEUED: 0,
    EnumJobStatus.PROCESSING: 1,
    EnumJobStatus.COMPLETED: 2,
    EnumJobStatus.FAILED: 2,
}


__all__ = ["EnumJobStatus"]
