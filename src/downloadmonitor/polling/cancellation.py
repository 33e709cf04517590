# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Cooperative cancellation for poll loops.

A ``CancellationToken`` is owned by whoever started a job. The poll loop
races each suspension point (the inter-poll delay and the in-flight status
request) against the token and stops as soon as it is signalled.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class OperationCancelledError(Exception):
    """Raised by ``run_until_cancelled`` when the token wins the race."""


class CancellationToken:
    """One-shot cancellation signal."""

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Signal cancellation. Idempotent."""
        self._event.set()

    async def wait(self) -> None:
        await self._event.wait()


async def run_until_cancelled(awaitable: Awaitable[T], token: CancellationToken) -> T:
    """Await ``awaitable`` unless ``token`` is signalled first.

    If the token fires first the pending work is cancelled and awaited, so
    any spans it opened are finalized before this returns.

    Raises:
        OperationCancelledError: The token was signalled before completion.
    """
    if token.cancelled:
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise OperationCancelledError

    work = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(token.wait())
    try:
        done, _ = await asyncio.wait(
            {work, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        work.cancel()
        raise
    finally:
        waiter.cancel()

    if work in done:
        return work.result()

    work.cancel()
    await asyncio.gather(work, return_exceptions=True)
    raise OperationCancelledError


__all__ = ["CancellationToken", "OperationCancelledError", "run_until_cancelled"]
