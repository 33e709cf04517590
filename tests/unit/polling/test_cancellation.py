"""Unit tests for CancellationToken and run_until_cancelled."""

import asyncio

import pytest

from downloadmonitor.polling import (
    CancellationToken,
    OperationCancelledError,
    run_until_cancelled,
)


@pytest.mark.unit
class TestCancellationToken:
    async def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        assert not token.cancelled

        token.cancel()
        token.cancel()

        assert token.cancelled
        await asyncio.wait_for(token.wait(), timeout=1)


@pytest.mark.unit
class TestRunUntilCancelled:
    async def test_returns_result(self) -> None:
        async def work() -> str:
            return "ok"

        assert await run_until_cancelled(work(), CancellationToken()) == "ok"

    async def test_propagates_work_error(self) -> None:
        async def work() -> None:
            raise ValueError("bad")

        with pytest.raises(ValueError, match="bad"):
            await run_until_cancelled(work(), CancellationToken())

    async def test_already_cancelled_never_runs_work(self) -> None:
        ran = False

        async def work() -> None:
            nonlocal ran
            ran = True

        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            await run_until_cancelled(work(), token)

        assert ran is False

    async def test_cancel_interrupts_pending_work(self) -> None:
        started = asyncio.Event()
        interrupted = asyncio.Event()

        async def work() -> None:
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                interrupted.set()
                raise

        token = CancellationToken()
        runner = asyncio.create_task(run_until_cancelled(work(), token))
        await started.wait()

        token.cancel()

        with pytest.raises(OperationCancelledError):
            await runner
        assert interrupted.is_set()

    async def test_outer_cancellation_cancels_work(self) -> None:
        started = asyncio.Event()
        interrupted = asyncio.Event()

        async def work() -> None:
            started.set()
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                interrupted.set()
                raise

        runner = asyncio.create_task(run_until_cancelled(work(), CancellationToken()))
        await started.wait()

        runner.cancel()

        with pytest.raises(asyncio.CancelledError):
            await runner
        await asyncio.sleep(0)
        assert interrupted.is_set()
