# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""FastAPI router for the monitoring dashboard.

Thin shell over ``DownloadMonitor``: job snapshots come from the poller's
store, the trace view from the span exporter, the error log from the
in-memory telemetry sink.
"""

# NOTE: Do NOT use `from __future__ import annotations` in this module.
# FastAPI resolves Depends()/Query() from runtime annotations.

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, status

from downloadmonitor.api.models_dashboard import (
    ModelCancelResult,
    ModelDownloadList,
    ModelErrorLog,
    ModelStartDownloadBody,
    ModelTraceView,
)
from downloadmonitor.errors import DownloadMonitorError, FileIdValidationError
from downloadmonitor.models import ModelDownloadJob, ModelHealthCheckResponse
from downloadmonitor.monitor import DownloadMonitor


def create_dashboard_router(*, get_monitor: Any) -> APIRouter:
    """Create the dashboard router.

    Args:
        get_monitor: Dependency callable returning the ``DownloadMonitor``.
    """
    router = APIRouter(prefix="/api/v1", tags=["dashboard"])

    @router.get("/backend/health", response_model=ModelHealthCheckResponse)
    async def get_backend_health(
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
    ) -> ModelHealthCheckResponse:
        """Proxy the download service health check."""
        try:
            return await monitor.client.check_health()
        except DownloadMonitorError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message
            ) from exc

    @router.post(
        "/downloads",
        response_model=ModelDownloadJob,
        status_code=status.HTTP_202_ACCEPTED,
    )
    async def start_download(
        body: ModelStartDownloadBody,
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
    ) -> ModelDownloadJob:
        """Start a job; polling continues in the background."""
        try:
            return await monitor.poller.start(body.file_id)
        except FileIdValidationError as exc:
            raise HTTPException(
                status_code=422, detail=exc.message
            ) from exc
        except DownloadMonitorError as exc:
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=exc.message
            ) from exc

    @router.get("/downloads", response_model=ModelDownloadList)
    async def list_downloads(
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
    ) -> ModelDownloadList:
        store = monitor.poller.store
        return ModelDownloadList(
            active_job_ids=sorted(store.active_job_ids),
            jobs=list(store.snapshots().values()),
        )

    @router.get("/downloads/{job_id}", response_model=ModelDownloadJob)
    async def get_download(
        job_id: str,
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
    ) -> ModelDownloadJob:
        job = monitor.poller.snapshot(job_id)
        if job is None:
            raise HTTPException(status_code=404, detail=f"Unknown job {job_id}")
        return job

    @router.delete("/downloads/{job_id}", response_model=ModelCancelResult)
    async def cancel_download(
        job_id: str,
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
    ) -> ModelCancelResult:
        """Stop polling a job. The backend job itself is not affected."""
        if monitor.poller.snapshot(job_id) is None:
            raise HTTPException(status_code=404, detail=f"Unknown job {job_id}")
        return ModelCancelResult(job_id=job_id, cancelled=monitor.poller.cancel(job_id))

    @router.get("/trace", response_model=ModelTraceView)
    async def get_trace(
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
        limit: Annotated[int, Query(ge=1, le=500)] = 50,
    ) -> ModelTraceView:
        spans = monitor.span_exporter.spans()
        return ModelTraceView(
            trace_id=monitor.trace_context.current_trace_id(),
            spans=spans[-limit:],
        )

    @router.get("/errors", response_model=ModelErrorLog)
    async def get_errors(
        monitor: Annotated[DownloadMonitor, Depends(get_monitor)],
        limit: Annotated[int, Query(ge=1, le=200)] = 50,
    ) -> ModelErrorLog:
        events = monitor.error_log.events()
        return ModelErrorLog(events=list(reversed(events))[:limit], total=len(events))

    return router


__all__ = ["create_dashboard_router"]
