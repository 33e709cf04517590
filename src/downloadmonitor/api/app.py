# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""FastAPI application factory for the download monitor dashboard.

Usage:
    >>> app = create_app()
    >>> # uvicorn downloadmonitor.api.app:create_app --factory
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from downloadmonitor.api.router_dashboard import create_dashboard_router
from downloadmonitor.models import ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor

logger = logging.getLogger(__name__)


def create_app(
    settings: ModelDownloadMonitorSettings | None = None,
    *,
    monitor: DownloadMonitor | None = None,
) -> FastAPI:
    """Create the dashboard application.

    Args:
        settings: Used to build a monitor when ``monitor`` is not given.
        monitor: Pre-built monitor (tests inject one with a mock transport).
    """
    active_monitor = monitor or DownloadMonitor(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:  # noqa: ARG001
        await active_monitor.open()
        logger.info(
            "Dashboard started | backend=%s", active_monitor.settings.api_base_url
        )
        try:
            yield
        finally:
            await active_monitor.close()
            logger.info("Dashboard stopped")

    async def get_monitor() -> DownloadMonitor:
        return active_monitor

    app = FastAPI(
        title="Download Monitor",
        description="Trace-correlated job tracking for the file download service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(create_dashboard_router(get_monitor=get_monitor))

    @app.get("/health", tags=["infrastructure"])
    async def health_check() -> dict[str, str]:
        """Liveness probe for this service (not the backend)."""
        return {"status": "ok"}

    return app


__all__ = ["create_app"]
