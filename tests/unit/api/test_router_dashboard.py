"""Unit tests for the dashboard router.

Tests the FastAPI endpoints using httpx.AsyncClient over ASGITransport,
with the monitor talking to the fake backend. Poll loops park on a
blocking sleep so started jobs stay active for the duration of a test.
"""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from downloadmonitor.api import create_app
from downloadmonitor.models import ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor
from tests.fixtures.fake_backend import (
    HEALTHY,
    BlockingSleep,
    FakeBackend,
    connect_error,
    start_payload,
)


@pytest.fixture
async def dashboard_monitor(
    settings: ModelDownloadMonitorSettings, backend: FakeBackend
) -> DownloadMonitor:
    active = DownloadMonitor(settings, transport=backend.transport, sleep=BlockingSleep())
    yield active
    await active.close()


@pytest.fixture
def app(dashboard_monitor: DownloadMonitor) -> FastAPI:
    return create_app(monitor=dashboard_monitor)


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Create an async HTTP client for the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.unit
class TestHealthEndpoints:
    async def test_liveness(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    async def test_backend_health_proxied(
        self, client: AsyncClient, backend: FakeBackend
    ) -> None:
        backend.on("GET", "/health", (200, HEALTHY))

        response = await client.get("/api/v1/backend/health")

        assert response.status_code == 200
        assert response.json() == HEALTHY

    async def test_backend_unreachable_is_502(
        self,
        client: AsyncClient,
        backend: FakeBackend,
        dashboard_monitor: DownloadMonitor,
    ) -> None:
        backend.on("GET", "/health", connect_error)

        response = await client.get("/api/v1/backend/health")

        assert response.status_code == 502
        assert len(dashboard_monitor.error_log) == 1


@pytest.mark.unit
class TestDownloadEndpoints:
    async def test_start_returns_queued_job(
        self, client: AsyncClient, backend: FakeBackend
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))

        response = await client.post("/api/v1/downloads", json={"file_id": 70000})

        assert response.status_code == 202
        body = response.json()
        assert body["jobId"] == "job-abc"
        assert body["status"] == "queued"
        assert body["file_id"] == 70000

    async def test_invalid_file_id_is_422_without_backend_call(
        self, client: AsyncClient, backend: FakeBackend
    ) -> None:
        response = await client.post("/api/v1/downloads", json={"file_id": 5})

        assert response.status_code == 422
        assert response.json()["detail"] == (
            "Please enter a valid file ID (10,000 - 100,000,000)"
        )
        assert backend.requests == []

    async def test_backend_error_is_502(
        self, client: AsyncClient, backend: FakeBackend
    ) -> None:
        backend.on("POST", "/v1/download/start", (500, {"error": "boom"}))

        response = await client.post("/api/v1/downloads", json={"file_id": 70000})

        assert response.status_code == 502

    async def test_list_and_get(self, client: AsyncClient, backend: FakeBackend) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        await client.post("/api/v1/downloads", json={"file_id": 70000})

        listing = await client.get("/api/v1/downloads")
        single = await client.get("/api/v1/downloads/job-abc")

        assert listing.status_code == 200
        assert listing.json()["active_job_ids"] == ["job-abc"]
        assert [job["jobId"] for job in listing.json()["jobs"]] == ["job-abc"]
        assert single.status_code == 200
        assert single.json()["status"] == "queued"

    async def test_get_unknown_is_404(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/downloads/job-missing")

        assert response.status_code == 404

    async def test_cancel(
        self,
        client: AsyncClient,
        backend: FakeBackend,
        dashboard_monitor: DownloadMonitor,
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        await client.post("/api/v1/downloads", json={"file_id": 70000})

        response = await client.delete("/api/v1/downloads/job-abc")

        assert response.status_code == 200
        assert response.json() == {"job_id": "job-abc", "cancelled": True}
        await dashboard_monitor.poller.wait("job-abc")
        listing = await client.get("/api/v1/downloads")
        assert listing.json()["active_job_ids"] == []

    async def test_cancel_unknown_is_404(self, client: AsyncClient) -> None:
        response = await client.delete("/api/v1/downloads/job-missing")

        assert response.status_code == 404


@pytest.mark.unit
class TestObservabilityEndpoints:
    async def test_trace_view(
        self,
        client: AsyncClient,
        backend: FakeBackend,
        dashboard_monitor: DownloadMonitor,
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        await client.post("/api/v1/downloads", json={"file_id": 70000})

        response = await client.get("/api/v1/trace")

        body = response.json()
        assert body["trace_id"] == dashboard_monitor.trace_context.current_trace_id()
        assert [span["name"] for span in body["spans"]] == ["api.startDownload"]
        assert body["spans"][0]["status"] == "OK"

    async def test_trace_view_before_any_call(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/trace")

        assert response.json() == {"trace_id": None, "spans": []}

    async def test_error_log_newest_first(
        self, client: AsyncClient, backend: FakeBackend
    ) -> None:
        backend.on("GET", "/health", (500, {"error": "first"}), (503, {"error": "second"}))
        await client.get("/api/v1/backend/health")
        await client.get("/api/v1/backend/health")

        response = await client.get("/api/v1/errors", params={"limit": 1})

        body = response.json()
        assert body["total"] == 2
        assert len(body["events"]) == 1
        assert body["events"][0]["tags"]["api_status"] == "503"

    async def test_limit_is_validated(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/errors", params={"limit": 0})

        assert response.status_code == 422


@pytest.mark.unit
class TestLifespan:
    async def test_monitor_closed_when_server_stops_on_error(
        self,
        app: FastAPI,
        backend: FakeBackend,
        dashboard_monitor: DownloadMonitor,
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))

        with pytest.raises(RuntimeError):
            async with app.router.lifespan_context(app):
                assert dashboard_monitor.client.is_connected
                await dashboard_monitor.poller.start(70000)
                raise RuntimeError("server crashed")

        assert not dashboard_monitor.client.is_connected
        assert dashboard_monitor.poller.active_job_ids == frozenset()
