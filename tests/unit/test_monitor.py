"""Unit tests for the DownloadMonitor composition root.

Runs the whole stack (poller, pipeline, tracer, reporter) against the fake
backend to check that one trace id ties requests, spans and error events
together.
"""

import pytest

from downloadmonitor.enums import EnumJobStatus, EnumSpanStatus
from downloadmonitor.models import ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor, build_telemetry_sink
from downloadmonitor.reporting import (
    FanOutTelemetrySink,
    HttpTelemetrySink,
    InMemoryTelemetrySink,
)
from tests.fixtures.fake_backend import (
    FakeBackend,
    RecordingSleep,
    completed_payload,
    start_payload,
    status_path,
    status_payload,
)


@pytest.mark.unit
class TestEndToEnd:
    async def test_job_completes_under_one_trace(
        self,
        monitor: DownloadMonitor,
        backend: FakeBackend,
        recording_sleep: RecordingSleep,
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        backend.on(
            "GET",
            status_path(),
            (200, status_payload("processing", progress=42)),
            (200, completed_payload()),
        )

        job = await monitor.poller.start(70000)
        final = await monitor.poller.wait(job.job_id)

        assert final.status is EnumJobStatus.COMPLETED
        assert final.processing_time_ms == 12000
        assert recording_sleep.delays == [2.0, 2.0]

        trace_id = monitor.trace_context.current_trace_id()
        assert {request.headers["x-trace-id"] for request in backend.requests} == {trace_id}
        spans = monitor.span_exporter.spans_for_trace(trace_id)
        assert [span.name for span in spans] == [
            "api.startDownload",
            "api.getDownloadStatus",
            "api.getDownloadStatus",
        ]
        assert len(monitor.error_log) == 0

    async def test_poll_failure_is_reported_and_retried(
        self,
        monitor: DownloadMonitor,
        backend: FakeBackend,
        recording_sleep: RecordingSleep,
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        backend.on(
            "GET",
            status_path(),
            (503, {"error": "Service unavailable"}),
            (200, completed_payload()),
        )

        job = await monitor.poller.start(70000)
        final = await monitor.poller.wait(job.job_id)

        assert final.status is EnumJobStatus.COMPLETED
        assert recording_sleep.delays == [2.0, 5.0]

        (event,) = monitor.error_log.events()
        failed_request = backend.requests_to(status_path())[0]
        assert event.tags["api_status"] == "503"
        assert event.tags["api_endpoint"] == status_path()
        assert event.tags["trace_id"] == failed_request.headers["x-trace-id"]
        assert event.environment == "test"

        statuses = [span.status for span in monitor.span_exporter.spans()]
        assert statuses.count(EnumSpanStatus.ERROR) == 1

    async def test_close_stops_polling_and_disconnects(
        self, monitor: DownloadMonitor, backend: FakeBackend
    ) -> None:
        backend.on("POST", "/v1/download/start", (200, start_payload()))
        backend.on("GET", status_path(), (200, status_payload("processing", progress=1)))

        async with monitor:
            job = await monitor.poller.start(70000)

        assert monitor.poller.active_job_ids == frozenset()
        assert not monitor.client.is_connected
        assert monitor.poller.snapshot(job.job_id) is not None


@pytest.mark.unit
class TestBuildTelemetrySink:
    def test_no_sink_url_keeps_errors_local(self) -> None:
        error_log = InMemoryTelemetrySink()
        settings = ModelDownloadMonitorSettings(environment="production", error_sink_url=None)

        assert build_telemetry_sink(settings, error_log) is error_log

    def test_development_does_not_forward(self) -> None:
        error_log = InMemoryTelemetrySink()
        settings = ModelDownloadMonitorSettings(
            environment="development", error_sink_url="http://telemetry.test/errors"
        )

        assert build_telemetry_sink(settings, error_log) is error_log

    def test_production_forwards_and_keeps_local_log(self) -> None:
        error_log = InMemoryTelemetrySink()
        settings = ModelDownloadMonitorSettings(
            environment="production", error_sink_url="http://telemetry.test/errors"
        )

        sink = build_telemetry_sink(settings, error_log)

        assert isinstance(sink, FanOutTelemetrySink)
        local, remote = sink.sinks
        assert local is error_log
        assert isinstance(remote, HttpTelemetrySink)
        assert remote.url == "http://telemetry.test/errors"
