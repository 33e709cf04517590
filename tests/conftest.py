"""
Pytest configuration and fixtures for download monitor tests.

Shared fixtures wire the monitor components against the scripted fake
backend in ``tests.fixtures.fake_backend``. No test touches the network
or waits on a real timer.
"""

import pytest

from downloadmonitor.models import ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor
from downloadmonitor.reporting import ErrorReporter, InMemoryTelemetrySink
from downloadmonitor.tracing import (
    InMemorySpanExporter,
    TraceContextManager,
    TracedOperationRunner,
)
from tests.fixtures.fake_backend import BACKEND_URL, FakeBackend, RecordingSleep

# =========================================================================
# Backend and Settings
# =========================================================================


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def settings() -> ModelDownloadMonitorSettings:
    """Settings pointing at the fake backend with the production delays."""
    return ModelDownloadMonitorSettings(
        api_base_url=BACKEND_URL,
        timeout_seconds=30.0,
        poll_interval_seconds=2.0,
        poll_error_backoff_seconds=5.0,
        environment="test",
        error_sink_url=None,
    )


# =========================================================================
# Tracing and Reporting
# =========================================================================


@pytest.fixture
def trace_context() -> TraceContextManager:
    return TraceContextManager()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def error_log() -> InMemoryTelemetrySink:
    return InMemoryTelemetrySink()


@pytest.fixture
def tracer(
    trace_context: TraceContextManager, span_exporter: InMemorySpanExporter
) -> TracedOperationRunner:
    return TracedOperationRunner(trace_context, span_exporter)


@pytest.fixture
def error_reporter(
    error_log: InMemoryTelemetrySink, trace_context: TraceContextManager
) -> ErrorReporter:
    return ErrorReporter(error_log, trace_context, environment="test")


# =========================================================================
# Poller and Monitor
# =========================================================================


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
async def monitor(
    settings: ModelDownloadMonitorSettings,
    backend: FakeBackend,
    recording_sleep: RecordingSleep,
) -> DownloadMonitor:
    """Fully wired monitor talking to the fake backend."""
    active = DownloadMonitor(
        settings, transport=backend.transport, sleep=recording_sleep
    )
    yield active
    await active.close()
