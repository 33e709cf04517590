# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""
Download Service HTTP Client - request pipeline

Async HTTP client for the file download service with:
- Trace propagation headers on every outbound call
- Classification of httpx failures into the download monitor error family
- Error reporting with endpoint/method/status tags and the active trace id
- One span per logical API call (health, start, status, check)
- Connection pooling via a persistent httpx.AsyncClient

Every request goes through ``_send``. A failure is classified once, the
resulting error is reported, and that same error is raised to the caller.
Successful responses are decoded into their contract model and returned
as is; the pipeline never turns an error into a result.

Endpoints:
    GET  /health
    POST /v1/download/start
    GET  /v1/download/status/{jobId}
    POST /v1/download/check[?sentry_test=true]
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, TypeVar

import httpx
from pydantic import BaseModel

from downloadmonitor.constants import (
    ENDPOINT_DOWNLOAD_CHECK,
    ENDPOINT_DOWNLOAD_START,
    ENDPOINT_DOWNLOAD_STATUS,
    ENDPOINT_HEALTH,
    ERROR_PROBE_QUERY_PARAM,
    SPAN_OPERATION_HTTP_CLIENT,
)
from downloadmonitor.errors import (
    DownloadMonitorError,
    PipelineHTTPError,
    ResponseDecodeError,
    TransportError,
)
from downloadmonitor.models import (
    ModelDownloadMonitorSettings,
    ModelErrorProbeResult,
    ModelFileCheckRequest,
    ModelFileCheckResponse,
    ModelHealthCheckResponse,
    ModelJobStatusResponse,
    ModelStartDownloadRequest,
    ModelStartDownloadResponse,
)
from downloadmonitor.reporting import ErrorReporter
from downloadmonitor.tracing import TraceContextManager, TracedOperationRunner
from downloadmonitor.validation import validate_file_id

if TYPE_CHECKING:
    from types import TracebackType

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class DownloadServiceClient:
    """
    Async HTTP client for the download service.

    Usage:
        async with DownloadServiceClient(settings, trace_context, tracer, reporter) as client:
            job = await client.start_download(70000)
            status = await client.get_download_status(job.job_id)
    """

    def __init__(
        self,
        settings: ModelDownloadMonitorSettings,
        trace_context: TraceContextManager,
        tracer: TracedOperationRunner,
        error_reporter: ErrorReporter,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            settings: Base URL and timeout.
            trace_context: Source of propagation headers.
            tracer: Span runner wrapping each logical API call.
            error_reporter: Receives every pipeline failure.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._settings = settings
        self._trace_context = trace_context
        self._tracer = tracer
        self._error_reporter = error_reporter
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        self.metrics: dict[str, float] = {
            "total_requests": 0,
            "successful_requests": 0,
            "failed_requests": 0,
            "total_duration_ms": 0.0,
        }

    @property
    def base_url(self) -> str:
        return self._settings.api_base_url

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def connect(self) -> None:
        """Open the connection pool. Safe to call multiple times."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self._settings.timeout_seconds),
            headers={"Content-Type": "application/json"},
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=5),
            transport=self._transport,
        )
        logger.info("DownloadServiceClient connected | base_url=%s", self.base_url)

    async def close(self) -> None:
        """Close the connection pool. Safe to call multiple times."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("DownloadServiceClient closed")

    async def __aenter__(self) -> DownloadServiceClient:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # ========================================================================
    # API Operations
    # ========================================================================

    async def check_health(self) -> ModelHealthCheckResponse:
        """GET /health."""
        return await self._tracer.run(
            "api.getHealth",
            SPAN_OPERATION_HTTP_CLIENT,
            lambda: self._send(
                "GET", ENDPOINT_HEALTH, response_model=ModelHealthCheckResponse
            ),
        )

    async def start_download(self, file_id: int) -> ModelStartDownloadResponse:
        """POST /v1/download/start.

        Raises:
            FileIdValidationError: Before any network call, for an invalid id.
            TransportError: No response from the backend.
            PipelineHTTPError: Non-2xx response or undecodable body.
        """
        file_id = validate_file_id(file_id)
        body = ModelStartDownloadRequest(file_id=file_id).model_dump()
        return await self._tracer.run(
            "api.startDownload",
            SPAN_OPERATION_HTTP_CLIENT,
            lambda: self._send(
                "POST",
                ENDPOINT_DOWNLOAD_START,
                json=body,
                response_model=ModelStartDownloadResponse,
            ),
        )

    async def get_download_status(self, job_id: str) -> ModelJobStatusResponse:
        """GET /v1/download/status/{jobId}."""
        endpoint = ENDPOINT_DOWNLOAD_STATUS.format(job_id=job_id)
        return await self._tracer.run(
            "api.getDownloadStatus",
            SPAN_OPERATION_HTTP_CLIENT,
            lambda: self._send("GET", endpoint, response_model=ModelJobStatusResponse),
        )

    async def check_file(
        self, file_id: int, *, error_probe: bool = False
    ) -> ModelFileCheckResponse:
        """POST /v1/download/check.

        Args:
            file_id: File to look up.
            error_probe: Ask the backend to raise its deliberate test error.
        """
        body = ModelFileCheckRequest(file_id=file_id).model_dump()
        params = {ERROR_PROBE_QUERY_PARAM: "true"} if error_probe else None
        return await self._tracer.run(
            "api.checkFile",
            SPAN_OPERATION_HTTP_CLIENT,
            lambda: self._send(
                "POST",
                ENDPOINT_DOWNLOAD_CHECK,
                json=body,
                params=params,
                response_model=ModelFileCheckResponse,
            ),
        )

    async def trigger_error_probe(self, file_id: int) -> ModelErrorProbeResult:
        """Provoke the backend's test error and confirm it was reported.

        The error raised by the backend is expected here. The pipeline has
        already reported it by the time it reaches this method, so it is
        returned as a result instead of propagating.
        """
        body = ModelFileCheckRequest(file_id=file_id).model_dump()

        async def _probe() -> ModelErrorProbeResult:
            try:
                await self._send(
                    "POST",
                    ENDPOINT_DOWNLOAD_CHECK,
                    json=body,
                    params={ERROR_PROBE_QUERY_PARAM: "true"},
                    response_model=ModelFileCheckResponse,
                )
            except DownloadMonitorError as exc:
                logger.info("Error probe triggered as expected: %s", exc)
                return ModelErrorProbeResult(
                    success=True,
                    error_kind=exc.error_kind,
                    message=exc.message,
                    status_code=exc.status_code,
                )
            logger.warning("Error probe did not raise | file_id=%s", file_id)
            return ModelErrorProbeResult(
                success=False, message="Backend did not raise the probe error"
            )

        return await self._tracer.run(
            "api.triggerErrorProbe", SPAN_OPERATION_HTTP_CLIENT, _probe
        )

    # ========================================================================
    # Request Pipeline
    # ========================================================================

    async def _send(
        self,
        method: str,
        endpoint: str,
        *,
        response_model: type[ResponseT],
        json: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> ResponseT:
        """
        Execute one HTTP request through the pipeline.

        Trace headers are always injected and take precedence over any
        header of the same name.

        Raises:
            TransportError: Connect failure, timeout, or other transport error.
            PipelineHTTPError: Non-2xx response.
            ResponseDecodeError: 2xx body that is not JSON or breaks the contract.
        """
        if self._client is None:
            await self.connect()
        assert self._client is not None

        headers = self._trace_context.headers_for_outbound_call()
        self.metrics["total_requests"] += 1
        start_time = time.perf_counter()
        status_code: int | None = None
        response: httpx.Response | None = None

        try:
            response = await self._client.request(
                method, endpoint, json=json, params=params, headers=headers
            )
            status_code = response.status_code
            response.raise_for_status()
            result = response_model.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            cause: Exception = exc
            error: DownloadMonitorError = PipelineHTTPError(
                endpoint,
                method,
                exc.response.status_code,
                response_text=exc.response.text,
            )
        except httpx.TimeoutException as exc:
            cause = exc
            error = TransportError(
                f"{method} {endpoint} timed out after "
                f"{self._settings.timeout_seconds}s",
                endpoint,
                method,
                details={"timeout_seconds": self._settings.timeout_seconds},
            )
        except httpx.TransportError as exc:
            cause = exc
            error = TransportError(
                f"Network error on {method} {endpoint}: {exc}", endpoint, method
            )
        except httpx.RequestError as exc:
            # DecodingError, TooManyRedirects and friends
            cause = exc
            error = TransportError(
                f"Request failed on {method} {endpoint}: {exc}",
                endpoint,
                method,
                details={"error_type": type(exc).__name__},
            )
        except ValueError as exc:
            cause = exc
            error = ResponseDecodeError(
                endpoint,
                method,
                status_code or 0,
                reason=str(exc),
                response_text=response.text if response is not None else "",
            )
        else:
            duration_ms = (time.perf_counter() - start_time) * 1000
            self.metrics["successful_requests"] += 1
            self.metrics["total_duration_ms"] += duration_ms
            logger.debug(
                "Request completed | %s %s status=%s duration=%.2fms",
                method,
                endpoint,
                status_code,
                duration_ms,
            )
            return result

        self.metrics["failed_requests"] += 1
        await self._error_reporter.report(
            error,
            {
                "api_endpoint": endpoint,
                "api_method": method.lower(),
                "api_status": status_code,
            },
        )
        raise error from cause

    # ========================================================================
    # Metrics
    # ========================================================================

    def get_metrics(self) -> dict[str, float]:
        """Request counters plus derived success rate and mean latency."""
        total = self.metrics["total_requests"]
        successful = self.metrics["successful_requests"]
        return {
            **self.metrics,
            "success_rate": successful / total if total else 0.0,
            "avg_duration_ms": (
                self.metrics["total_duration_ms"] / successful if successful else 0.0
            ),
        }


__all__ = ["DownloadServiceClient"]
