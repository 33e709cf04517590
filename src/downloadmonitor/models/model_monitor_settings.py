# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Runtime settings for the download monitor.

Loaded from ``DOWNLOAD_MONITOR_*`` environment variables, e.g.::

    DOWNLOAD_MONITOR_API_BASE_URL=http://downloads.internal:3000
    DOWNLOAD_MONITOR_ENVIRONMENT=production
    DOWNLOAD_MONITOR_ERROR_SINK_URL=http://telemetry.internal/v1/errors
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from downloadmonitor.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_POLL_ERROR_BACKOFF_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
)

_DEVELOPMENT = "development"


class ModelDownloadMonitorSettings(BaseSettings):
    """Settings for the client, poller, tracer and error reporter.

    Attributes:
        api_base_url: Base URL of the download service.
        timeout_seconds: Per-request HTTP timeout.
        poll_interval_seconds: Delay before every status poll.
        poll_error_backoff_seconds: Delay after a failed status poll.
        environment: Environment tag attached to error events.
        error_reporting_debug: Forward error events even in development.
        error_sink_url: Optional HTTP endpoint receiving error events.
        span_buffer_size: Finished spans kept in memory.
        error_buffer_size: Error events kept in memory.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOWNLOAD_MONITOR_",
        frozen=True,
        extra="ignore",
    )

    api_base_url: str = Field(default="http://localhost:3000")
    timeout_seconds: float = Field(default=DEFAULT_HTTP_TIMEOUT_SECONDS, gt=0)
    poll_interval_seconds: float = Field(default=DEFAULT_POLL_INTERVAL_SECONDS, gt=0)
    poll_error_backoff_seconds: float = Field(
        default=DEFAULT_POLL_ERROR_BACKOFF_SECONDS, gt=0
    )
    environment: str = Field(default=_DEVELOPMENT)
    error_reporting_debug: bool = Field(default=False)
    error_sink_url: str | None = Field(default=None)
    span_buffer_size: int = Field(default=500, ge=1)
    error_buffer_size: int = Field(default=200, ge=1)

    @field_validator("api_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def forward_errors(self) -> bool:
        """Whether error events leave the process.

        Development builds keep errors local unless debug reporting is on.
        """
        return self.environment != _DEVELOPMENT or self.error_reporting_debug


__all__ = ["ModelDownloadMonitorSettings"]
