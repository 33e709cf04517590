# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Trace context manager and traceparent codec.

One ``TraceContextManager`` is created by the composition root at process
start and handed to the HTTP client, the traced operation runner and the
error reporter. It is the only writer of the trace id:

- the trace id is generated lazily, the first time it is needed, and then
  held for the lifetime of the manager;
- every outbound call gets a fresh span id.

Wire format (W3C trace context, version 00)::

    traceparent: 00-<32 hex trace id>-<16 hex span id>-<2 hex flags>
    x-trace-id:  <32 hex trace id>
"""

from __future__ import annotations

import logging
import re
import secrets
from collections.abc import Callable

from pydantic import ValidationError

from downloadmonitor.constants import (
    SPAN_ID_BYTES,
    TRACE_FLAGS_NOT_SAMPLED,
    TRACE_FLAGS_SAMPLED,
    TRACE_ID_BYTES,
    TRACE_ID_HEADER,
    TRACEPARENT_HEADER,
    TRACEPARENT_VERSION,
)
from downloadmonitor.models import ModelTraceContext

logger = logging.getLogger(__name__)

_TRACEPARENT_PATTERN = re.compile(
    r"^(?P<version>[0-9a-f]{2})-(?P<trace_id>[0-9a-f]{32})-"
    r"(?P<span_id>[0-9a-f]{16})-(?P<flags>[0-9a-f]{2})$"
)


class TraceparentFormatError(ValueError):
    """Raised when a traceparent header value cannot be parsed."""


def format_traceparent(context: ModelTraceContext) -> str:
    """Encode a trace context as a ``traceparent`` header value."""
    return (
        f"{TRACEPARENT_VERSION}-{context.trace_id}-"
        f"{context.span_id}-{context.trace_flags}"
    )


def parse_traceparent(value: str) -> ModelTraceContext:
    """Decode a ``traceparent`` header value.

    Only version ``00`` with flags ``00`` or ``01`` is accepted.

    Raises:
        TraceparentFormatError: If the value is malformed or carries an
            all-zero trace or span id.
    """
    match = _TRACEPARENT_PATTERN.match(value.strip())
    if match is None:
        raise TraceparentFormatError(f"malformed traceparent: {value!r}")
    if match["version"] != TRACEPARENT_VERSION:
        raise TraceparentFormatError(f"unsupported version: {match['version']}")
    if match["flags"] not in (TRACE_FLAGS_SAMPLED, TRACE_FLAGS_NOT_SAMPLED):
        raise TraceparentFormatError(f"unsupported trace flags: {match['flags']}")
    try:
        return ModelTraceContext(
            trace_id=match["trace_id"],
            span_id=match["span_id"],
            sampled=match["flags"] == TRACE_FLAGS_SAMPLED,
        )
    except ValidationError as exc:
        raise TraceparentFormatError(str(exc)) from exc


class TraceContextManager:
    """Owner of the process trace id.

    Example:
        >>> manager = TraceContextManager()
        >>> manager.current_trace_id() is None
        True
        >>> headers = manager.headers_for_outbound_call()
        >>> headers["x-trace-id"] == manager.current_trace_id()
        True
    """

    def __init__(
        self,
        *,
        sampled: bool = True,
        token_hex: Callable[[int], str] = secrets.token_hex,
    ) -> None:
        """
        Args:
            sampled: Sampling decision advertised in every traceparent.
            token_hex: Random hex source; ``secrets.token_hex`` unless a test
                needs deterministic ids.
        """
        self._trace_id: str | None = None
        self._sampled = sampled
        self._token_hex = token_hex

    @property
    def sampled(self) -> bool:
        return self._sampled

    def current_trace_id(self) -> str | None:
        """Return the trace id, or None if no call has needed one yet."""
        return self._trace_id

    def ensure_trace_id(self) -> str:
        """Return the trace id, generating it on first use."""
        if self._trace_id is None:
            self._trace_id = self._generate(TRACE_ID_BYTES)
            logger.info("Trace context initialized | trace_id=%s", self._trace_id)
        return self._trace_id

    def new_span_id(self) -> str:
        """Generate a fresh 64-bit span id."""
        return self._generate(SPAN_ID_BYTES)

    def new_context(self) -> ModelTraceContext:
        """Context for a new call: the stable trace id plus a fresh span id."""
        return ModelTraceContext(
            trace_id=self.ensure_trace_id(),
            span_id=self.new_span_id(),
            sampled=self._sampled,
        )

    def headers_for_outbound_call(self) -> dict[str, str]:
        """Propagation headers for one outbound HTTP call."""
        context = self.new_context()
        return {
            TRACEPARENT_HEADER: format_traceparent(context),
            TRACE_ID_HEADER: context.trace_id,
        }

    def _generate(self, num_bytes: int) -> str:
        # All-zero ids are invalid in W3C trace context.
        while True:
            value = self._token_hex(num_bytes).lower()
            if set(value) != {"0"}:
                return value


__all__ = [
    "TraceContextManager",
    "TraceparentFormatError",
    "format_traceparent",
    "parse_traceparent",
]
