# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Span exporters.

Spans are kept in process; exporting to an external tracing backend is
not part of this package.
"""

from __future__ import annotations

from collections import deque

from downloadmonitor.models import ModelSpan


class InMemorySpanExporter:
    """Bounded buffer of the most recently finished spans.

    Oldest spans are dropped first once ``max_spans`` is reached. Backs the
    trace view of the dashboard API and span assertions in tests.
    """

    def __init__(self, max_spans: int = 500) -> None:
        if max_spans < 1:
            raise ValueError("max_spans must be >= 1")
        self._spans: deque[ModelSpan] = deque(maxlen=max_spans)

    def export(self, span: ModelSpan) -> None:
        self._spans.append(span)

    def spans(self) -> list[ModelSpan]:
        """Finished spans, oldest first."""
        return list(self._spans)

    def spans_for_trace(self, trace_id: str) -> list[ModelSpan]:
        return [span for span in self._spans if span.trace_id == trace_id]

    def clear(self) -> None:
        self._spans.clear()

    def __len__(self) -> int:
        return len(self._spans)


__all__ = ["InMemorySpanExporter"]
