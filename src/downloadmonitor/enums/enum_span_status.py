# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Span status codes recorded by the traced operation wrapper."""

from enum import Enum


class EnumSpanStatus(str, Enum):
    """Outcome recorded on a finished span."""

    OK = "OK"
    ERROR = "ERROR"


__all__ = ["EnumSpanStatus"]
