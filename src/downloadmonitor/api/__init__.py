# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""Dashboard read API."""

from downloadmonitor.api.app import create_app

__all__ = ["create_app"]
