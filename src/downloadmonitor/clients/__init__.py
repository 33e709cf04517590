# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT
"""HTTP clients for the download service.

Only this package imports the HTTP transport; the poller and the dashboard
receive a client through dependency injection.
"""

from __future__ import annotations

from downloadmonitor.clients.client_download_service import DownloadServiceClient

__all__ = ["DownloadServiceClient"]
