# SPDX-FileCopyrightText: 2025 OmniNode.ai Inc.
# SPDX-License-Identifier: MIT

"""download-monitor: command line access to the download service.

Usage:
    download-monitor health
    download-monitor start 70000 80000 90000
    download-monitor check 70000 [--error-probe]
    download-monitor serve --port 8080

Exit codes:
    0  Success (healthy backend / all jobs completed / file available)
    1  Failure (unhealthy backend / a job failed / backend error)
    2  Usage error (invalid file id)

Settings come from DOWNLOAD_MONITOR_* environment variables; --base-url
overrides DOWNLOAD_MONITOR_API_BASE_URL.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from downloadmonitor.enums import EnumJobStatus
from downloadmonitor.errors import DownloadMonitorError, FileIdValidationError
from downloadmonitor.models import ModelDownloadJob, ModelDownloadMonitorSettings
from downloadmonitor.monitor import DownloadMonitor
from downloadmonitor.validation import validate_file_id

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _emit(payload: dict[str, Any], *, as_json: bool, text: str) -> None:
    if as_json:
        print(json.dumps(payload, default=str))
    else:
        print(text)


def _describe(job: ModelDownloadJob) -> str:
    parts = [f"job={job.job_id}", f"file_id={job.file_id}", f"status={job.status.value}"]
    if job.progress is not None:
        parts.append(f"progress={job.progress:g}%")
    if job.processing_time_ms is not None:
        parts.append(f"processing_time={job.processing_time_ms / 1000:.1f}s")
    if job.result is not None and job.result.download_url:
        parts.append(f"url={job.result.download_url}")
    if job.error is not None:
        parts.append(f"error={job.error!r}")
    return " ".join(parts)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def _cmd_health(monitor: DownloadMonitor, args: argparse.Namespace) -> int:
    try:
        health = await monitor.client.check_health()
    except DownloadMonitorError as exc:
        _emit(
            {"status": "unreachable", "error": exc.message},
            as_json=args.json,
            text=f"Connection error: {exc.message}",
        )
        return EXIT_FAILURE
    _emit(
        health.model_dump(),
        as_json=args.json,
        text=f"status={health.status} storage={health.checks.storage}",
    )
    return EXIT_OK if health.is_healthy else EXIT_FAILURE


async def _cmd_start(monitor: DownloadMonitor, args: argparse.Namespace) -> int:
    try:
        file_ids = [validate_file_id(value) for value in args.file_ids]
    except FileIdValidationError as exc:
        print(exc.message, file=sys.stderr)
        return EXIT_USAGE

    monitor.poller.subscribe(
        lambda job: _emit(
            job.model_dump(mode="json", by_alias=True),
            as_json=args.json,
            text=_describe(job),
        )
    )
    trace_id = monitor.trace_context.ensure_trace_id()
    if not args.json:
        print(f"trace_id={trace_id}")

    async def _run_one(file_id: int) -> ModelDownloadJob | None:
        try:
            job = await monitor.poller.start(file_id)
        except DownloadMonitorError as exc:
            print(f"file_id={file_id} start failed: {exc.message}", file=sys.stderr)
            return None
        return await monitor.poller.wait(job.job_id)

    results = await asyncio.gather(*(_run_one(file_id) for file_id in file_ids))
    all_completed = all(
        job is not None and job.status is EnumJobStatus.COMPLETED for job in results
    )
    return EXIT_OK if all_completed else EXIT_FAILURE


async def _cmd_check(monitor: DownloadMonitor, args: argparse.Namespace) -> int:
    if args.error_probe:
        probe = await monitor.client.trigger_error_probe(args.file_id)
        _emit(
            probe.model_dump(mode="json"),
            as_json=args.json,
            text=(
                f"error probe triggered: {probe.message}"
                if probe.success
                else "error probe did not raise"
            ),
        )
        return EXIT_OK if probe.success else EXIT_FAILURE

    try:
        check = await monitor.client.check_file(args.file_id)
    except DownloadMonitorError as exc:
        print(f"check failed: {exc.message}", file=sys.stderr)
        return EXIT_FAILURE
    _emit(
        check.model_dump(by_alias=True),
        as_json=args.json,
        text=f"file_id={check.file_id} available={check.available}",
    )
    return EXIT_OK if check.available else EXIT_FAILURE


_COMMANDS = {
    "health": _cmd_health,
    "start": _cmd_start,
    "check": _cmd_check,
}


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="download-monitor",
        description="Trace-correlated client for the file download service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--base-url", default=None, help="Download service base URL")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Emit one JSON object per line",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("health", help="Show backend health")

    start = subparsers.add_parser("start", help="Start jobs and poll them to completion")
    start.add_argument("file_ids", nargs="+", help="File ids (10000-100000000)")

    check = subparsers.add_parser("check", help="Check file availability")
    check.add_argument("file_id", type=int)
    check.add_argument(
        "--error-probe",
        action="store_true",
        default=False,
        help="Ask the backend to raise its test error and report it",
    )

    serve = subparsers.add_parser("serve", help="Run the dashboard API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return parser.parse_args(argv)


def _load_settings(args: argparse.Namespace) -> ModelDownloadMonitorSettings:
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["api_base_url"] = args.base_url
    return ModelDownloadMonitorSettings(**overrides)


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from downloadmonitor.api import create_app

    uvicorn.run(
        create_app(_load_settings(args)),
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )
    return EXIT_OK


async def _run(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    async with DownloadMonitor(settings) as monitor:
        return await _COMMANDS[args.command](monitor, args)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        0 on success, 1 on failure, 2 on usage error.
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command == "serve":
        return _serve(args)
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
