"""Command-line interface for raw-socket HTTP fetches."""

from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Sequence

from ..core.cache import FileCache
from ..core.dispatcher import Dispatcher
from ..core.errors import InvalidURL
from ..core.executor import SUPPORTED_METHODS, FetchOptions, RequestExecutor, RequestOutcome
from ..core.metrics import MetricsRecorder
from ..core.transport import SocketTransport
from ..core.url import parse_url
from ..settings import AppConfig, load_config
from ..utils.file_helper import read_lines
from ..utils.logging import (
    REQUEST_LOGGER,
    configure_activity_logs,
    configure_logging,
    get_logger,
)

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_intermixed_args(argv)

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        configure_logging(structured=args.log_json or None)
        LOGGER.error("Could not load configuration: %s", exc, extra={"event": "cli.error"})
        return 1

    debug = args.debug or config.logging.debug
    level = logging.DEBUG if debug else logging.INFO
    configure_logging(level=level, structured=args.log_json or config.logging.structured)
    configure_activity_logs(
        request_log=config.paths.request_log,
        metrics_log=config.paths.metrics_log,
        max_bytes=config.logging.max_log_size,
        level=level,
    )

    raw_argv = list(sys.argv[1:] if argv is None else argv)
    get_logger(REQUEST_LOGGER).info("Command run: %s", shlex.join(raw_argv))

    method = args.method.upper()
    try:
        urls = _collect_urls(args.urls, args.url_file)
    except OSError as exc:
        LOGGER.error(
            "Could not read URL file %s: %s",
            args.url_file,
            exc,
            extra={"event": "cli.error", "url_file": str(args.url_file)},
        )
        return 1

    problem = _validate(method, urls)
    if problem:
        LOGGER.error(problem, extra={"event": "cli.error", "method": method})
        return 1

    options = FetchOptions(
        headers_only=args.headers_only,
        use_cache=args.use_cache,
        output_path=args.output,
        data=args.data,
    )
    dispatcher = build_dispatcher(config, timeout=args.timeout)

    LOGGER.debug(
        "Dispatching requests",
        extra={"event": "cli.command", "method": method, "urls": urls, "repeat": args.count},
    )
    outcomes = dispatcher.dispatch(method, urls, options, repeat=args.count)
    _report(outcomes)
    return 0


def build_dispatcher(config: AppConfig, *, timeout: float | None = None) -> Dispatcher:
    transport = SocketTransport(
        timeout=timeout if timeout is not None else config.http.timeout,
        verify_tls=config.http.verify_tls,
    )
    executor = RequestExecutor(
        transport,
        FileCache(config.paths.cache_dir),
        user_agent=config.http.user_agent,
        max_redirects=config.http.max_redirects,
        metrics=MetricsRecorder(low_memory_mb=config.metrics.low_memory_mb),
    )
    return Dispatcher(executor, max_workers=config.dispatch.max_workers)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="simplefetch",
        description="Issue HTTP/HTTPS requests over raw sockets",
    )
    parser.add_argument("method", type=str.upper, choices=SUPPORTED_METHODS, help="GET or POST")
    parser.add_argument("urls", nargs="*", metavar="URL", help="Target URL(s)")
    parser.add_argument(
        "-I",
        dest="headers_only",
        action="store_true",
        help="Print response headers only",
    )
    parser.add_argument("-o", dest="output", type=Path, help="Write the response to a file")
    parser.add_argument(
        "-c",
        dest="use_cache",
        action="store_true",
        help="Read and write the response cache",
    )
    parser.add_argument(
        "-n",
        dest="count",
        type=_positive_int,
        default=1,
        help="Repeat the whole batch this many times",
    )
    parser.add_argument("-u", dest="url_file", type=Path, help="File with one URL per line")
    parser.add_argument(
        "-d",
        dest="data",
        help="POST body: key=value pairs, JSON text, or a path to a JSON file",
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument("--log-json", action="store_true", help="Emit JSON logs on stderr")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Socket timeout in seconds (default: wait indefinitely)",
    )
    return parser


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _collect_urls(positional: Sequence[str], url_file: Path | None) -> list[str]:
    urls = list(positional)
    if url_file is not None:
        urls.extend(read_lines(url_file))
    return urls


def _validate(method: str, urls: Sequence[str]) -> str | None:
    if not urls:
        return "No URLs provided. Please specify URLs with -u or as positional arguments."
    if method == "POST" and len(urls) != 1:
        return f"POST takes exactly one URL, got {len(urls)}."
    for url in urls:
        try:
            parse_url(url)
        except InvalidURL as exc:
            return str(exc)
    return None


def _report(outcomes: Sequence[RequestOutcome]) -> None:
    for outcome in outcomes:
        if outcome.succeeded:
            LOGGER.debug(
                "Request completed",
                extra={
                    "event": "fetch.done",
                    "url": outcome.url,
                    "final_url": outcome.final_url,
                    "redirects": outcome.redirect_count,
                    "cached": outcome.served_from_cache,
                    "elapsed": round(outcome.elapsed_seconds, 6),
                },
            )
    failed = [outcome for outcome in outcomes if not outcome.succeeded]
    if failed:
        LOGGER.warning(
            "%d of %d request(s) failed",
            len(failed),
            len(outcomes),
            extra={"event": "cli.summary", "failed": [outcome.url for outcome in failed]},
        )


__all__ = ["build_dispatcher", "main"]
