"""One logical request: cache check, round trips, redirects, emission."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from ..utils.logging import REQUEST_LOGGER, get_logger
from .cache import ResponseCache
from .errors import FetchError
from .message import DEFAULT_USER_AGENT, prepare_post_body, request_spec
from .metrics import MetricsRecorder
from .output import OutputSink, sink_for
from .response import RawResponse, parse_response
from .transport import Transport
from .url import parse_url, resolve_location

LOGGER = get_logger(__name__)
DEFAULT_MAX_REDIRECTS = 5
SUPPORTED_METHODS = ("GET", "POST")


@dataclass(slots=True)
class FetchOptions:
    headers_only: bool = False
    use_cache: bool = False
    output_path: Path | None = None
    data: str | None = None
    extra_headers: Mapping[str, str] | None = None


@dataclass(slots=True)
class RequestOutcome:
    method: str
    url: str
    final_url: str
    headers: str = ""
    body: bytes | None = None
    status_code: int | None = None
    redirect_count: int = 0
    elapsed_seconds: float = 0.0
    served_from_cache: bool = False
    redirect_limit_reached: bool = False
    error: FetchError | None = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.error is None


class RequestExecutor:
    """Runs logical requests against an injected transport and cache.

    The executor holds no per-request state, so one instance can serve many
    threads at once.
    """

    def __init__(
        self,
        transport: Transport,
        cache: ResponseCache | None = None,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        metrics: MetricsRecorder | None = None,
        request_log: logging.Logger | None = None,
        sink: OutputSink | None = None,
    ) -> None:
        self._transport = transport
        self._cache = cache
        self._user_agent = user_agent
        self._max_redirects = max_redirects
        self._metrics = metrics
        self._request_log = request_log or get_logger(REQUEST_LOGGER)
        self._sink = sink

    def execute(self, method: str, url: str, options: FetchOptions | None = None) -> RequestOutcome:
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported method {method!r}; expected one of {SUPPORTED_METHODS}")
        options = options or FetchOptions()
        outcome = RequestOutcome(method=method, url=url, final_url=url)
        start = time.monotonic()

        if self._metrics is not None:
            self._metrics.sample_system()

        try:
            cached = self._cached(url, options)
            if cached is not None:
                LOGGER.info(
                    "Using cached response for %s",
                    url,
                    extra={"event": "fetch.cache_hit", "method": method, "url": url},
                )
                response = parse_response(cached)
                outcome.served_from_cache = True
            else:
                response = self._fetch(method, url, options, outcome)
                if options.use_cache and self._cache is not None:
                    self._cache.put(url, response.raw)
                    if outcome.final_url != url:
                        self._cache.put(outcome.final_url, response.raw)
            self._emit(response, options)
        except FetchError as exc:
            outcome.error = exc
            outcome.elapsed_seconds = time.monotonic() - start
            LOGGER.error(
                "%s %s failed: %s",
                method,
                url,
                exc,
                extra={
                    "event": "fetch.failed",
                    "method": method,
                    "url": url,
                    "error_type": type(exc).__name__,
                },
            )
            return outcome

        outcome.headers = response.header_block
        outcome.body = None if options.headers_only else response.body
        outcome.status_code = None if outcome.served_from_cache else response.status_code
        outcome.elapsed_seconds = time.monotonic() - start
        if not outcome.served_from_cache and self._metrics is not None:
            self._metrics.record_timing(outcome.final_url, outcome.elapsed_seconds)
        return outcome

    def _cached(self, url: str, options: FetchOptions) -> bytes | None:
        if not options.use_cache or self._cache is None:
            return None
        cached = self._cache.get(url)
        if cached is None:
            LOGGER.info(
                "Fetching live response for %s",
                url,
                extra={"event": "fetch.cache_miss", "url": url},
            )
        return cached

    def _fetch(
        self, method: str, url: str, options: FetchOptions, outcome: RequestOutcome
    ) -> RawResponse:
        body: bytes | None = None
        content_type: str | None = None
        if method == "POST":
            body, content_type = prepare_post_body(options.data)

        current = url
        while True:
            response = self._round_trip(method, current, options, body, content_type)
            outcome.final_url = current
            if method != "GET" or not response.is_redirect or not response.location:
                return response
            if outcome.redirect_count >= self._max_redirects:
                outcome.redirect_limit_reached = True
                LOGGER.warning(
                    "Redirect limit of %d reached at %s",
                    self._max_redirects,
                    current,
                    extra={"event": "fetch.redirect_limit", "url": url, "hops": outcome.redirect_count},
                )
                return response
            current = resolve_location(current, response.location)
            outcome.redirect_count += 1
            LOGGER.info(
                "Redirecting to %s",
                current,
                extra={
                    "event": "fetch.redirect",
                    "url": url,
                    "status": response.status_code,
                    "hop": outcome.redirect_count,
                },
            )

    def _round_trip(
        self,
        method: str,
        url: str,
        options: FetchOptions,
        body: bytes | None,
        content_type: str | None,
    ) -> RawResponse:
        parsed = parse_url(url)
        spec = request_spec(
            method,
            parsed,
            options.extra_headers,
            body,
            user_agent=self._user_agent,
            content_type=content_type,
        )
        payload = spec.to_bytes()
        self._request_log.info("%s %s", method, url)
        if self._request_log.isEnabledFor(logging.DEBUG):
            head = payload.split(b"\r\n\r\n", 1)[0].decode("latin-1")
            self._request_log.debug("Request Headers:\n%s", head)
        raw = self._transport.round_trip(parsed.host, parsed.port, parsed.scheme, payload)
        return parse_response(raw)

    def _emit(self, response: RawResponse, options: FetchOptions) -> None:
        sink = self._sink or sink_for(options.output_path)
        if options.headers_only:
            sink.write(response.header_bytes)
        else:
            sink.write(response.raw)


__all__ = [
    "DEFAULT_MAX_REDIRECTS",
    "FetchOptions",
    "RequestExecutor",
    "RequestOutcome",
    "SUPPORTED_METHODS",
]
