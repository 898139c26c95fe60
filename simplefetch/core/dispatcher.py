"""Concurrent fan-out of logical requests with a single completion barrier."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Sequence

from ..utils.logging import get_logger
from .errors import FetchError
from .executor import FetchOptions, RequestExecutor, RequestOutcome

LOGGER = get_logger(__name__)


class Dispatcher:
    """Launch one executor run per (repetition, URL) pair and wait for all of them."""

    def __init__(self, executor: RequestExecutor, *, max_workers: int | None = None) -> None:
        self._executor = executor
        self._max_workers = max_workers

    def dispatch(
        self,
        method: str,
        urls: Sequence[str],
        options: FetchOptions | None = None,
        *,
        repeat: int = 1,
    ) -> list[RequestOutcome]:
        if repeat < 1:
            raise ValueError(f"repeat must be at least 1, got {repeat}")
        jobs = [url for _ in range(repeat) for url in urls]
        if not jobs:
            return []
        options = options or FetchOptions()
        workers = min(self._max_workers or len(jobs), len(jobs))

        LOGGER.debug(
            "Dispatching %d request(s) on %d worker(s)",
            len(jobs),
            workers,
            extra={"event": "dispatch.start", "method": method, "units": len(jobs)},
        )
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="simplefetch") as pool:
            futures = [pool.submit(self._executor.execute, method, url, options) for url in jobs]
            wait(futures)

        outcomes = [self._collect(method, url, future) for url, future in zip(jobs, futures)]
        failed = sum(1 for outcome in outcomes if not outcome.succeeded)
        LOGGER.debug(
            "Dispatch finished",
            extra={"event": "dispatch.done", "units": len(outcomes), "failed": failed},
        )
        return outcomes

    def _collect(self, method: str, url: str, future: Future[RequestOutcome]) -> RequestOutcome:
        exc = future.exception()
        if exc is None:
            return future.result()
        LOGGER.error(
            "Unexpected failure for %s %s",
            method,
            url,
            exc_info=exc,
            extra={"event": "dispatch.unit_failed", "url": url},
        )
        error = exc if isinstance(exc, FetchError) else FetchError(url, f"{type(exc).__name__}: {exc}")
        return RequestOutcome(method=method.upper(), url=url, final_url=url, error=error)


__all__ = ["Dispatcher"]
