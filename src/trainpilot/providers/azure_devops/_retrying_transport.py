"""httpx async transport wrapper with retry, backoff, and rate-limit handling."""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Iterable

import httpx

_LOG = logging.getLogger(__name__)

# Azure DevOps answers throttled or overloaded requests with these codes.
DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})


class RetryingTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx async transport with automatic retry on transient failures.

    - Exponential backoff with jitter, capped at *max_delay*, for up to *max_retries* retries
    - HTTP 429 pauses **every** request sharing this transport until ``Retry-After`` elapses
    - Other retryable statuses honour ``Retry-After`` for that request only
    - Transport-level errors (connection reset, timeout) are retried the same way
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 8.0,
        retryable_status_codes: Iterable[int] = DEFAULT_RETRYABLE_STATUS_CODES,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._retryable = frozenset(retryable_status_codes)

        self._throttle_lock = asyncio.Lock()
        self._throttle_clear = asyncio.Event()
        self._throttle_clear.set()
        self._throttled_until = 0.0

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            await self._throttle_clear.wait()

            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if attempt >= self._max_retries:
                    raise
                _LOG.warning("%s %s failed (%s); retrying", request.method, request.url, exc)
                await self._sleep_backoff(attempt)
                attempt += 1
                continue

            status = response.status_code
            if status not in self._retryable or attempt >= self._max_retries:
                return response

            retry_after = self._parse_retry_after(response)
            await response.aclose()
            _LOG.warning("%s %s returned %d; retrying", request.method, request.url, status)
            if status == 429:
                await self._throttle(retry_after)
            elif retry_after > 0:
                await asyncio.sleep(retry_after)
            await self._sleep_backoff(attempt)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    # ------------------------------------------------------------------
    # Throttling helpers
    # ------------------------------------------------------------------

    async def _throttle(self, retry_after: float) -> None:
        async with self._throttle_lock:
            until = time.monotonic() + max(0.0, retry_after)
            if until <= self._throttled_until:
                return
            self._throttled_until = until
            self._throttle_clear.clear()

        await asyncio.sleep(max(0.0, until - time.monotonic()))

        async with self._throttle_lock:
            # A later 429 may have pushed the deadline out; its sleeper reopens.
            if self._throttled_until == until:
                self._throttle_clear.set()

    @staticmethod
    def _parse_retry_after(response: httpx.Response) -> float:
        raw = response.headers.get("Retry-After")
        if raw is None:
            return 0.0
        try:
            return max(0.0, float(raw))
        except ValueError:
            return 0.0

    async def _sleep_backoff(self, attempt: int) -> None:
        seconds = min(self._max_delay, self._base_delay * 2**attempt) + random.uniform(0.0, 0.25)
        await asyncio.sleep(seconds)
