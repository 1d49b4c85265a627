"""Tests for RetryingTransport - retry, backoff, and rate-limit handling."""

from __future__ import annotations

import time
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from trainpilot.providers.azure_devops._retrying_transport import RetryingTransport

_BACKOFF = "trainpilot.providers.azure_devops._retrying_transport.RetryingTransport._sleep_backoff"
_SLEEP = "trainpilot.providers.azure_devops._retrying_transport.asyncio.sleep"


def _make_response(status_code: int = 200, headers: dict[str, str] | None = None) -> httpx.Response:
    return httpx.Response(status_code=status_code, headers=headers or {})


def _make_request() -> httpx.Request:
    return httpx.Request("GET", "https://dev.azure.com/contoso/Platform/_apis/wit/workitems/1")


def _inner(*responses: object) -> AsyncMock:
    inner = AsyncMock(spec=httpx.AsyncBaseTransport)
    inner.handle_async_request.side_effect = list(responses)
    return inner


@pytest.mark.asyncio
async def test_returns_successful_response_without_retry() -> None:
    inner = _inner(_make_response(200))

    response = await RetryingTransport(transport=inner).handle_async_request(_make_request())

    assert response.status_code == 200
    assert inner.handle_async_request.call_count == 1


@pytest.mark.asyncio
@patch(_BACKOFF, new_callable=AsyncMock)
async def test_retries_transport_error_then_succeeds(mock_backoff: AsyncMock) -> None:
    inner = _inner(httpx.ConnectError("reset"), _make_response(200))

    response = await RetryingTransport(transport=inner, max_retries=2).handle_async_request(_make_request())

    assert response.status_code == 200
    mock_backoff.assert_awaited_once_with(0)


@pytest.mark.asyncio
@patch(_BACKOFF, new_callable=AsyncMock)
async def test_transport_error_is_raised_when_retries_exhausted(mock_backoff: AsyncMock) -> None:
    inner = _inner(httpx.ConnectError("a"), httpx.ConnectError("b"))

    with pytest.raises(httpx.ConnectError):
        await RetryingTransport(transport=inner, max_retries=1).handle_async_request(_make_request())

    assert inner.handle_async_request.call_count == 2


@pytest.mark.asyncio
@patch(_BACKOFF, new_callable=AsyncMock)
async def test_retryable_status_backs_off_exponentially(mock_backoff: AsyncMock) -> None:
    inner = _inner(_make_response(503), _make_response(502), _make_response(200))

    response = await RetryingTransport(transport=inner, max_retries=3).handle_async_request(_make_request())

    assert response.status_code == 200
    assert [call.args for call in mock_backoff.await_args_list] == [(0,), (1,)]


@pytest.mark.asyncio
@patch(_BACKOFF, new_callable=AsyncMock)
async def test_last_retryable_response_is_returned_when_exhausted(mock_backoff: AsyncMock) -> None:
    inner = _inner(_make_response(503), _make_response(503))

    response = await RetryingTransport(transport=inner, max_retries=1).handle_async_request(_make_request())

    assert response.status_code == 503
    assert inner.handle_async_request.call_count == 2


@pytest.mark.asyncio
async def test_non_retryable_status_is_returned_immediately() -> None:
    inner = _inner(_make_response(404))

    response = await RetryingTransport(transport=inner).handle_async_request(_make_request())

    assert response.status_code == 404
    assert inner.handle_async_request.call_count == 1


@pytest.mark.asyncio
@patch(_BACKOFF, new_callable=AsyncMock)
async def test_rate_limit_pauses_until_retry_after(mock_backoff: AsyncMock) -> None:
    inner = _inner(_make_response(429, {"Retry-After": "0.05"}), _make_response(200))
    transport = RetryingTransport(transport=inner)

    started = time.monotonic()
    response = await transport.handle_async_request(_make_request())

    assert response.status_code == 200
    assert time.monotonic() - started >= 0.03
    assert transport._throttle_clear.is_set()
    mock_backoff.assert_awaited_once_with(0)


def test_parse_retry_after() -> None:
    assert RetryingTransport._parse_retry_after(_make_response(429, {"Retry-After": "5"})) == 5.0
    assert RetryingTransport._parse_retry_after(_make_response(429, {"Retry-After": "soon"})) == 0.0
    assert RetryingTransport._parse_retry_after(_make_response(429)) == 0.0


@pytest.mark.asyncio
async def test_backoff_is_capped() -> None:
    transport = RetryingTransport(base_delay=1.0, max_delay=4.0)

    with patch(_SLEEP, new_callable=AsyncMock) as mock_sleep:
        await transport._sleep_backoff(10)

    (seconds,) = mock_sleep.await_args.args
    assert 4.0 <= seconds <= 4.25
