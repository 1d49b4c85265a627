"""Thin async REST client for the Azure DevOps work item tracking API."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import httpx

from trainpilot.contracts.exceptions import AuthenticationError, ItemNotFoundError, ProviderError
from trainpilot.providers.azure_devops._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)

API_VERSION = "7.0"
_JSON_PATCH = "application/json-patch+json"


class AzureDevOpsClient:
    def __init__(
        self,
        *,
        base_url: str,
        project: str,
        token: str,
        timeout: float = 30.0,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._project = project
        self._token = token
        self._timeout = timeout
        self._max_retries = max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def api_root(self) -> str:
        return f"{self._base_url}/{quote(self._project, safe='')}/_apis/"

    def work_item_url(self, item_id: int) -> str:
        return f"{self._base_url}/_apis/wit/workItems/{item_id}"

    async def open(self) -> None:
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self.api_root,
            auth=httpx.BasicAuth("", self._token),
            headers={"Accept": "application/json"},
            params={"api-version": API_VERSION},
            transport=RetryingTransport(transport=self._transport, max_retries=self._max_retries),
            timeout=httpx.Timeout(self._timeout),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get(self, path: str, *, params: dict[str, str] | None = None, item_id: int | None = None) -> Any:
        return await self._send("GET", path, params=params, item_id=item_id)

    async def post(self, path: str, body: Any, *, params: dict[str, str] | None = None) -> Any:
        return await self._send("POST", path, params=params, content=json.dumps(body), content_type="application/json")

    async def patch(self, path: str, operations: list[dict[str, Any]], *, item_id: int | None = None) -> Any:
        return await self._send(
            "PATCH", path, content=json.dumps(operations), content_type=_JSON_PATCH, item_id=item_id
        )

    async def post_patch(self, path: str, operations: list[dict[str, Any]]) -> Any:
        return await self._send("POST", path, content=json.dumps(operations), content_type=_JSON_PATCH)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        content: str | None = None,
        content_type: str | None = None,
        item_id: int | None = None,
    ) -> Any:
        if self._client is None:
            raise ProviderError("Azure DevOps client is not open. Use 'async with'.")

        headers = {"Content-Type": content_type} if content_type else None
        try:
            response = await self._client.request(method, path, params=params, content=content, headers=headers)
        except httpx.HTTPError as exc:
            raise ProviderError(f"{method} {path} failed: {exc}") from exc

        status = response.status_code
        _LOG.debug("%s %s -> %d", method, path, status)
        if status in (401, 403):
            raise AuthenticationError(f"Azure DevOps rejected the credentials ({status}) for {method} {path}")
        if status == 404 and item_id is not None:
            raise ItemNotFoundError(f"Work item {item_id} not found", item_id=item_id)
        if status >= 400:
            raise ProviderError(f"{method} {path} returned {status}: {_error_message(response)}")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(f"{method} {path} returned a non-JSON body") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict) and isinstance(payload.get("message"), str):
        return payload["message"]
    return str(payload)[:200]
