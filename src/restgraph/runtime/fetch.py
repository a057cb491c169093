"""
Fetch capability.

The executor talks to upstream APIs through any callable matching ``Fetch``:

    response = await fetch(url, method="GET", headers={...}, body=None)
    response.status, response.status_text, response.headers.get("content-type")
    text = await response.text()

``HttpxFetch`` is the default implementation; tests and embedders can pass
their own callable through the registry or the GraphQL context.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol, Union

import httpx

from ..core.errors import ExecutionError

logger = logging.getLogger(__name__)


class FetchHeaders(Protocol):
    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        ...


class FetchResponse(Protocol):
    status: int
    status_text: str
    headers: FetchHeaders

    async def text(self) -> str:
        ...


class Fetch(Protocol):
    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: Mapping[str, str],
        body: Optional[Union[str, bytes]] = None,
    ) -> FetchResponse:
        ...


class HttpxFetchResponse:
    """Adapts ``httpx.Response`` to the ``FetchResponse`` protocol."""

    def __init__(self, response: httpx.Response):
        self._response = response
        self.status = response.status_code
        self.status_text = response.reason_phrase
        self.headers = response.headers

    async def text(self) -> str:
        await self._response.aread()
        return self._response.text


class HttpxFetch:
    """
    Default fetch backed by a shared ``httpx.AsyncClient``.

    Usage:
        fetch = HttpxFetch(timeout=10.0)
        response = await fetch("https://api/users/1", method="GET", headers={})
        await fetch.close()
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize fetch.

        Args:
            timeout: HTTP request timeout in seconds
            transport: Optional custom transport (e.g. httpx.MockTransport)
        """
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __call__(
        self,
        url: str,
        *,
        method: str,
        headers: Mapping[str, str],
        body: Optional[Union[str, bytes]] = None,
    ) -> HttpxFetchResponse:
        """
        Send one request.

        Raises:
            ExecutionError: If the request could not be sent
        """
        client = self._get_client()
        try:
            response = await client.request(method, url, headers=dict(headers), content=body)
        except httpx.RequestError as e:
            logger.warning(f"Request to {url} failed: {e}")
            raise ExecutionError(str(e), url=url) from e
        return HttpxFetchResponse(response)
