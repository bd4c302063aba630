"""Proxy intermediaries used after a cross-origin rejection.

When a direct request is rejected by an origin/access policy, the transport
re-issues the identical request through a ``ProxyClient``. Two clients are
provided:

- ``RelayProxyClient`` posts a ``{originalUrl, method, headers, body,
  timeout}`` message to a relay endpoint and expects ``{data}`` or
  ``{error}`` back.
- ``EgressProxyClient`` re-issues the request through an httpx client
  routed via an egress proxy URL.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import httpx

from switchyard.core.errors import ProxyUnavailableError
from switchyard.core.observability import redact_secrets, redact_url
from switchyard.core.transport.http import parse_response_body

logger = logging.getLogger(__name__)

DEFAULT_PROXY_TIMEOUT = 30.0


@dataclass(frozen=True)
class ProxyRequest:
    """Request forwarded to the proxy intermediary."""

    original_url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    timeout: float = 15.0

    def to_message(self) -> dict[str, Any]:
        """Wire message for the relay (timeout in milliseconds)."""
        return {
            "originalUrl": self.original_url,
            "method": self.method,
            "headers": dict(self.headers),
            "body": self.body,
            "timeout": int(self.timeout * 1000),
        }


@dataclass(frozen=True)
class ProxyResponse:
    """Reply from the intermediary: either ``data`` or ``error``."""

    data: Any = None
    error: Optional[str] = None
    status_code: Optional[int] = None
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def from_message(cls, message: Any) -> "ProxyResponse":
        if not isinstance(message, dict):
            return cls(error=f"Malformed proxy reply: {type(message).__name__}")
        if message.get("error"):
            status = message.get("status")
            return cls(error=str(message["error"]), status_code=status if isinstance(status, int) else None)
        return cls(data=message.get("data"), status_code=200)


class ProxyClient(ABC):
    """Forwards a request through an intermediary."""

    @abstractmethod
    async def forward(self, request: ProxyRequest) -> ProxyResponse:
        """Forward *request*.

        Raises:
            ProxyUnavailableError: If the intermediary itself cannot be reached
        """
        ...

    async def aclose(self) -> None:
        """Release any pooled connections."""
        return None


class RelayProxyClient(ProxyClient):
    """Posts the request message as JSON to a relay endpoint."""

    def __init__(
        self,
        endpoint: str,
        *,
        timeout: float = DEFAULT_PROXY_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoint = endpoint
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def forward(self, request: ProxyRequest) -> ProxyResponse:
        logger.debug("Relaying %s %s via %s", request.method, redact_url(request.original_url), self.endpoint)
        try:
            response = await self._get_client().post(self.endpoint, json=request.to_message())
        except httpx.RequestError as e:
            raise ProxyUnavailableError(
                "proxy",
                f"Relay {self.endpoint} unreachable: {redact_secrets(str(e))}",
                original_error=e,
            ) from e

        if response.status_code >= 400:
            raise ProxyUnavailableError(
                "proxy",
                f"Relay {self.endpoint} answered HTTP {response.status_code}",
            )
        try:
            message = response.json()
        except ValueError as e:
            raise ProxyUnavailableError("proxy", "Relay returned a non-JSON reply", original_error=e) from e
        return ProxyResponse.from_message(message)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class EgressProxyClient(ProxyClient):
    """Re-issues the request through an egress HTTP proxy."""

    def __init__(
        self,
        proxy_url: str,
        *,
        timeout: float = DEFAULT_PROXY_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.proxy_url = proxy_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(proxy=self.proxy_url, timeout=self.timeout)
        return self._client

    async def forward(self, request: ProxyRequest) -> ProxyResponse:
        kwargs: dict[str, Any] = {"headers": dict(request.headers), "timeout": request.timeout}
        if isinstance(request.body, (dict, list)):
            kwargs["json"] = request.body
        elif request.body is not None:
            kwargs["content"] = request.body

        try:
            response = await self._get_client().request(request.method, request.original_url, **kwargs)
        except httpx.ProxyError as e:
            raise ProxyUnavailableError(
                "proxy",
                f"Egress proxy unreachable: {redact_secrets(str(e))}",
                original_error=e,
            ) from e
        except httpx.RequestError as e:
            return ProxyResponse(error=redact_secrets(str(e)) or type(e).__name__)

        if response.status_code >= 400:
            return ProxyResponse(
                error=redact_secrets(response.text[:200]) or response.reason_phrase,
                status_code=response.status_code,
            )
        return ProxyResponse(
            data=parse_response_body(response),
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
