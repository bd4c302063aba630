"""Abstract base class for data providers.

This module defines the Provider interface that every concrete provider
implements. A provider knows only how to turn a query into a request
against its endpoint; rate limiting, credential injection, retries and
proxy recovery all happen in the transport it calls through.

Example usage:
    class DuckDuckGoProvider(Provider):
        provider_name = "duckduckgo"

        async def invoke(self, query, options, ctx):
            return await ctx.request(
                "https://api.duckduckgo.com/",
                params={"q": query, "format": "json"},
            )
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Optional

from switchyard.core.transport.cancellation import CancellationToken
from switchyard.core.transport.models import RetryPredicate

if TYPE_CHECKING:
    from switchyard.core.registry.models import AuthConfig
    from switchyard.core.transport.client import ResilientTransport


@dataclass
class InvocationContext:
    """Per-invocation handle a provider uses to reach the network.

    Attributes:
        transport: The resilient transport every request goes through
        provider_id: Registry id, used for logs, errors and rate-limit audit
        auth: Credential injection rules for this provider
        cancel_token: Caller's cancellation token, if any
        timeout: Per-attempt timeout override
        max_retries: Attempt budget override
    """

    transport: "ResilientTransport"
    provider_id: str
    auth: Optional["AuthConfig"] = None
    cancel_token: Optional[CancellationToken] = None
    timeout: Optional[float] = None
    max_retries: Optional[int] = None

    async def request(
        self,
        url: str,
        *,
        method: str = "GET",
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        body: Any = None,
        retry_predicate: Optional[RetryPredicate] = None,
    ) -> Any:
        """Issue a request through the transport and return the parsed body."""
        context = self.transport.build_context(
            url,
            method=method,
            params=params,
            headers=headers,
            body=body,
            timeout=self.timeout,
            max_retries=self.max_retries,
            retry_predicate=retry_predicate,
        )
        response = await self.transport.call(
            context,
            auth_config=self.auth,
            provider_hint=self.provider_id,
            cancel_token=self.cancel_token,
        )
        return response.data


class Provider(ABC):
    """Abstract base class for providers.

    Subclasses should:
    - Set ``provider_name`` to a short identifier for the upstream service
    - Implement ``invoke()`` to build the endpoint request
    - Optionally override ``health_check()`` with a cheaper live probe

    ``invoke`` returns the provider's raw parsed payload; it must raise
    ``ProviderError`` subclasses (the transport already does) for failures
    the orchestrator should absorb into the fallback chain.
    """

    provider_name: str = ""

    # Query used by the default live health probe
    health_query: str = "test"

    @abstractmethod
    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        """Execute *query* against the provider.

        Args:
            query: Free-text query (or symbol/location, per provider)
            options: Provider options such as ``limit`` or ``language``
            ctx: Invocation context carrying the transport

        Returns:
            The provider's parsed response payload

        Raises:
            ProviderError: If the call fails after transport-level retries
        """
        ...

    async def health_check(self, ctx: InvocationContext) -> bool:
        """Perform a minimal live request. Returns True on success.

        Failures propagate as ``ProviderError`` so the caller can report why.
        """
        await self.invoke(self.health_query, {"limit": 1}, ctx)
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
