"""Provider health reporting.

``probe_all`` is the cheap check: a provider is available when it needs no
credential or its credential is present. It makes no network calls.
``probe_live`` additionally performs a minimal request through the
transport with a single attempt and a short timeout.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from typing import Any, Optional

from switchyard.core.credentials import CredentialStore
from switchyard.core.errors import ProviderError
from switchyard.core.providers.base import InvocationContext
from switchyard.core.registry import ProviderDescriptor, ProviderRegistry
from switchyard.core.transport.client import ResilientTransport

logger = logging.getLogger(__name__)

DEFAULT_LIVE_TIMEOUT = 5.0


@dataclass(frozen=True)
class ProviderHealth:
    """Availability snapshot for one provider."""

    provider_id: str
    name: str
    available: bool
    requires_credential: bool
    credential_type: Optional[str]
    category: str
    priority: int
    reason: Optional[str] = None
    latency_ms: Optional[float] = None
    checked_live: bool = False

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "available": self.available,
            "requires_credential": self.requires_credential,
            "credential_type": self.credential_type,
            "category": self.category,
            "priority": self.priority,
        }
        if self.reason:
            result["reason"] = self.reason
        if self.checked_live:
            result["checked_live"] = True
            result["latency_ms"] = None if self.latency_ms is None else round(self.latency_ms, 1)
        return result


class HealthProber:
    """Reports provider availability from credentials and optional live probes."""

    def __init__(
        self,
        registry: ProviderRegistry,
        credentials: CredentialStore,
        transport: Optional[ResilientTransport] = None,
    ):
        self.registry = registry
        self.credentials = credentials
        self.transport = transport

    async def probe(self, descriptor: ProviderDescriptor) -> ProviderHealth:
        """Credential-only availability for one provider."""
        reason: Optional[str] = None
        available = True
        if descriptor.requires_credential:
            secret = None
            if descriptor.credential_type:
                secret = await self.credentials.get(descriptor.credential_type)
            if not secret:
                available = False
                reason = f"missing credential '{descriptor.credential_type}'"

        return ProviderHealth(
            provider_id=descriptor.id,
            name=descriptor.display_name,
            available=available,
            requires_credential=descriptor.requires_credential,
            credential_type=descriptor.credential_type,
            category=descriptor.category.value,
            priority=int(descriptor.priority),
            reason=reason,
        )

    async def probe_all(self) -> dict[str, ProviderHealth]:
        """Credential-only availability for every registered provider."""
        return {descriptor.id: await self.probe(descriptor) for descriptor in self.registry}

    async def probe_live(
        self,
        provider_id: str,
        timeout: float = DEFAULT_LIVE_TIMEOUT,
    ) -> ProviderHealth:
        """Credential check followed by one minimal live request.

        Raises:
            ProviderNotFoundError: If *provider_id* is unknown
            ValueError: If the prober was built without a transport
        """
        if self.transport is None:
            raise ValueError("probe_live requires a transport")

        descriptor = self.registry.lookup(provider_id)
        health = await self.probe(descriptor)
        if not health.available:
            return replace(health, checked_live=True)

        ctx = InvocationContext(
            transport=self.transport,
            provider_id=descriptor.id,
            auth=descriptor.auth,
            timeout=timeout,
            max_retries=1,
        )
        started = time.monotonic()
        try:
            await descriptor.provider.health_check(ctx)
        except ProviderError as e:
            logger.info("Live probe of %s failed: %s", provider_id, e)
            return replace(
                health,
                available=False,
                reason=str(e),
                checked_live=True,
                latency_ms=(time.monotonic() - started) * 1000,
            )
        return replace(health, checked_live=True, latency_ms=(time.monotonic() - started) * 1000)
