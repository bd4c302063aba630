"""High-level client that wires switchyard together from configuration.

Example:
    from switchyard.client import Switchyard

    async with Switchyard() as client:
        result = await client.execute("weather in Paris")
        health = await client.probe_all()
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Union

import httpx

from switchyard.config import CredentialConfig, ProxyConfig, SwitchyardConfig
from switchyard.core.credentials import (
    ChainedCredentialStore,
    CredentialStore,
    EnvironmentCredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)
from switchyard.core.health import DEFAULT_LIVE_TIMEOUT, HealthProber, ProviderHealth
from switchyard.core.intent import IntentResult
from switchyard.core.orchestration import ExecuteOptions, OrchestrationResult, Orchestrator
from switchyard.core.registry import ProviderCategory, ProviderDescriptor, ProviderRegistry, load_catalog
from switchyard.core.transport import (
    DEFAULT_USER_AGENT,
    EgressProxyClient,
    ProxyClient,
    RelayProxyClient,
    ResilientTransport,
    get_rate_limiter,
)

logger = logging.getLogger(__name__)


def build_credential_store(config: CredentialConfig) -> CredentialStore:
    """Create the credential store selected by ``config.backend``."""
    if config.backend == "memory":
        return InMemoryCredentialStore()
    if config.backend == "env":
        return EnvironmentCredentialStore(prefix=config.env_prefix)

    file_store = FileCredentialStore(config.resolved_path, lock_timeout=config.lock_timeout)
    if config.backend == "file":
        return file_store
    # chained: environment wins, writes land in the file
    return ChainedCredentialStore([EnvironmentCredentialStore(prefix=config.env_prefix), file_store])


def build_proxy_client(config: ProxyConfig) -> Optional[ProxyClient]:
    """Create the cross-origin intermediary, or None when proxying is off."""
    if not config.enabled:
        if config.mode != "none":
            logger.warning("Proxy mode %s configured without a url; proxy recovery disabled", config.mode)
        return None
    if config.mode == "relay":
        return RelayProxyClient(config.url, timeout=config.timeout)
    return EgressProxyClient(config.url, timeout=config.timeout)


class Switchyard:
    """Facade over the registry, transport, orchestrator and health prober.

    Every collaborator can be injected; anything omitted is built from
    *config* (``SwitchyardConfig.from_env()`` when that is omitted too).
    """

    def __init__(
        self,
        config: Optional[SwitchyardConfig] = None,
        *,
        credentials: Optional[CredentialStore] = None,
        registry: Optional[ProviderRegistry] = None,
        transport: Optional[ResilientTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config or SwitchyardConfig.from_env()
        self.credentials = credentials or build_credential_store(self.config.credentials)
        self.registry = registry or load_catalog(self.config.orchestration.catalog_path)

        if transport is None:
            transport_config = self.config.transport
            transport = ResilientTransport(
                self.credentials,
                rate_limiter=get_rate_limiter(transport_config.min_interval),
                proxy_client=build_proxy_client(self.config.proxy),
                http_client=http_client,
                timeout=transport_config.timeout,
                max_retries=transport_config.max_retries,
                base_delay=transport_config.base_delay,
                user_agent=transport_config.user_agent or DEFAULT_USER_AGENT,
            )
        self.transport = transport

        self.orchestrator = Orchestrator(
            self.registry,
            self.transport,
            self.credentials,
            max_providers=self.config.orchestration.max_providers,
            confidence_threshold=self.config.orchestration.confidence_threshold,
        )
        self.prober = HealthProber(self.registry, self.credentials, self.transport)

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "Switchyard":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    async def execute(
        self,
        target: str,
        query: Optional[str] = None,
        **options: Any,
    ) -> Union[OrchestrationResult, list[OrchestrationResult]]:
        """Run a request against a provider id, an intent name or free text.

        Keyword arguments are ``ExecuteOptions`` fields (``use_multiple``,
        ``max_providers``, ``provider_options``, ``cancel_token``, ...).
        """
        return await self.orchestrator.execute(target, query, ExecuteOptions(**options))

    def classify(self, query: str) -> IntentResult:
        return self.orchestrator.classify(query)

    # -------------------------------------------------------------------------
    # Health and catalog
    # -------------------------------------------------------------------------

    async def probe_all(self, live: bool = False) -> dict[str, ProviderHealth]:
        """Availability of every provider; *live* adds a minimal request each."""
        if not live:
            return await self.prober.probe_all()
        return {pid: await self.prober.probe_live(pid) for pid in self.registry.ids()}

    async def probe_live(self, provider_id: str, timeout: float = DEFAULT_LIVE_TIMEOUT) -> ProviderHealth:
        return await self.prober.probe_live(provider_id, timeout=timeout)

    def providers(self, category: Optional[Union[str, ProviderCategory]] = None) -> list[ProviderDescriptor]:
        """Registered providers, optionally limited to one category (priority order)."""
        if category is None:
            return list(self.registry)
        return self.registry.by_category(ProviderCategory(category))

    # -------------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------------

    async def get_credential(self, name: str) -> Optional[str]:
        return await self.credentials.get(name)

    async def set_credential(self, name: str, secret: str) -> bool:
        """Persist *secret* under *name*; False when no writable store accepted it."""
        return await self.credentials.set(name, secret)
