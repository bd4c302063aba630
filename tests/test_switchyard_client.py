"""Tests for the Switchyard facade and its builders."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from switchyard.client import Switchyard, build_credential_store, build_proxy_client
from switchyard.config import CredentialConfig, ProxyConfig, SwitchyardConfig
from switchyard.core.credentials import (
    ChainedCredentialStore,
    EnvironmentCredentialStore,
    FileCredentialStore,
    InMemoryCredentialStore,
)
from switchyard.core.errors import ProviderNotFoundError
from switchyard.core.orchestration import OrchestrationResult
from switchyard.core.registry import ProviderCategory
from switchyard.core.transport import EgressProxyClient, RelayProxyClient, get_rate_limiter


class TestBuilders:
    """Config-driven construction of stores and proxy clients."""

    def test_credential_backends(self, tmp_path):
        path = tmp_path / "creds.json"
        assert isinstance(build_credential_store(CredentialConfig(backend="memory")), InMemoryCredentialStore)
        assert isinstance(build_credential_store(CredentialConfig(backend="env")), EnvironmentCredentialStore)

        file_store = build_credential_store(CredentialConfig(backend="file", path=path))
        assert isinstance(file_store, FileCredentialStore)
        assert file_store.path == path

        chained = build_credential_store(CredentialConfig(backend="chained", path=path))
        assert isinstance(chained, ChainedCredentialStore)
        assert [type(s) for s in chained.stores] == [EnvironmentCredentialStore, FileCredentialStore]

    def test_proxy_clients(self):
        assert build_proxy_client(ProxyConfig()) is None
        assert build_proxy_client(ProxyConfig(mode="relay")) is None
        assert isinstance(build_proxy_client(ProxyConfig(mode="relay", url="https://relay.test")), RelayProxyClient)
        assert isinstance(build_proxy_client(ProxyConfig(mode="egress", url="http://proxy.test:3128")), EgressProxyClient)


@pytest.fixture
def config():
    config = SwitchyardConfig()
    config.transport.min_interval = 0.0
    return config


@pytest.fixture
def client_factory(config):
    def _make(handler, secrets=None):
        return Switchyard(
            config,
            credentials=InMemoryCredentialStore(secrets or {}),
            http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )

    return _make


def _ok(request):
    return httpx.Response(200, json={"url": str(request.url)})


class TestSwitchyard:
    """The facade wires config into transport, orchestrator and prober."""

    def test_uses_configured_limits(self, client_factory, config):
        config.transport.timeout = 4.0
        config.orchestration.max_providers = 3
        client = client_factory(_ok)

        assert client.transport.timeout == 4.0
        assert client.transport.rate_limiter is get_rate_limiter()
        assert client.transport.rate_limiter.min_interval == 0.0
        assert client.orchestrator.max_providers == 3

    @pytest.mark.asyncio
    async def test_execute_provider(self, client_factory):
        async with client_factory(_ok) as client:
            result = await client.execute("duckduckgo_instant", "asyncio")

        assert isinstance(result, OrchestrationResult)
        assert result.success is True
        assert "q=asyncio" in result.data["url"]

    @pytest.mark.asyncio
    async def test_execute_options(self, client_factory):
        async with client_factory(_ok) as client:
            results = await client.execute("reddit_search", "rust", provider_options={"limit": 2})
        assert "limit=2" in results.data["url"]

    @pytest.mark.asyncio
    async def test_credentials_round_trip(self, client_factory):
        async with client_factory(_ok) as client:
            assert await client.get_credential("serpapi") is None
            assert await client.set_credential("serpapi", "sk") is True
            assert await client.get_credential("serpapi") == "sk"

    def test_providers_by_category(self, client_factory):
        client = client_factory(_ok)
        assert len(client.providers()) == 13
        assert [d.id for d in client.providers("stocks")] == ["alphavantage_quote", "yahoo_finance"]
        assert [d.id for d in client.providers(ProviderCategory.TECH)] == ["github_search"]

    def test_classify(self, client_factory):
        assert client_factory(_ok).classify("github repository").intent == "tech"

    @pytest.mark.asyncio
    async def test_probe_all(self, client_factory):
        async with client_factory(_ok, {"omdb": "om"}) as client:
            report = await client.probe_all()
        assert report["omdb_search"].available is True
        assert report["tmdb_search"].available is False

    @pytest.mark.asyncio
    async def test_probe_all_live(self, client_factory):
        calls = []

        def handler(request):
            calls.append(request.url.host)
            return httpx.Response(200, json={})

        async with client_factory(handler) as client:
            report = await client.probe_all(live=True)

        assert all(h.checked_live for h in report.values())
        assert report["duckduckgo_instant"].available is True
        # Only credential-free providers reach the network
        assert len(calls) == sum(1 for h in report.values() if not h.requires_credential)

    @pytest.mark.asyncio
    async def test_probe_live_unknown(self, client_factory):
        async with client_factory(_ok) as client:
            with pytest.raises(ProviderNotFoundError):
                await client.probe_live("ghost")

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, client_factory):
        client = client_factory(_ok)
        with patch.object(client.transport, "aclose", new_callable=AsyncMock) as aclose:
            async with client:
                pass
        aclose.assert_awaited_once()
