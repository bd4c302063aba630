"""Tests for credential injection."""

import base64

import pytest

from switchyard.core.credentials import InMemoryCredentialStore
from switchyard.core.errors import AuthenticationError
from switchyard.core.registry import AuthConfig, AuthType
from switchyard.core.transport import RequestContext, apply_auth, format_credential


@pytest.fixture
def store():
    return InMemoryCredentialStore(
        {
            "serpapi": "serp-secret",
            "github": "gh-token",
            "service": "alice:wonderland",
            "rapidapi": "rapid-secret",
        }
    )


class TestFormatCredential:
    def test_key_placeholder(self):
        assert format_credential("Bearer {key}", "abc") == "Bearer abc"

    def test_token_placeholder(self):
        assert format_credential("token {token}", "abc") == "token abc"

    def test_default_template_is_raw_secret(self):
        assert format_credential(None, "abc") == "abc"


class TestApplyAuth:
    """Tests for apply_auth."""

    @pytest.mark.asyncio
    async def test_no_auth_returns_context_unchanged(self, store):
        """Providers without auth get the original context back."""
        context = RequestContext(url="https://example.com")
        assert await apply_auth(context, None, store) is context
        assert await apply_auth(context, AuthConfig(type=AuthType.NONE), store) is context

    @pytest.mark.asyncio
    async def test_query_param_injection(self, store):
        """API keys can travel as a query parameter."""
        auth = AuthConfig(type=AuthType.API_KEY, query_param="api_key", credential_key="serpapi")
        context = RequestContext(url="https://serpapi.com/search.json", params={"q": "x"})

        result = await apply_auth(context, auth, store, "serpapi_google")

        assert result.params == {"q": "x", "api_key": "serp-secret"}
        assert "Authorization" not in result.headers

    @pytest.mark.asyncio
    async def test_header_injection_with_format(self, store):
        """Header templates receive the secret."""
        auth = AuthConfig(
            type=AuthType.API_KEY,
            header_name="Authorization",
            header_format="Bearer {key}",
            credential_key="serpapi",
        )
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        assert result.headers["Authorization"] == "Bearer serp-secret"

    @pytest.mark.asyncio
    async def test_header_and_query_together(self, store):
        """A provider can require the key in both places."""
        auth = AuthConfig(
            type=AuthType.API_KEY,
            header_name="Authorization",
            header_format="Bearer {key}",
            query_param="api_key",
            credential_key="serpapi",
        )
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        assert result.headers["Authorization"] == "Bearer serp-secret"
        assert result.params["api_key"] == "serp-secret"

    @pytest.mark.asyncio
    async def test_defaults_to_authorization_header(self, store):
        """With neither a header nor a parameter named, Authorization is used."""
        auth = AuthConfig(type=AuthType.API_KEY, credential_key="serpapi")
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        assert result.headers["Authorization"] == "serp-secret"

    @pytest.mark.asyncio
    async def test_oauth2_defaults_to_bearer(self, store):
        """OAuth2 tokens are read from token_key and sent as a bearer token."""
        auth = AuthConfig(type=AuthType.OAUTH2, header_name="Authorization", token_key="github")
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        assert result.headers["Authorization"] == "Bearer gh-token"

    @pytest.mark.asyncio
    async def test_basic_auth(self, store):
        """BASIC credentials are user:password, base64 encoded."""
        auth = AuthConfig(type=AuthType.BASIC, credential_key="service")
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        expected = base64.b64encode(b"alice:wonderland").decode("ascii")
        assert result.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_basic_auth_requires_colon(self, store):
        """A BASIC secret without a colon is rejected."""
        auth = AuthConfig(type=AuthType.BASIC, credential_key="serpapi")
        with pytest.raises(AuthenticationError, match="username:password"):
            await apply_auth(RequestContext(url="https://x"), auth, store, "svc")

    @pytest.mark.asyncio
    async def test_host_header_added(self, store):
        """Gateway APIs get their fixed host header alongside the key."""
        auth = AuthConfig(
            type=AuthType.API_KEY,
            header_name="X-RapidAPI-Key",
            credential_key="rapidapi",
            host_header_name="X-RapidAPI-Host",
            host="weatherapi-com.p.rapidapi.com",
        )
        result = await apply_auth(RequestContext(url="https://x"), auth, store)
        assert result.headers == {
            "X-RapidAPI-Key": "rapid-secret",
            "X-RapidAPI-Host": "weatherapi-com.p.rapidapi.com",
        }

    @pytest.mark.asyncio
    async def test_missing_credential_raises(self, store):
        """A missing secret raises AuthenticationError naming the key."""
        auth = AuthConfig(type=AuthType.API_KEY, query_param="appid", credential_key="openweather")
        with pytest.raises(AuthenticationError) as exc_info:
            await apply_auth(RequestContext(url="https://x"), auth, store, "openweather_current")
        assert exc_info.value.credential_key == "openweather"
        assert exc_info.value.provider == "openweather_current"
        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_original_context_not_mutated(self, store):
        """Injection returns a copy."""
        auth = AuthConfig(type=AuthType.API_KEY, query_param="api_key", credential_key="serpapi")
        context = RequestContext(url="https://x", params={"q": "x"}, headers={"Accept": "a"})
        await apply_auth(context, auth, store)
        assert context.params == {"q": "x"}
        assert context.headers == {"Accept": "a"}
