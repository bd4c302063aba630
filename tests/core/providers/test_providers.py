"""Request-shape tests for the bundled providers.

Each provider is invoked through its catalog descriptor and a transport
backed by ``httpx.MockTransport``, so credential injection is exercised
exactly as in production.
"""

import httpx
import pytest

from switchyard.core.errors import AuthenticationError, HttpStatusError
from switchyard.core.providers import PROVIDER_HANDLERS, InvocationContext, get_handler
from switchyard.core.providers.shared import normalize_symbol, option_limit, path_segment
from switchyard.core.providers.weather import location_from_query
from switchyard.core.registry import load_catalog


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def invoke(catalog, make_transport, memory_store, requests_seen):
    """Invoke a catalog provider against a canned JSON responder."""

    async def _invoke(provider_id, query, options=None, responder=None, credentials=None):
        for name, secret in (credentials or {}).items():
            await memory_store.set(name, secret)

        def handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            if responder is not None:
                return responder(request)
            return httpx.Response(200, json={"provider": provider_id})

        descriptor = catalog.lookup(provider_id)
        ctx = InvocationContext(
            transport=make_transport(handler),
            provider_id=descriptor.id,
            auth=descriptor.auth,
        )
        return await descriptor.invoke(query, options or {}, ctx)

    return _invoke


class TestHandlerTable:
    """Handler names map to Provider classes."""

    def test_every_catalog_handler_resolves(self):
        assert len(PROVIDER_HANDLERS) == 13
        assert get_handler("duckduckgo").provider_name == "duckduckgo"

    def test_unknown_handler(self):
        with pytest.raises(KeyError):
            get_handler("carrier_pigeon")


class TestSearchProviders:
    """SerpAPI, Wikipedia and DuckDuckGo."""

    @pytest.mark.asyncio
    async def test_serpapi_google(self, invoke, requests_seen):
        data = await invoke("serpapi_google", "python asyncio", {"limit": 5}, credentials={"serpapi": "sk"})

        assert data == {"provider": "serpapi_google"}
        url = requests_seen[0].url
        assert url.host == "serpapi.com"
        assert url.params["engine"] == "google"
        assert url.params["q"] == "python asyncio"
        assert url.params["num"] == "5"
        assert url.params["api_key"] == "sk"
        assert "tbm" not in url.params

    @pytest.mark.asyncio
    async def test_serpapi_missing_key_fails_before_io(self, invoke, requests_seen):
        with pytest.raises(AuthenticationError) as exc_info:
            await invoke("serpapi_google", "python")
        assert exc_info.value.credential_key == "serpapi"
        assert requests_seen == []

    @pytest.mark.asyncio
    async def test_serpapi_news_sets_search_type(self, invoke, requests_seen):
        await invoke("serpapi_news", "elections", credentials={"serpapi": "sk"})
        assert requests_seen[0].url.params["tbm"] == "nws"

    @pytest.mark.asyncio
    async def test_wikipedia_summary(self, invoke, requests_seen):
        await invoke("wikipedia_search", "Alan Turing")

        assert len(requests_seen) == 1
        assert requests_seen[0].url.host == "en.wikipedia.org"
        assert requests_seen[0].url.raw_path == b"/api/rest_v1/page/summary/Alan%20Turing"

    @pytest.mark.asyncio
    async def test_wikipedia_falls_back_to_search_api(self, invoke, requests_seen):
        """A failed summary lookup is retried against the full-text search API."""

        def responder(request):
            if "/page/summary/" in request.url.path:
                return httpx.Response(404, json={"title": "Not found."})
            return httpx.Response(200, json={"query": {"search": [{"title": "Alan Turing"}]}})

        data = await invoke("wikipedia_search", "turing machine inventor", {"language": "de"}, responder=responder)

        assert data["query"]["search"][0]["title"] == "Alan Turing"
        assert len(requests_seen) == 2
        search = requests_seen[1].url
        assert search.host == "de.wikipedia.org"
        assert search.path == "/w/api.php"
        assert search.params["srsearch"] == "turing machine inventor"
        assert search.params["srlimit"] == "5"

    @pytest.mark.asyncio
    async def test_duckduckgo(self, invoke, requests_seen):
        await invoke("duckduckgo_instant", "asyncio")
        params = requests_seen[0].url.params
        assert params["q"] == "asyncio"
        assert params["format"] == "json"
        assert params["no_html"] == "1"


class TestNewsProviders:
    """NewsAPI and Reddit."""

    @pytest.mark.asyncio
    async def test_newsapi_key_in_header(self, invoke, requests_seen):
        await invoke("newsapi_everything", "AI", credentials={"newsapi": "na"})

        request = requests_seen[0]
        assert request.headers["X-Api-Key"] == "na"
        assert request.url.params["sortBy"] == "publishedAt"
        assert request.url.params["pageSize"] == "10"
        assert "apiKey" not in request.url.params

    @pytest.mark.asyncio
    async def test_reddit(self, invoke, requests_seen):
        await invoke("reddit_search", "rust", {"subreddit": "programming", "limit": 500})

        url = requests_seen[0].url
        assert url.host == "www.reddit.com"
        assert url.path == "/r/programming/search.json"
        assert url.params["limit"] == "100"
        assert url.params["t"] == "week"

    @pytest.mark.asyncio
    async def test_upstream_error_raised(self, invoke):
        def responder(request):
            return httpx.Response(401, json={"status": "error", "message": "Your API key is invalid."})

        with pytest.raises(HttpStatusError) as exc_info:
            await invoke("newsapi_everything", "AI", responder=responder, credentials={"newsapi": "bad"})
        assert exc_info.value.status == 401
        assert "Your API key is invalid." in str(exc_info.value)


class TestWeatherProviders:
    """OpenWeatherMap and WeatherAPI (RapidAPI gateway)."""

    @pytest.mark.asyncio
    async def test_openweather(self, invoke, requests_seen):
        await invoke("openweather_current", "weather in Paris", credentials={"openweather": "ow"})

        params = requests_seen[0].url.params
        assert params["q"] == "Paris"
        assert params["units"] == "metric"
        assert params["appid"] == "ow"

    @pytest.mark.asyncio
    async def test_weatherapi_gateway_headers(self, invoke, requests_seen):
        await invoke("weatherapi_current", "London", credentials={"rapidapi": "rk"})

        request = requests_seen[0]
        assert request.url.host == "weatherapi-com.p.rapidapi.com"
        assert request.headers["X-RapidAPI-Key"] == "rk"
        assert request.headers["X-RapidAPI-Host"] == "weatherapi-com.p.rapidapi.com"
        assert request.url.params["q"] == "London"

    def test_location_from_query(self):
        assert location_from_query("Weather in New York") == "New York"
        assert location_from_query("forecast for Oslo ") == "Oslo"
        assert location_from_query("Berlin") == "Berlin"


class TestStockProviders:
    """Alpha Vantage and Yahoo Finance."""

    @pytest.mark.asyncio
    async def test_alphavantage(self, invoke, requests_seen):
        await invoke("alphavantage_quote", " ibm ", credentials={"alphavantage": "av"})

        params = requests_seen[0].url.params
        assert params["function"] == "GLOBAL_QUOTE"
        assert params["symbol"] == "IBM"
        assert params["apikey"] == "av"

    @pytest.mark.asyncio
    async def test_yahoo_symbol_in_path(self, invoke, requests_seen):
        await invoke("yahoo_finance", "aapl", {"interval": "1d"})

        url = requests_seen[0].url
        assert url.path == "/v8/finance/chart/AAPL"
        assert url.params["interval"] == "1d"


class TestMovieProviders:
    """OMDb and TMDB."""

    @pytest.mark.asyncio
    async def test_omdb(self, invoke, requests_seen):
        await invoke("omdb_search", "Inception", {"year": 2010}, credentials={"omdb": "om"})

        params = requests_seen[0].url.params
        assert params["s"] == "Inception"
        assert params["y"] == "2010"
        assert params["apikey"] == "om"

    @pytest.mark.asyncio
    async def test_tmdb_header_and_query(self, invoke, requests_seen):
        """TMDB receives the key both as a bearer token and as ``api_key``."""
        await invoke("tmdb_search", "Inception", credentials={"tmdb": "tm"})

        request = requests_seen[0]
        assert request.headers["Authorization"] == "Bearer tm"
        assert request.url.params["api_key"] == "tm"
        assert request.url.params["query"] == "Inception"
        assert request.url.params["language"] == "en-US"


class TestTechProviders:
    """GitHub repository search."""

    @pytest.mark.asyncio
    async def test_github(self, invoke, requests_seen):
        await invoke("github_search", "http client", {"limit": 3})

        request = requests_seen[0]
        assert request.headers["Accept"] == "application/vnd.github.v3+json"
        assert request.url.params["q"] == "http client"
        assert request.url.params["sort"] == "stars"
        assert request.url.params["per_page"] == "3"
        assert "Authorization" not in request.headers


class TestSharedHelpers:
    """Option parsing helpers."""

    def test_option_limit(self):
        assert option_limit({}) == 10
        assert option_limit({"limit": "7"}) == 7
        assert option_limit({"limit": 0}) == 1
        assert option_limit({"limit": 1000}) == 100
        assert option_limit({"limit": "many"}) == 10

    def test_path_segment(self):
        assert path_segment(" a/b c ") == "a%2Fb%20c"

    def test_normalize_symbol(self):
        assert normalize_symbol(" msft ") == "MSFT"
