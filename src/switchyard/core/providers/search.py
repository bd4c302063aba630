"""General web search providers: SerpAPI (Google), Wikipedia, DuckDuckGo."""

import logging
from typing import Any, Mapping, Optional

from switchyard.core.errors import TransportError
from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.shared import option_limit, option_str, path_segment

logger = logging.getLogger(__name__)

SERPAPI_URL = "https://serpapi.com/search.json"
DUCKDUCKGO_URL = "https://api.duckduckgo.com/"


class SerpApiProvider(Provider):
    """Google results through SerpAPI. The key travels as ``api_key``."""

    provider_name = "serpapi"
    engine = "google"
    search_type: Optional[str] = None

    def build_params(self, query: str, options: Mapping[str, Any]) -> dict[str, Any]:
        params: dict[str, Any] = {
            "engine": self.engine,
            "q": query,
            "location": option_str(options, "location", "United States"),
            "hl": option_str(options, "language", "en"),
            "num": option_limit(options),
        }
        if self.search_type:
            params["tbm"] = self.search_type
        return params

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(SERPAPI_URL, params=self.build_params(query, options))


class SerpApiSearchProvider(SerpApiProvider):
    """Organic Google web results."""


class WikipediaProvider(Provider):
    """Wikipedia page summary with a search-API fallback.

    The REST summary endpoint only answers exact titles; on any transport
    failure the full-text search API is tried instead.
    """

    provider_name = "wikipedia"
    health_query = "Python (programming language)"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        language = option_str(options, "language", "en")
        headers = {"Accept": "application/json"}
        summary_url = f"https://{language}.wikipedia.org/api/rest_v1/page/summary/{path_segment(query)}"
        try:
            return await ctx.request(summary_url, headers=headers)
        except TransportError as e:
            logger.info("Wikipedia direct lookup failed (%s); trying search API", e)

        return await ctx.request(
            f"https://{language}.wikipedia.org/w/api.php",
            headers=headers,
            params={
                "action": "query",
                "format": "json",
                "list": "search",
                "srsearch": query,
                "srlimit": option_limit(options, default=5),
                "origin": "*",
            },
        )


class DuckDuckGoProvider(Provider):
    """DuckDuckGo Instant Answer API (no key)."""

    provider_name = "duckduckgo"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            DUCKDUCKGO_URL,
            params={"q": query, "format": "json", "no_html": 1, "skip_disambig": 1},
        )
