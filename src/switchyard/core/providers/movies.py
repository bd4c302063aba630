"""Movie lookup providers: OMDb and TMDB."""

from typing import Any, Mapping

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.shared import option_str

OMDB_URL = "https://www.omdbapi.com/"
TMDB_SEARCH_URL = "https://api.themoviedb.org/3/search/movie"


class OmdbProvider(Provider):
    """OMDb title search. Key sent as ``apikey``."""

    provider_name = "omdb"
    health_query = "Inception"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        params: dict[str, Any] = {"s": query}
        year = option_str(options, "year", "")
        if year:
            params["y"] = year
        return await ctx.request(OMDB_URL, params=params)


class TmdbProvider(Provider):
    """TMDB movie search. Key sent both as ``api_key`` and as a bearer header."""

    provider_name = "tmdb"
    health_query = "Inception"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            TMDB_SEARCH_URL,
            params={"query": query, "language": option_str(options, "language", "en-US")},
        )
