"""News providers: NewsAPI, SerpAPI news, Reddit search."""

from typing import Any, Mapping

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.search import SerpApiProvider
from switchyard.core.providers.shared import option_limit, option_str, path_segment

NEWSAPI_URL = "https://newsapi.org/v2/everything"


class NewsApiProvider(Provider):
    """NewsAPI ``/everything``, newest first. The key goes in ``X-Api-Key``."""

    provider_name = "newsapi"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            NEWSAPI_URL,
            params={
                "q": query,
                "pageSize": option_limit(options),
                "sortBy": option_str(options, "sort", "publishedAt"),
            },
        )


class SerpApiNewsProvider(SerpApiProvider):
    """Google News results through SerpAPI."""

    search_type = "nws"


class RedditProvider(Provider):
    """Reddit post search over the past week."""

    provider_name = "reddit"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        subreddit = path_segment(option_str(options, "subreddit", "all"))
        return await ctx.request(
            f"https://www.reddit.com/r/{subreddit}/search.json",
            params={
                "q": query,
                "sort": option_str(options, "sort", "hot"),
                "limit": option_limit(options, default=25),
                "t": option_str(options, "period", "week"),
            },
        )
