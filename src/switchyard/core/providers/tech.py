"""Code-repository search providers."""

from typing import Any, Mapping

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.shared import option_limit, option_str

GITHUB_SEARCH_URL = "https://api.github.com/search/repositories"


class GitHubProvider(Provider):
    """GitHub repository search, most-starred first (unauthenticated)."""

    provider_name = "github"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            GITHUB_SEARCH_URL,
            headers={"Accept": "application/vnd.github.v3+json"},
            params={
                "q": query,
                "sort": option_str(options, "sort", "stars"),
                "order": option_str(options, "order", "desc"),
                "per_page": option_limit(options),
            },
        )
