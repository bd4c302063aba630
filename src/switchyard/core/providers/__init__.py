"""Provider implementations.

Each catalog entry names a ``handler``; ``PROVIDER_HANDLERS`` maps those
names to the Provider class that serves them.

Example usage:
    from switchyard.core.providers import get_handler

    provider = get_handler("duckduckgo")()
    payload = await provider.invoke("python asyncio", {}, ctx)
"""

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.movies import OmdbProvider, TmdbProvider
from switchyard.core.providers.news import (
    NewsApiProvider,
    RedditProvider,
    SerpApiNewsProvider,
)
from switchyard.core.providers.search import (
    DuckDuckGoProvider,
    SerpApiProvider,
    SerpApiSearchProvider,
    WikipediaProvider,
)
from switchyard.core.providers.stocks import AlphaVantageProvider, YahooFinanceProvider
from switchyard.core.providers.tech import GitHubProvider
from switchyard.core.providers.weather import OpenWeatherProvider, WeatherApiProvider

PROVIDER_HANDLERS: dict[str, type[Provider]] = {
    "serpapi_search": SerpApiSearchProvider,
    "serpapi_news": SerpApiNewsProvider,
    "wikipedia": WikipediaProvider,
    "duckduckgo": DuckDuckGoProvider,
    "newsapi": NewsApiProvider,
    "reddit": RedditProvider,
    "openweather": OpenWeatherProvider,
    "weatherapi": WeatherApiProvider,
    "alphavantage": AlphaVantageProvider,
    "yahoo_finance": YahooFinanceProvider,
    "omdb": OmdbProvider,
    "tmdb": TmdbProvider,
    "github": GitHubProvider,
}


def get_handler(name: str) -> type[Provider]:
    """Return the Provider class registered under *name*.

    Raises:
        KeyError: If no handler has that name
    """
    return PROVIDER_HANDLERS[name]


__all__ = [
    "InvocationContext",
    "Provider",
    "PROVIDER_HANDLERS",
    "get_handler",
    "SerpApiProvider",
    "SerpApiSearchProvider",
    "SerpApiNewsProvider",
    "WikipediaProvider",
    "DuckDuckGoProvider",
    "NewsApiProvider",
    "RedditProvider",
    "OpenWeatherProvider",
    "WeatherApiProvider",
    "AlphaVantageProvider",
    "YahooFinanceProvider",
    "OmdbProvider",
    "TmdbProvider",
    "GitHubProvider",
]
