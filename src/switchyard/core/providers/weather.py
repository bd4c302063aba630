"""Current-conditions weather providers."""

from typing import Any, Mapping

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.shared import option_str

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"
WEATHERAPI_URL = "https://weatherapi-com.p.rapidapi.com/current.json"


def location_from_query(query: str) -> str:
    """Strip a leading "weather in" phrase so "weather in Paris" becomes "Paris"."""
    text = query.strip()
    lowered = text.lower()
    for prefix in ("weather in ", "weather for ", "temperature in ", "forecast for ", "forecast in "):
        if lowered.startswith(prefix):
            return text[len(prefix):].strip() or text
    return text


class OpenWeatherProvider(Provider):
    """OpenWeatherMap current weather, metric units. Key sent as ``appid``."""

    provider_name = "openweather"
    health_query = "London"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            OPENWEATHER_URL,
            params={
                "q": location_from_query(query),
                "units": option_str(options, "units", "metric"),
            },
        )


class WeatherApiProvider(Provider):
    """WeatherAPI.com through the RapidAPI gateway (key + host headers)."""

    provider_name = "weatherapi"
    health_query = "London"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(WEATHERAPI_URL, params={"q": location_from_query(query)})
