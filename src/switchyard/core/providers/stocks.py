"""Stock quote providers. Queries are treated as ticker symbols."""

from typing import Any, Mapping

from switchyard.core.providers.base import InvocationContext, Provider
from switchyard.core.providers.shared import normalize_symbol, option_str, path_segment

ALPHAVANTAGE_URL = "https://www.alphavantage.co/query"
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"


class AlphaVantageProvider(Provider):
    """Alpha Vantage ``GLOBAL_QUOTE``. Key sent as ``apikey``."""

    provider_name = "alphavantage"
    health_query = "IBM"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        return await ctx.request(
            ALPHAVANTAGE_URL,
            params={"function": "GLOBAL_QUOTE", "symbol": normalize_symbol(query)},
        )


class YahooFinanceProvider(Provider):
    """Yahoo Finance chart endpoint (no key)."""

    provider_name = "yahoo_finance"
    health_query = "AAPL"

    async def invoke(
        self,
        query: str,
        options: Mapping[str, Any],
        ctx: InvocationContext,
    ) -> Any:
        params: dict[str, Any] = {}
        interval = option_str(options, "interval", "")
        if interval:
            params["interval"] = interval
        return await ctx.request(
            YAHOO_CHART_URL.format(symbol=path_segment(normalize_symbol(query))),
            params=params,
        )
