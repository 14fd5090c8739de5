from typing import Dict, Type
from stocktrade.services.market_data.base import InstrumentCatalog, InstrumentInfo, QuoteSource
from stocktrade.services.market_data.simulated_provider import SimulatedMarket
from stocktrade.services.market_data.static_provider import StaticQuoteSource
from stocktrade.services.market_data.yfinance_provider import YFinanceQuoteSource
from stocktrade.core.config import settings

PROVIDERS: Dict[str, Type[QuoteSource]] = {
    "simulated": SimulatedMarket,
    "yfinance": YFinanceQuoteSource,
}


def get_quote_provider(name: str = "simulated") -> QuoteSource:
    """Factory to get provider instance."""
    provider_class = PROVIDERS.get(name)
    if not provider_class:
        raise ValueError(f"Unknown quote provider: {name}")

    if provider_class is SimulatedMarket:
        return SimulatedMarket(
            stock_count=settings.SIMULATED_STOCK_COUNT,
            seed=settings.MARKET_SEED,
            tick_pct=settings.MARKET_TICK_PCT,
        )
    return provider_class()


__all__ = [
    "InstrumentCatalog",
    "InstrumentInfo",
    "QuoteSource",
    "SimulatedMarket",
    "StaticQuoteSource",
    "YFinanceQuoteSource",
    "get_quote_provider",
]
