"""
Process-wide service instances.

Built lazily on first use from settings; FastAPI routes receive them through
dependencies so tests can override them. Sync dependencies run in the
threadpool, so creation is serialized: every caller must see the same ledger,
store and lock registry.
"""

import logging
import threading
from typing import Optional

from stocktrade.core.config import settings
from stocktrade.core.exceptions import UnknownInstrument
from stocktrade.services.ledger_service import PortfolioLedger
from stocktrade.services.market_data import InstrumentCatalog, QuoteSource, SimulatedMarket, get_quote_provider
from stocktrade.services.portfolio_store import get_portfolio_store

logger = logging.getLogger(__name__)

quote_source: Optional[QuoteSource] = None
ledger: Optional[PortfolioLedger] = None

# re-entrant: get_ledger builds the quote source while holding it
_init_lock = threading.RLock()


def get_quote_source() -> QuoteSource:
    """Get the configured quote source."""
    global quote_source
    if quote_source is None:
        with _init_lock:
            if quote_source is None:
                quote_source = get_quote_provider(settings.QUOTE_PROVIDER)
                logger.info(f"Using quote provider: {settings.QUOTE_PROVIDER}")
    return quote_source


def get_ledger() -> PortfolioLedger:
    """Get the portfolio ledger."""
    global ledger
    if ledger is None:
        with _init_lock:
            if ledger is None:
                quotes = get_quote_source()
                catalog = quotes if isinstance(quotes, InstrumentCatalog) else None
                ledger = PortfolioLedger(
                    store=get_portfolio_store(settings.STORE_BACKEND),
                    quotes=quotes,
                    catalog=catalog,
                    starting_balance=settings.STARTING_BALANCE,
                )
                logger.info(f"Portfolio ledger ready (store={settings.STORE_BACKEND})")
    return ledger


def get_market() -> SimulatedMarket:
    """Get the simulated market; only available with QUOTE_PROVIDER=simulated."""
    quotes = get_quote_source()
    if not isinstance(quotes, SimulatedMarket):
        raise UnknownInstrument("Market listing requires the simulated quote provider")
    return quotes


def reset_services() -> None:
    """Drop the cached instances."""
    global quote_source, ledger
    with _init_lock:
        quote_source = None
        ledger = None
