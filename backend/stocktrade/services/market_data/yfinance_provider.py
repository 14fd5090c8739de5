import yfinance as yf
from decimal import Decimal
import logging

import pandas as pd

from stocktrade.core.exceptions import UnknownInstrument
from stocktrade.services.market_data.base import InstrumentCatalog, InstrumentInfo, QuoteSource

logger = logging.getLogger(__name__)


class YFinanceQuoteSource(QuoteSource, InstrumentCatalog):
    """
    yfinance quotes; the instrument id is the ticker symbol.

    Every call is a network request. Used as the ledger's quote source it is
    hit once per holding on each mutation, under the owner's lock, and any
    fetch failure surfaces as UnknownInstrument.
    """

    def get_current_price(self, instrument_id: str) -> Decimal:
        # yf has no reliable realtime API, so take the last close of a short window
        try:
            hist = yf.Ticker(instrument_id).history(period="5d", interval="1d")
        except Exception as e:
            logger.error(f"yfinance history failed for {instrument_id}: {e}")
            raise UnknownInstrument(f"No price for instrument {instrument_id}") from e

        if hist is None or hist.empty or "Close" not in hist.columns:
            raise UnknownInstrument(f"No price for instrument {instrument_id}")

        closes = pd.to_numeric(hist["Close"], errors="coerce").dropna()
        if closes.empty:
            raise UnknownInstrument(f"No price for instrument {instrument_id}")
        return Decimal(str(round(float(closes.iloc[-1]), 4)))

    def get_display_info(self, instrument_id: str) -> InstrumentInfo:
        try:
            info = yf.Ticker(instrument_id).info or {}
        except Exception as e:
            logger.error(f"yfinance info failed for {instrument_id}: {e}")
            raise UnknownInstrument(f"Instrument not listed: {instrument_id}") from e

        name = info.get("shortName") or info.get("longName")
        if not name:
            raise UnknownInstrument(f"Instrument not listed: {instrument_id}")
        return InstrumentInfo(symbol=info.get("symbol") or instrument_id, display_name=name)
