import threading
from decimal import Decimal
from typing import Dict, Mapping, Optional

from stocktrade.core.exceptions import UnknownInstrument
from stocktrade.services.ledger_types import to_decimal
from stocktrade.services.market_data.base import InstrumentCatalog, InstrumentInfo, QuoteSource


class StaticQuoteSource(QuoteSource, InstrumentCatalog):
    """Fixed price table, for scripted scenarios and tests."""

    def __init__(
        self,
        prices: Mapping[str, object],
        names: Optional[Mapping[str, InstrumentInfo]] = None,
    ):
        self._lock = threading.Lock()
        self._prices: Dict[str, Decimal] = {
            key: to_decimal(value, "price") for key, value in prices.items()
        }
        self._names: Dict[str, InstrumentInfo] = dict(names or {})

    def set_price(self, instrument_id: str, price) -> None:
        with self._lock:
            self._prices[instrument_id] = to_decimal(price, "price")

    def remove(self, instrument_id: str) -> None:
        with self._lock:
            self._prices.pop(instrument_id, None)
            self._names.pop(instrument_id, None)

    def get_current_price(self, instrument_id: str) -> Decimal:
        with self._lock:
            price = self._prices.get(instrument_id)
        if price is None:
            raise UnknownInstrument(f"No price for instrument {instrument_id}")
        return price

    def get_display_info(self, instrument_id: str) -> InstrumentInfo:
        with self._lock:
            info = self._names.get(instrument_id)
            listed = instrument_id in self._prices
        if info is not None:
            return info
        if listed:
            return InstrumentInfo(symbol=instrument_id, display_name=instrument_id)
        raise UnknownInstrument(f"Instrument not listed: {instrument_id}")
