from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class InstrumentInfo:
    symbol: str
    display_name: str


class QuoteSource(ABC):
    """Abstract base class for current-price providers."""

    @abstractmethod
    def get_current_price(self, instrument_id: str) -> Decimal:
        """
        Return the current price of an instrument.
        Raises UnknownInstrument if the instrument cannot be priced.
        """
        pass


class InstrumentCatalog(ABC):
    """Abstract base class for instrument display lookups."""

    @abstractmethod
    def get_display_info(self, instrument_id: str) -> InstrumentInfo:
        """
        Return symbol and display name for an instrument.
        Raises UnknownInstrument if the instrument is not listed.
        """
        pass
