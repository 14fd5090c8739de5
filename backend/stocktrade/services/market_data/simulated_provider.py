"""
Simulated market.

Generates a catalogue of stocks with random prices and moves them with a
bounded random walk on every market update. Serves as both the quote source
and the instrument catalogue when no real feed is configured.
"""

import logging
import random
import string
import threading
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from stocktrade.core.exceptions import UnknownInstrument
from stocktrade.services.market_data.base import InstrumentCatalog, InstrumentInfo, QuoteSource

logger = logging.getLogger(__name__)

TECH_STOCKS = [
    ("AAPL", "Apple Inc."),
    ("MSFT", "Microsoft Corporation"),
    ("GOOGL", "Alphabet Inc."),
    ("AMZN", "Amazon.com Inc."),
    ("META", "Meta Platforms Inc."),
    ("TSLA", "Tesla Inc."),
    ("NVDA", "NVIDIA Corporation"),
    ("ADBE", "Adobe Inc."),
    ("CRM", "Salesforce Inc."),
    ("INTC", "Intel Corporation"),
]

_CENT = Decimal("0.01")
_MIN_PRICE = Decimal("0.01")


def _cents(value: float) -> Decimal:
    return Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP)


def _change_percent(price: Decimal, previous_price: Decimal) -> float:
    if previous_price == 0:
        return 0.0
    return round(float((price - previous_price) / previous_price * 100), 4)


@dataclass(frozen=True)
class StockPrediction:
    next_day_price: Decimal
    confidence: float
    trend: str  # up / down / neutral


@dataclass(frozen=True)
class StockQuote:
    id: str
    symbol: str
    name: str
    price: Decimal
    previous_price: Decimal
    change: Decimal
    change_percent: float
    volume: int
    market_cap: int
    last_updated: datetime
    prediction: Optional[StockPrediction] = None


@dataclass(frozen=True)
class ChartPoint:
    date: date
    value: Decimal
    volume: int


class SimulatedMarket(QuoteSource, InstrumentCatalog):
    """In-process random market keyed by instrument id (``stock-1`` ...)."""

    def __init__(
        self,
        stock_count: int = len(TECH_STOCKS),
        seed: Optional[int] = None,
        tick_pct: float = 0.01,
    ):
        if tick_pct < 0:
            raise ValueError(f"tick_pct must be non-negative; got {tick_pct}")
        self._rng = random.Random(seed)
        self._tick_pct = tick_pct
        self._lock = threading.Lock()
        self._stocks: Dict[str, StockQuote] = {}
        self._generate(stock_count)

    # ------------------------------------------------------------------
    # Catalogue generation
    # ------------------------------------------------------------------

    def _generate(self, stock_count: int) -> None:
        listings = list(TECH_STOCKS[:stock_count])
        used = {symbol for symbol, _ in listings}
        while len(listings) < stock_count:
            symbol = "".join(self._rng.choice(string.ascii_uppercase) for _ in range(3))
            if symbol in used:
                continue
            used.add(symbol)
            listings.append((symbol, f"{symbol} Corporation"))

        for index, (symbol, name) in enumerate(listings):
            stock_id = f"stock-{index + 1}"
            self._stocks[stock_id] = self._random_stock(stock_id, symbol, name)
        logger.info(f"Simulated market initialised with {len(self._stocks)} stocks")

    def _random_stock(self, stock_id: str, symbol: str, name: str) -> StockQuote:
        rng = self._rng
        price = _cents(rng.uniform(50, 500))
        previous_price = _cents(float(price) * (1 + (rng.random() * 0.06 - 0.03)))

        prediction = None
        if rng.random() > 0.3:
            move = float(price) * (rng.random() * 0.1 - 0.05)
            trend = "up" if move > 0 else "down" if move < 0 else "neutral"
            prediction = StockPrediction(
                next_day_price=_cents(float(price) + move),
                confidence=round(rng.random() * 0.3 + 0.7, 4),
                trend=trend,
            )

        return StockQuote(
            id=stock_id,
            symbol=symbol,
            name=name,
            price=price,
            previous_price=previous_price,
            change=price - previous_price,
            change_percent=_change_percent(price, previous_price),
            volume=rng.randint(500_000, 10_000_000),
            market_cap=rng.randint(10_000_000_000, 3_000_000_000_000),
            last_updated=datetime.now(timezone.utc),
            prediction=prediction,
        )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def list_stocks(self) -> List[StockQuote]:
        with self._lock:
            return list(self._stocks.values())

    def get_stock(self, stock_id: str) -> StockQuote:
        with self._lock:
            stock = self._stocks.get(stock_id)
        if stock is None:
            raise UnknownInstrument(f"Stock not found: {stock_id}")
        return stock

    def get_stock_by_symbol(self, symbol: str) -> StockQuote:
        for stock in self.list_stocks():
            if stock.symbol == symbol:
                return stock
        raise UnknownInstrument(f"Stock not found: {symbol}")

    def trending(self, limit: int = 10) -> List[StockQuote]:
        return sorted(self.list_stocks(), key=lambda s: s.volume, reverse=True)[:limit]

    def gainers(self, limit: int = 10) -> List[StockQuote]:
        return sorted(self.list_stocks(), key=lambda s: s.change_percent, reverse=True)[:limit]

    def losers(self, limit: int = 10) -> List[StockQuote]:
        return sorted(self.list_stocks(), key=lambda s: s.change_percent)[:limit]

    # QuoteSource / InstrumentCatalog

    def get_current_price(self, instrument_id: str) -> Decimal:
        return self.get_stock(instrument_id).price

    def get_display_info(self, instrument_id: str) -> InstrumentInfo:
        stock = self.get_stock(instrument_id)
        return InstrumentInfo(symbol=stock.symbol, display_name=stock.name)

    # ------------------------------------------------------------------
    # Market movement
    # ------------------------------------------------------------------

    def update_prices(self) -> List[StockQuote]:
        """Move every price by a random fraction within +/- tick_pct."""
        now = datetime.now(timezone.utc)
        with self._lock:
            for stock_id, stock in self._stocks.items():
                move = float(stock.price) * (self._rng.random() * 2 * self._tick_pct - self._tick_pct)
                new_price = max(_cents(float(stock.price) + move), _MIN_PRICE)
                self._stocks[stock_id] = replace(
                    stock,
                    price=new_price,
                    change=new_price - stock.previous_price,
                    change_percent=_change_percent(new_price, stock.previous_price),
                    last_updated=now,
                )
            updated = list(self._stocks.values())
        logger.debug(f"Market prices updated for {len(updated)} stocks")
        return updated

    def price_history(self, stock_id: str, days: int = 30, volatility: float = 0.05) -> List[ChartPoint]:
        """Random-walk chart series of ``days + 1`` daily points ending today."""
        stock = self.get_stock(stock_id)
        if days < 0:
            raise ValueError(f"days must be non-negative; got {days}")

        points: List[ChartPoint] = []
        current = float(stock.price)
        today = date.today()
        with self._lock:
            for offset in range(days, -1, -1):
                current += current * (self._rng.random() * volatility * 2 - volatility)
                points.append(
                    ChartPoint(
                        date=today - timedelta(days=offset),
                        value=max(_cents(current), _MIN_PRICE),
                        volume=self._rng.randint(100_000, 10_000_000),
                    )
                )
        return points
