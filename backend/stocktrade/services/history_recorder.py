"""
History recorder.

Appends one mark-to-market snapshot per ledger mutation. Every snapshot queries
the quote source afresh for each holding; prices are never cached.

Valuation runs inside the owner's critical section, after validation. With a
networked quote source (yfinance) that means one remote lookup per holding
while the lock is held, and a failed lookup aborts the whole mutation,
deposits included. The simulated and static sources do no I/O.
"""

import logging
from datetime import datetime
from decimal import Decimal

from stocktrade.services.ledger_types import HistorySnapshot, Portfolio
from stocktrade.services.market_data.base import QuoteSource

logger = logging.getLogger(__name__)


class HistoryRecorder:
    def __init__(self, quotes: QuoteSource):
        self.quotes = quotes

    def mark_to_market(self, portfolio: Portfolio) -> Decimal:
        """
        Balance plus the current market value of every holding.

        Raises UnknownInstrument when any held instrument cannot be priced; the
        whole valuation fails rather than silently dropping a position.
        """
        value = portfolio.balance
        for holding in portfolio.holdings.values():
            price = self.quotes.get_current_price(holding.instrument_id)
            value += holding.quantity * price
        return value

    def record(self, portfolio: Portfolio, timestamp: datetime) -> HistorySnapshot:
        snapshot = HistorySnapshot(timestamp=timestamp, value=self.mark_to_market(portfolio))
        portfolio.history.append(snapshot)
        logger.debug(f"Recorded snapshot for {portfolio.owner_id}: {snapshot.value}")
        return snapshot
