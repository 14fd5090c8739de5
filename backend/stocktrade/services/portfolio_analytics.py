"""
Portfolio valuation summary: market value, cost basis and unrealised gain/loss.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from stocktrade.services.ledger_types import Holding, Portfolio
from stocktrade.services.market_data.base import QuoteSource

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class HoldingValuation:
    holding: Holding
    current_price: Decimal
    market_value: Decimal
    gain_loss: Decimal


@dataclass(frozen=True)
class PortfolioSummary:
    owner_id: str
    balance: Decimal
    holdings_value: Decimal
    cost_basis: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal
    total_value: Decimal
    holdings: List[HoldingValuation]


def summarize(portfolio: Portfolio, quotes: QuoteSource) -> PortfolioSummary:
    """
    Value every holding at the current quote.

    Holdings come back sorted by market value, largest first. Raises
    UnknownInstrument if a held instrument cannot be priced.
    """
    valuations = []
    for holding in portfolio.holdings.values():
        price = quotes.get_current_price(holding.instrument_id)
        market_value = holding.quantity * price
        valuations.append(HoldingValuation(
            holding=holding,
            current_price=price,
            market_value=market_value,
            gain_loss=market_value - holding.cost_basis,
        ))
    valuations.sort(key=lambda v: v.market_value, reverse=True)

    holdings_value = sum((v.market_value for v in valuations), _ZERO)
    cost_basis = sum((v.holding.cost_basis for v in valuations), _ZERO)
    gain_loss = holdings_value - cost_basis
    gain_loss_percent = (gain_loss / cost_basis * _HUNDRED) if cost_basis != _ZERO else _ZERO

    return PortfolioSummary(
        owner_id=portfolio.owner_id,
        balance=portfolio.balance,
        holdings_value=holdings_value,
        cost_basis=cost_basis,
        gain_loss=gain_loss,
        gain_loss_percent=gain_loss_percent,
        total_value=portfolio.balance + holdings_value,
        holdings=valuations,
    )
