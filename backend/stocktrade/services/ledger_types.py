"""
Portfolio ledger data model.

A Portfolio exclusively owns its holdings, transactions and history snapshots.
Transactions and snapshots are immutable once created and are only ever
appended, so insertion order is chronological order.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Dict, List, Optional

from stocktrade.core.exceptions import InvalidAmount


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    BUY = "buy"
    SELL = "sell"


@dataclass
class Holding:
    """A position in one instrument. ``quantity`` is always > 0."""
    instrument_id: str
    symbol: str
    display_name: str
    quantity: Decimal
    average_price: Decimal
    last_updated: datetime

    @property
    def cost_basis(self) -> Decimal:
        return self.quantity * self.average_price


@dataclass(frozen=True)
class Transaction:
    id: str
    type: TransactionType
    total_amount: Decimal
    balance_after: Decimal
    timestamp: datetime
    instrument_id: Optional[str] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None


@dataclass(frozen=True)
class HistorySnapshot:
    timestamp: datetime
    value: Decimal


@dataclass
class Portfolio:
    owner_id: str
    balance: Decimal
    holdings: Dict[str, Holding] = field(default_factory=dict)
    transactions: List[Transaction] = field(default_factory=list)
    history: List[HistorySnapshot] = field(default_factory=list)

    def holding_list(self) -> List[Holding]:
        return list(self.holdings.values())


@dataclass(frozen=True)
class LedgerResult:
    """Outcome of a successful mutation: the committed portfolio and its new transaction."""
    portfolio: Portfolio
    transaction: Transaction


def to_decimal(value, field_name: str = "amount") -> Decimal:
    """Coerce a number or numeric string to a finite Decimal."""
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidAmount(f"{field_name} is not a number: {value!r}")
    if not result.is_finite():
        raise InvalidAmount(f"{field_name} must be finite; got {value!r}")
    return result
