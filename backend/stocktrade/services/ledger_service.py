"""
PortfolioLedger: cash balance, holdings and transaction history per owner.

Design invariants
-----------------
1. **All monetary values use Decimal**, so balance changes are exact.
2. **Weighted-average cost basis**: a buy re-averages the holding's price, a
   sell never touches it.
3. **No zero rows**: a holding whose quantity reaches 0 is removed.
4. **All-or-nothing**: every operation works on a private copy loaded from the
   store. Validation, mutation, transaction append and history snapshot all run
   on that copy and it is written back only if every step succeeded, so a failed
   operation leaves the stored portfolio untouched.
5. **Per-owner critical section**: each operation, including the lazy
   provisioning read, runs under the owner's lock. Different owners never
   contend.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional

from stocktrade.core.config import settings
from stocktrade.core.exceptions import (
    InsufficientFunds,
    InsufficientShares,
    InvalidAmount,
    NoSuchHolding,
)
from stocktrade.services.history_recorder import HistoryRecorder
from stocktrade.services.ledger_types import (
    Holding,
    HistorySnapshot,
    LedgerResult,
    Portfolio,
    Transaction,
    TransactionType,
    to_decimal,
)
from stocktrade.services.market_data.base import InstrumentCatalog, QuoteSource
from stocktrade.services.owner_locks import OwnerLocks
from stocktrade.services.portfolio_store.base import PortfolioStore

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PortfolioLedger:
    """Single source of truth for portfolio accounting."""

    def __init__(
        self,
        store: PortfolioStore,
        quotes: QuoteSource,
        catalog: Optional[InstrumentCatalog] = None,
        starting_balance: Optional[Decimal] = None,
        locks: Optional[OwnerLocks] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Args:
            store:            Where portfolios live between operations.
            quotes:           Prices used for history snapshots.
            catalog:          Display lookups for buys that omit symbol/name.
            starting_balance: Balance of a lazily provisioned portfolio.
            locks:            Per-owner lock registry.
            clock:            Timestamp source for transactions and snapshots.
        """
        if starting_balance is None:
            starting_balance = settings.STARTING_BALANCE
        starting_balance = to_decimal(starting_balance, "starting_balance")
        if starting_balance < _ZERO:
            raise ValueError(f"starting_balance must be non-negative; got {starting_balance}")

        self.store = store
        self.quotes = quotes
        self.catalog = catalog
        self.starting_balance = starting_balance
        self.locks = locks or OwnerLocks(timeout=settings.OWNER_LOCK_TIMEOUT_SECONDS)
        self.recorder = HistoryRecorder(quotes)
        self._clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_or_create(self, owner_id: str) -> Portfolio:
        """
        Return the owner's portfolio, provisioning it on first access.

        Provisioning is a write, so this takes the owner's lock like any mutation.
        """
        with self.locks.hold(owner_id):
            return self._load(owner_id)

    get_portfolio = get_or_create

    def get_transaction_history(self, owner_id: str) -> List[Transaction]:
        """Transactions newest first. Ties keep reverse insertion order."""
        portfolio = self.get_or_create(owner_id)
        newest_first = list(reversed(portfolio.transactions))
        return sorted(newest_first, key=lambda t: t.timestamp, reverse=True)

    def get_history(self, owner_id: str) -> List[HistorySnapshot]:
        """History snapshots in the order they were appended."""
        return list(self.get_or_create(owner_id).history)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def deposit(self, owner_id: str, amount) -> LedgerResult:
        amount = to_decimal(amount, "amount")
        if amount <= _ZERO:
            logger.warning(f"Rejected deposit of {amount} for {owner_id}")
            raise InvalidAmount(f"Amount must be positive; got {amount}")

        def apply(portfolio: Portfolio, now: datetime) -> Transaction:
            portfolio.balance += amount
            return Transaction(
                id=str(uuid.uuid4()),
                type=TransactionType.DEPOSIT,
                total_amount=amount,
                balance_after=portfolio.balance,
                timestamp=now,
            )

        result = self._mutate(owner_id, apply)
        logger.info(f"Deposit {amount} for {owner_id}; balance {result.portfolio.balance}")
        return result

    def buy(
        self,
        owner_id: str,
        instrument_id: str,
        quantity,
        unit_price,
        symbol: Optional[str] = None,
        display_name: Optional[str] = None,
    ) -> LedgerResult:
        quantity, unit_price = self._validate_trade(owner_id, "buy", quantity, unit_price)
        cost = quantity * unit_price

        def apply(portfolio: Portfolio, now: datetime) -> Transaction:
            if cost > portfolio.balance:
                logger.warning(
                    f"Rejected buy of {quantity} {instrument_id} for {owner_id}: "
                    f"cost {cost} exceeds balance {portfolio.balance}"
                )
                raise InsufficientFunds(
                    f"Insufficient funds: cost {cost} exceeds balance {portfolio.balance}"
                )

            holding = portfolio.holdings.get(instrument_id)
            if holding is None:
                holding_symbol, holding_name = self._display_info(instrument_id, symbol, display_name)
                holding = Holding(
                    instrument_id=instrument_id,
                    symbol=holding_symbol,
                    display_name=holding_name,
                    quantity=quantity,
                    average_price=unit_price,
                    last_updated=now,
                )
                portfolio.holdings[instrument_id] = holding
            else:
                new_quantity = holding.quantity + quantity
                holding.average_price = (
                    holding.quantity * holding.average_price + quantity * unit_price
                ) / new_quantity
                holding.quantity = new_quantity
                holding.last_updated = now

            portfolio.balance -= cost
            return Transaction(
                id=str(uuid.uuid4()),
                type=TransactionType.BUY,
                total_amount=cost,
                balance_after=portfolio.balance,
                timestamp=now,
                instrument_id=instrument_id,
                symbol=holding.symbol,
                quantity=quantity,
                unit_price=unit_price,
            )

        result = self._mutate(owner_id, apply)
        logger.info(f"Bought {quantity} {instrument_id} @ {unit_price} for {owner_id}")
        return result

    def sell(self, owner_id: str, instrument_id: str, quantity, unit_price) -> LedgerResult:
        quantity, unit_price = self._validate_trade(owner_id, "sell", quantity, unit_price)
        proceeds = quantity * unit_price

        def apply(portfolio: Portfolio, now: datetime) -> Transaction:
            holding = portfolio.holdings.get(instrument_id)
            if holding is None:
                logger.warning(f"Rejected sell of {instrument_id} for {owner_id}: not held")
                raise NoSuchHolding(f"Instrument not in portfolio: {instrument_id}")
            if quantity > holding.quantity:
                logger.warning(
                    f"Rejected sell of {quantity} {instrument_id} for {owner_id}: "
                    f"only {holding.quantity} held"
                )
                raise InsufficientShares(
                    f"Insufficient shares: requested {quantity}, held {holding.quantity}"
                )

            portfolio.balance += proceeds
            holding.quantity -= quantity
            if holding.quantity == _ZERO:
                del portfolio.holdings[instrument_id]
            else:
                holding.last_updated = now

            return Transaction(
                id=str(uuid.uuid4()),
                type=TransactionType.SELL,
                total_amount=proceeds,
                balance_after=portfolio.balance,
                timestamp=now,
                instrument_id=instrument_id,
                symbol=holding.symbol,
                quantity=quantity,
                unit_price=unit_price,
            )

        result = self._mutate(owner_id, apply)
        logger.info(f"Sold {quantity} {instrument_id} @ {unit_price} for {owner_id}")
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, owner_id: str) -> Portfolio:
        """Fetch or provision. Caller must hold the owner's lock."""
        portfolio = self.store.get(owner_id)
        if portfolio is None:
            portfolio = Portfolio(owner_id=owner_id, balance=self.starting_balance)
            self.store.put(portfolio)
            logger.info(f"Provisioned portfolio for {owner_id} with balance {self.starting_balance}")
        return portfolio

    def _mutate(
        self,
        owner_id: str,
        apply: Callable[[Portfolio, datetime], Transaction],
    ) -> LedgerResult:
        with self.locks.hold(owner_id):
            working = self._load(owner_id)
            now = self._clock()
            # any LedgerError below discards the working copy
            transaction = apply(working, now)
            working.transactions.append(transaction)
            self.recorder.record(working, now)
            self.store.put(working)
        return LedgerResult(portfolio=working, transaction=transaction)

    def _display_info(self, instrument_id: str, symbol: Optional[str], display_name: Optional[str]):
        if symbol and display_name:
            return symbol, display_name
        if self.catalog is None:
            return symbol or instrument_id, display_name or symbol or instrument_id
        info = self.catalog.get_display_info(instrument_id)
        return symbol or info.symbol, display_name or info.display_name

    def _validate_trade(self, owner_id: str, action: str, quantity, unit_price):
        quantity = to_decimal(quantity, "quantity")
        unit_price = to_decimal(unit_price, "unit_price")
        if quantity <= _ZERO:
            logger.warning(f"Rejected {action} for {owner_id}: quantity {quantity}")
            raise InvalidAmount(f"Quantity must be positive; got {quantity}")
        if unit_price < _ZERO:
            logger.warning(f"Rejected {action} for {owner_id}: unit price {unit_price}")
            raise InvalidAmount(f"Unit price must be non-negative; got {unit_price}")
        return quantity, unit_price
