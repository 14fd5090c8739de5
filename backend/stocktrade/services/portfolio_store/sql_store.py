import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine

from stocktrade.core.database import init_db, make_session_factory
from stocktrade.models.history_snapshot import HistorySnapshotRecord
from stocktrade.models.holding import HoldingRecord
from stocktrade.models.portfolio import PortfolioRecord
from stocktrade.models.transaction import TransactionRecord
from stocktrade.services.ledger_types import (
    Holding,
    HistorySnapshot,
    Portfolio,
    Transaction,
    TransactionType,
)
from stocktrade.services.portfolio_store.base import PortfolioStore

logger = logging.getLogger(__name__)


def _aware(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything we write is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _optional_decimal(value) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


class SqlPortfolioStore(PortfolioStore):
    """
    SQLAlchemy-backed store. Holdings are rewritten on every ``put``;
    transactions and history snapshots are append-only, so only rows not yet
    persisted are inserted.
    """

    def __init__(self, engine: Engine, create_schema: bool = True):
        self.engine = engine
        self._session_factory = make_session_factory(engine)
        if create_schema:
            init_db(engine)

    def get(self, owner_id: str) -> Optional[Portfolio]:
        with self._session_factory() as session:
            record = session.get(PortfolioRecord, owner_id)
            if record is None:
                return None

            holdings = session.execute(
                select(HoldingRecord)
                .where(HoldingRecord.owner_id == owner_id)
                .order_by(HoldingRecord.id)
            ).scalars().all()
            transactions = session.execute(
                select(TransactionRecord)
                .where(TransactionRecord.owner_id == owner_id)
                .order_by(TransactionRecord.id)
            ).scalars().all()
            snapshots = session.execute(
                select(HistorySnapshotRecord)
                .where(HistorySnapshotRecord.owner_id == owner_id)
                .order_by(HistorySnapshotRecord.id)
            ).scalars().all()

            return Portfolio(
                owner_id=record.owner_id,
                balance=Decimal(record.balance),
                holdings={
                    h.instrument_id: Holding(
                        instrument_id=h.instrument_id,
                        symbol=h.symbol,
                        display_name=h.display_name,
                        quantity=Decimal(h.quantity),
                        average_price=Decimal(h.average_price),
                        last_updated=_aware(h.last_updated),
                    )
                    for h in holdings
                },
                transactions=[
                    Transaction(
                        id=t.transaction_id,
                        type=TransactionType(t.type),
                        total_amount=Decimal(t.total_amount),
                        balance_after=Decimal(t.balance_after),
                        timestamp=_aware(t.timestamp),
                        instrument_id=t.instrument_id,
                        symbol=t.symbol,
                        quantity=_optional_decimal(t.quantity),
                        unit_price=_optional_decimal(t.unit_price),
                    )
                    for t in transactions
                ],
                history=[
                    HistorySnapshot(timestamp=_aware(s.timestamp), value=Decimal(s.value))
                    for s in snapshots
                ],
            )

    def put(self, portfolio: Portfolio) -> None:
        owner_id = portfolio.owner_id
        with self._session_factory.begin() as session:
            record = session.get(PortfolioRecord, owner_id)
            if record is None:
                record = PortfolioRecord(owner_id=owner_id, balance=portfolio.balance)
                session.add(record)
                session.flush()
                logger.info(f"Created portfolio row for {owner_id}")
            else:
                record.balance = portfolio.balance

            session.execute(delete(HoldingRecord).where(HoldingRecord.owner_id == owner_id))
            for holding in portfolio.holdings.values():
                session.add(HoldingRecord(
                    owner_id=owner_id,
                    instrument_id=holding.instrument_id,
                    symbol=holding.symbol,
                    display_name=holding.display_name,
                    quantity=holding.quantity,
                    average_price=holding.average_price,
                    last_updated=holding.last_updated,
                ))

            known_ids = set(session.execute(
                select(TransactionRecord.transaction_id).where(TransactionRecord.owner_id == owner_id)
            ).scalars())
            for transaction in portfolio.transactions:
                if transaction.id in known_ids:
                    continue
                session.add(TransactionRecord(
                    transaction_id=transaction.id,
                    owner_id=owner_id,
                    type=transaction.type.value,
                    instrument_id=transaction.instrument_id,
                    symbol=transaction.symbol,
                    quantity=transaction.quantity,
                    unit_price=transaction.unit_price,
                    total_amount=transaction.total_amount,
                    balance_after=transaction.balance_after,
                    timestamp=transaction.timestamp,
                ))

            stored_snapshots = session.execute(
                select(func.count())
                .select_from(HistorySnapshotRecord)
                .where(HistorySnapshotRecord.owner_id == owner_id)
            ).scalar_one()
            for snapshot in portfolio.history[stored_snapshots:]:
                session.add(HistorySnapshotRecord(
                    owner_id=owner_id,
                    timestamp=snapshot.timestamp,
                    value=snapshot.value,
                ))

    def owners(self) -> List[str]:
        with self._session_factory() as session:
            return list(session.execute(
                select(PortfolioRecord.owner_id).order_by(PortfolioRecord.owner_id)
            ).scalars())
