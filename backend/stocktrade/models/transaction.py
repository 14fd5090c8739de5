from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from stocktrade.core.database import Base
from stocktrade.models.base import IdMixin


class TransactionRecord(Base, IdMixin):
    """
    Append-only transaction log; ``id`` order is insertion order.
    """
    __tablename__ = "transactions"

    transaction_id = Column(String(36), unique=True, nullable=False)
    owner_id = Column(String(100), ForeignKey("portfolios.owner_id"), nullable=False, index=True)
    type = Column(String(10), nullable=False)
    instrument_id = Column(String(50))
    symbol = Column(String(20))
    quantity = Column(Numeric(24, 10))
    unit_price = Column(Numeric(24, 10))
    total_amount = Column(Numeric(24, 10), nullable=False)
    balance_after = Column(Numeric(24, 10), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)
