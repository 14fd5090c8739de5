from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey
from stocktrade.core.database import Base
from stocktrade.models.base import IdMixin


class HistorySnapshotRecord(Base, IdMixin):
    """
    Append-only mark-to-market series.
    """
    __tablename__ = "history_snapshots"

    owner_id = Column(String(100), ForeignKey("portfolios.owner_id"), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False)
    value = Column(Numeric(24, 10), nullable=False)
