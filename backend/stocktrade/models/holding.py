from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, UniqueConstraint
from stocktrade.core.database import Base
from stocktrade.models.base import IdMixin


class HoldingRecord(Base, IdMixin):
    """
    Current holdings. Rewritten on every save; never holds a zero quantity.
    """
    __tablename__ = "holdings"
    __table_args__ = (UniqueConstraint("owner_id", "instrument_id", name="uq_holding_owner_instrument"),)

    owner_id = Column(String(100), ForeignKey("portfolios.owner_id"), nullable=False, index=True)
    instrument_id = Column(String(50), nullable=False)
    symbol = Column(String(20), nullable=False)
    display_name = Column(String(255), nullable=False)
    quantity = Column(Numeric(24, 10), nullable=False)
    average_price = Column(Numeric(24, 10), nullable=False)
    last_updated = Column(DateTime(timezone=True), nullable=False)
