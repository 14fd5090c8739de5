from sqlalchemy import Column, String, Numeric
from stocktrade.core.database import Base
from stocktrade.models.base import TimestampMixin


class PortfolioRecord(Base, TimestampMixin):
    """
    One row per owner: the cash balance.
    """
    __tablename__ = "portfolios"

    owner_id = Column(String(100), primary_key=True)
    balance = Column(Numeric(24, 10), nullable=False)
