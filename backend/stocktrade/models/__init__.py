# Base
from stocktrade.models.base import TimestampMixin, IdMixin

# Accounting
from stocktrade.models.portfolio import PortfolioRecord
from stocktrade.models.holding import HoldingRecord
from stocktrade.models.transaction import TransactionRecord
from stocktrade.models.history_snapshot import HistorySnapshotRecord

__all__ = [
    "TimestampMixin",
    "IdMixin",
    "PortfolioRecord",
    "HoldingRecord",
    "TransactionRecord",
    "HistorySnapshotRecord",
]
