from typing import Optional

from stocktrade.core.config import settings
from stocktrade.services.portfolio_store.base import PortfolioStore
from stocktrade.services.portfolio_store.memory_store import InMemoryPortfolioStore
from stocktrade.services.portfolio_store.sql_store import SqlPortfolioStore


def get_portfolio_store(backend: Optional[str] = None) -> PortfolioStore:
    """Factory to get a store for the configured backend."""
    backend = backend or settings.STORE_BACKEND
    if backend == "memory":
        return InMemoryPortfolioStore()
    if backend == "sql":
        from stocktrade.core.database import get_engine

        return SqlPortfolioStore(get_engine())
    raise ValueError(f"Unknown store backend: {backend}")


__all__ = [
    "PortfolioStore",
    "InMemoryPortfolioStore",
    "SqlPortfolioStore",
    "get_portfolio_store",
]
