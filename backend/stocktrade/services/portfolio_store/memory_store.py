import copy
import logging
import threading
from typing import Dict, List, Optional

from stocktrade.services.ledger_types import Portfolio
from stocktrade.services.portfolio_store.base import PortfolioStore

logger = logging.getLogger(__name__)


class InMemoryPortfolioStore(PortfolioStore):
    """
    Process-local store. All state is lost when the process exits.
    """

    def __init__(self):
        self._portfolios: Dict[str, Portfolio] = {}
        self._guard = threading.Lock()

    def get(self, owner_id: str) -> Optional[Portfolio]:
        with self._guard:
            portfolio = self._portfolios.get(owner_id)
        return copy.deepcopy(portfolio) if portfolio is not None else None

    def put(self, portfolio: Portfolio) -> None:
        snapshot = copy.deepcopy(portfolio)
        with self._guard:
            self._portfolios[portfolio.owner_id] = snapshot

    def owners(self) -> List[str]:
        with self._guard:
            return list(self._portfolios.keys())

    def clear(self) -> None:
        with self._guard:
            self._portfolios.clear()
        logger.info("In-memory portfolio store cleared")
