from abc import ABC, abstractmethod
from typing import List, Optional

from stocktrade.services.ledger_types import Portfolio


class PortfolioStore(ABC):
    """
    Abstract portfolio storage keyed by owner id.

    ``get`` must return an object independent of the stored state and ``put``
    must not keep a reference to its argument, so a caller can mutate a
    portfolio freely and only ``put`` makes the change visible. Callers are
    responsible for per-owner locking.
    """

    @abstractmethod
    def get(self, owner_id: str) -> Optional[Portfolio]:
        """Return the owner's portfolio, or None if it was never stored."""
        pass

    @abstractmethod
    def put(self, portfolio: Portfolio) -> None:
        """Persist the whole portfolio, replacing the previous version."""
        pass

    @abstractmethod
    def owners(self) -> List[str]:
        """Owner ids with a stored portfolio."""
        pass
