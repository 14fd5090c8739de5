"""
Per-owner mutual exclusion.

Each owner gets its own lock so that operations on different portfolios run
concurrently while the read-validate-mutate-append sequence of one owner is a
single critical section.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from stocktrade.core.exceptions import OwnerBusy

logger = logging.getLogger(__name__)


class OwnerLocks:
    def __init__(self, timeout: Optional[float] = None):
        self._timeout = timeout
        # one lock per owner ever seen, never evicted; grows with the owner count
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _lock_for(self, owner_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(owner_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[owner_id] = lock
            return lock

    @contextmanager
    def hold(self, owner_id: str) -> Iterator[None]:
        lock = self._lock_for(owner_id)
        acquired = lock.acquire(timeout=self._timeout if self._timeout is not None else -1)
        if not acquired:
            logger.warning(f"Timed out after {self._timeout}s waiting for owner {owner_id}")
            raise OwnerBusy(f"Portfolio {owner_id} is busy; try again")
        try:
            yield
        finally:
            lock.release()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
