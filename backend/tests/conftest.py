from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from stocktrade.api.main import app
from stocktrade.core.services import get_ledger, get_market
from stocktrade.services.ledger_service import PortfolioLedger
from stocktrade.services.market_data import InstrumentInfo, SimulatedMarket, StaticQuoteSource
from stocktrade.services.portfolio_store import InMemoryPortfolioStore


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(seconds=1)):
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.current += self.step
        return self.current


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def quotes() -> StaticQuoteSource:
    return StaticQuoteSource(
        {"stock-1": "50", "stock-2": "100", "stock-3": "20"},
        names={
            "stock-1": InstrumentInfo(symbol="AAPL", display_name="Apple Inc."),
            "stock-2": InstrumentInfo(symbol="MSFT", display_name="Microsoft Corporation"),
        },
    )


@pytest.fixture
def store() -> InMemoryPortfolioStore:
    return InMemoryPortfolioStore()


@pytest.fixture
def ledger(store, quotes, clock) -> PortfolioLedger:
    return PortfolioLedger(
        store=store,
        quotes=quotes,
        catalog=quotes,
        starting_balance=Decimal("10000"),
        clock=clock,
    )


@pytest.fixture
def market() -> SimulatedMarket:
    return SimulatedMarket(seed=42)


@pytest.fixture
def client(ledger, market):
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_market] = lambda: market
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
