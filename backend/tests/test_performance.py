"""Tests for the portfolio summary and the performance calculator."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from stocktrade.core.exceptions import UnknownInstrument
from stocktrade.services.ledger_types import HistorySnapshot, Holding, Portfolio
from stocktrade.services.performance_calculator import PerformanceCalculator
from stocktrade.services.portfolio_analytics import summarize

_D = Decimal
_T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _history(*values) -> list[HistorySnapshot]:
    return [
        HistorySnapshot(timestamp=_T0 + timedelta(minutes=i), value=_D(str(v)))
        for i, v in enumerate(values)
    ]


def _holding(instrument_id: str, quantity: str, average_price: str) -> Holding:
    return Holding(
        instrument_id=instrument_id,
        symbol=instrument_id.upper(),
        display_name=instrument_id,
        quantity=_D(quantity),
        average_price=_D(average_price),
        last_updated=_T0,
    )


# ---------------------------------------------------------------------------
# PerformanceCalculator
# ---------------------------------------------------------------------------

def test_no_history_gives_zeros():
    metrics = PerformanceCalculator().calculate([])
    assert metrics.snapshot_count == 0
    assert metrics.total_return == 0.0
    assert metrics.max_drawdown == 0.0


def test_single_snapshot():
    metrics = PerformanceCalculator().calculate(_history(10000))
    assert metrics.snapshot_count == 1
    assert metrics.start_value == metrics.end_value == 10000.0
    assert metrics.high_water_mark == 10000.0
    assert metrics.total_return == 0.0


def test_returns_and_drawdown():
    metrics = PerformanceCalculator().calculate(_history(100, 120, 90, 110))

    assert metrics.snapshot_count == 4
    assert metrics.total_return == pytest.approx(0.10)
    assert metrics.high_water_mark == 120.0
    assert metrics.max_drawdown == pytest.approx(0.25)
    assert metrics.current_drawdown == pytest.approx(10 / 120)
    assert metrics.best_step_return == pytest.approx(0.2222, abs=1e-4)
    assert metrics.worst_step_return == pytest.approx(-0.25)
    assert metrics.pct_winning_steps == pytest.approx(200 / 3)


def test_new_high_clears_current_drawdown():
    metrics = PerformanceCalculator().calculate(_history(100, 80, 130))
    assert metrics.current_drawdown == 0.0
    assert metrics.max_drawdown == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# summarize
# ---------------------------------------------------------------------------

def test_summary_values_holdings_at_current_quotes(quotes):
    portfolio = Portfolio(
        owner_id="alice",
        balance=_D("1000"),
        holdings={
            "stock-2": _holding("stock-2", "2", "80"),
            "stock-1": _holding("stock-1", "10", "55"),
        },
    )

    summary = summarize(portfolio, quotes)

    assert [v.holding.instrument_id for v in summary.holdings] == ["stock-1", "stock-2"]
    assert summary.holdings_value == _D("700")
    assert summary.cost_basis == _D("710")
    assert summary.gain_loss == _D("-10")
    assert summary.gain_loss_percent == _D("-10") / _D("710") * 100
    assert summary.total_value == _D("1700")
    assert summary.holdings[0].gain_loss == _D("-50")
    assert summary.holdings[1].gain_loss == _D("40")


def test_summary_of_cash_only_portfolio(quotes):
    summary = summarize(Portfolio(owner_id="bob", balance=_D("250")), quotes)
    assert summary.holdings == []
    assert summary.gain_loss_percent == _D("0")
    assert summary.total_value == _D("250")


def test_summary_fails_for_unpriceable_holding(quotes):
    portfolio = Portfolio(
        owner_id="alice",
        balance=_D("0"),
        holdings={"stock-9": _holding("stock-9", "1", "10")},
    )
    with pytest.raises(UnknownInstrument):
        summarize(portfolio, quotes)
