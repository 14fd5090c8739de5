"""HTTP tests for the portfolio and stocks routers."""

from __future__ import annotations

from decimal import Decimal

import pytest

_D = Decimal
_BASE = "/api/v1/portfolio"


def _d(value) -> Decimal:
    return _D(str(value))


def _buy(client, owner="alice", **overrides):
    body = {
        "instrumentId": "stock-1",
        "symbol": "AAPL",
        "displayName": "Apple Inc.",
        "quantity": 10,
        "unitPrice": 40,
    }
    body.update(overrides)
    return client.post(f"{_BASE}/{owner}/buy", json=body)


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_root(client):
    assert client.get("/").json()["docs"] == "/docs"


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------

def test_first_access_provisions_portfolio(client):
    resp = client.get(f"{_BASE}/alice")
    assert resp.status_code == 200
    body = resp.json()
    assert body["ownerId"] == "alice"
    assert _d(body["balance"]) == _D("10000")
    assert body["holdings"] == []
    assert body["transactions"] == []


def test_add_funds(client):
    resp = client.post(f"{_BASE}/alice/funds", json={"amount": 500})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Funds added successfully"
    assert _d(body["balance"]) == _D("10500")
    assert body["transaction"]["type"] == "deposit"
    assert _d(body["transaction"]["totalAmount"]) == _D("500")
    assert body["transaction"]["quantity"] is None


@pytest.mark.parametrize("amount", [0, -5])
def test_add_funds_rejects_non_positive(client, amount):
    resp = client.post(f"{_BASE}/alice/funds", json={"amount": amount})
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidAmount"
    assert _d(client.get(f"{_BASE}/alice").json()["balance"]) == _D("10000")


@pytest.mark.parametrize("body", [{}, {"amount": None}, {"amount": "abc"}, {"amount": "NaN"}, {"amount": "Infinity"}])
def test_add_funds_rejects_missing_or_malformed_amount(client, body):
    resp = client.post(f"{_BASE}/alice/funds", json=body)
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidAmount"
    assert client.get(f"{_BASE}/alice").json()["transactions"] == []


def test_add_funds_accepts_numeric_string(client):
    resp = client.post(f"{_BASE}/alice/funds", json={"amount": "12.34"})
    assert resp.status_code == 200
    assert _d(resp.json()["balance"]) == _D("10012.34")


def test_trade_rejects_malformed_numbers(client):
    resp = _buy(client, unitPrice="ten")
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidAmount"

    resp = client.post(f"{_BASE}/alice/sell", json={"instrumentId": "stock-1", "unitPrice": 50})
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidAmount"


def test_trade_requires_instrument_id(client):
    resp = client.post(f"{_BASE}/alice/buy", json={"quantity": 1, "unitPrice": 1})
    assert resp.status_code == 422


def test_responses_use_camel_case(client):
    body = _buy(client).json()
    holding = body["portfolio"]["holdings"][0]
    assert set(holding) == {
        "instrumentId", "symbol", "displayName", "quantity", "averagePrice", "lastUpdated",
    }
    assert set(body["transaction"]) == {
        "id", "type", "instrumentId", "symbol", "quantity", "unitPrice",
        "totalAmount", "balanceAfter", "timestamp",
    }
    stock = client.get("/api/v1/stocks/stock-1").json()
    assert "previousPrice" in stock and "changePercent" in stock and "marketCap" in stock
    assert "previous_price" not in stock


def test_buy_then_sell(client):
    resp = _buy(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Stock purchased successfully"
    assert _d(body["portfolio"]["balance"]) == _D("9600")
    holding = body["portfolio"]["holdings"][0]
    assert holding["instrumentId"] == "stock-1"
    assert holding["symbol"] == "AAPL"
    assert _d(holding["quantity"]) == _D("10")
    assert _d(holding["averagePrice"]) == _D("40")

    resp = client.post(
        f"{_BASE}/alice/sell",
        json={"instrument_id": "stock-1", "quantity": 4, "unit_price": 60},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "Stock sold successfully"
    assert _d(body["portfolio"]["balance"]) == _D("9840")
    holding = body["portfolio"]["holdings"][0]
    assert _d(holding["quantity"]) == _D("6")
    assert _d(holding["averagePrice"]) == _D("40")
    assert body["transaction"]["type"] == "sell"
    assert _d(body["transaction"]["totalAmount"]) == _D("240")


def test_buy_uses_catalog_names_when_omitted(client):
    resp = client.post(
        f"{_BASE}/alice/buy",
        json={"instrumentId": "stock-2", "quantity": 1, "unitPrice": 100},
    )
    holding = resp.json()["portfolio"]["holdings"][0]
    assert holding["symbol"] == "MSFT"
    assert holding["displayName"] == "Microsoft Corporation"


def test_buy_insufficient_funds(client):
    resp = _buy(client, quantity=1000, unitPrice=11)
    assert resp.status_code == 400
    assert resp.json()["error"] == "InsufficientFunds"
    body = client.get(f"{_BASE}/alice").json()
    assert _d(body["balance"]) == _D("10000")
    assert body["holdings"] == []


def test_buy_unknown_instrument_is_404(client):
    resp = client.post(
        f"{_BASE}/alice/buy",
        json={"instrumentId": "stock-404", "quantity": 1, "unitPrice": 1},
    )
    assert resp.status_code == 404
    assert resp.json()["error"] == "UnknownInstrument"


def test_sell_errors(client):
    resp = client.post(f"{_BASE}/alice/sell", json={"instrumentId": "stock-1", "quantity": 1, "unitPrice": 50})
    assert resp.status_code == 400
    assert resp.json()["error"] == "NoSuchHolding"

    _buy(client)
    resp = client.post(f"{_BASE}/alice/sell", json={"instrumentId": "stock-1", "quantity": 11, "unitPrice": 50})
    assert resp.status_code == 400
    assert resp.json()["error"] == "InsufficientShares"


def test_trade_requires_positive_quantity(client):
    resp = _buy(client, quantity=0)
    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidAmount"


def test_transactions_newest_first(client):
    client.post(f"{_BASE}/alice/funds", json={"amount": 100})
    _buy(client)
    client.post(f"{_BASE}/alice/sell", json={"instrumentId": "stock-1", "quantity": 10, "unitPrice": 45})

    types = [t["type"] for t in client.get(f"{_BASE}/alice/transactions").json()]
    assert types == ["sell", "buy", "deposit"]
    assert client.get(f"{_BASE}/alice").json()["holdings"] == []


def test_history_summary_and_performance(client):
    client.post(f"{_BASE}/alice/funds", json={"amount": 500})
    _buy(client)

    history = client.get(f"{_BASE}/alice/history").json()
    assert [_d(s["value"]) for s in history] == [_D("10500"), _D("10600")]

    summary = client.get(f"{_BASE}/alice/summary").json()
    assert _d(summary["balance"]) == _D("10100")
    assert _d(summary["holdingsValue"]) == _D("500")
    assert _d(summary["costBasis"]) == _D("400")
    assert _d(summary["gainLoss"]) == _D("100")
    assert _d(summary["gainLossPercent"]) == _D("25")
    assert _d(summary["totalValue"]) == _D("10600")
    assert summary["holdings"][0]["symbol"] == "AAPL"

    performance = client.get(f"{_BASE}/alice/performance").json()
    assert performance["snapshotCount"] == 2
    assert performance["totalReturn"] == pytest.approx(10600 / 10500 - 1)
    assert performance["maxDrawdown"] == 0.0


def test_owners_are_isolated(client):
    client.post(f"{_BASE}/alice/funds", json={"amount": 1})
    assert _d(client.get(f"{_BASE}/bob").json()["balance"]) == _D("10000")


# ---------------------------------------------------------------------------
# Stocks
# ---------------------------------------------------------------------------

def test_list_stocks(client):
    stocks = client.get("/api/v1/stocks").json()
    assert len(stocks) == 10
    assert stocks[0]["id"] == "stock-1"
    assert stocks[0]["symbol"] == "AAPL"


def test_stock_lookups(client):
    assert client.get("/api/v1/stocks/stock-2").json()["symbol"] == "MSFT"
    assert client.get("/api/v1/stocks/symbol/NVDA").json()["id"] == "stock-7"

    resp = client.get("/api/v1/stocks/stock-404")
    assert resp.status_code == 404
    assert resp.json()["error"] == "UnknownInstrument"


def test_rankings(client):
    trending = client.get("/api/v1/stocks/trending/list", params={"limit": 3}).json()
    assert len(trending) == 3
    assert [s["volume"] for s in trending] == sorted((s["volume"] for s in trending), reverse=True)

    gainers = client.get("/api/v1/stocks/gainers/list").json()
    losers = client.get("/api/v1/stocks/losers/list").json()
    assert gainers[0]["changePercent"] >= gainers[-1]["changePercent"]
    assert losers[0]["changePercent"] <= losers[-1]["changePercent"]

    assert client.get("/api/v1/stocks/trending/list", params={"limit": 0}).status_code == 422


def test_market_update(client, market):
    before = {s.id: s.price for s in market.list_stocks()}
    resp = client.post("/api/v1/stocks/market/update")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Market prices updated"}
    for stock in client.get("/api/v1/stocks").json():
        assert abs(_d(stock["price"]) - before[stock["id"]]) <= before[stock["id"]] * _D("0.01") + _D("0.01")


def test_chart(client):
    points = client.get("/api/v1/stocks/stock-1/chart", params={"days": 10}).json()
    assert len(points) == 11
    assert client.get("/api/v1/stocks/stock-1/chart", params={"days": 0}).status_code == 422


def test_indicators(client):
    body = client.get("/api/v1/stocks/stock-3/indicators").json()
    assert body["stockId"] == "stock-3"
    for key in ("sma20", "ema12", "ema26", "rsi14", "macd", "macdSignal", "macdHistogram"):
        assert body[key] is not None
    assert body["prediction"]["trend"] in {"up", "down", "neutral"}
