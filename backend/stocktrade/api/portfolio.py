"""
Portfolio API Router.

Every route is a thin mapping onto one PortfolioLedger operation. Ledger errors
are rendered by the application-level handler in ``main``.
"""
from dataclasses import asdict

from fastapi import APIRouter, Depends

from stocktrade.api.schemas import (
    BuyRequest,
    FundsRequest,
    FundsResponse,
    PerformanceSchema,
    PortfolioSchema,
    SellRequest,
    SnapshotSchema,
    SummarySchema,
    TradeResponse,
    TransactionSchema,
)
from stocktrade.core.services import get_ledger
from stocktrade.services.ledger_service import PortfolioLedger
from stocktrade.services.performance_calculator import performance_calculator
from stocktrade.services.portfolio_analytics import summarize

router = APIRouter()


@router.get("/{owner_id}", response_model=PortfolioSchema)
def get_portfolio(owner_id: str, ledger: PortfolioLedger = Depends(get_ledger)):
    """Get the owner's portfolio, provisioning it on first access."""
    return PortfolioSchema.from_portfolio(ledger.get_or_create(owner_id))


@router.post("/{owner_id}/funds", response_model=FundsResponse)
def add_funds(owner_id: str, body: FundsRequest, ledger: PortfolioLedger = Depends(get_ledger)):
    result = ledger.deposit(owner_id, body.amount)
    return FundsResponse(
        message="Funds added successfully",
        balance=result.portfolio.balance,
        transaction=TransactionSchema.from_transaction(result.transaction),
    )


@router.post("/{owner_id}/buy", response_model=TradeResponse)
def buy_stock(owner_id: str, body: BuyRequest, ledger: PortfolioLedger = Depends(get_ledger)):
    result = ledger.buy(
        owner_id,
        body.instrument_id,
        body.quantity,
        body.unit_price,
        symbol=body.symbol,
        display_name=body.display_name,
    )
    return TradeResponse(
        message="Stock purchased successfully",
        portfolio=PortfolioSchema.from_portfolio(result.portfolio),
        transaction=TransactionSchema.from_transaction(result.transaction),
    )


@router.post("/{owner_id}/sell", response_model=TradeResponse)
def sell_stock(owner_id: str, body: SellRequest, ledger: PortfolioLedger = Depends(get_ledger)):
    result = ledger.sell(owner_id, body.instrument_id, body.quantity, body.unit_price)
    return TradeResponse(
        message="Stock sold successfully",
        portfolio=PortfolioSchema.from_portfolio(result.portfolio),
        transaction=TransactionSchema.from_transaction(result.transaction),
    )


@router.get("/{owner_id}/transactions", response_model=list[TransactionSchema])
def get_transactions(owner_id: str, ledger: PortfolioLedger = Depends(get_ledger)):
    """Transaction history, newest first."""
    return [TransactionSchema.from_transaction(t) for t in ledger.get_transaction_history(owner_id)]


@router.get("/{owner_id}/history", response_model=list[SnapshotSchema])
def get_history(owner_id: str, ledger: PortfolioLedger = Depends(get_ledger)):
    """Mark-to-market snapshots, oldest first."""
    return [SnapshotSchema.from_snapshot(s) for s in ledger.get_history(owner_id)]


@router.get("/{owner_id}/summary", response_model=SummarySchema)
def get_summary(owner_id: str, ledger: PortfolioLedger = Depends(get_ledger)):
    """Holdings valued at current quotes with unrealised gain/loss."""
    portfolio = ledger.get_or_create(owner_id)
    return SummarySchema.from_summary(summarize(portfolio, ledger.quotes))


@router.get("/{owner_id}/performance", response_model=PerformanceSchema)
def get_performance(owner_id: str, ledger: PortfolioLedger = Depends(get_ledger)):
    metrics = performance_calculator.calculate(ledger.get_history(owner_id))
    return PerformanceSchema(**asdict(metrics))
