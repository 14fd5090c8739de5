"""
Request and response bodies for the portfolio and stocks routers.

Every body is camelCase on the wire. Requests also accept the snake_case field
names. Numeric request fields are handed to the ledger as sent so that a
missing or malformed amount is reported as InvalidAmount.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from stocktrade.services.ledger_types import Holding, HistorySnapshot, Portfolio, Transaction
from stocktrade.services.portfolio_analytics import PortfolioSummary


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ---------- Requests ----------

class FundsRequest(CamelModel):
    amount: Any = None


class BuyRequest(CamelModel):
    instrument_id: str
    symbol: Optional[str] = None
    display_name: Optional[str] = None
    quantity: Any = None
    unit_price: Any = None


class SellRequest(CamelModel):
    instrument_id: str
    quantity: Any = None
    unit_price: Any = None


# ---------- Portfolio ----------

class HoldingSchema(CamelModel):
    instrument_id: str
    symbol: str
    display_name: str
    quantity: Decimal
    average_price: Decimal
    last_updated: datetime

    @classmethod
    def from_holding(cls, holding: Holding) -> "HoldingSchema":
        return cls(
            instrument_id=holding.instrument_id,
            symbol=holding.symbol,
            display_name=holding.display_name,
            quantity=holding.quantity,
            average_price=holding.average_price,
            last_updated=holding.last_updated,
        )


class TransactionSchema(CamelModel):
    id: str
    type: str
    instrument_id: Optional[str] = None
    symbol: Optional[str] = None
    quantity: Optional[Decimal] = None
    unit_price: Optional[Decimal] = None
    total_amount: Decimal
    balance_after: Decimal
    timestamp: datetime

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "TransactionSchema":
        return cls(
            id=transaction.id,
            type=transaction.type.value,
            instrument_id=transaction.instrument_id,
            symbol=transaction.symbol,
            quantity=transaction.quantity,
            unit_price=transaction.unit_price,
            total_amount=transaction.total_amount,
            balance_after=transaction.balance_after,
            timestamp=transaction.timestamp,
        )


class SnapshotSchema(CamelModel):
    timestamp: datetime
    value: Decimal

    @classmethod
    def from_snapshot(cls, snapshot: HistorySnapshot) -> "SnapshotSchema":
        return cls(timestamp=snapshot.timestamp, value=snapshot.value)


class PortfolioSchema(CamelModel):
    owner_id: str
    balance: Decimal
    holdings: list[HoldingSchema]
    transactions: list[TransactionSchema]

    @classmethod
    def from_portfolio(cls, portfolio: Portfolio) -> "PortfolioSchema":
        return cls(
            owner_id=portfolio.owner_id,
            balance=portfolio.balance,
            holdings=[HoldingSchema.from_holding(h) for h in portfolio.holding_list()],
            transactions=[TransactionSchema.from_transaction(t) for t in portfolio.transactions],
        )


class FundsResponse(CamelModel):
    message: str
    balance: Decimal
    transaction: TransactionSchema


class TradeResponse(CamelModel):
    message: str
    portfolio: PortfolioSchema
    transaction: TransactionSchema


class HoldingValuationSchema(CamelModel):
    instrument_id: str
    symbol: str
    display_name: str
    quantity: Decimal
    average_price: Decimal
    current_price: Decimal
    market_value: Decimal
    gain_loss: Decimal


class SummarySchema(CamelModel):
    owner_id: str
    balance: Decimal
    holdings_value: Decimal
    cost_basis: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal
    total_value: Decimal
    holdings: list[HoldingValuationSchema]

    @classmethod
    def from_summary(cls, summary: PortfolioSummary) -> "SummarySchema":
        return cls(
            owner_id=summary.owner_id,
            balance=summary.balance,
            holdings_value=summary.holdings_value,
            cost_basis=summary.cost_basis,
            gain_loss=summary.gain_loss,
            gain_loss_percent=summary.gain_loss_percent,
            total_value=summary.total_value,
            holdings=[
                HoldingValuationSchema(
                    instrument_id=v.holding.instrument_id,
                    symbol=v.holding.symbol,
                    display_name=v.holding.display_name,
                    quantity=v.holding.quantity,
                    average_price=v.holding.average_price,
                    current_price=v.current_price,
                    market_value=v.market_value,
                    gain_loss=v.gain_loss,
                )
                for v in summary.holdings
            ],
        )


class PerformanceSchema(CamelModel):
    snapshot_count: int
    start_value: float
    end_value: float
    total_return: float
    high_water_mark: float
    current_drawdown: float
    max_drawdown: float
    best_step_return: float
    worst_step_return: float
    pct_winning_steps: float


# ---------- Stocks ----------

class PredictionSchema(CamelModel):
    next_day_price: Decimal
    confidence: float
    trend: str

    class Config:
        from_attributes = True


class StockSchema(CamelModel):
    id: str
    symbol: str
    name: str
    price: Decimal
    previous_price: Decimal
    change: Decimal
    change_percent: float
    volume: int
    market_cap: int
    last_updated: datetime
    prediction: Optional[PredictionSchema] = None

    class Config:
        from_attributes = True


class ChartPointSchema(CamelModel):
    date: date
    value: Decimal
    volume: int

    class Config:
        from_attributes = True


class IndicatorsSchema(CamelModel):
    stock_id: str
    symbol: str
    price: Decimal
    sma_20: Optional[float] = Field(default=None, alias="sma20")
    ema_12: Optional[float] = Field(default=None, alias="ema12")
    ema_26: Optional[float] = Field(default=None, alias="ema26")
    rsi_14: Optional[float] = Field(default=None, alias="rsi14")
    macd: Optional[float] = None
    macd_signal: Optional[float] = None
    macd_histogram: Optional[float] = None
    prediction: Optional[PredictionSchema] = None
