"""
Stocks API Router (simulated market).
"""
import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Query

from stocktrade.api.schemas import ChartPointSchema, IndicatorsSchema, StockSchema
from stocktrade.core.services import get_market
from stocktrade.services.indicators import compute_indicators
from stocktrade.services.market_data import SimulatedMarket

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[StockSchema])
def list_stocks(market: SimulatedMarket = Depends(get_market)):
    return market.list_stocks()


@router.get("/trending/list", response_model=list[StockSchema])
def trending_stocks(limit: int = Query(default=10, ge=1, le=100), market: SimulatedMarket = Depends(get_market)):
    """Most traded stocks by volume."""
    return market.trending(limit)


@router.get("/gainers/list", response_model=list[StockSchema])
def top_gainers(limit: int = Query(default=10, ge=1, le=100), market: SimulatedMarket = Depends(get_market)):
    return market.gainers(limit)


@router.get("/losers/list", response_model=list[StockSchema])
def top_losers(limit: int = Query(default=10, ge=1, le=100), market: SimulatedMarket = Depends(get_market)):
    return market.losers(limit)


@router.post("/market/update")
def update_market(market: SimulatedMarket = Depends(get_market)) -> dict[str, str]:
    """Apply one random price move to every stock."""
    updated = market.update_prices()
    logger.info(f"Market update applied to {len(updated)} stocks")
    return {"message": "Market prices updated"}


@router.get("/symbol/{symbol}", response_model=StockSchema)
def get_stock_by_symbol(symbol: str, market: SimulatedMarket = Depends(get_market)):
    return market.get_stock_by_symbol(symbol)


@router.get("/{stock_id}", response_model=StockSchema)
def get_stock(stock_id: str, market: SimulatedMarket = Depends(get_market)):
    return market.get_stock(stock_id)


@router.get("/{stock_id}/chart", response_model=list[ChartPointSchema])
def get_chart(
    stock_id: str,
    days: int = Query(default=30, ge=1, le=365),
    market: SimulatedMarket = Depends(get_market),
):
    return market.price_history(stock_id, days=days)


@router.get("/{stock_id}/indicators", response_model=IndicatorsSchema)
def get_indicators(stock_id: str, market: SimulatedMarket = Depends(get_market)):
    """Indicators over a simulated 60-day chart ending at the current price."""
    stock = market.get_stock(stock_id)
    closes = [float(point.value) for point in market.price_history(stock_id, days=60)]
    indicators = compute_indicators(closes)
    prediction = indicators.pop("prediction")
    return IndicatorsSchema(
        stock_id=stock.id,
        symbol=stock.symbol,
        price=stock.price,
        prediction=asdict(prediction) if prediction is not None else None,
        **indicators,
    )
