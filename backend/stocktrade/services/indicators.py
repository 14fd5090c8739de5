"""
Technical indicators over a close-price series, plus the simulated next-day
price prediction shown alongside them.

All functions take a plain sequence of prices (oldest first) and return lists
aligned to the end of the input: the last element always corresponds to the
last price.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd


def sma(prices: Sequence[float], period: int) -> List[float]:
    """Simple moving average; one value per full window."""
    if period <= 0:
        raise ValueError(f"period must be positive; got {period}")
    series = pd.Series(prices, dtype=float)
    return series.rolling(period).mean().dropna().tolist()


def ema(prices: Sequence[float], period: int) -> List[float]:
    """Exponential moving average seeded with the SMA of the first ``period`` prices."""
    if period <= 0:
        raise ValueError(f"period must be positive; got {period}")
    if len(prices) < period:
        return []
    seed = sum(prices[:period]) / period
    series = pd.Series([seed] + list(prices[period:]), dtype=float)
    return series.ewm(alpha=2 / (period + 1), adjust=False).mean().tolist()


def rsi(prices: Sequence[float], period: int = 14) -> List[float]:
    """
    Relative Strength Index with Wilder smoothing.

    A window without losses is divided by 1 instead of 0, which caps RSI below
    100 for a strictly rising series.
    """
    if period <= 0:
        raise ValueError(f"period must be positive; got {period}")
    changes = pd.Series(prices, dtype=float).diff().dropna().tolist()
    if len(changes) < period:
        return []

    gains = [max(c, 0.0) for c in changes]
    losses = [max(-c, 0.0) for c in changes]
    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period

    def _value(gain: float, loss: float) -> float:
        rs = gain / (loss if loss != 0 else 1)
        return 100 - (100 / (1 + rs))

    result = [_value(avg_gain, avg_loss)]
    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_value(avg_gain, avg_loss))
    return result


@dataclass
class MACDResult:
    line: List[float] = field(default_factory=list)
    signal: List[float] = field(default_factory=list)
    histogram: List[float] = field(default_factory=list)


def macd(
    prices: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """MACD line (fast EMA - slow EMA), its signal EMA and the histogram."""
    if fast_period >= slow_period:
        raise ValueError("fast_period must be shorter than slow_period")
    fast = ema(prices, fast_period)
    slow = ema(prices, slow_period)
    if not slow:
        return MACDResult()

    offset = slow_period - fast_period
    line = [f - s for f, s in zip(fast[offset:], slow)]
    signal = ema(line, signal_period)
    histogram = [m - s for m, s in zip(line[signal_period - 1:], signal)]
    return MACDResult(line=line, signal=signal, histogram=histogram)


@dataclass(frozen=True)
class PricePrediction:
    next_day_price: float
    confidence: float
    trend: str


def predict_next_price(price: float, rng: Optional[random.Random] = None) -> PricePrediction:
    """
    Random next-day price within +/-5%, with a 0.5% neutral band for the trend.
    """
    rng = rng or random.Random()
    move = price * (rng.random() * 0.1 - 0.05)
    if move > price * 0.005:
        trend = "up"
    elif move < -price * 0.005:
        trend = "down"
    else:
        trend = "neutral"
    return PricePrediction(
        next_day_price=round(price + move, 2),
        confidence=round(rng.random() * 0.25 + 0.7, 4),
        trend=trend,
    )


def compute_indicators(prices: Sequence[float], rng: Optional[random.Random] = None) -> Dict[str, object]:
    """Latest value of each indicator (None when the series is too short) and a prediction."""
    def _last(values: List[float]) -> Optional[float]:
        return round(values[-1], 4) if values else None

    macd_result = macd(prices)
    return {
        "sma_20": _last(sma(prices, 20)),
        "ema_12": _last(ema(prices, 12)),
        "ema_26": _last(ema(prices, 26)),
        "rsi_14": _last(rsi(prices, 14)),
        "macd": _last(macd_result.line),
        "macd_signal": _last(macd_result.signal),
        "macd_histogram": _last(macd_result.histogram),
        "prediction": predict_next_price(float(prices[-1]), rng) if len(prices) else None,
    }
