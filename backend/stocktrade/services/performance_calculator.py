"""
Performance Calculator Service.

Computes return and drawdown metrics from a portfolio's mark-to-market
history snapshots.
"""
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import List, Tuple

from stocktrade.services.ledger_types import HistorySnapshot


@dataclass
class PerformanceMetrics:
    """Return and drawdown metrics over the snapshot series."""
    snapshot_count: int = 0
    start_value: float = 0.0
    end_value: float = 0.0
    total_return: float = 0.0
    high_water_mark: float = 0.0

    # Drawdown
    current_drawdown: float = 0.0
    max_drawdown: float = 0.0

    # Step returns (snapshot to snapshot)
    best_step_return: float = 0.0
    worst_step_return: float = 0.0
    pct_winning_steps: float = 0.0


class PerformanceCalculator:
    """
    Calculates performance metrics from the history snapshot series.
    """

    def to_series(self, history: List[HistorySnapshot]) -> pd.Series:
        """Snapshot values as a float series indexed by timestamp, in append order."""
        if not history:
            return pd.Series(dtype=float)
        return pd.Series(
            [float(s.value) for s in history],
            index=pd.DatetimeIndex([s.timestamp for s in history]),
            dtype=float,
        )

    def calculate(self, history: List[HistorySnapshot]) -> PerformanceMetrics:
        """
        Calculate metrics for a snapshot history.

        Args:
            history: Snapshots in the order they were recorded

        Returns:
            PerformanceMetrics; all zeros below two snapshots except the counters
        """
        metrics = PerformanceMetrics(snapshot_count=len(history))
        values = self.to_series(history)

        if values.empty:
            return metrics

        metrics.start_value = float(values.iloc[0])
        metrics.end_value = float(values.iloc[-1])
        metrics.high_water_mark = float(values.max())

        if len(values) < 2:
            return metrics

        if metrics.start_value > 0:
            metrics.total_return = (metrics.end_value / metrics.start_value) - 1

        metrics.current_drawdown, metrics.max_drawdown = self.calculate_drawdown_metrics(values)

        step_returns = values.pct_change().replace([np.inf, -np.inf], np.nan).dropna()
        if len(step_returns) > 0:
            metrics.best_step_return = float(step_returns.max())
            metrics.worst_step_return = float(step_returns.min())
            metrics.pct_winning_steps = float((step_returns > 0).mean() * 100)

        return metrics

    def calculate_drawdown_metrics(self, values: pd.Series) -> Tuple[float, float]:
        """
        Calculate drawdown metrics.

        Returns:
            Tuple of (current_drawdown, max_drawdown) as positive fractions
        """
        if values.empty:
            return 0.0, 0.0

        rolling_max = values.expanding().max()
        drawdowns = ((values - rolling_max) / rolling_max).replace([np.inf, -np.inf], np.nan).fillna(0.0)

        current_dd = abs(float(drawdowns.iloc[-1]))
        max_dd = abs(float(drawdowns.min()))
        return current_dd, max_dd


# Singleton instance for convenience
performance_calculator = PerformanceCalculator()
