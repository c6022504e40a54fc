"""
Metrics Aggregator - Summary performance statistics for a simulated trade list.
"""
from datetime import datetime, timezone
from typing import Optional, Sequence

import numpy as np
from loguru import logger

from src.models import BacktestMetrics, Trade
from src.simulation.drawdown import drawdown_pct

DAYS_PER_YEAR = 365


def sharpe_ratio(returns: Sequence[float], periods_per_year: float) -> Optional[float]:
    """
    Annualised Sharpe ratio with a zero risk-free rate.

    Returns None when fewer than two returns exist or they do not vary.
    """
    if len(returns) < 2 or periods_per_year <= 0:
        return None

    values = np.asarray(returns, dtype=float)
    std = float(values.std(ddof=1))
    if std == 0:
        return None

    return float(values.mean() / std * np.sqrt(periods_per_year))


def sortino_ratio(returns: Sequence[float], periods_per_year: float) -> Optional[float]:
    """
    Annualised Sortino ratio with a zero target return.

    Returns None when fewer than two returns exist or none is negative.
    """
    if len(returns) < 2 or periods_per_year <= 0:
        return None

    values = np.asarray(returns, dtype=float)
    downside = np.minimum(values, 0.0)
    downside_dev = float(np.sqrt(np.mean(downside ** 2)))
    if downside_dev == 0:
        return None

    return float(values.mean() / downside_dev * np.sqrt(periods_per_year))


class MetricsAggregator:
    """
    Computes the metrics record from a trade list and starting capital.

    Keeps its own running/peak equity bookkeeping instead of reading the
    equity curve, so it can be tested on its own.
    """

    def aggregate(
        self,
        trades: Sequence[Trade],
        starting_capital: float,
        horizon_days: int,
        fallback_time: Optional[datetime] = None,
    ) -> BacktestMetrics:
        """
        Aggregate trade outcomes into BacktestMetrics.

        Args:
            trades: Trades in entry-time order
            starting_capital: Equity before the first trade
            horizon_days: Length of the simulated period
            fallback_time: Start/end date used when there are no trades
                (default: current UTC time)

        Returns:
            BacktestMetrics
        """
        if starting_capital <= 0:
            raise ValueError(f"starting_capital must be positive, got {starting_capital}")

        total_pnl = sum(t.pnl for t in trades)
        wins = [t.pnl for t in trades if t.is_win]
        losses = [t.pnl for t in trades if t.is_loss]

        win_rate = len(wins) / len(trades) * 100 if trades else 0.0
        average_win = sum(wins) / len(wins) if wins else 0.0
        average_loss = abs(sum(losses) / len(losses)) if losses else 0.0
        profit_factor = average_win / average_loss if average_loss > 0 else 0.0

        # Equity fold: drawdown and per-trade returns
        equity = starting_capital
        peak = starting_capital
        max_drawdown = 0.0
        returns = []
        for trade in trades:
            if equity > 0:
                returns.append(trade.pnl / equity)
            equity += trade.pnl
            peak = max(peak, equity)
            max_drawdown = max(max_drawdown, drawdown_pct(peak, equity))

        periods_per_year = (
            len(trades) * DAYS_PER_YEAR / horizon_days if horizon_days > 0 else 0.0
        )

        if trades:
            start_date = trades[0].entry_time
            end_date = trades[-1].exit_time
        else:
            start_date = end_date = fallback_time or datetime.now(timezone.utc)

        metrics = BacktestMetrics(
            total_return_pct=total_pnl / starting_capital * 100,
            total_return_abs=total_pnl,
            win_rate=win_rate,
            profit_factor=profit_factor,
            max_drawdown_pct=max_drawdown,
            sharpe_ratio=sharpe_ratio(returns, periods_per_year),
            sortino_ratio=sortino_ratio(returns, periods_per_year),
            total_trades=len(trades),
            winning_trades=len(wins),
            losing_trades=len(losses),
            average_win=average_win,
            average_loss=average_loss,
            largest_win=max(wins) if wins else 0.0,
            largest_loss=min(losses) if losses else 0.0,
            start_date=start_date,
            end_date=end_date,
            duration=f"{horizon_days} days",
            starting_capital=starting_capital,
            final_equity=equity,
        )

        logger.debug(
            f"Aggregated {metrics.total_trades} trades: "
            f"return {metrics.total_return_pct:+.2f}%, "
            f"win rate {metrics.win_rate:.1f}%, "
            f"max drawdown {metrics.max_drawdown_pct:.2f}%"
        )

        return metrics
