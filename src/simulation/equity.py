"""
Equity Tracker - Folds trade outcomes into a running equity curve.
"""
from datetime import datetime
from typing import Sequence

from src.models import EquityPoint, Trade
from src.simulation.drawdown import drawdown_pct


class EquityTracker:
    """Builds the time-ordered equity curve with running drawdown."""

    def build_curve(
        self,
        trades: Sequence[Trade],
        starting_capital: float,
        horizon_start: datetime,
    ) -> list[EquityPoint]:
        """
        Build the equity curve for a trade list.

        Args:
            trades: Trades in entry-time order
            starting_capital: Equity before the first trade
            horizon_start: Timestamp of the seed point

        Returns:
            Seed point followed by one point per trade exit
        """
        points = [
            EquityPoint(timestamp=horizon_start, equity=starting_capital, drawdown_pct=0.0)
        ]

        equity = starting_capital
        peak = starting_capital
        for trade in trades:
            equity += trade.pnl
            peak = max(peak, equity)
            points.append(
                EquityPoint(
                    timestamp=trade.exit_time,
                    equity=equity,
                    drawdown_pct=drawdown_pct(peak, equity),
                )
            )

        return points
