"""BacktestMetrics and BacktestResult models for simulated backtest output."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.models.strategy import StrategyConfig
from src.models.trade import EquityPoint, Trade


class BacktestMetrics(BaseModel):
    """Summary performance metrics derived from one simulated trade list."""

    model_config = {"from_attributes": True, "frozen": True}

    # Core performance
    total_return_pct: float = 0.0
    total_return_abs: float = 0.0
    win_rate: float = Field(default=0.0, ge=0.0, le=100.0)
    profit_factor: float = Field(default=0.0, ge=0.0)

    # Risk
    max_drawdown_pct: float = Field(default=0.0, ge=0.0)
    sharpe_ratio: Optional[float] = None
    sortino_ratio: Optional[float] = None

    # Trade statistics
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    average_win: float = 0.0
    average_loss: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0

    # Time
    start_date: datetime
    end_date: datetime
    duration: str

    starting_capital: float = Field(gt=0)
    final_equity: float


class BacktestResult(BaseModel):
    """Aggregated backtest output: metrics, trade log and equity curve."""

    model_config = {"from_attributes": True, "frozen": True}

    strategy: StrategyConfig
    seed: Optional[int] = None
    metrics: BacktestMetrics
    trades: list[Trade] = []
    equity_curve: list[EquityPoint] = []
