from src.models.strategy import (
    RISK_LIMITS,
    TRADING_PAIRS,
    RiskConfig,
    StrategyConfig,
    Timeframe,
    TradeSide,
)
from src.models.trade import EquityPoint, ExitReason, Trade
from src.models.backtest import BacktestMetrics, BacktestResult

__all__ = [
    "RISK_LIMITS",
    "TRADING_PAIRS",
    "RiskConfig",
    "StrategyConfig",
    "Timeframe",
    "TradeSide",
    "EquityPoint",
    "ExitReason",
    "Trade",
    "BacktestMetrics",
    "BacktestResult",
]
