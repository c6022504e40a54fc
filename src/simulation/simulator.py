"""
Backtest Simulator - Runs synthesis, equity tracking and aggregation in one call.
"""
from typing import Any, Mapping, Optional

import numpy as np
from loguru import logger
from pydantic import ValidationError

from config.settings import SimulationSettings, get_settings
from src.models import BacktestResult, RiskConfig, StrategyConfig
from src.simulation.equity import EquityTracker
from src.simulation.metrics import MetricsAggregator
from src.simulation.synthesizer import TradeSynthesizer
from src.utils.exceptions import InvalidStrategyError

_RISK_FIELDS = set(RiskConfig.model_fields)

# Query-string names used by the strategy builder UI
_FIELD_ALIASES = {
    "stopLoss": "stop_loss_pct",
    "takeProfit": "take_profit_pct",
    "startingCapital": "starting_capital",
    "initialCapital": "starting_capital",
    "horizonDays": "horizon_days",
    "winProbability": "win_probability",
}


def parse_strategy(
    payload: Mapping[str, Any],
    settings: Optional[SimulationSettings] = None,
) -> StrategyConfig:
    """
    Build a validated StrategyConfig from loose input.

    Risk fields may be given at the top level or under ``"risk"``. Missing
    capital, horizon and win probability come from the simulation settings.
    None values are treated as missing.

    Args:
        payload: Mapping of strategy fields
        settings: Defaults source (defaults to global settings)

    Returns:
        StrategyConfig

    Raises:
        InvalidStrategyError: Listing every invalid or missing field
    """
    settings = settings or get_settings().simulation

    flat = {_FIELD_ALIASES.get(k, k): v for k, v in payload.items() if v is not None}
    nested = flat.pop("risk", None) or {}
    if not isinstance(nested, Mapping):
        raise InvalidStrategyError(["risk: must be a mapping of risk parameters"])

    risk: dict[str, Any] = {
        "starting_capital": settings.default_starting_capital,
        "horizon_days": settings.default_horizon_days,
        "win_probability": settings.default_win_probability,
    }
    risk.update({k: v for k, v in flat.items() if k in _RISK_FIELDS})
    risk.update(
        {_FIELD_ALIASES.get(k, k): v for k, v in nested.items() if v is not None}
    )

    strategy = {k: v for k, v in flat.items() if k not in _RISK_FIELDS}

    try:
        return StrategyConfig(**strategy, risk=risk)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in exc.errors()
        ]
        raise InvalidStrategyError(errors) from exc


class BacktestSimulator:
    """
    Runs a complete simulated backtest for a strategy.

    Holds no per-run state: every call builds its own random generator from
    the seed, so repeated calls with the same strategy and seed return
    identical results.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None):
        """
        Initialize simulator components.

        Args:
            settings: Market model parameters (defaults to global settings)
        """
        self.settings = settings or get_settings().simulation
        self.synthesizer = TradeSynthesizer(self.settings)
        self.equity_tracker = EquityTracker()
        self.metrics_aggregator = MetricsAggregator()

    def run(self, strategy: StrategyConfig, seed: Optional[int] = None) -> BacktestResult:
        """
        Simulate a backtest.

        Args:
            strategy: Validated strategy configuration
            seed: Random seed; None draws fresh entropy

        Returns:
            BacktestResult with metrics, trades and equity curve
        """
        risk = strategy.risk
        rng = np.random.default_rng(seed)

        logger.info(
            f"Simulating '{strategy.name}' {strategy.pair} {risk.timeframe}: "
            f"SL {risk.stop_loss_pct}%, TP {risk.take_profit_pct}%, "
            f"{risk.horizon_days} days, capital ${risk.starting_capital:,.2f}"
        )

        trades = self.synthesizer.synthesize(risk, rng)
        equity_curve = self.equity_tracker.build_curve(
            trades=trades,
            starting_capital=risk.starting_capital,
            horizon_start=risk.horizon_start,
        )
        metrics = self.metrics_aggregator.aggregate(
            trades=trades,
            starting_capital=risk.starting_capital,
            horizon_days=risk.horizon_days,
            fallback_time=risk.horizon_end,
        )

        logger.info(
            f"Backtest complete: {metrics.total_trades} trades, "
            f"return {metrics.total_return_pct:+.2f}%, "
            f"max drawdown {metrics.max_drawdown_pct:.2f}%"
        )

        return BacktestResult(
            strategy=strategy,
            seed=seed,
            metrics=metrics,
            trades=trades,
            equity_curve=equity_curve,
        )
