"""
Trade Synthesizer - Generates a synthetic trade history for a risk configuration.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

import numpy as np
from loguru import logger

from config.settings import SimulationSettings, get_settings
from src.models import RiskConfig, Trade
from src.simulation.sizing import (
    apply_exit_drag,
    direction,
    realized_pnl,
    size_position,
    target_exit_price,
)
from src.utils.exceptions import ConfigError


@dataclass(frozen=True)
class SynthesisState:
    """Values carried from one trade to the next."""

    capital: float
    base_price: float


class TradeSynthesizer:
    """
    Produces an ordered list of synthetic trades.

    Entries are evenly spaced over the horizon. Each trade risks a fixed
    share of the capital left after the previous trade, so sizing compounds.
    Outcomes, hold times and prices come from the injected random generator,
    which makes the output a pure function of config and seed.
    """

    def __init__(self, settings: Optional[SimulationSettings] = None):
        """
        Initialize synthesizer with simulation settings.

        Args:
            settings: Market model parameters (defaults to global settings)
        """
        self.settings = settings or get_settings().simulation

        if self.settings.min_hold_hours > self.settings.max_hold_hours:
            raise ConfigError(
                f"min_hold_hours ({self.settings.min_hold_hours}) must not exceed "
                f"max_hold_hours ({self.settings.max_hold_hours})"
            )

    def trade_count(self, config: RiskConfig) -> int:
        """
        Number of trades for the configured timeframe and horizon.

        Args:
            config: Risk configuration

        Returns:
            floor(trades_per_week * horizon_days / 7)
        """
        rate = self.settings.trades_per_week.get(config.timeframe)
        if rate is None:
            raise ConfigError(f"No trade rate configured for timeframe '{config.timeframe}'")
        if rate < 0:
            raise ConfigError(f"Trade rate for '{config.timeframe}' must be non-negative, got {rate}")

        return (rate * config.horizon_days) // 7

    def synthesize(self, config: RiskConfig, rng: np.random.Generator) -> list[Trade]:
        """
        Generate the trade history.

        Args:
            config: Risk configuration
            rng: Seeded random generator, owned by the caller

        Returns:
            Trades sorted by entry time (possibly empty)
        """
        count = self.trade_count(config)
        if count == 0:
            logger.warning(
                f"No trades for timeframe {config.timeframe} over {config.horizon_days} days"
            )
            return []

        spacing = timedelta(days=config.horizon_days) / count
        state = SynthesisState(
            capital=config.starting_capital,
            base_price=self.settings.base_price,
        )

        trades = []
        for i in range(count):
            entry_time = config.horizon_start + spacing * i
            trade, state = self._next_trade(i, entry_time, spacing, config, state, rng)
            trades.append(trade)

        logger.debug(
            f"Synthesized {count} trades, capital {config.starting_capital:,.2f} -> "
            f"{state.capital:,.2f}"
        )

        return sorted(trades, key=lambda t: t.entry_time)

    def _next_trade(
        self,
        index: int,
        entry_time: datetime,
        max_hold: timedelta,
        config: RiskConfig,
        state: SynthesisState,
        rng: np.random.Generator,
    ) -> tuple[Trade, SynthesisState]:
        """
        Build one trade and the state the following trade starts from.

        The hold is capped at ``max_hold`` so the position is closed before
        the next one opens.
        """
        s = self.settings

        hold_hours = float(rng.uniform(s.min_hold_hours, s.max_hold_hours))
        hold = min(timedelta(hours=hold_hours), max_hold)

        price_move = float(rng.uniform(-s.price_jitter, s.price_jitter))
        entry_price = state.base_price * (1 + price_move)

        size = size_position(state.capital, config.stop_loss_fraction, entry_price)

        is_win = float(rng.random()) < config.win_probability
        slippage = float(rng.uniform(0.0, s.max_slippage))

        target = target_exit_price(
            entry_price=entry_price,
            side=config.side,
            is_win=is_win,
            stop_loss_fraction=config.stop_loss_fraction,
            take_profit_fraction=config.take_profit_fraction,
        )
        exit_price = apply_exit_drag(target, config.side, s.fee_rate + slippage)

        pnl = realized_pnl(entry_price, exit_price, size.quantity, config.side)
        pnl_percent = (exit_price - entry_price) / entry_price * 100 * direction(config.side)

        trade = Trade(
            id=f"trade-{index + 1}",
            entry_time=entry_time,
            exit_time=entry_time + hold,
            entry_price=entry_price,
            exit_price=exit_price,
            quantity=size.quantity,
            side=config.side,
            pnl=pnl,
            pnl_percent=pnl_percent,
            hold_duration=hold,
            exit_reason="take-profit" if is_win else "stop-loss",
            risk_amount=size.risk_amount,
            fees=target * size.quantity * s.fee_rate,
        )

        drift = float(rng.uniform(-s.price_drift, s.price_drift))
        next_state = SynthesisState(
            capital=state.capital + pnl,
            base_price=state.base_price * (1 + drift),
        )
        return trade, next_state
