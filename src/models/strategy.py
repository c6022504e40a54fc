import math
from datetime import datetime, timedelta, timezone
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

Timeframe = Literal["15m", "1h", "4h", "1d"]
TradeSide = Literal["long", "short"]

TRADING_PAIRS = (
    "BTC/USDT",
    "ETH/USDT",
    "SOL/USDT",
    "ADA/USDT",
    "DOT/USDT",
)

# Upper bounds mirror the strategy builder sliders.
RISK_LIMITS = {
    "stop_loss_pct": 50.0,
    "take_profit_pct": 500.0,
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class RiskConfig(BaseModel):
    """
    Strategy parameters that drive a simulated backtest.

    Percentages are expressed in percent (2.0 means 2%). ``horizon_end`` pins
    the simulated clock: the horizon covers the ``horizon_days`` before it.
    """

    model_config = {"from_attributes": True, "frozen": True}

    stop_loss_pct: float = Field(gt=0, le=RISK_LIMITS["stop_loss_pct"])
    take_profit_pct: float = Field(gt=0, le=RISK_LIMITS["take_profit_pct"])
    timeframe: Timeframe = "1h"
    starting_capital: float = Field(default=10000.0, gt=0)
    horizon_days: int = Field(default=90, ge=0)
    win_probability: float = Field(default=0.6, ge=0.0, le=1.0)
    side: TradeSide = "long"
    horizon_end: datetime = Field(default_factory=_utc_now)

    @field_validator("starting_capital")
    @classmethod
    def validate_finite_capital(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("starting_capital must be a finite amount")
        return v

    @field_validator("horizon_end")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @model_validator(mode="after")
    def validate_short_take_profit(self) -> "RiskConfig":
        # A short target of entry * (1 - tp) must stay above zero
        if self.side == "short" and self.take_profit_pct >= 100:
            raise ValueError("take_profit_pct must be below 100 for short trades")
        return self

    @computed_field
    @property
    def horizon_start(self) -> datetime:
        return self.horizon_end - timedelta(days=self.horizon_days)

    @property
    def stop_loss_fraction(self) -> float:
        return self.stop_loss_pct / 100

    @property
    def take_profit_fraction(self) -> float:
        return self.take_profit_pct / 100


class StrategyConfig(BaseModel):
    """Strategy as handed over by the builder: identity, pair and risk parameters."""

    model_config = {"from_attributes": True, "frozen": True}

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(default="My Strategy", min_length=1)
    pair: str = "BTC/USDT"
    risk: RiskConfig

    @field_validator("pair")
    @classmethod
    def validate_pair(cls, v: str) -> str:
        if v not in TRADING_PAIRS:
            raise ValueError(f"pair must be one of {', '.join(TRADING_PAIRS)}")
        return v

    @property
    def timeframe(self) -> Timeframe:
        return self.risk.timeframe
