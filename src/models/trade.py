from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, Field, computed_field, model_validator

from src.models.strategy import TradeSide
from src.utils.formatting import format_duration

ExitReason = Literal["take-profit", "stop-loss"]


class Trade(BaseModel):
    model_config = {"from_attributes": True, "frozen": True}

    id: str
    entry_time: datetime
    exit_time: datetime
    entry_price: float = Field(gt=0)
    exit_price: float = Field(gt=0)
    quantity: float = Field(gt=0)
    side: TradeSide = "long"
    pnl: float
    pnl_percent: float
    hold_duration: timedelta
    exit_reason: ExitReason
    risk_amount: float = Field(ge=0)
    fees: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def validate_chronology(self) -> "Trade":
        if self.exit_time < self.entry_time:
            raise ValueError("exit_time must not precede entry_time")
        return self

    @computed_field
    @property
    def duration_label(self) -> str:
        return format_duration(self.hold_duration)

    @property
    def is_win(self) -> bool:
        return self.pnl > 0

    @property
    def is_loss(self) -> bool:
        return self.pnl < 0


class EquityPoint(BaseModel):
    model_config = {"from_attributes": True, "frozen": True}

    timestamp: datetime
    equity: float
    drawdown_pct: float = Field(ge=0.0)
