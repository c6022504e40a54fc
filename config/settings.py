from pathlib import Path
from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SimulationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SIM_")

    base_price: float = Field(default=45000.0, gt=0)
    fee_rate: float = Field(default=0.001, ge=0.0, lt=1.0)
    max_slippage: float = Field(default=0.0005, ge=0.0, lt=1.0)
    price_jitter: float = Field(default=0.10, ge=0.0, lt=1.0)
    price_drift: float = Field(default=0.01, ge=0.0, lt=1.0)
    min_hold_hours: float = Field(default=1.0, gt=0)
    max_hold_hours: float = Field(default=48.0, gt=0)
    default_win_probability: float = Field(default=0.6, ge=0.0, le=1.0)
    default_starting_capital: float = Field(default=10000.0, gt=0)
    default_horizon_days: int = Field(default=90, ge=0)
    trades_per_week: dict[str, int] = Field(
        default_factory=lambda: {"15m": 3, "1h": 2, "4h": 1, "1d": 1}
    )


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: Path = Field(default=Path("logs"), alias="LOG_DIR")

    simulation: SimulationSettings = Field(default_factory=SimulationSettings)

    @computed_field
    @property
    def log_file(self) -> Path:
        return self.log_dir / "strategy-forge.log"


@lru_cache
def get_settings() -> Settings:
    return Settings()
