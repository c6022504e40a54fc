from src.utils.exceptions import ConfigError, InvalidStrategyError, StrategyForgeError
from src.utils.formatting import format_currency, format_duration, format_percentage
from src.utils.logging import setup_logging

__all__ = [
    "StrategyForgeError",
    "ConfigError",
    "InvalidStrategyError",
    "format_duration",
    "format_currency",
    "format_percentage",
    "setup_logging",
]
