from src.simulation.synthesizer import TradeSynthesizer
from src.simulation.equity import EquityTracker
from src.simulation.metrics import MetricsAggregator
from src.simulation.simulator import BacktestSimulator, parse_strategy

__all__ = [
    "TradeSynthesizer",
    "EquityTracker",
    "MetricsAggregator",
    "BacktestSimulator",
    "parse_strategy",
]
