import math
import statistics
from datetime import datetime, timezone, timedelta

import pytest

from src.models import Trade, BacktestMetrics
from src.simulation.metrics import MetricsAggregator, sharpe_ratio, sortino_ratio

HORIZON_START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _make_trades(pnls: list[float]) -> list[Trade]:
    trades = []
    for i, pnl in enumerate(pnls):
        entry = HORIZON_START + timedelta(days=3 * i)
        trades.append(
            Trade(
                id=f"trade-{i + 1}",
                entry_time=entry,
                exit_time=entry + timedelta(hours=12),
                entry_price=1000.0,
                exit_price=1000.0 + pnl,
                quantity=1.0,
                pnl=pnl,
                pnl_percent=pnl / 10,
                hold_duration=timedelta(hours=12),
                exit_reason="take-profit" if pnl > 0 else "stop-loss",
                risk_amount=50.0,
            )
        )
    return trades


@pytest.fixture
def aggregator():
    """Create MetricsAggregator."""
    return MetricsAggregator()


def test_aggregate_mixed_trades(aggregator):
    """Test metrics for a simple win/loss sequence."""
    trades = _make_trades([100.0, -50.0, 200.0, -100.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=12)

    assert isinstance(metrics, BacktestMetrics)
    assert metrics.total_trades == 4
    assert metrics.winning_trades == 2
    assert metrics.losing_trades == 2
    assert metrics.total_return_abs == pytest.approx(150.0)
    assert metrics.total_return_pct == pytest.approx(15.0)
    assert metrics.win_rate == pytest.approx(50.0)
    assert metrics.average_win == pytest.approx(150.0)
    assert metrics.average_loss == pytest.approx(75.0)
    assert metrics.profit_factor == pytest.approx(2.0)
    assert metrics.largest_win == pytest.approx(200.0)
    assert metrics.largest_loss == pytest.approx(-100.0)
    assert metrics.final_equity == pytest.approx(1150.0)
    assert metrics.duration == "12 days"


def test_aggregate_max_drawdown_uses_running_peak(aggregator):
    """Test drawdown is measured from the highest equity seen so far."""
    # Equity: 1100, 1050, 1250, 1150 -> worst is 100 below 1250
    trades = _make_trades([100.0, -50.0, 200.0, -100.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=12)

    assert metrics.max_drawdown_pct == pytest.approx(8.0)


def test_aggregate_drawdown_from_starting_capital(aggregator):
    """Test an initial loss is a drawdown against starting capital."""
    trades = _make_trades([-200.0, 50.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=7)

    assert metrics.max_drawdown_pct == pytest.approx(20.0)


def test_aggregate_total_return_is_exact_sum(aggregator):
    """Test total return equals the sum of trade pnl exactly."""
    trades = _make_trades([0.1, 0.2, -0.3, 123.456, -7.89])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=15)

    assert metrics.total_return_abs == sum(t.pnl for t in trades)


def test_aggregate_dates_from_trades(aggregator):
    """Test start/end dates come from the first entry and last exit."""
    trades = _make_trades([10.0, -5.0, 20.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=9)

    assert metrics.start_date == trades[0].entry_time
    assert metrics.end_date == trades[-1].exit_time


def test_aggregate_no_trades(aggregator):
    """Test zero trades produce zeroed metrics without errors."""
    fallback = datetime(2024, 6, 1, tzinfo=timezone.utc)

    metrics = aggregator.aggregate([], starting_capital=10000.0, horizon_days=3, fallback_time=fallback)

    assert metrics.total_trades == 0
    assert metrics.win_rate == 0.0
    assert metrics.profit_factor == 0.0
    assert metrics.average_win == 0.0
    assert metrics.average_loss == 0.0
    assert metrics.largest_win == 0.0
    assert metrics.largest_loss == 0.0
    assert metrics.max_drawdown_pct == 0.0
    assert metrics.total_return_abs == 0.0
    assert metrics.sharpe_ratio is None
    assert metrics.sortino_ratio is None
    assert metrics.start_date == fallback
    assert metrics.end_date == fallback
    assert metrics.final_equity == 10000.0


def test_aggregate_no_trades_defaults_to_now(aggregator):
    """Test the date fallback is the current time when none is given."""
    before = datetime.now(timezone.utc)
    metrics = aggregator.aggregate([], starting_capital=10000.0, horizon_days=0)
    after = datetime.now(timezone.utc)

    assert before <= metrics.start_date <= after
    assert metrics.end_date == metrics.start_date


def test_aggregate_all_wins(aggregator):
    """Test profit factor is zero, not infinite, without losses."""
    trades = _make_trades([50.0, 75.0, 25.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=9)

    assert metrics.losing_trades == 0
    assert metrics.average_loss == 0.0
    assert metrics.largest_loss == 0.0
    assert metrics.profit_factor == 0.0
    assert metrics.win_rate == pytest.approx(100.0)
    assert metrics.max_drawdown_pct == 0.0
    assert metrics.sortino_ratio is None


def test_aggregate_all_losses(aggregator):
    """Test averages when there are no winners."""
    trades = _make_trades([-50.0, -25.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=7)

    assert metrics.winning_trades == 0
    assert metrics.average_win == 0.0
    assert metrics.largest_win == 0.0
    assert metrics.profit_factor == 0.0
    assert metrics.average_loss == pytest.approx(37.5)


def test_aggregate_break_even_trade_is_neither_win_nor_loss(aggregator):
    """Test a zero-pnl trade counts toward total but not wins or losses."""
    trades = _make_trades([0.0, 10.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=7)

    assert metrics.total_trades == 2
    assert metrics.winning_trades == 1
    assert metrics.losing_trades == 0
    assert metrics.win_rate == pytest.approx(50.0)


def test_aggregate_rejects_non_positive_capital(aggregator):
    with pytest.raises(ValueError):
        aggregator.aggregate([], starting_capital=0.0, horizon_days=7)


def test_aggregate_sharpe_uses_per_trade_returns(aggregator):
    """Test Sharpe is computed from equity returns and annualised by trade frequency."""
    trades = _make_trades([100.0, -50.0, 200.0, -100.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=12)

    returns = [100 / 1000, -50 / 1100, 200 / 1050, -100 / 1250]
    periods = 4 * 365 / 12
    expected = statistics.mean(returns) / statistics.stdev(returns) * math.sqrt(periods)
    assert metrics.sharpe_ratio == pytest.approx(expected)


def test_sharpe_ratio_requires_variation() -> None:
    assert sharpe_ratio([0.01], 52) is None
    assert sharpe_ratio([0.01, 0.01, 0.01], 52) is None


def test_sharpe_ratio_value() -> None:
    returns = [0.02, -0.01, 0.03]
    expected = statistics.mean(returns) / statistics.stdev(returns) * math.sqrt(52)
    assert sharpe_ratio(returns, 52) == pytest.approx(expected)


def test_sortino_ratio_value() -> None:
    returns = [0.02, -0.01, 0.03]
    downside = math.sqrt((0.01 ** 2) / 3)
    expected = statistics.mean(returns) / downside * math.sqrt(52)
    assert sortino_ratio(returns, 52) == pytest.approx(expected)


def test_sortino_ratio_without_losses() -> None:
    assert sortino_ratio([0.01, 0.02], 52) is None


def test_aggregate_breakeven_trade_counts_in_total_only(aggregator):
    """Test a zero-pnl trade is neither a win nor a loss."""
    trades = _make_trades([100.0, 0.0, -50.0])

    metrics = aggregator.aggregate(trades, starting_capital=1000.0, horizon_days=9)

    assert metrics.total_trades == 3
    assert metrics.winning_trades == 1
    assert metrics.losing_trades == 1
    assert metrics.win_rate == pytest.approx(100 / 3)
