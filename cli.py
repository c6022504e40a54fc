from typing import Optional

import typer
from loguru import logger

from config.settings import get_settings
from src.simulation import BacktestSimulator, parse_strategy
from src.utils.exceptions import InvalidStrategyError, StrategyForgeError
from src.utils.formatting import format_currency, format_percentage
from src.utils.logging import setup_logging

app = typer.Typer(no_args_is_help=True)


def _ratio(value: Optional[float]) -> str:
    return "n/a" if value is None else f"{value:.2f}"


@app.command()
def backtest(
    name: str = typer.Option("My Strategy", help="Strategy name"),
    pair: str = typer.Option("BTC/USDT", help="Trading pair"),
    timeframe: str = typer.Option("1h", help="Timeframe: 15m, 1h, 4h or 1d"),
    stop_loss: float = typer.Option(2.0, help="Stop loss in percent"),
    take_profit: float = typer.Option(4.0, help="Take profit in percent"),
    capital: float = typer.Option(None, help="Starting capital in USD"),
    days: int = typer.Option(None, help="Simulation horizon in days"),
    win_probability: float = typer.Option(None, help="Probability that a trade wins"),
    side: str = typer.Option("long", help="Trade side: long or short"),
    seed: int = typer.Option(None, help="Random seed for a reproducible run"),
    show_trades: bool = typer.Option(False, "--trades", help="Print the trade log"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
) -> None:
    """Run a simulated backtest for a strategy."""
    try:
        settings = get_settings()
        setup_logging(settings.log_level, settings.log_file)

        strategy = parse_strategy(
            {
                "name": name,
                "pair": pair,
                "timeframe": timeframe,
                "stop_loss_pct": stop_loss,
                "take_profit_pct": take_profit,
                "starting_capital": capital,
                "horizon_days": days,
                "win_probability": win_probability,
                "side": side,
            },
            settings.simulation,
        )

        result = BacktestSimulator(settings.simulation).run(strategy, seed=seed)

        if as_json:
            typer.echo(result.model_dump_json(indent=2))
            return

        m = result.metrics
        typer.echo(f"\nBacktest Results: {strategy.name} ({strategy.pair}, {strategy.timeframe})")
        typer.echo("=" * 60)
        typer.echo(f"Period: {m.start_date:%Y-%m-%d} -> {m.end_date:%Y-%m-%d} ({m.duration})")
        typer.echo(f"Starting capital: {format_currency(m.starting_capital)}")
        typer.echo(f"Final equity: {format_currency(m.final_equity)}")
        typer.echo(
            f"Total return: {format_percentage(m.total_return_pct)} "
            f"({format_currency(m.total_return_abs)})"
        )
        typer.echo(f"Max drawdown: {format_percentage(m.max_drawdown_pct)}")
        typer.echo(f"Sharpe ratio: {_ratio(m.sharpe_ratio)}")
        typer.echo(f"Sortino ratio: {_ratio(m.sortino_ratio)}")
        typer.echo("")
        typer.echo(
            f"Trades: {m.total_trades} "
            f"(won {m.winning_trades}, lost {m.losing_trades})"
        )
        typer.echo(f"Win rate: {format_percentage(m.win_rate)}")
        typer.echo(f"Profit factor: {m.profit_factor:.2f}")
        typer.echo(f"Average win: {format_currency(m.average_win)}")
        typer.echo(f"Average loss: {format_currency(m.average_loss)}")
        typer.echo(f"Largest win: {format_currency(m.largest_win)}")
        typer.echo(f"Largest loss: {format_currency(m.largest_loss)}")

        if show_trades and result.trades:
            typer.echo("")
            typer.echo("=" * 100)
            typer.echo(
                f"{'ID':<10} | {'Entry':<16} | {'Exit':<16} | {'Entry Px':<10} | "
                f"{'Exit Px':<10} | {'P&L':<12} | {'Hold':<8} | {'Reason':<11}"
            )
            typer.echo("=" * 100)
            for trade in result.trades:
                typer.echo(
                    f"{trade.id:<10} | {trade.entry_time:%Y-%m-%d %H:%M} | "
                    f"{trade.exit_time:%Y-%m-%d %H:%M} | {trade.entry_price:<10.2f} | "
                    f"{trade.exit_price:<10.2f} | {format_currency(trade.pnl):<12} | "
                    f"{trade.duration_label:<8} | {trade.exit_reason:<11}"
                )

    except InvalidStrategyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1)
    except StrategyForgeError as e:
        typer.echo(f"Backtest failed: {e}", err=True)
        raise typer.Exit(code=1)
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        logger.exception("Backtest command failed")
        raise typer.Exit(code=1)


@app.command()
def status() -> None:
    """Show the simulation configuration."""
    settings = get_settings()
    sim = settings.simulation

    typer.echo("Strategy Forge Simulation Settings")
    typer.echo("=" * 50)
    typer.echo(f"Log level: {settings.log_level}")
    typer.echo(f"Log file: {settings.log_file}")
    typer.echo("")
    typer.echo(f"Base price: {format_currency(sim.base_price)}")
    typer.echo(f"Fee rate: {format_percentage(sim.fee_rate * 100, 3)}")
    typer.echo(f"Max slippage: {format_percentage(sim.max_slippage * 100, 3)}")
    typer.echo(f"Hold time: {sim.min_hold_hours:g}h - {sim.max_hold_hours:g}h")
    typer.echo(f"Default capital: {format_currency(sim.default_starting_capital)}")
    typer.echo(f"Default horizon: {sim.default_horizon_days} days")
    typer.echo(f"Default win probability: {format_percentage(sim.default_win_probability * 100, 0)}")
    typer.echo("")
    typer.echo("Trades per week:")
    for timeframe, rate in sim.trades_per_week.items():
        typer.echo(f"  {timeframe}: {rate}")


if __name__ == "__main__":
    app()
