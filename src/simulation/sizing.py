"""
Risk-based position sizing and exit pricing for simulated trades.
"""
from dataclasses import dataclass

from src.models.strategy import TradeSide


@dataclass(frozen=True)
class PositionSize:
    risk_amount: float
    quantity: float


def size_position(capital: float, stop_loss_fraction: float, entry_price: float) -> PositionSize:
    """
    Size a position so that a stop-out loses ``capital * stop_loss_fraction``.

    Args:
        capital: Running capital at the time the trade is opened
        stop_loss_fraction: Stop distance as a fraction of entry (0.02 for 2%)
        entry_price: Fill price of the entry

    Returns:
        PositionSize with the capital at risk and the unit quantity
    """
    if capital <= 0:
        raise ValueError(f"capital must be positive, got {capital}")
    if stop_loss_fraction <= 0:
        raise ValueError(f"stop_loss_fraction must be positive, got {stop_loss_fraction}")
    if entry_price <= 0:
        raise ValueError(f"entry_price must be positive, got {entry_price}")

    risk_amount = capital * stop_loss_fraction
    quantity = risk_amount / (entry_price * stop_loss_fraction)
    return PositionSize(risk_amount=risk_amount, quantity=quantity)


def direction(side: TradeSide) -> int:
    return 1 if side == "long" else -1


def target_exit_price(
    entry_price: float,
    side: TradeSide,
    is_win: bool,
    stop_loss_fraction: float,
    take_profit_fraction: float,
) -> float:
    """Theoretical take-profit or stop-loss level before fees and slippage."""
    sign = direction(side)
    if is_win:
        return entry_price * (1 + sign * take_profit_fraction)
    return entry_price * (1 - sign * stop_loss_fraction)


def apply_exit_drag(price: float, side: TradeSide, drag: float) -> float:
    """Move an exit price against the position by ``drag`` (fees + slippage)."""
    return price * (1 - direction(side) * drag)


def realized_pnl(entry_price: float, exit_price: float, quantity: float, side: TradeSide) -> float:
    return (exit_price - entry_price) * quantity * direction(side)
