"""
Display helpers shared by the result models and the CLI.
"""
from datetime import timedelta


def format_duration(hold: timedelta) -> str:
    """
    Render a holding period the way the results table shows it.

    Examples: ``45m``, ``2h 30m``, ``1d 4h``.
    """
    hours = hold.total_seconds() / 3600
    minutes = round(hold.total_seconds() / 60)
    if minutes < 60:
        return f"{minutes}m"
    if hours < 24:
        return f"{minutes // 60}h {minutes % 60}m"
    days = int(hours // 24)
    remaining_hours = int(hours % 24)
    return f"{days}d {remaining_hours}h"


def format_currency(value: float, decimals: int = 2) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.{decimals}f}"


def format_percentage(value: float, decimals: int = 2) -> str:
    return f"{value:.{decimals}f}%"
