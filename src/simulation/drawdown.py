def drawdown_pct(peak: float, equity: float) -> float:
    """Percentage decline of ``equity`` below ``peak``; 0 at or above the peak."""
    if peak <= 0 or equity >= peak:
        return 0.0
    return (peak - equity) / peak * 100
