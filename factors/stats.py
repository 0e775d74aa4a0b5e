"""
Price statistics used by the market factors.

All percentages are on a 0-100 scale.
"""
import math
from typing import Sequence


def daily_returns(prices: Sequence[float]) -> list[float]:
    """Percent return between consecutive samples."""
    return [
        (prices[i] - prices[i - 1]) / prices[i - 1] * 100
        for i in range(1, len(prices))
    ]


def population_std(values: Sequence[float]) -> float:
    """Population standard deviation; 0.0 for an empty series."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def volatility(prices: Sequence[float]) -> float:
    """Population standard deviation of daily returns."""
    return population_std(daily_returns(prices))


def max_drawdown(prices: Sequence[float]) -> float:
    """Largest decline from the running maximum, scanning left to right."""
    if not prices:
        return 0.0
    running_max = prices[0]
    worst = 0.0
    for price in prices:
        if price > running_max:
            running_max = price
        drawdown = (running_max - price) / running_max * 100
        if drawdown > worst:
            worst = drawdown
    return worst


def percent_change(current: float, past: float) -> float:
    return (current - past) / past * 100


def share_excluding(dominant_percent: float) -> float:
    """Share left to everything but the dominant asset, e.g. 100 - BTC dominance."""
    return 100 - dominant_percent


def volume_share(total: float, dominant_amount: float) -> float:
    """Percent of total volume not traded in the dominant asset."""
    return (total - dominant_amount) / total * 100


def round2(value: float) -> float:
    return round(value, 2)
