"""
Exponential Moving Average (EMA) indicator.
"""

from decimal import Decimal
from typing import List

from ..models.ohlcv import PricePath
from ..utils.numeric import D
from .base import IndicatorSeries, validate_period


def compute_ema(path: PricePath, period: int = 20) -> IndicatorSeries:
    """
    Compute an EMA over the closes of a path.
    
    The first value is seeded with the first close; every later value is
    close * k + previous * (1 - k) with k = 2 / (period + 1).
    
    Args:
        path: Generated price path (not mutated)
        period: EMA period (default 20)
    
    Returns:
        IndicatorSeries with one value per bar
    
    Raises:
        ValueError: If period is not a positive integer
    """
    validate_period(period)
    
    k = D(2) / D(period + 1)
    one_minus_k = Decimal(1) - k
    
    values: List[Decimal] = []
    prev = None
    for close in path.closes:
        if prev is None:
            prev = close
        else:
            prev = close * k + prev * one_minus_k
        values.append(prev)
    
    return IndicatorSeries(name=f"ema{period}", period=period, values=tuple(values))
