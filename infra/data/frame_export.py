"""
Chart-data export for renderers.

Turns a generated path (and optionally its indicator series) into a pandas
DataFrame with one row per bar, the shape a plotting layer consumes.
"""

import logging
from typing import Optional

import pandas as pd

from tradefade.indicators.base import IndicatorSeries
from tradefade.models.ohlcv import PricePath

logger = logging.getLogger(__name__)

COLUMNS = ["open", "high", "low", "close", "volume"]


def path_to_frame(path: PricePath, indicator: Optional[IndicatorSeries] = None) -> pd.DataFrame:
    """
    Build a float DataFrame indexed by bar position.
    
    Args:
        path: Generated price path
        indicator: Optional series aligned to the path; added as a column
            named after the indicator (e.g. "ema20")
    
    Returns:
        DataFrame with columns open, high, low, close, volume[, <indicator>]
    
    Raises:
        ValueError: If the indicator length does not match the path
    """
    df = pd.DataFrame(
        [[float(b.open), float(b.high), float(b.low), float(b.close), float(b.volume)] for b in path.bars],
        columns=COLUMNS,
    )
    df.index.name = "bar"
    
    if indicator is not None:
        if len(indicator) != len(path):
            raise ValueError(
                f"Indicator length {len(indicator)} does not match path length {len(path)}"
            )
        df[indicator.name] = [float(v) for v in indicator.values]
    
    return df


def price_bounds(df: pd.DataFrame, pad_ratio: float = 0.08) -> tuple:
    """
    Padded (min, max) price range for the chart's vertical scale.
    
    A flat path gets a fixed pad of 1.0 so the scale never collapses.
    """
    if df.empty:
        raise ValueError("Cannot compute bounds of an empty frame")
    lo = float(df["low"].min())
    hi = float(df["high"].max())
    pad = (hi - lo) * pad_ratio or 1.0
    return lo - pad, hi + pad
