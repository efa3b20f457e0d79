"""
Price path generator.

Geometric-Brownian-style closes with clamped per-step moves, randomized
wicks and body-correlated volume. The wick and volume formulas are kept
literal; they aim at plausible-looking candles, not a calibrated market
model.
"""

import logging
import math
import random
from typing import List, Optional

from ..models.config import SimulatorParams
from ..models.ohlcv import Bar, PricePath
from ..utils.numeric import D
from .random_source import NormalSource

logger = logging.getLogger(__name__)


class PricePathGenerator:
    """Generates a fresh bounded path of OHLCV bars per call."""
    
    def __init__(self, params: SimulatorParams = None, rng: Optional[random.Random] = None):
        """
        Initialize generator.
        
        Args:
            params: Drift/volatility/clamp parameters (defaults match the game)
            rng: Uniform source shared by the normal draws and all noise terms
        """
        self.params = params or SimulatorParams()
        self.rng = rng if rng is not None else random.Random()
        self.normal = NormalSource(self.rng)
    
    def generate(self, count: int = 48) -> PricePath:
        """
        Generate a path of `count` bars.
        
        Args:
            count: Number of bars (positive integer)
        
        Returns:
            New PricePath; previously returned paths are never touched
        
        Raises:
            ValueError: If count is not a positive integer, or a step would
                open at a non-positive price
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise ValueError(f"Bar count must be an integer, got {count!r}")
        if count < 1:
            raise ValueError(f"Bar count must be >= 1, got {count}")
        
        p = self.params
        rnd = self.rng.random
        drift = p.mu - 0.5 * p.sigma * p.sigma
        
        bars: List[Bar] = []
        prev_close = p.start_base + rnd() * p.start_spread
        
        for _ in range(count):
            open_ = prev_close
            if open_ <= 0:
                raise ValueError(f"Cannot simulate from non-positive open price {open_}")
            
            z = self.normal.next()
            close = open_ * math.exp(drift + p.sigma * z)
            
            # Bound single-step moves
            move = max(-p.max_move, min(p.max_move, (close - open_) / open_))
            close = open_ * (1 + move)
            
            body = abs(close - open_)
            wick_amp = body * (0.6 + rnd() * 1.2) + open_ * (0.001 + rnd() * 0.004)
            high = max(open_, close) + wick_amp * (0.4 + rnd() * 0.8)
            low = min(open_, close) - wick_amp * (0.4 + rnd() * 0.8)
            
            vol_base = 1000 + rnd() * 2000
            volume = vol_base * (0.7 + (body / open_) * 180 + rnd() * 0.6)
            
            bars.append(Bar(
                open=D(open_),
                high=D(high),
                low=D(low),
                close=D(close),
                volume=D(volume),
            ))
            prev_close = close
        
        path = PricePath(bars=tuple(bars))
        logger.debug("path_generated", extra={
            "bars": count,
            "first_open": float(path.first_open),
            "last_close": float(path.last_close),
        })
        return path
