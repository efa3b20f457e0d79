"""
OHLCV data models for simulated price bars and paths.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Bar:
    """Single OHLCV bar (immutable)."""
    open: Decimal
    high: Decimal
    low: Decimal
    close: Decimal
    volume: Decimal
    
    def __post_init__(self):
        if self.open <= 0 or self.close <= 0 or self.low <= 0:
            raise ValueError("Prices must be positive")
        if self.high < self.low:
            raise ValueError("High must be >= Low")
        if self.high < self.open or self.high < self.close:
            raise ValueError("High must be >= Open and Close")
        if self.low > self.open or self.low > self.close:
            raise ValueError("Low must be <= Open and Close")
        if self.volume < 0:
            raise ValueError("Volume must be >= 0")
    
    @property
    def is_bullish(self) -> bool:
        """True for an up (or flat) candle."""
        return self.close >= self.open
    
    @property
    def body_size(self) -> Decimal:
        return abs(self.close - self.open)
    
    @property
    def range(self) -> Decimal:
        return self.high - self.low


@dataclass(frozen=True)
class PricePath:
    """Chronological sequence of bars generated for one round."""
    bars: Tuple[Bar, ...]
    
    def __post_init__(self):
        if not isinstance(self.bars, tuple):
            object.__setattr__(self, 'bars', tuple(self.bars))
    
    def __len__(self) -> int:
        return len(self.bars)
    
    def __iter__(self):
        return iter(self.bars)
    
    @property
    def length(self) -> int:
        """Number of bars."""
        return len(self.bars)
    
    @property
    def latest_bar(self) -> Optional[Bar]:
        """Get the most recent bar."""
        return self.bars[-1] if self.bars else None
    
    @property
    def first_open(self) -> Optional[Decimal]:
        return self.bars[0].open if self.bars else None
    
    @property
    def last_close(self) -> Optional[Decimal]:
        return self.bars[-1].close if self.bars else None
    
    @property
    def closes(self) -> Tuple[Decimal, ...]:
        return tuple(bar.close for bar in self.bars)
