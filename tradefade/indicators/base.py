"""
Base indicator classes.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Tuple, Optional


@dataclass(frozen=True)
class IndicatorSeries:
    """Indicator values aligned by index to the path they were computed from."""
    name: str
    period: int
    values: Tuple[Decimal, ...]
    
    def __post_init__(self):
        if not isinstance(self.values, tuple):
            object.__setattr__(self, 'values', tuple(self.values))
    
    def __len__(self) -> int:
        return len(self.values)
    
    def __getitem__(self, index: int) -> Decimal:
        return self.values[index]
    
    @property
    def latest(self) -> Optional[Decimal]:
        """Most recent indicator value."""
        return self.values[-1] if self.values else None


def validate_period(period: int) -> int:
    """Reject non-integer or non-positive lookback periods."""
    if isinstance(period, bool) or not isinstance(period, int):
        raise ValueError(f"Period must be an integer, got {period!r}")
    if period < 1:
        raise ValueError(f"Period must be >= 1, got {period}")
    return period
