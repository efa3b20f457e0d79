"""
Standard-normal deviates for the price simulator.
"""

import math
import random
from typing import Optional


class NormalSource:
    """
    Box-Muller transform over an injectable uniform source.
    
    Any object exposing random() -> float in [0, 1) works as the uniform
    source; tests pass a seeded random.Random.
    """
    
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()
    
    def _positive_uniform(self) -> float:
        u = 0.0
        while u == 0.0:
            u = self.rng.random()
        return u
    
    def next(self) -> float:
        """Draw one approximately N(0, 1) value."""
        u = self._positive_uniform()
        v = self._positive_uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)
