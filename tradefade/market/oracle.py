"""Ground-truth up/down label for a generated path."""

import logging
import random
from typing import Optional

from ..models.game import Direction
from ..models.ohlcv import PricePath

logger = logging.getLogger(__name__)


def label_path(path: PricePath, rng: Optional[random.Random] = None) -> Direction:
    """
    Label a path UP when its last close is at or above its first open.
    
    An empty path has no answer; it gets an unbiased coin flip instead of
    an error.
    """
    if not path.bars:
        coin = (rng or random).random()
        direction = Direction.UP if coin < 0.5 else Direction.DOWN
        logger.warning("oracle_empty_path_coin_flip", extra={"direction": direction.value})
        return direction
    
    return Direction.UP if path.last_close >= path.first_open else Direction.DOWN
