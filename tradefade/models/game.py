"""
Game models: rounds, aggregate game state and the views published to collaborators.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from .ohlcv import PricePath
from ..indicators.base import IndicatorSeries


class Direction(Enum):
    """Net move of a path over the round."""
    UP = "up"
    DOWN = "down"


class Outcome(Enum):
    """Result of a resolved round."""
    CORRECT = "correct"
    WRONG = "wrong"


class GamePhase(Enum):
    """States of the round state machine."""
    IDLE = "IDLE"
    ROUND_ACTIVE = "ROUND_ACTIVE"
    RESOLVING = "RESOLVING"
    ENDED = "ENDED"


class Difficulty(Enum):
    """HUD difficulty label derived from the countdown length."""
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def for_timer(cls, timer_seconds: int) -> "Difficulty":
        if timer_seconds >= 3:
            return cls.EASY
        if timer_seconds == 2:
            return cls.MEDIUM
        return cls.HARD


@dataclass
class Round:
    """One play cycle. Replaced wholesale at the next round start."""
    round_number: int
    direction: Direction
    timer_seconds: int
    seconds_remaining: int
    path: PricePath
    indicator: IndicatorSeries
    awaiting_resolution: bool = False

    def __post_init__(self):
        if self.timer_seconds < 1:
            raise ValueError("Round timer must be >= 1 second")


@dataclass
class GameState:
    """Process-lifetime aggregate owned by the game engine."""
    score: int = 0
    lives: int = 3
    level: int = 1
    best_score: int = 0
    active: bool = True
    new_record_achieved: bool = False
    rounds_played: int = 0

    def copy(self) -> "GameState":
        return replace(self)


@dataclass(frozen=True)
class RoundSnapshot:
    """Published after every round start (chart + HUD input)."""
    round_number: int
    path: PricePath
    indicator: IndicatorSeries
    timer_seconds: int
    difficulty: Difficulty
    state: GameState


@dataclass(frozen=True)
class RoundResult:
    """Published after every resolution."""
    round_number: int
    outcome: Outcome
    choice: Optional[Direction]
    correct_direction: Direction
    timed_out: bool
    game_over: bool
    new_record: bool
    state: GameState

    @property
    def is_correct(self) -> bool:
        return self.outcome == Outcome.CORRECT
