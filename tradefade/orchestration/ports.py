"""
Capability interfaces the game engine depends on.

The engine never touches storage, audio or rendering directly; it talks to
these abstractions so it can be driven headless in tests with zero I/O.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import List

from ..models.game import RoundResult, RoundSnapshot

logger = logging.getLogger(__name__)


class GameEvent(Enum):
    """Discrete cues emitted for audio/feedback collaborators."""
    CORRECT = "correct"
    WRONG = "wrong"
    NEW_RECORD = "new-record"
    GAME_OVER = "game-over"


class BestScoreStore(ABC):
    """Durable best-score storage."""

    @abstractmethod
    def read_best(self) -> int:
        """Return the stored best score, 0 when absent or unparseable."""
        pass

    @abstractmethod
    def write_best(self, value: int) -> None:
        """Persist a new best score."""
        pass


class Notifier(ABC):
    """Receives named cue events."""

    @abstractmethod
    def emit(self, event: GameEvent) -> None:
        pass


class Presenter:
    """Chart/HUD collaborator. Every hook is optional."""

    def on_round_started(self, snapshot: RoundSnapshot) -> None:
        pass

    def on_tick(self, round_number: int, seconds_remaining: int) -> None:
        pass

    def on_round_resolved(self, result: RoundResult) -> None:
        pass


class InMemoryBestScoreStore(BestScoreStore):
    """Process-local store; records every write for inspection."""

    def __init__(self, initial: int = 0):
        self.value = initial
        self.writes: List[int] = []

    def read_best(self) -> int:
        return self.value

    def write_best(self, value: int) -> None:
        self.writes.append(value)
        self.value = value


class NullNotifier(Notifier):
    def emit(self, event: GameEvent) -> None:
        pass


class RecordingNotifier(Notifier):
    """Keeps emitted event names in order."""

    def __init__(self):
        self.events: List[str] = []

    def emit(self, event: GameEvent) -> None:
        self.events.append(event.value)


class LoggingNotifier(Notifier):
    """Writes each cue to the log instead of playing a sound."""

    def emit(self, event: GameEvent) -> None:
        logger.info("game_event", extra={"event": event.value})
