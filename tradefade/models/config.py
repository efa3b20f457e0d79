"""
Configuration models.
"""

from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from hashlib import sha256
import json


@dataclass
class ConfigHash:
    """Configuration hash for reproducibility."""
    hash_value: str
    timestamp: str

    @staticmethod
    def compute(config_dict: Dict[str, Any]) -> str:
        """Compute SHA256 hash of config."""
        json_str = json.dumps(config_dict, sort_keys=True, default=str)
        return sha256(json_str.encode()).hexdigest()


@dataclass(frozen=True)
class SimulatorParams:
    """Drift/volatility model used by the price path generator."""
    mu: float = 0.0005
    sigma: float = 0.02
    max_move: float = 0.035
    start_base: float = 100.0
    start_spread: float = 20.0

    def __post_init__(self):
        if self.sigma < 0:
            raise ValueError("sigma must be >= 0")
        if self.max_move < 0:
            raise ValueError("max_move must be >= 0")
        if self.start_spread < 0:
            raise ValueError("start_spread must be >= 0")


@dataclass(frozen=True)
class GameRules:
    """Scoring, lives and pacing rules."""
    bar_count: int = 48
    ema_period: int = 20
    starting_lives: int = 3
    points_per_correct: int = 10
    level_up_every: int = 50
    difficulty_step_points: int = 50
    base_timer_seconds: int = 3
    min_timer_seconds: int = 1
    next_round_delay_ms: int = 600

    def __post_init__(self):
        positive = {
            'bar_count': self.bar_count,
            'ema_period': self.ema_period,
            'starting_lives': self.starting_lives,
            'points_per_correct': self.points_per_correct,
            'level_up_every': self.level_up_every,
            'difficulty_step_points': self.difficulty_step_points,
            'min_timer_seconds': self.min_timer_seconds,
        }
        for name, value in positive.items():
            if value < 1:
                raise ValueError(f"{name} must be >= 1, got {value}")
        if self.base_timer_seconds < self.min_timer_seconds:
            raise ValueError("base_timer_seconds must be >= min_timer_seconds")
        if self.next_round_delay_ms < 0:
            raise ValueError("next_round_delay_ms must be >= 0")

    @property
    def next_round_delay_seconds(self) -> float:
        return self.next_round_delay_ms / 1000.0


@dataclass(frozen=True)
class StorageSettings:
    """Where the best score is persisted."""
    best_score_path: str = "state/best_score.json"
    best_score_key: str = "tof_highScore"


@dataclass
class GameConfig:
    """Full game configuration."""
    rules: GameRules = field(default_factory=GameRules)
    simulator: SimulatorParams = field(default_factory=SimulatorParams)
    storage: StorageSettings = field(default_factory=StorageSettings)
    config_hash: Optional[ConfigHash] = None

    def __post_init__(self):
        if self.config_hash is None:
            hash_value = ConfigHash.compute(self.to_dict())
            self.config_hash = ConfigHash(
                hash_value=hash_value,
                timestamp=datetime.now(timezone.utc).isoformat()
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'game': asdict(self.rules),
            'simulator': asdict(self.simulator),
            'storage': asdict(self.storage),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        """
        Build a config from the sections of configs/game.json.

        Missing sections or keys fall back to defaults; unknown keys raise
        TypeError from the dataclass constructors.

        Raises:
            ValueError: If a value violates a rule (e.g. bar_count < 1)
        """
        data = data or {}
        return cls(
            rules=GameRules(**(data.get('game') or {})),
            simulator=SimulatorParams(**(data.get('simulator') or {})),
            storage=StorageSettings(**(data.get('storage') or {})),
        )
