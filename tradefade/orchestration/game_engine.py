"""Round-based game state machine.

IDLE -> ROUND_ACTIVE -> RESOLVING -> ROUND_ACTIVE | ENDED

Each round generates a fresh path, its EMA and the oracle's answer, arms a
per-second countdown and waits for exactly one resolution: a player choice
or a timeout. The round's awaiting_resolution flag is set synchronously at
the start of every resolution, so whichever of choice/timeout arrives first
wins and the other is a no-op.
"""

import logging
import random
from typing import Callable, Dict, Optional

from ..indicators.ema import compute_ema
from ..market.generator import PricePathGenerator
from ..market.oracle import label_path
from ..models.config import GameConfig
from ..models.game import (
    Difficulty,
    Direction,
    GamePhase,
    GameState,
    Outcome,
    Round,
    RoundResult,
    RoundSnapshot,
)
from .ports import (
    BestScoreStore,
    GameEvent,
    InMemoryBestScoreStore,
    NullNotifier,
    Notifier,
    Presenter,
)
from .scheduler import ScheduledTask, TaskScheduler

logger = logging.getLogger(__name__)

TICK_SECONDS = 1.0


class GameEngine:
    """Owns score, lives, level, countdown and difficulty."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[TaskScheduler] = None,
        generator: Optional[PricePathGenerator] = None,
        store: Optional[BestScoreStore] = None,
        notifier: Optional[Notifier] = None,
        presenter: Optional[Presenter] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.rules = self.config.rules
        self.rng = rng if rng is not None else random.Random()
        self.scheduler = scheduler or TaskScheduler()
        self.generator = generator or PricePathGenerator(self.config.simulator, self.rng)
        self.store = store or InMemoryBestScoreStore()
        self.notifier = notifier or NullNotifier()
        self.presenter = presenter or Presenter()

        self.state = GameState(lives=self.rules.starting_lives)
        self.phase = GamePhase.IDLE
        self.current_round: Optional[Round] = None
        self._started = False
        self._countdown_task: Optional[ScheduledTask] = None
        self._next_round_task: Optional[ScheduledTask] = None
        self.counters = {
            "rounds_started": 0,
            "correct": 0,
            "wrong": 0,
            "timeouts": 0,
            "ignored_actions": 0,
        }

    # ---------- LIFECYCLE ----------

    def start(self) -> Optional[RoundSnapshot]:
        """Load the best score once and start the first round."""
        if self._started:
            logger.debug("engine_already_started")
            return None
        self._started = True
        self.state.best_score = self._load_best_score()
        logger.info("game_started", extra={
            "best_score": self.state.best_score,
            "config_hash": self.config.config_hash.hash_value[:16],
        })
        return self.start_round()

    def restart(self) -> bool:
        """
        Reset score/lives/level and start a new round.

        Only valid once the game has ended; otherwise ignored. If the new
        round cannot be built the game stays ended and the error propagates.
        """
        if self.phase != GamePhase.ENDED:
            self._ignore("restart")
            return False

        self._cancel_pending()
        prior_state = self.state.copy()
        prior_round = self.current_round
        self.state.score = 0
        self.state.lives = self.rules.starting_lives
        self.state.level = 1
        self.state.active = True
        self.state.new_record_achieved = False
        self.current_round = None
        self.phase = GamePhase.IDLE
        logger.info("game_restarted", extra={"best_score": self.state.best_score})
        try:
            self.start_round()
        except Exception:
            # Stay ended with the last game intact
            self.state = prior_state
            self.current_round = prior_round
            self.phase = GamePhase.ENDED
            logger.exception("restart_failed")
            raise
        return True

    # ---------- ROUND FLOW ----------

    def timer_for_score(self, score: int) -> int:
        """Countdown shrinks by a second every difficulty step, floored."""
        step = score // self.rules.difficulty_step_points
        return max(self.rules.min_timer_seconds, self.rules.base_timer_seconds - step)

    def start_round(self) -> Optional[RoundSnapshot]:
        if not self.state.active:
            return None
        if self.phase not in (GamePhase.IDLE, GamePhase.RESOLVING):
            logger.debug("start_round_skipped", extra={"phase": self.phase.value})
            return None

        # Build everything before touching state so a generation error
        # leaves the previous round intact.
        timer = self.timer_for_score(self.state.score)
        path = self.generator.generate(self.rules.bar_count)
        indicator = compute_ema(path, self.rules.ema_period)
        direction = label_path(path, self.rng)

        if self._next_round_task is not None:
            self._next_round_task.cancel()
            self._next_round_task = None
        self.state.rounds_played += 1
        self.counters["rounds_started"] += 1
        self.current_round = Round(
            round_number=self.state.rounds_played,
            direction=direction,
            timer_seconds=timer,
            seconds_remaining=timer,
            path=path,
            indicator=indicator,
        )
        self.phase = GamePhase.ROUND_ACTIVE
        self._arm_countdown()

        snapshot = RoundSnapshot(
            round_number=self.current_round.round_number,
            path=path,
            indicator=indicator,
            timer_seconds=timer,
            difficulty=Difficulty.for_timer(timer),
            state=self.state.copy(),
        )
        logger.info("round_started", extra={
            "round": snapshot.round_number,
            "timer_seconds": timer,
            "difficulty": snapshot.difficulty.value,
            "score": self.state.score,
            "lives": self.state.lives,
        })
        self._publish(self.presenter.on_round_started, snapshot)
        return snapshot

    def _arm_countdown(self) -> None:
        self._countdown_task = self.scheduler.call_later(TICK_SECONDS, self._on_tick, name="countdown")

    def _on_tick(self) -> None:
        rnd = self.current_round
        if rnd is None or rnd.awaiting_resolution:
            return
        rnd.seconds_remaining -= 1
        self._publish(self.presenter.on_tick, rnd.round_number, rnd.seconds_remaining)
        if rnd.seconds_remaining <= 0:
            self._countdown_task = None
            self._resolve(choice=None)
        else:
            self._arm_countdown()

    # ---------- INPUT ----------

    def choose(self, choice: Direction) -> Optional[RoundResult]:
        """Evaluate a player decision; returns None when the action is ignored."""
        if not isinstance(choice, Direction):
            raise ValueError(f"Choice must be a Direction, got {choice!r}")
        rnd = self.current_round
        if self.phase != GamePhase.ROUND_ACTIVE or rnd is None or rnd.awaiting_resolution:
            self._ignore(f"choose_{choice.value}")
            return None
        if self._countdown_task is not None:
            self._countdown_task.cancel()
            self._countdown_task = None
        return self._resolve(choice=choice)

    def choose_up(self) -> Optional[RoundResult]:
        return self.choose(Direction.UP)

    def choose_down(self) -> Optional[RoundResult]:
        return self.choose(Direction.DOWN)

    def handle_action(self, action: str):
        """Dispatch one of the named input actions (chooseUp, chooseDown, restart)."""
        handlers: Dict[str, Callable] = {
            "chooseUp": self.choose_up,
            "chooseDown": self.choose_down,
            "restart": self.restart,
        }
        if action not in handlers:
            raise ValueError(f"Unknown action {action!r}; expected one of {sorted(handlers)}")
        return handlers[action]()

    # ---------- RESOLUTION ----------

    def _resolve(self, choice: Optional[Direction]) -> RoundResult:
        rnd = self.current_round
        rnd.awaiting_resolution = True
        self.phase = GamePhase.RESOLVING

        timed_out = choice is None
        correct = (choice == rnd.direction)
        best_before = self.state.best_score

        if correct:
            self._handle_correct()
        else:
            if timed_out:
                self.counters["timeouts"] += 1
            self._handle_wrong()

        result = RoundResult(
            round_number=rnd.round_number,
            outcome=Outcome.CORRECT if correct else Outcome.WRONG,
            choice=choice,
            correct_direction=rnd.direction,
            timed_out=timed_out,
            game_over=not self.state.active,
            new_record=self.state.best_score > best_before,
            state=self.state.copy(),
        )
        logger.info("round_resolved", extra={
            "round": result.round_number,
            "outcome": result.outcome.value,
            "choice": choice.value if choice else None,
            "answer": rnd.direction.value,
            "timed_out": timed_out,
            "score": self.state.score,
            "lives": self.state.lives,
            "level": self.state.level,
        })
        self._publish(self.presenter.on_round_resolved, result)
        return result

    def _handle_correct(self) -> None:
        self.counters["correct"] += 1
        self.state.score += self.rules.points_per_correct
        if self.state.score % self.rules.level_up_every == 0:
            self.state.level += 1
            logger.info("level_up", extra={"level": self.state.level, "score": self.state.score})
        self._emit(GameEvent.CORRECT)
        self._maybe_update_best_score()
        self._queue_next_round()

    def _handle_wrong(self) -> None:
        self.counters["wrong"] += 1
        self.state.lives = max(0, self.state.lives - 1)
        self._emit(GameEvent.WRONG)
        if self.state.lives == 0:
            self._end_game()
        else:
            self._queue_next_round()

    def _queue_next_round(self) -> None:
        self._next_round_task = self.scheduler.call_later(
            self.rules.next_round_delay_seconds, self.start_round, name="next_round"
        )

    def _end_game(self) -> None:
        self.state.active = False
        self.phase = GamePhase.ENDED
        self._cancel_pending()
        self._maybe_update_best_score()
        self._emit(GameEvent.GAME_OVER)
        logger.info("game_over", extra={
            "score": self.state.score,
            "best_score": self.state.best_score,
            "level": self.state.level,
            "rounds": self.state.rounds_played,
            "new_record": self.state.new_record_achieved,
        })

    # ---------- BEST SCORE ----------

    def _load_best_score(self) -> int:
        try:
            value = int(self.store.read_best())
        except Exception as e:
            logger.warning("best_score_read_failed", extra={"error": str(e)})
            return 0
        return max(value, 0)

    def _maybe_update_best_score(self) -> None:
        """Compare-then-set; storage failures never roll back the in-memory value."""
        if self.state.score <= self.state.best_score:
            return
        self.state.best_score = self.state.score
        self.state.new_record_achieved = True
        self._emit(GameEvent.NEW_RECORD)
        try:
            self.store.write_best(self.state.best_score)
        except Exception as e:
            logger.warning("best_score_write_failed", extra={
                "best_score": self.state.best_score,
                "error": str(e),
            })

    # ---------- HELPERS ----------

    def _cancel_pending(self) -> None:
        for task in (self._countdown_task, self._next_round_task):
            if task is not None:
                task.cancel()
        self._countdown_task = None
        self._next_round_task = None

    def _ignore(self, action: str) -> None:
        self.counters["ignored_actions"] += 1
        logger.debug("action_ignored", extra={"action": action, "phase": self.phase.value})

    def _emit(self, event: GameEvent) -> None:
        try:
            self.notifier.emit(event)
        except Exception as e:
            logger.warning("notifier_emit_failed", extra={"event": event.value, "error": str(e)})

    def _publish(self, hook: Callable, *args) -> None:
        try:
            hook(*args)
        except Exception:
            logger.exception("presenter_hook_failed", extra={"hook": getattr(hook, "__name__", str(hook))})

    def stats(self) -> dict:
        return {
            **self.counters,
            "score": self.state.score,
            "best_score": self.state.best_score,
            "level": self.state.level,
            "lives": self.state.lives,
            "phase": self.phase.value,
        }
