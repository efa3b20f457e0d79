"""
Trade or Fade Headless Demo

Plays full games with an autoplay bot standing in for the player. The bot
reacts to each round's chart after a short delay, so the same countdown,
race guard and next-round delay the real UI relies on are exercised.

Usage (from repo root):
    python demo_game.py --bot ema --games 2 --seed 7
    python demo_game.py --bot idle --realtime          # let every countdown expire
"""

import argparse
import json
import logging
import random
import sys
import time

from configs import config_loader
from infra.data.frame_export import path_to_frame, price_bounds
from infra.storage.best_score_store import JsonBestScoreStore
from tradefade.models.game import Direction, RoundResult, RoundSnapshot
from tradefade.orchestration.game_engine import GameEngine
from tradefade.orchestration.ports import LoggingNotifier, Presenter
from tradefade.orchestration.scheduler import TaskScheduler
from tradefade.utils.logging_setup import setup_logging
from tradefade.utils.numeric import round_price

logger = logging.getLogger(__name__)

BOTS = ("ema", "random", "up", "idle")


class ConsolePresenter(Presenter):
    """Prints a one-line HUD per round instead of drawing a chart."""

    def on_round_started(self, snapshot: RoundSnapshot) -> None:
        frame = path_to_frame(snapshot.path, snapshot.indicator)
        lo, hi = price_bounds(frame)
        print(
            f"Round {snapshot.round_number:>3} | {snapshot.difficulty.value:<6} "
            f"{snapshot.timer_seconds}s | bars={len(frame)} "
            f"scale=[{round_price(lo)}, {round_price(hi)}] "
            f"score={snapshot.state.score} lives={snapshot.state.lives} level={snapshot.state.level}"
        )

    def on_round_resolved(self, result: RoundResult) -> None:
        verdict = "Correct!" if result.is_correct else ("Time's up" if result.timed_out else "Wrong")
        line = f"          {verdict:<9} answer={result.correct_direction.value}"
        if result.new_record:
            line += "  NEW RECORD"
        print(line)
        if result.game_over:
            print(f"GAME OVER  final={result.state.score} best={result.state.best_score}")


class AutoplayBot:
    """Schedules one decision per round after a reaction delay."""

    def __init__(self, engine: GameEngine, strategy: str, reaction_seconds: float, rng: random.Random):
        if strategy not in BOTS:
            raise ValueError(f"Unknown bot {strategy!r}; expected one of {BOTS}")
        self.engine = engine
        self.strategy = strategy
        self.reaction_seconds = reaction_seconds
        self.rng = rng

    def pick(self, snapshot: RoundSnapshot) -> Direction:
        if self.strategy == "up":
            return Direction.UP
        if self.strategy == "random":
            return self.rng.choice([Direction.UP, Direction.DOWN])
        # Trend-follow: last close against its EMA
        return Direction.UP if snapshot.path.last_close >= snapshot.indicator.latest else Direction.DOWN

    def on_round_started(self, snapshot: RoundSnapshot) -> None:
        if self.strategy == "idle":
            return
        choice = self.pick(snapshot)

        def decide():
            # A slow reaction must not leak into the following round
            current = self.engine.current_round
            if current is not None and current.round_number == snapshot.round_number:
                self.engine.choose(choice)

        self.engine.scheduler.call_later(self.reaction_seconds, decide, name="bot_choice")


class DemoPresenter(ConsolePresenter):
    def __init__(self):
        self.bot = None

    def on_round_started(self, snapshot: RoundSnapshot) -> None:
        super().on_round_started(snapshot)
        if self.bot is not None:
            self.bot.on_round_started(snapshot)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Trade or Fade headless demo")
    parser.add_argument("--bot", choices=BOTS, default="ema", help="Autoplay strategy")
    parser.add_argument("--games", type=int, default=1, help="Games to play (restart between them)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the simulator and bot")
    parser.add_argument("--reaction", type=float, default=0.4, help="Bot reaction time in seconds")
    parser.add_argument("--realtime", action="store_true", help="Wait in wall-clock time instead of a virtual clock")
    parser.add_argument("--best-score-path", default=None, help="Override the best score JSON file")
    parser.add_argument("--log-dir", default="logs", help="Directory for the JSON log")
    return parser.parse_args(argv)


def main(argv=None) -> dict:
    """Run the demo and return a summary dict."""
    args = parse_args(argv)
    log_file = setup_logging(args.log_dir, prefix="game_demo", console_level=logging.WARNING)

    config = config_loader.load_game_config()
    store_path = args.best_score_path or config.storage.best_score_path
    rng = random.Random(args.seed)

    presenter = DemoPresenter()
    scheduler = TaskScheduler(clock=time.monotonic if args.realtime else None)
    engine = GameEngine(
        config=config,
        scheduler=scheduler,
        store=JsonBestScoreStore(store_path, config.storage.best_score_key),
        notifier=LoggingNotifier(),
        presenter=presenter,
        rng=rng,
    )
    presenter.bot = AutoplayBot(engine, args.bot, args.reaction, rng)

    print("Trade or Fade Demo")
    print("=" * 50)
    print(f"Config hash: {config.config_hash.hash_value[:16]}...")

    engine.start()
    for game in range(args.games):
        if game > 0:
            engine.handle_action("restart")
        scheduler.run(until=lambda: not engine.state.active)

    summary = engine.stats()
    summary["log_file"] = str(log_file) if log_file else None
    print("\nDemo Statistics:")
    print(json.dumps(summary, indent=2, default=str))
    return summary


if __name__ == "__main__":
    main(sys.argv[1:])
