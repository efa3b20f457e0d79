"""
Unit tests for the price path simulator.

Covers:
- Box-Muller normal source (zero re-draw, rough moments)
- Bar invariants across many seeded paths
- Move clamp, determinism under a fixed seed, input validation
"""

import math
import random
import statistics
from decimal import Decimal

import pytest

from tradefade.market.generator import PricePathGenerator
from tradefade.market.random_source import NormalSource
from tradefade.models.config import SimulatorParams


class SequenceRandom:
    """Uniform source replaying a fixed sequence."""

    def __init__(self, values):
        self.values = list(values)

    def random(self):
        return self.values.pop(0)


class TestNormalSource:

    def test_zero_draws_are_redrawn(self):
        rng = SequenceRandom([0.0, 0.5, 0.0, 0.0, 0.25])
        value = NormalSource(rng).next()
        # u=0.5, v=0.25 -> cos(pi/2) == 0
        assert value == pytest.approx(0.0, abs=1e-12)
        assert rng.values == []

    def test_known_value(self):
        rng = SequenceRandom([math.exp(-0.5), 1.0 / 2])
        # sqrt(-2 * -0.5) * cos(pi) == -1
        assert NormalSource(rng).next() == pytest.approx(-1.0)

    def test_moments_close_to_standard_normal(self):
        source = NormalSource(random.Random(1234))
        draws = [source.next() for _ in range(20000)]
        assert statistics.fmean(draws) == pytest.approx(0.0, abs=0.05)
        assert statistics.pstdev(draws) == pytest.approx(1.0, abs=0.05)


class TestPricePathGenerator:

    @pytest.mark.parametrize("seed", range(25))
    def test_bar_invariants(self, seed):
        path = PricePathGenerator(rng=random.Random(seed)).generate(48)

        assert path.length == 48
        for bar in path.bars:
            assert bar.low <= min(bar.open, bar.close)
            assert max(bar.open, bar.close) <= bar.high
            assert bar.volume >= 0
            assert bar.low > 0

    def test_bars_are_chained(self):
        path = PricePathGenerator(rng=random.Random(7)).generate(48)
        for prev, cur in zip(path.bars, path.bars[1:]):
            assert cur.open == prev.close

    def test_start_price_range(self):
        for seed in range(50):
            path = PricePathGenerator(rng=random.Random(seed)).generate(1)
            assert Decimal(100) <= path.first_open <= Decimal(120)

    def test_single_step_move_is_clamped(self):
        # Huge volatility forces the clamp on nearly every step
        params = SimulatorParams(sigma=0.5)
        path = PricePathGenerator(params, rng=random.Random(3)).generate(200)
        for bar in path.bars:
            move = abs(float(bar.close) / float(bar.open) - 1.0)
            assert move <= 0.035 + 1e-9

    def test_same_seed_same_path(self):
        a = PricePathGenerator(rng=random.Random(99)).generate(48)
        b = PricePathGenerator(rng=random.Random(99)).generate(48)
        assert a == b

    def test_previous_path_untouched(self):
        gen = PricePathGenerator(rng=random.Random(5))
        first = gen.generate(10)
        closes = first.closes
        gen.generate(10)
        assert first.closes == closes

    @pytest.mark.parametrize("count", [0, -1, 2.5, "48", True, None])
    def test_invalid_count_rejected(self, count):
        rng = random.Random(0)
        gen = PricePathGenerator(rng=rng)
        state = rng.getstate()
        with pytest.raises(ValueError):
            gen.generate(count)
        # Rejected before any draw
        assert rng.getstate() == state

    def test_non_positive_open_rejected(self):
        params = SimulatorParams(start_base=-50.0, start_spread=0.0)
        with pytest.raises(ValueError, match="non-positive open"):
            PricePathGenerator(params, rng=random.Random(0)).generate(5)

    def test_flat_model_still_has_wicks(self):
        params = SimulatorParams(mu=0.0, sigma=0.0)
        path = PricePathGenerator(params, rng=random.Random(11)).generate(5)
        for bar in path.bars:
            assert bar.high > bar.open
            assert bar.low < bar.open
