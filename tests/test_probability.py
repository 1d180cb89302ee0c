"""Tests for rarity weighting and division economy."""

import random

import pytest

from dungeon_engine.combat.simulation import LootSimulator
from dungeon_engine.core.economy import (
    Division,
    apply_division_scaling,
    division_multiplier,
    scale_drop_chance,
)
from dungeon_engine.core.probability import (
    RARITY_ORDER,
    RarityTier,
    calculate_rarity_chance,
    determine_rarity,
    rarity_distribution,
    rarity_statistics,
)


class TestRarityChance:
    """Per-tier chance tests."""

    def test_never_exceeds_cap(self):
        """Test every tier stays under its cap at every floor."""
        for tier in RARITY_ORDER:
            for floor in list(range(0, 520, 5)) + [10_000]:
                assert calculate_rarity_chance(tier, floor) <= tier.cap

    def test_common_reaches_cap(self):
        assert calculate_rarity_chance(RarityTier.COMMON, 500) == pytest.approx(0.60)

    def test_floor_one_values(self):
        assert calculate_rarity_chance("common", 1) == pytest.approx(0.451)
        assert calculate_rarity_chance("epic", 1) == pytest.approx(0.0825)

    def test_long_tail_tiers_stay_tiny(self):
        assert calculate_rarity_chance(RarityTier.MYTHICAL, 500) < 0.0001
        assert calculate_rarity_chance(RarityTier.LEGENDARY, 500) <= 0.0001


class TestRarityDistribution:
    """Normalised distribution and tier draws."""

    def test_distribution_sums_to_one(self):
        for floor in (1, 50, 500):
            assert sum(rarity_distribution(floor).values()) == pytest.approx(1.0)

    def test_distribution_order(self):
        assert list(rarity_distribution(1)) == list(RARITY_ORDER)

    def test_determine_rarity_deterministic_with_seed(self):
        first = [determine_rarity(10, rng=random.Random(42)) for _ in range(5)]
        second = [determine_rarity(10, rng=random.Random(42)) for _ in range(5)]
        assert first == second

    def test_division_does_not_change_draws(self):
        """Test division never touches the rarity shape."""
        free = [determine_rarity(30, Division.FREE, random.Random(i)) for i in range(200)]
        premium = [determine_rarity(30, Division.PREMIUM, random.Random(i)) for i in range(200)]
        assert free == premium

    def test_convergence(self):
        """Test 100k draws converge to the normalised weights."""
        result = LootSimulator(base_seed=42).rarity_convergence(floor=25, trials=100_000)
        assert result.trials == 100_000
        assert result.max_deviation < 0.01

    def test_statistics(self):
        stats = rarity_statistics(1)
        assert [s.tier for s in stats] == list(RARITY_ORDER)
        assert stats[0].percentage.endswith("%")


class TestDivision:
    """Division economy tests."""

    def test_multipliers(self):
        assert division_multiplier("free") == pytest.approx(0.8)
        assert division_multiplier(Division.BASE) == pytest.approx(0.9)
        assert division_multiplier("premium") == pytest.approx(1.1)

    def test_aliases(self):
        assert Division.parse("gold") == Division.BASE
        assert Division.parse("ETH") == Division.PREMIUM

    def test_unknown_falls_back_to_base(self):
        assert Division.parse("platinum") == Division.BASE
        assert Division.parse(None) == Division.BASE

    def test_apply_division_scaling_floors(self):
        assert apply_division_scaling(100, "free") == 80
        assert apply_division_scaling(15, "premium") == 16
        assert apply_division_scaling(-5, "premium") == 0

    def test_scale_drop_chance_capped(self):
        assert scale_drop_chance(0.8, "premium", 0.85) == pytest.approx(0.85)
        assert scale_drop_chance(0.5, "free", 0.85) == pytest.approx(0.4)
