"""Monte Carlo Loot Simulation.

Runs many seeded reward draws to estimate drop rates, gold spread and the
empirical rarity distribution at a floor.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union
import random

import numpy as np

from ..core.economy import Division
from ..core.probability import RARITY_ORDER, RarityTier, determine_rarity, rarity_distribution
from ..core.rating import Rating, RatingTier
from ..core.rewards import RewardBundle, RewardGenerator
from ..data.catalog import GameCatalog


@dataclass
class LootSimulationResult:
    """
    Result of a Monte Carlo reward simulation.

    Rates are fractions of iterations in which the category dropped.
    """

    floor: int
    battle_type: str
    division: str
    iterations: int

    weapon_drop_rate: float
    item_drop_rate: float
    potion_drop_rate: float

    avg_gold: float
    min_gold: int
    max_gold: int
    gold_std: float
    avg_items: float

    # Empirical rarity of dropped weapons
    weapon_rarity_counts: Dict[str, int] = field(default_factory=dict)

    # Confidence interval (95%) on the weapon drop rate
    weapon_drop_confidence: Tuple[float, float] = (0.0, 1.0)


@dataclass
class RarityConvergence:
    """Empirical vs. analytic rarity distribution at one floor."""

    floor: int
    trials: int
    expected: Dict[str, float]
    observed: Dict[str, float]

    @property
    def max_deviation(self) -> float:
        return max(abs(self.observed[tier] - self.expected[tier]) for tier in self.expected)


class LootSimulator:
    """
    Monte Carlo reward simulator.

    Usage:
        simulator = LootSimulator(base_seed=42)
        result = simulator.simulate(floor=25, battle_type="mimic", iterations=2000)
        print(f"Weapon drop rate: {result.weapon_drop_rate:.1%}")
    """

    def __init__(self, catalog: Optional[GameCatalog] = None, base_seed: Optional[int] = None):
        """
        Initialize simulator.

        Args:
            catalog: Catalog to draw rewards from (default catalog if omitted).
            base_seed: Base seed for reproducibility (seeds will be derived).
        """
        self.catalog = catalog
        self.base_seed = base_seed
        self.rng = random.Random(base_seed)

    def simulate(
        self,
        floor: int,
        battle_type: str = "explore",
        rating: Union[Rating, RatingTier, str, None] = RatingTier.AVERAGE,
        division: Union[Division, str, None] = Division.BASE,
        iterations: int = 1000,
    ) -> LootSimulationResult:
        """
        Run the reward generator repeatedly with derived seeds.

        Args:
            floor: Floor to simulate.
            battle_type: Encounter type.
            rating: Performance rating used for every draw.
            division: Player's division.
            iterations: Number of reward draws.

        Returns:
            LootSimulationResult with aggregate statistics.
        """
        generator = RewardGenerator(catalog=self.catalog)
        bundles: List[RewardBundle] = []
        for i in range(iterations):
            rng = random.Random(self._get_iteration_seed(i))
            bundles.append(generator.generate(floor, battle_type, rating, division, rng=rng))
        return self._analyze_results(bundles, floor, battle_type, Division.parse(division), iterations)

    def rarity_convergence(self, floor: int, trials: int = 100_000) -> RarityConvergence:
        """Draw rarity tiers directly and compare with the analytic distribution."""
        rng = random.Random(self._get_iteration_seed(0))
        index = {tier: i for i, tier in enumerate(RARITY_ORDER)}
        draws = np.fromiter(
            (index[determine_rarity(floor, rng=rng)] for _ in range(trials)),
            dtype=np.int64,
            count=trials,
        )
        counts = np.bincount(draws, minlength=len(RARITY_ORDER))
        observed = counts / max(trials, 1)
        expected = rarity_distribution(floor)
        return RarityConvergence(
            floor=floor,
            trials=trials,
            expected={tier.value: expected[tier] for tier in RARITY_ORDER},
            observed={tier.value: float(observed[index[tier]]) for tier in RARITY_ORDER},
        )

    def _get_iteration_seed(self, iteration: int) -> int:
        """Get deterministic seed for an iteration."""
        if self.base_seed is not None:
            return self.base_seed + iteration
        return self.rng.randint(0, 2**31)

    def _analyze_results(
        self,
        bundles: List[RewardBundle],
        floor: int,
        battle_type: str,
        division: Division,
        iterations: int,
    ) -> LootSimulationResult:
        """Analyze simulation results."""
        gold = np.array([b.gold for b in bundles], dtype=np.int64)
        weapon_hits = np.array([bool(b.weapons) for b in bundles], dtype=bool)
        item_counts = np.array([len(b.items) for b in bundles], dtype=np.int64)
        potion_hits = np.array([bool(b.potions) for b in bundles], dtype=bool)

        rarity_counts = {tier.value: 0 for tier in RARITY_ORDER}
        for bundle in bundles:
            for weapon in bundle.weapons:
                rarity_counts[RarityTier(weapon.rarity).value] += 1

        weapon_drops = int(weapon_hits.sum())

        return LootSimulationResult(
            floor=floor,
            battle_type=str(battle_type),
            division=division.value,
            iterations=iterations,
            weapon_drop_rate=float(weapon_hits.mean()) if iterations else 0.0,
            item_drop_rate=float((item_counts > 0).mean()) if iterations else 0.0,
            potion_drop_rate=float(potion_hits.mean()) if iterations else 0.0,
            avg_gold=float(gold.mean()) if iterations else 0.0,
            min_gold=int(gold.min()) if iterations else 0,
            max_gold=int(gold.max()) if iterations else 0,
            gold_std=float(gold.std()) if iterations else 0.0,
            avg_items=float(item_counts.mean()) if iterations else 0.0,
            weapon_rarity_counts=rarity_counts,
            weapon_drop_confidence=self._calculate_confidence_interval(weapon_drops, iterations),
        )

    def _calculate_confidence_interval(
        self, successes: int, n: int, confidence: float = 0.95
    ) -> Tuple[float, float]:
        """Calculate Wilson score confidence interval."""
        if n == 0:
            return (0.0, 1.0)

        z = 1.96  # 95% confidence
        p = successes / n

        denominator = 1 + z * z / n
        center = (p + z * z / (2 * n)) / denominator

        spread = z * np.sqrt(p * (1 - p) / n + z * z / (4 * n * n)) / denominator

        lower = max(0.0, center - spread)
        upper = min(1.0, center + spread)

        return (float(lower), float(upper))
