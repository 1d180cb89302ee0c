"""Rarity probability.

Each rarity tier has a base chance, a per-floor increment and a hard cap.
Selection normalises the capped chances into a distribution and walks the
cumulative weights in tier order (common first).
"""

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Union

from .constants import RARITY_RATES
from .economy import Division
from .floor_scaling import effective_floor


class RarityTier(StrEnum):
    """Loot quality classes, ordered from most to least common."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHICAL = "mythical"

    @property
    def base_chance(self) -> float:
        return RARITY_RATES[self.value][0]

    @property
    def per_floor(self) -> float:
        return RARITY_RATES[self.value][1]

    @property
    def cap(self) -> float:
        return RARITY_RATES[self.value][2]


RARITY_ORDER: tuple[RarityTier, ...] = tuple(RarityTier)


def calculate_rarity_chance(tier: Union[RarityTier, str], floor: int) -> float:
    """
    Chance weight of one tier at a floor.

    Args:
        tier: Rarity tier.
        floor: Current floor (clamped to the scaling cap).

    Returns:
        min(base + effective_floor * per_floor, cap).
    """
    tier = RarityTier(tier)
    return min(tier.base_chance + effective_floor(floor) * tier.per_floor, tier.cap)


def rarity_distribution(floor: int) -> dict[RarityTier, float]:
    """Normalised probability of each tier at a floor (sums to 1)."""
    chances = {tier: calculate_rarity_chance(tier, floor) for tier in RARITY_ORDER}
    total = sum(chances.values())
    return {tier: chance / total for tier, chance in chances.items()}


def determine_rarity(
    floor: int,
    division: Union[Division, str, None] = Division.BASE,
    rng: Optional[random.Random] = None,
) -> RarityTier:
    """
    Draw one rarity tier.

    The division is accepted for call-site symmetry with the drop gates but
    does not change the distribution: division controls how often loot
    drops, not its quality.

    Args:
        floor: Current floor.
        division: Player's division.
        rng: Random source (defaults to a fresh unseeded generator).

    Returns:
        The first tier whose cumulative weight meets or exceeds the draw.
    """
    rng = rng or random.Random()
    roll = rng.random()
    cumulative = 0.0
    for tier, weight in rarity_distribution(floor).items():
        cumulative += weight
        if roll <= cumulative:
            return tier
    return RarityTier.COMMON


@dataclass
class RarityStatistic:
    """Per-tier chance at a floor."""

    tier: RarityTier
    chance: float
    probability: float

    @property
    def percentage(self) -> str:
        return f"{self.probability * 100:.4f}%"


def rarity_statistics(floor: int) -> list[RarityStatistic]:
    distribution = rarity_distribution(floor)
    return [
        RarityStatistic(
            tier=tier,
            chance=calculate_rarity_chance(tier, floor),
            probability=distribution[tier],
        )
        for tier in RARITY_ORDER
    ]
