"""Floor-scaled potion rewards.

Potions come in ten size tiers, one per 40 floors, and four kinds. Only one
potion can drop per battle.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional, Union

from .config import settings
from .constants import (
    POTION_BATTLE_BONUS,
    POTION_DROP_BASE,
    POTION_DROP_FACTOR,
    POTION_KINDS,
    POTION_RATING_BONUS,
    POTION_TIER_FLOORS,
    POTION_TIERS,
)
from .economy import Division, scale_drop_chance
from .floor_scaling import drop_rate_scaling, effective_floor
from .rating import Rating, RatingTier

POTION_NAMES = {
    "health": "Health Potion",
    "mana": "Mana Potion",
    "healing": "Healing Elixir",
    "energy": "Energy Potion",
}


@dataclass
class PotionReward:
    """A generated potion."""

    id: str
    name: str
    kind: str
    tier: str
    value: int


def potion_tier(floor: int) -> tuple[str, float]:
    """(tier name, potency multiplier) for a floor."""
    ef = max(1, effective_floor(floor))
    index = min((ef - 1) // POTION_TIER_FLOORS, len(POTION_TIERS) - 1)
    return POTION_TIERS[index]


def scaled_potion(kind: str, floor: int) -> PotionReward:
    """
    Build a potion of one kind for a floor.

    Raises:
        ValueError: Unknown potion kind.
    """
    if kind not in POTION_KINDS:
        raise ValueError(f"Unknown potion kind: {kind}")
    base_value, _ = POTION_KINDS[kind]
    tier_name, multiplier = potion_tier(floor)
    return PotionReward(
        id=f"{kind}_potion_{tier_name.lower()}",
        name=f"{tier_name} {POTION_NAMES[kind]}",
        kind=kind,
        tier=tier_name,
        value=math.floor(base_value * multiplier),
    )


def available_kinds(floor: int) -> list[str]:
    return [kind for kind, (_, min_floor) in POTION_KINDS.items() if floor >= min_floor]


def choose_potion_kind(
    floor: int,
    rng: random.Random,
    low_health: bool = False,
    low_mana: bool = False,
) -> str:
    """Pick a kind; a hurt player is steered towards health, a drained one to mana."""
    if low_health:
        if "healing" in available_kinds(floor) and rng.random() >= 0.7:
            return "healing"
        return "health"
    if low_mana:
        return "mana"
    return rng.choice(available_kinds(floor))


def potion_drop_chance(
    floor: int,
    battle_type: str,
    rating: Union[Rating, RatingTier, str, None],
    division: Union[Division, str, None] = Division.BASE,
) -> float:
    chance = drop_rate_scaling(POTION_DROP_BASE, floor, POTION_DROP_FACTOR)
    chance += POTION_BATTLE_BONUS.get(str(battle_type), 0.0)
    chance += POTION_RATING_BONUS.get(RatingTier.parse(rating).value, 0.0)
    return scale_drop_chance(chance, division, settings.POTION_DROP_CAP)


def generate_potion_rewards(
    floor: int,
    battle_type: str,
    rating: Union[Rating, RatingTier, str, None],
    division: Union[Division, str, None] = Division.BASE,
    rng: Optional[random.Random] = None,
    low_health: bool = False,
    low_mana: bool = False,
) -> list[PotionReward]:
    """Roll for at most one potion."""
    rng = rng or random.Random()
    if rng.random() >= potion_drop_chance(floor, battle_type, rating, division):
        return []
    kind = choose_potion_kind(floor, rng, low_health, low_mana)
    return [scaled_potion(kind, floor)]
