"""Floor scaling curves.

Every floor-dependent number in the engine (weapon damage, monster stats,
gold, drop rates) goes through effective_floor(), so the scaling cap lives in
one place.
"""

import math
from dataclasses import dataclass
from typing import Any

from .config import settings
from .constants import (
    DEFAULT_DROP_RATE_FACTOR,
    DROP_RATE_FLOOR_STEP,
    GOLD_PER_FLOOR,
    SCALING_START_FLOOR,
    SCALING_STEP,
)


def _non_negative_int(value: Any) -> int:
    """Coerce arbitrary input to a non-negative integer (garbage becomes 0)."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return 0 if number < 0 else settings.MAX_SCALING_FLOOR
    return max(0, math.floor(number))


def _non_negative_float(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or number < 0:
        return 0.0
    return number


def effective_floor(floor: Any) -> int:
    """Clamp a floor number to the maximum scaling floor."""
    return min(_non_negative_int(floor), settings.MAX_SCALING_FLOOR)


def is_beyond_scaling_limit(floor: Any) -> bool:
    return _non_negative_int(floor) > settings.MAX_SCALING_FLOOR


def scale_by_floor(base: Any, floor: Any, rate: Any) -> int:
    """
    Scale a base value linearly with the effective floor.

    Args:
        base: Value at floor 0.
        floor: Current floor (clamped to the scaling cap).
        rate: Fractional growth per floor.

    Returns:
        floor(base * (1 + effective_floor * rate)), never negative.
    """
    base_value = _non_negative_int(base)
    growth = _non_negative_float(rate)
    return math.floor(base_value * (1 + effective_floor(floor) * growth))


def monster_scaling_factor(floor: Any) -> float:
    """Stat multiplier for monsters: +10% per 20 floors after floor 20."""
    ef = effective_floor(floor)
    if ef <= SCALING_START_FLOOR:
        return 1.0
    cycles = (ef - 1) // SCALING_START_FLOOR
    return 1.0 + cycles * SCALING_STEP


def weapon_damage_scaling(base_damage: Any, floor: Any) -> int:
    """Weapon damage after floor scaling (rounded up)."""
    damage = _non_negative_int(base_damage)
    ef = effective_floor(floor)
    if ef <= SCALING_START_FLOOR:
        return damage
    multiplier = (ef // SCALING_START_FLOOR) * SCALING_STEP
    return math.ceil(damage * (1 + multiplier))


def gold_scaling(base_gold: Any, floor: Any) -> int:
    """Flat gold bonus of 3 per effective floor."""
    return _non_negative_int(base_gold) + math.floor(effective_floor(floor) * GOLD_PER_FLOOR)


def drop_rate_scaling(
    base_chance: float, floor: Any, factor: float = DEFAULT_DROP_RATE_FACTOR
) -> float:
    """Add `factor` to a drop chance for every 25 effective floors."""
    steps = effective_floor(floor) // DROP_RATE_FLOOR_STEP
    return _non_negative_float(base_chance) + steps * _non_negative_float(factor)


@dataclass
class ScalingInfo:
    """Snapshot of how a floor scales, for display."""

    floor: int
    effective_floor: int
    is_at_cap: bool
    monster_factor: float

    @property
    def message(self) -> str:
        if self.is_at_cap:
            return f"Maximum scaling reached at floor {settings.MAX_SCALING_FLOOR}"
        return f"Scaling active (effective floor: {self.effective_floor})"


def scaling_info(floor: Any) -> ScalingInfo:
    current = _non_negative_int(floor)
    return ScalingInfo(
        floor=current,
        effective_floor=effective_floor(current),
        is_at_cap=current >= settings.MAX_SCALING_FLOOR,
        monster_factor=monster_scaling_factor(current),
    )
