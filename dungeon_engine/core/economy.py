"""Division economy.

A division is the player's economic tier. Its multiplier scales gold and the
"does anything drop" gates, never the rarity distribution itself.
"""

import logging
import math
from enum import StrEnum
from typing import Union

from .constants import DIVISION_ALIASES, DIVISION_MULTIPLIERS

logger = logging.getLogger(__name__)


class Division(StrEnum):
    """Economic tiers."""

    FREE = "free"
    BASE = "base"
    PREMIUM = "premium"

    @property
    def multiplier(self) -> float:
        return DIVISION_MULTIPLIERS[self.value]

    @classmethod
    def parse(cls, value: Union["Division", str, None]) -> "Division":
        """
        Resolve a division from an enum member, name or legacy alias.

        Unknown values fall back to BASE so a bad profile value never
        blocks reward generation.
        """
        if isinstance(value, Division):
            return value
        if value is None:
            return cls.BASE
        key = str(value).strip().lower()
        key = DIVISION_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            logger.warning("Unknown division %r, using %s", value, cls.BASE.value)
            return cls.BASE


def division_multiplier(division: Union[Division, str, None]) -> float:
    return Division.parse(division).multiplier


def apply_division_scaling(amount: float, division: Union[Division, str, None]) -> int:
    """Scale a currency amount by the division multiplier (floored)."""
    return max(0, math.floor(amount * division_multiplier(division)))


def scale_drop_chance(chance: float, division: Union[Division, str, None], cap: float) -> float:
    """Apply the division multiplier to a drop gate and clamp it to [0, cap]."""
    return max(0.0, min(chance * division_multiplier(division), cap))
