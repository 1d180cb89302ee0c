"""Performance Rating Calculator.

Scores a finished battle on independent, capped axes and maps the
percentage of the maximum achievable score to one of seven tiers.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Union, TYPE_CHECKING

from .constants import (
    ABILITY_VARIETY_MAX,
    CRIT_SCORE_MAX,
    DAMAGE_RATIO_MAX,
    GOLD_RATING_MULTIPLIER,
    HEALTH_SCORE_MAX,
    RATING_THRESHOLDS,
    SPELL_VARIETY_MAX,
    TURN_SCORE_BASELINE,
    TURN_SCORE_MAX,
)

if TYPE_CHECKING:
    from ..combat.combatant import Combatant
    from ..combat.session import BattleStats, SideStats


class RatingTier(Enum):
    """Seven ordered performance tiers, best first. Value is the label."""

    LEGENDARY = "LEGENDARY"
    MASTERFUL = "MASTERFUL"
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    AVERAGE = "AVERAGE"
    BELOW_AVERAGE = "BELOW AVERAGE"
    BARELY_SURVIVED = "BARELY SURVIVED"

    @property
    def grade(self) -> str:
        for _, grade, label in RATING_THRESHOLDS:
            if label == self.value:
                return grade
        return "F"

    @property
    def min_percentage(self) -> int:
        for minimum, _, label in RATING_THRESHOLDS:
            if label == self.value:
                return minimum
        return 0

    @property
    def gold_multiplier(self) -> float:
        return GOLD_RATING_MULTIPLIER[self.value]

    @property
    def display(self) -> str:
        return f"{self.value} ({self.grade})"

    @classmethod
    def from_percentage(cls, percentage: int) -> "RatingTier":
        for minimum, _, label in RATING_THRESHOLDS:
            if percentage >= minimum:
                return cls(label)
        return cls.BARELY_SURVIVED

    @classmethod
    def parse(cls, value: Union["RatingTier", "Rating", str, None]) -> "RatingTier":
        """
        Accept a tier, a Rating, a label ("GOOD"), a grade ("B") or a
        display string such as "AVERAGE (C)". Unknown input maps to AVERAGE.
        """
        if isinstance(value, RatingTier):
            return value
        if isinstance(value, Rating):
            return value.tier
        if not value:
            return cls.AVERAGE
        text = str(value).upper().replace("_", " ")
        # Longest labels first so "BELOW AVERAGE" wins over "AVERAGE"
        for tier in sorted(cls, key=lambda t: len(t.value), reverse=True):
            if tier.value in text:
                return tier
        grade = text.strip().strip("()")
        for tier in cls:
            if tier.grade == grade:
                return tier
        return cls.AVERAGE


@dataclass
class Rating:
    """Scored battle performance."""

    tier: RatingTier
    score: int
    max_score: int
    percentage: int
    breakdown: Dict[str, int] = field(default_factory=dict)

    @property
    def grade(self) -> str:
        return self.tier.grade

    @property
    def label(self) -> str:
        return self.tier.value

    def __str__(self) -> str:
        return self.tier.display


def score_axes(side: "SideStats", turns: int, health_fraction: float) -> Dict[str, int]:
    """Per-axis scores for one combatant's stats."""
    turn_score = min(TURN_SCORE_MAX, max(0, TURN_SCORE_BASELINE - turns))

    if side.damage_received > 0:
        ratio = side.damage_dealt / side.damage_received
    else:
        ratio = side.damage_dealt
    damage_score = min(DAMAGE_RATIO_MAX, math.floor(ratio))

    if health_fraction > 0.8:
        health_score = 2
    elif health_fraction > 0.5:
        health_score = 1
    else:
        health_score = 0

    return {
        "turns": turn_score,
        "damage_ratio": damage_score,
        "critical_hits": min(CRIT_SCORE_MAX, side.critical_hits),
        "abilities": min(ABILITY_VARIETY_MAX, len(side.abilities_used)),
        "spells": min(SPELL_VARIETY_MAX, len(side.spells_used)),
        "health": min(HEALTH_SCORE_MAX, health_score),
    }


MAX_SCORE = (
    TURN_SCORE_MAX
    + DAMAGE_RATIO_MAX
    + CRIT_SCORE_MAX
    + ABILITY_VARIETY_MAX
    + SPELL_VARIETY_MAX
    + HEALTH_SCORE_MAX
)


def rate_battle(stats: "BattleStats", combatant: "Combatant") -> Rating:
    """
    Rate a combatant's performance over a finished battle.

    Pure and deterministic: identical stats and combatant state always give
    the same rating.

    Args:
        stats: Accumulated battle statistics.
        combatant: The rated combatant (its ending health is scored).

    Returns:
        Rating with tier, raw score and per-axis breakdown.
    """
    from ..combat.session import SideStats

    side: Optional[SideStats] = stats.sides.get(combatant.id)
    if side is None:
        side = SideStats()
    breakdown = score_axes(side, stats.turns, combatant.health_fraction)
    score = sum(breakdown.values())
    percentage = math.floor(score / MAX_SCORE * 100)
    return Rating(
        tier=RatingTier.from_percentage(percentage),
        score=score,
        max_score=MAX_SCORE,
        percentage=percentage,
        breakdown=breakdown,
    )
