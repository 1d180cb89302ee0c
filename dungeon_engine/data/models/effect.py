"""Status effect data model."""

from enum import StrEnum

from pydantic import BaseModel, Field


class EffectCategory(StrEnum):
    """Effect polarity as listed in the catalog."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    SPECIAL = "special"


class EffectDefinition(BaseModel):
    """Timed modifier definition.

    A duration of -1 means the effect never expires on its own.
    """
    id: str
    name: str
    type: EffectCategory = EffectCategory.NEUTRAL
    description: str = ""
    duration: int = Field(default=1, ge=-1)

    # Per-turn ticks
    health_per_turn: int = 0
    mana_per_turn: int = 0
    damage_per_turn: int = 0
    drain_amount: int = 0

    # Damage modifiers
    damage_bonus: int = 0
    damage_multiplier: float = 1.0
    damage_vulnerability: float = 1.0
    damage_reduction: float = 0.0
    crit_bonus: int = 0

    # Armor
    armor_reduction: float = 0.0
    ignore_armor: bool = False

    # Control
    disable_weapons: bool = False
    disable_magic: bool = False
    disable_primary_weapon: bool = False
    disable_all_actions: bool = False

    untargetable: bool = False
    effect_immunity: bool = False

    model_config = {"use_enum_values": True, "extra": "ignore"}

    @property
    def is_permanent(self) -> bool:
        return self.duration < 0

    @property
    def is_control(self) -> bool:
        return (
            self.disable_weapons
            or self.disable_magic
            or self.disable_primary_weapon
            or self.disable_all_actions
        )

    @property
    def ticks(self) -> bool:
        return bool(
            self.health_per_turn or self.mana_per_turn or self.damage_per_turn or self.drain_amount
        )
