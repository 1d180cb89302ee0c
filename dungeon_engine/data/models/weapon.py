"""Weapon data model."""

from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field


class WeaponType(StrEnum):
    """Weapon delivery class, used by counter/dodge/silence checks."""
    MELEE = "melee"
    RANGED = "ranged"
    MAGIC = "magic"


class EffectChance(BaseModel):
    """An effect carried by a weapon or spell.

    Rolled once per use. Passive entries (no chance) always apply to the
    wielder instead of the target.
    """
    type: str = Field(..., description="Effect id")
    chance: Optional[float] = Field(default=None, ge=0, le=100, description="Percent chance")
    passive: bool = False
    target: str = Field(default="opponent", description="opponent or self")

    @property
    def applies_to_self(self) -> bool:
        return self.passive or self.target == "self"


class Weapon(BaseModel):
    """Weapon definition."""
    id: str
    name: str
    weapon_type: WeaponType = WeaponType.MELEE
    rarity: str
    damage: int = Field(default=1, ge=0)
    mana_cost: int = Field(default=0, ge=0)
    health_cost: int = Field(default=0, ge=0)
    effects: list[EffectChance] = Field(default_factory=list)
    description: str = ""
    gold_value: int = Field(default=0, ge=0)

    model_config = {"use_enum_values": True}
