"""Ability and spell data models."""

from typing import Optional

from pydantic import BaseModel, Field

from .weapon import EffectChance


class AppliedEffect(BaseModel):
    """Effect an ability always applies on use."""
    effect: str
    target: str = Field(default="opponent", description="opponent or self")
    duration: Optional[int] = Field(default=None, description="Overrides the effect's default duration")


class Ability(BaseModel):
    """Ability definition."""
    id: str
    name: str
    mana_cost: int = Field(default=0, ge=0)
    health_cost: int = Field(default=0, ge=0)
    damage: int = Field(default=0, ge=0)
    heal_amount: int = Field(default=0, ge=0)
    mana_restore: int = Field(default=0, ge=0)
    ignore_armor: bool = False
    applies: list[AppliedEffect] = Field(default_factory=list)
    category: str = "utility"
    description: str = ""


class Spell(BaseModel):
    """Spell definition."""
    id: str
    name: str
    rarity: str = "common"
    damage: int = Field(default=0, ge=0)
    mana_cost: int = Field(default=0, ge=0)
    healing: int = Field(default=0, ge=0)
    health_cost: int = Field(default=0, ge=0)
    effects: list[EffectChance] = Field(default_factory=list)
    description: str = ""
