"""Monster and hero data models."""

from typing import Optional

from pydantic import BaseModel, Field


class CreatureBase(BaseModel):
    """Stats and loadout shared by monsters and heroes."""
    id: str
    name: str
    health: int = Field(..., ge=1)
    mana: int = Field(default=0, ge=0)
    armor: int = Field(default=0, ge=0)
    crit_chance: int = Field(default=5, ge=0, le=100, description="Percent")
    weapons: list[str] = Field(default_factory=list)
    abilities: list[str] = Field(default_factory=list)
    spells: list[str] = Field(default_factory=list)


class Monster(CreatureBase):
    """Monster definition."""
    floor_number: Optional[int] = Field(default=None, description="Floor the monster guards; None for wanderers")
    is_boss: bool = False
    is_mimic: bool = False
    reward_gold: int = Field(default=0, ge=0)
    reward_description: Optional[str] = None


class Hero(CreatureBase):
    """Playable hero definition."""
    rarity: Optional[str] = None
    unlock_floor: int = Field(default=0, ge=0)
    description: str = ""
