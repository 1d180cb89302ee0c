"""Loot item data model."""

from pydantic import BaseModel, Field


class Item(BaseModel):
    """Non-weapon loot entry."""
    id: str
    name: str
    rarity: str = "common"
    min_floor: int = Field(default=1, ge=0, description="First floor the item can drop on")
    milestone: bool = Field(default=False, description="Only granted by floor milestones")
