"""Weapon data loader."""

from functools import lru_cache
from typing import Optional

from ..models.weapon import Weapon
from ._files import read_catalog

WEAPONS_FILE = "weapons.json"


@lru_cache(maxsize=1)
def load_weapons() -> list[Weapon]:
    """Load all weapons.

    Returns:
        List of Weapon objects in catalog order.
    """
    return [Weapon(**data) for data in read_catalog(WEAPONS_FILE)]


def get_weapon_by_id(weapon_id: str) -> Optional[Weapon]:
    """Get a weapon by its ID.

    Args:
        weapon_id: The unique weapon identifier.

    Returns:
        Weapon if found, None otherwise.
    """
    for weapon in load_weapons():
        if weapon.id == weapon_id:
            return weapon
    return None


def get_weapons_by_rarity(rarity: str) -> list[Weapon]:
    """Get all weapons of one rarity tier (possibly empty)."""
    return [w for w in load_weapons() if w.rarity == rarity]


def get_weapon_counts_by_rarity() -> dict[str, int]:
    counts: dict[str, int] = {}
    for weapon in load_weapons():
        counts[weapon.rarity] = counts.get(weapon.rarity, 0) + 1
    return counts


def clear_cache() -> None:
    """Clear the weapon cache. Useful for testing or hot-reloading data."""
    load_weapons.cache_clear()
