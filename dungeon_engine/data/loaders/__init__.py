# Data Loaders
from .weapon_loader import (
    load_weapons,
    get_weapon_by_id,
    get_weapons_by_rarity,
    get_weapon_counts_by_rarity,
)
from .action_loader import (
    load_abilities,
    load_spells,
    get_ability_by_id,
    get_spell_by_id,
)
from .effect_loader import (
    load_effects,
    get_effect_by_id,
)
from .creature_loader import (
    load_monsters,
    load_heroes,
    get_monster_by_id,
    get_monster_for_floor,
    get_mimic,
    get_hero_by_id,
    get_starting_hero,
    get_unlocked_heroes,
)
from .item_loader import (
    load_items,
    get_item_by_id,
    get_item_pool,
)
from . import action_loader, creature_loader, effect_loader, item_loader, weapon_loader


def clear_all_caches() -> None:
    """Drop every cached catalog so the next load re-reads the files."""
    for module in (weapon_loader, action_loader, effect_loader, creature_loader, item_loader):
        module.clear_cache()


__all__ = [
    # Weapon loaders
    "load_weapons",
    "get_weapon_by_id",
    "get_weapons_by_rarity",
    "get_weapon_counts_by_rarity",
    # Ability / spell loaders
    "load_abilities",
    "load_spells",
    "get_ability_by_id",
    "get_spell_by_id",
    # Effect loaders
    "load_effects",
    "get_effect_by_id",
    # Creature loaders
    "load_monsters",
    "load_heroes",
    "get_monster_by_id",
    "get_monster_for_floor",
    "get_mimic",
    "get_hero_by_id",
    "get_starting_hero",
    "get_unlocked_heroes",
    # Item loaders
    "load_items",
    "get_item_by_id",
    "get_item_pool",
    "clear_all_caches",
]
