"""Static game catalogs.

GameCatalog bundles every id-keyed catalog the engine reads. Engine
components take one as a constructor argument so tests can inject small
hand-built catalogs; default_catalog() wraps the bundled JSON files.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..core.exceptions import DataNotFoundError
from .loaders import (
    load_abilities,
    load_effects,
    load_heroes,
    load_items,
    load_monsters,
    load_spells,
    load_weapons,
)
from .models import Ability, EffectDefinition, Hero, Item, Monster, Spell, Weapon


def _index(entries: Iterable) -> dict:
    return {entry.id: entry for entry in entries}


@dataclass(frozen=True)
class GameCatalog:
    """Immutable id -> definition lookups for weapons, abilities, spells, effects, creatures and items."""

    weapons: dict[str, Weapon] = field(default_factory=dict)
    abilities: dict[str, Ability] = field(default_factory=dict)
    spells: dict[str, Spell] = field(default_factory=dict)
    effects: dict[str, EffectDefinition] = field(default_factory=dict)
    monsters: dict[str, Monster] = field(default_factory=dict)
    heroes: dict[str, Hero] = field(default_factory=dict)
    items: dict[str, Item] = field(default_factory=dict)

    @classmethod
    def from_entries(
        cls,
        weapons: Iterable[Weapon] = (),
        abilities: Iterable[Ability] = (),
        spells: Iterable[Spell] = (),
        effects: Iterable[EffectDefinition] = (),
        monsters: Iterable[Monster] = (),
        heroes: Iterable[Hero] = (),
        items: Iterable[Item] = (),
    ) -> "GameCatalog":
        return cls(
            weapons=_index(weapons),
            abilities=_index(abilities),
            spells=_index(spells),
            effects=_index(effects),
            monsters=_index(monsters),
            heroes=_index(heroes),
            items=_index(items),
        )

    # Strict lookups raise DataNotFoundError

    def weapon(self, weapon_id: str) -> Weapon:
        try:
            return self.weapons[weapon_id]
        except KeyError:
            raise DataNotFoundError("weapon", weapon_id) from None

    def ability(self, ability_id: str) -> Ability:
        try:
            return self.abilities[ability_id]
        except KeyError:
            raise DataNotFoundError("ability", ability_id) from None

    def spell(self, spell_id: str) -> Spell:
        try:
            return self.spells[spell_id]
        except KeyError:
            raise DataNotFoundError("spell", spell_id) from None

    def effect(self, effect_id: str) -> EffectDefinition:
        try:
            return self.effects[effect_id]
        except KeyError:
            raise DataNotFoundError("effect", effect_id) from None

    def monster(self, monster_id: str) -> Monster:
        try:
            return self.monsters[monster_id]
        except KeyError:
            raise DataNotFoundError("monster", monster_id) from None

    def hero(self, hero_id: str) -> Hero:
        try:
            return self.heroes[hero_id]
        except KeyError:
            raise DataNotFoundError("hero", hero_id) from None

    # Queries

    def weapons_of_rarity(self, rarity: str) -> list[Weapon]:
        return [w for w in self.weapons.values() if w.rarity == rarity]

    def item_pool(self, floor: int) -> list[Item]:
        """Non-milestone items unlocked at this floor."""
        return [i for i in self.items.values() if not i.milestone and i.min_floor <= floor]

    def has_item(self, item_id: str) -> bool:
        return item_id in self.items

    def find_effect(self, effect_id: str) -> Optional[EffectDefinition]:
        return self.effects.get(effect_id)


_default: Optional[GameCatalog] = None


def default_catalog() -> GameCatalog:
    """The catalog built from the bundled JSON files (built once)."""
    global _default
    if _default is None:
        _default = GameCatalog.from_entries(
            weapons=load_weapons(),
            abilities=load_abilities(),
            spells=load_spells(),
            effects=load_effects().values(),
            monsters=load_monsters(),
            heroes=load_heroes(),
            items=load_items(),
        )
    return _default


def reset_default_catalog() -> None:
    global _default
    _default = None
