"""Tests for catalog loaders and the GameCatalog facade."""

import pytest
from pydantic import ValidationError

from dungeon_engine.core.exceptions import DataNotFoundError
from dungeon_engine.data import GameCatalog, default_catalog
from dungeon_engine.data.loaders import (
    get_ability_by_id,
    get_effect_by_id,
    get_item_pool,
    get_mimic,
    get_monster_by_id,
    get_monster_for_floor,
    get_spell_by_id,
    get_starting_hero,
    get_unlocked_heroes,
    get_weapon_by_id,
    get_weapon_counts_by_rarity,
    get_weapons_by_rarity,
    load_abilities,
    load_effects,
    load_heroes,
    load_items,
    load_monsters,
    load_spells,
    load_weapons,
)
from dungeon_engine.data.models import Weapon, WeaponType


class TestWeaponLoader:
    """Tests for weapon loading functionality."""

    def test_load_weapons_returns_list(self):
        weapons = load_weapons()
        assert isinstance(weapons, list)
        assert len(weapons) > 0

    def test_get_weapon_by_id_found(self):
        weapon = get_weapon_by_id("bow")
        assert weapon is not None
        assert weapon.name == "Bow"
        assert weapon.weapon_type == WeaponType.RANGED

    def test_get_weapon_by_id_not_found(self):
        assert get_weapon_by_id("nonexistent_weapon") is None

    def test_get_weapons_by_rarity(self):
        rares = get_weapons_by_rarity("rare")
        assert rares
        assert all(w.rarity == "rare" for w in rares)

    def test_no_epic_weapons(self):
        assert get_weapons_by_rarity("epic") == []
        assert "epic" not in get_weapon_counts_by_rarity()

    def test_passive_effects(self):
        passive = [
            effect
            for weapon in load_weapons()
            for effect in weapon.effects
            if effect.passive
        ]
        assert passive
        assert all(effect.applies_to_self for effect in passive)


class TestActionLoaders:
    """Ability, spell and effect catalogs."""

    def test_abilities_and_spells_load(self):
        assert len(load_abilities()) > 0
        assert len(load_spells()) > 0

    def test_counter_ability(self):
        counter = get_ability_by_id("counter")
        assert counter is not None
        assert counter.mana_cost == 1

    def test_spell_fields(self):
        bolt = get_spell_by_id("death_bolt")
        assert bolt.damage == 3
        assert bolt.mana_cost == 2

    def test_effects_keyed_by_id(self):
        effects = load_effects()
        assert "poisoned" in effects
        assert get_effect_by_id("frozen").is_control
        assert get_effect_by_id("regenerating").is_permanent


class TestCreatureLoaders:
    """Monster and hero catalogs."""

    def test_monsters_and_heroes_load(self):
        assert len(load_monsters()) > 0
        assert len(load_heroes()) > 0

    def test_monster_for_floor(self):
        assert get_monster_for_floor(1).id == "rat"
        # Floors past the last guarded floor wrap around
        assert get_monster_for_floor(1000) is not None

    def test_mimic(self):
        mimic = get_mimic()
        assert mimic is not None
        assert mimic.is_mimic
        assert mimic.floor_number is None

    def test_boss(self):
        assert get_monster_by_id("black_dragon").is_boss

    def test_starting_hero(self):
        assert get_starting_hero().id == "grim_stonebeard"
        assert get_starting_hero() in get_unlocked_heroes(0)


class TestItemLoader:
    def test_pool_grows_with_floor(self):
        assert len(get_item_pool(1)) < len(get_item_pool(5)) < len(get_item_pool(15))

    def test_milestones_excluded(self):
        pool_ids = {item.id for item in get_item_pool(100)}
        assert "floor_key" not in pool_ids
        assert "rare_gem" not in pool_ids
        assert any(item.milestone for item in load_items())


class TestGameCatalog:
    """GameCatalog facade tests."""

    @pytest.fixture
    def catalog(self):
        return default_catalog()

    def test_strict_lookup(self, catalog):
        assert catalog.weapon("sword").damage == 1
        with pytest.raises(DataNotFoundError) as exc_info:
            catalog.weapon("nope")
        assert exc_info.value.kind == "weapon"
        assert exc_info.value.item_id == "nope"

    def test_lookup_error_is_key_error(self, catalog):
        with pytest.raises(KeyError):
            catalog.spell("nope")

    def test_default_catalog_cached(self, catalog):
        assert default_catalog() is catalog

    def test_from_entries(self):
        catalog = GameCatalog.from_entries(
            weapons=[Weapon(id="stick", name="Stick", rarity="common")],
        )
        assert catalog.weapon("stick").damage == 1
        assert catalog.weapons_of_rarity("common")[0].id == "stick"
        assert catalog.find_effect("poisoned") is None

    def test_invalid_record_rejected(self):
        with pytest.raises(ValidationError):
            Weapon(id="broken", name="Broken", rarity="common", damage=-1)
