"""Tests for battle sessions and fleeing."""

import random

import pytest

from dungeon_engine.combat.actions import select_opponent_action
from dungeon_engine.combat.combatant import Combatant
from dungeon_engine.combat.session import BattleOutcome, BattleSession, BattleStats, BattleType
from dungeon_engine.core.exceptions import InvalidStateError
from dungeon_engine.data import default_catalog


def create_hero(health: int = 10, mana: int = 10) -> Combatant:
    return Combatant(
        id="hero", name="Hero", max_health=10, health=health,
        max_mana=10, mana=mana, weapons=["sword"], is_player=True,
    )


def create_monster(health: int = 5, abilities=()) -> Combatant:
    return Combatant(
        id="rat", name="Rat", max_health=health, health=health,
        max_mana=0, mana=0, weapons=["gnaw_attack"], abilities=list(abilities),
    )


class TestBattleSession:
    """BattleSession state tests."""

    def test_start(self):
        session = BattleSession.start(create_hero(), create_monster(), BattleType.MIMIC, floor=4)

        assert session.battle_type == BattleType.MIMIC
        assert session.turn_number == 0
        assert session.outcome == BattleOutcome.ONGOING
        assert set(session.stats.sides) == {"hero", "rat"}

    def test_battle_type_from_string(self):
        session = BattleSession.start(create_hero(), create_monster(), "detected")
        assert session.battle_type == BattleType.DETECTED

    def test_battle_type_immutable(self):
        session = BattleSession.start(create_hero(), create_monster())
        with pytest.raises(InvalidStateError):
            session.battle_type = BattleType.PVP

    def test_duplicate_ids_rejected(self):
        with pytest.raises(InvalidStateError):
            BattleSession.start(create_hero(), create_hero())

    def test_copy_is_independent(self):
        session = BattleSession.start(create_hero(), create_monster())
        clone = session.copy()
        clone.player.health = 1
        clone.stats.turns = 5

        assert session.player.health == 10
        assert session.stats.turns == 0
        assert clone.battle_type == session.battle_type

    def test_update_outcome(self):
        session = BattleSession.start(create_hero(), create_monster())
        session.opponent.health = 0
        assert session.update_outcome() == BattleOutcome.PLAYER_WON

        session = BattleSession.start(create_hero(), create_monster())
        session.player.health = 0
        session.opponent.health = 0
        assert session.update_outcome() == BattleOutcome.DRAW

    def test_stats_to_dict(self):
        stats = BattleStats()
        stats.side("hero").record(damage_dealt=3, ability="counter")
        data = stats.to_dict()
        assert data["sides"]["hero"]["damage_dealt"] == 3
        assert data["sides"]["hero"]["abilities_used"] == ["counter"]

    def test_stats_never_decrease(self):
        stats = BattleStats()
        side = stats.side("hero")
        side.record(damage_dealt=5)
        side.record(damage_dealt=-3)
        assert side.damage_dealt == 5


class TestFlee:
    """Flee rules and penalties."""

    def test_flee_weak_monster(self):
        session = BattleSession.start(create_hero(), create_monster(), floor=1)

        fled, result = session.flee(random.Random(42))

        assert fled.outcome == BattleOutcome.FLED
        assert fled.is_terminal
        assert result.health_lost == 1
        assert result.mana_lost == 1
        assert fled.player.health == 9
        assert not result.stronger_monster
        assert result.gold_penalty == 0
        assert not result.item_lost
        # Input untouched
        assert session.outcome == BattleOutcome.ONGOING
        assert session.player.health == 10

    def test_flee_stronger_monster_on_deep_floor(self):
        session = BattleSession.start(create_hero(), create_monster(), floor=5)

        _, result = session.flee(random.Random(42))

        assert result.stronger_monster
        assert result.gold_penalty == pytest.approx(0.1)
        assert result.apply_gold_penalty(100) == 90

    def test_stronger_by_ability_count(self):
        monster = create_monster(abilities=("roar", "pound", "dodge"))
        session = BattleSession.start(create_hero(), monster, floor=1)
        assert session.is_stronger_opponent()

    def test_flee_keeps_one_health(self):
        session = BattleSession.start(create_hero(health=1), create_monster())
        fled, _ = session.flee(random.Random(42))
        assert fled.player.health == 1

    def test_floor_boss_cannot_flee(self):
        session = BattleSession.start(create_hero(), create_monster(), BattleType.FLOOR_BOSS)

        assert not session.can_flee
        with pytest.raises(InvalidStateError):
            session.flee(random.Random(42))

    def test_terminal_session_cannot_flee(self):
        session = BattleSession.start(create_hero(), create_monster())
        fled, _ = session.flee(random.Random(42))
        with pytest.raises(InvalidStateError):
            fled.flee(random.Random(42))


class TestCombatantConstruction:
    """Combatants from catalog definitions."""

    def test_from_hero(self):
        hero = default_catalog().hero("grim_stonebeard")
        combatant = Combatant.from_hero(hero)

        assert combatant.is_player
        assert combatant.health == hero.health
        assert combatant.weapons == hero.weapons
        assert combatant.primary_weapon == "hammer"

    def test_from_monster_scales_with_floor(self):
        rat = default_catalog().monster("rat")

        low = Combatant.from_monster(rat, floor=1)
        deep = Combatant.from_monster(rat, floor=41)

        assert low.max_health == rat.health
        # ceil(2 * 1.2)
        assert deep.max_health == 3
        assert not deep.is_player

    def test_resources_clamped(self):
        hero = create_hero()
        assert hero.change_health(5) == 0
        assert hero.change_health(-50) == -10
        assert hero.health == 0
        assert not hero.is_alive


class TestOpponentActionSelector:
    def test_picks_from_loadout(self):
        monster = create_monster(abilities=("roar",))
        picks = {select_opponent_action(monster, random.Random(i)).id for i in range(50)}
        assert picks == {"gnaw_attack", "roar"}

    def test_empty_loadout_basic_attack(self):
        monster = create_monster()
        monster.weapons = []
        assert select_opponent_action(monster, random.Random(42)).is_basic_attack
