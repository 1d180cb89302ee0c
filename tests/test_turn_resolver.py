"""Tests for turn resolution."""

import random

import pytest

from dungeon_engine.combat.actions import Action, ActionType
from dungeon_engine.combat.combatant import Combatant
from dungeon_engine.combat.session import BattleOutcome, BattleSession, BattleType
from dungeon_engine.combat.special_abilities import SpecialAbilityRegistry, default_registry
from dungeon_engine.combat.status_effects import StatusEffectSystem
from dungeon_engine.combat.turn_resolver import TurnResolver
from dungeon_engine.core.exceptions import InvalidStateError
from dungeon_engine.data import default_catalog


def create_fighter(
    combatant_id: str,
    health: int = 10,
    mana: int = 10,
    armor: int = 0,
    crit_chance: int = 0,
    weapons=("sword",),
    abilities=(),
    spells=(),
) -> Combatant:
    """Create a fighter with no crits and no armor unless asked."""
    return Combatant(
        id=combatant_id,
        name=combatant_id.title(),
        max_health=10,
        health=health,
        max_mana=10,
        mana=mana,
        armor=armor,
        crit_chance=crit_chance,
        weapons=list(weapons),
        abilities=list(abilities),
        spells=list(spells),
    )


def create_session(player: Combatant, opponent: Combatant, **kwargs) -> BattleSession:
    return BattleSession.start(player, opponent, **kwargs)


@pytest.fixture
def resolver():
    return TurnResolver(catalog=default_catalog(), rng=random.Random(42))


@pytest.fixture
def effects():
    return StatusEffectSystem(default_catalog(), random.Random(42))


class TestBasicExchange:
    """Plain weapon-vs-weapon turns."""

    def test_weapon_vs_weapon(self, resolver):
        """Test each side takes the other's base weapon damage, no events."""
        player = create_fighter("hero", weapons=("hammer",))
        opponent = create_fighter("goblin", weapons=("bow",))
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("hammer"), Action.weapon("bow"))

        assert result.damage_to_opponent == 1
        assert result.damage_to_player == 1
        assert result.messages == []
        assert result.critical_hits == []
        assert state.player.health == 9
        assert state.opponent.health == 9
        assert result.outcome == BattleOutcome.ONGOING

    def test_input_session_untouched(self, resolver):
        player = create_fighter("hero")
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        state, _ = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert session.turn_number == 0
        assert session.player.health == 10
        assert session.stats.turns == 0
        assert state.turn_number == 1
        assert state.stats.turns == 1

    def test_stats_accumulate(self, resolver):
        player = create_fighter("hero")
        opponent = create_fighter("goblin")
        state = create_session(player, opponent)

        for _ in range(3):
            state, _ = resolver.resolve(state, Action.weapon("sword"), Action.weapon("sword"))

        assert state.stats.turns == 3
        assert state.player_stats.damage_dealt == 3
        assert state.opponent_stats.damage_received == 3

    def test_armor_reduces_damage(self, resolver):
        player = create_fighter("hero")
        opponent = create_fighter("golem", armor=1)
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert result.damage_to_opponent == 0

    def test_critical_hit(self, resolver, effects):
        """Test a guaranteed crit doubles damage and is reported."""
        player = create_fighter("hero", crit_chance=50)
        effects.apply_effect(player, "drunk_whiskey")
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert result.player.critical_hit
        assert result.damage_to_opponent == 2
        assert len(result.critical_hits) == 1
        assert state.player_stats.critical_hits == 1

    def test_spell_costs_mana(self, resolver):
        player = create_fighter("hero", spells=("death_bolt",))
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.spell("death_bolt"), Action.weapon("sword"))

        assert result.damage_to_opponent == 3
        assert result.player.mana_spent == 2
        assert state.player.mana == 8
        assert "death_bolt" in state.player_stats.spells_used

    def test_mana_cost_clamped(self, resolver):
        """Test an unaffordable spell still resolves with the cost capped."""
        player = create_fighter("hero", mana=1, spells=("death_bolt",))
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.spell("death_bolt"), Action.weapon("sword"))

        assert result.player.mana_spent == 1
        assert state.player.mana == 0
        assert result.damage_to_opponent == 3


class TestFallbacks:
    """Content errors degrade instead of failing."""

    def test_unknown_weapon_becomes_basic_attack(self, resolver):
        player = create_fighter("hero", weapons=("missing_blade",))
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.weapon("missing_blade"), Action.weapon("sword"))

        assert result.player.fallback_used
        assert result.player.performed_action.is_basic_attack
        assert result.damage_to_opponent == 1

    def test_unknown_spell_becomes_basic_attack(self, resolver):
        player = create_fighter("hero", spells=("missing_spell",))
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.spell("missing_spell"), Action.weapon("sword"))

        assert result.player.fallback_used
        assert result.damage_to_opponent == 1
        assert result.player.mana_spent == 0

    def test_basic_attack_always_allowed(self, resolver):
        player = create_fighter("hero", weapons=())
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.basic_attack(), Action.weapon("sword"))

        assert not result.player.fallback_used
        assert result.damage_to_opponent == 1


class TestProtocolErrors:
    """Caller mistakes raise InvalidStateError."""

    def test_terminal_session_rejected(self, resolver):
        session = create_session(create_fighter("hero"), create_fighter("goblin"))
        session.outcome = BattleOutcome.PLAYER_WON

        with pytest.raises(InvalidStateError):
            resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

    def test_action_outside_loadout_rejected(self, resolver):
        session = create_session(create_fighter("hero"), create_fighter("goblin"))

        with pytest.raises(InvalidStateError):
            resolver.resolve(session, Action.weapon("dragon_fang"), Action.weapon("sword"))

    def test_resolving_after_death_rejected(self, resolver):
        player = create_fighter("hero", weapons=("steel_sword",))
        opponent = create_fighter("rat", health=1)
        state, result = resolver.resolve(
            create_session(player, opponent), Action.weapon("steel_sword"), Action.weapon("sword")
        )

        assert result.outcome == BattleOutcome.PLAYER_WON
        assert result.is_terminal
        with pytest.raises(InvalidStateError):
            resolver.resolve(state, Action.weapon("steel_sword"), Action.weapon("sword"))


class TestControlOverride:
    """Control effects replace the action with a no-op."""

    def test_stunned_deals_no_damage_but_takes_ticks(self, resolver, effects):
        """Test a controlled combatant deals nothing yet still takes DoT."""
        player = create_fighter("hero", weapons=("hammer",))
        effects.apply_effect(player, "stunned")
        effects.apply_effect(player, "poisoned", source_id="goblin")
        opponent = create_fighter("goblin")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("hammer"), Action.weapon("sword"))

        assert result.player.blocked_by == "stunned"
        assert result.player.performed_action.type == ActionType.NONE
        assert result.damage_to_opponent == 0
        assert result.player.effect_damage == 1
        assert result.damage_to_player == 2
        assert state.player.health == 8
        assert len(result.overrides) == 1

    def test_stun_expires_after_its_turn(self, resolver, effects):
        player = create_fighter("hero", weapons=("hammer",))
        effects.apply_effect(player, "stunned")
        opponent = create_fighter("goblin")
        state = create_session(player, opponent)

        state, first = resolver.resolve(state, Action.weapon("hammer"), Action.weapon("sword"))
        state, second = resolver.resolve(state, Action.weapon("hammer"), Action.weapon("sword"))

        assert first.player.blocked_by == "stunned"
        assert second.player.blocked_by is None
        assert second.damage_to_opponent == 1


class TestEffectTiming:
    """Effects applied during a turn start ticking next turn."""

    def test_bleed_ticks_from_next_turn(self, resolver):
        player = create_fighter("hero", weapons=("holy_thats_worth_something",))
        opponent = create_fighter("goblin")
        state = create_session(player, opponent)

        state, first = resolver.resolve(
            state, Action.weapon("holy_thats_worth_something"), Action.weapon("sword")
        )
        assert state.opponent.health == 9
        assert first.opponent.applied_effects == ["bleeding"]
        assert first.opponent.effect_damage == 0

        state, second = resolver.resolve(
            state, Action.weapon("holy_thats_worth_something"), Action.weapon("sword")
        )
        assert second.opponent.effect_damage == 1
        assert state.opponent.health == 7
        assert [e.effect_id for e in state.opponent.effects] == ["bleeding", "bleeding"]

    def test_invisible_target_takes_no_direct_damage(self, resolver, effects):
        player = create_fighter("hero")
        opponent = create_fighter("thief")
        effects.apply_effect(opponent, "invisible")
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert result.damage_to_opponent == 0
        assert [e.kind for e in result.events] == ["invisible"]


class TestSpecialInteractions:
    """Counter, dodge and silence."""

    def test_counter_negates_melee(self, resolver):
        player = create_fighter("hero", abilities=("counter",))
        opponent = create_fighter("orc", weapons=("hammer",))
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.ability("counter"), Action.weapon("hammer"))

        assert result.damage_to_player == 0
        assert result.damage_to_opponent == 2
        assert [e.kind for e in result.events] == ["counter"]
        assert state.player.mana == 9

    def test_counter_ignores_ranged(self, resolver):
        player = create_fighter("hero", abilities=("counter",))
        opponent = create_fighter("archer", weapons=("bow",))
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.ability("counter"), Action.weapon("bow"))

        assert result.damage_to_player == 1
        assert result.events == []

    def test_dodge_heals_more_against_ranged(self, resolver):
        player = create_fighter("hero", health=5, abilities=("dodge",))
        opponent = create_fighter("archer", weapons=("bow",))
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.ability("dodge"), Action.weapon("bow"))

        assert result.damage_to_player == 0
        assert state.player.health == 8
        assert result.events[0].kind == "dodge"
        assert result.events[0].amount == 3

    def test_silence_punishes_caster(self, resolver):
        player = create_fighter("hero", abilities=("silence",))
        opponent = create_fighter("witch", weapons=(), spells=("death_bolt",))
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.ability("silence"), Action.spell("death_bolt"))

        assert result.damage_to_player == 0
        assert result.damage_to_opponent == 3
        assert state.opponent.health == 7
        assert result.events[0].kind == "silence"

    def test_interactions_are_symmetric(self, resolver):
        """Test the opponent's counter works the same way as the player's."""
        player = create_fighter("hero", weapons=("hammer",))
        opponent = create_fighter("duelist", abilities=("counter",))
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.weapon("hammer"), Action.ability("counter"))

        assert result.damage_to_opponent == 0
        assert result.damage_to_player == 2

    def test_custom_registry_without_counter(self):
        registry = SpecialAbilityRegistry()
        resolver = TurnResolver(default_catalog(), registry, random.Random(42))
        player = create_fighter("hero", abilities=("counter",))
        opponent = create_fighter("orc", weapons=("hammer",))
        session = create_session(player, opponent)

        _, result = resolver.resolve(session, Action.ability("counter"), Action.weapon("hammer"))

        assert result.damage_to_player == 1
        assert result.events == []


class TestSpecialAbilityRegistry:
    """Registry table tests."""

    def test_default_registry_ids(self):
        registry = default_registry()

        assert registry.interaction_ids == ["counter", "dodge", "silence"]
        assert sorted(registry.death_prevention_ids) == ["accepting_fate", "immortal"]
        assert registry.is_interaction("dodge")
        assert registry.is_death_prevention("immortal")

    def test_unregister_disables_rule(self):
        registry = default_registry()
        registry.unregister("counter")

        assert "counter" not in registry.interaction_ids
        assert not registry.is_interaction("counter")

        resolver = TurnResolver(default_catalog(), registry, random.Random(42))
        player = create_fighter("hero", abilities=("counter",))
        opponent = create_fighter("orc", weapons=("hammer",))
        _, result = resolver.resolve(
            create_session(player, opponent), Action.ability("counter"), Action.weapon("hammer")
        )

        assert result.damage_to_player == 1
        assert result.events == []

    def test_unregister_unknown_id(self):
        registry = default_registry()
        registry.unregister("nonexistent")
        assert len(registry.interaction_ids) == 3


class TestDeathPrevention:
    """Single-use death prevention."""

    def test_survives_at_exactly_one(self, resolver):
        player = create_fighter("hero", health=1, abilities=("immortal",))
        opponent = create_fighter("orc", weapons=("steel_sword",))
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("steel_sword"))

        assert state.player.health == 1
        assert result.outcome == BattleOutcome.ONGOING
        assert [e.kind for e in result.events] == ["death_prevention"]
        assert "immortal" in state.player.consumed_abilities

    def test_only_once_per_session(self, resolver):
        player = create_fighter("hero", health=1, abilities=("immortal",))
        opponent = create_fighter("orc")
        state = create_session(player, opponent)

        state, _ = resolver.resolve(state, Action.weapon("sword"), Action.weapon("sword"))
        state, result = resolver.resolve(state, Action.weapon("sword"), Action.weapon("sword"))

        assert state.player.health == 0
        assert result.outcome == BattleOutcome.OPPONENT_WON
        assert result.events == []

    def test_accepting_fate_restores_mana(self, resolver):
        player = create_fighter("hero", health=1, mana=0, abilities=("accepting_fate",))
        opponent = create_fighter("orc")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert state.player.health == 1
        assert state.player.mana == 4
        assert "Accepting Fate" in result.messages[0]

    def test_runs_after_effect_ticks(self, resolver, effects):
        player = create_fighter("hero", health=2, abilities=("immortal",))
        effects.apply_effect(player, "poisoned")
        opponent = create_fighter("orc")
        session = create_session(player, opponent)

        state, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))

        assert result.damage_to_player == 2
        assert state.player.health == 1
        assert result.events[0].kind == "death_prevention"


class TestBattleTypes:
    def test_battle_type_kept(self, resolver):
        session = create_session(
            create_fighter("hero"), create_fighter("dragon"), battle_type=BattleType.FLOOR_BOSS
        )
        state, _ = resolver.resolve(session, Action.weapon("sword"), Action.weapon("sword"))
        assert state.battle_type == BattleType.FLOOR_BOSS
