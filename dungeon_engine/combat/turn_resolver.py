"""Turn Resolver.

Resolves one turn of simultaneous combat. Both sides commit an action, then:

1. Look up each action in the catalogs (unknown ids become a basic attack).
2. Replace actions forbidden by an active control effect with a no-op.
3. Roll critical hits per side.
4. Run special interaction rules (counter, dodge, silence) before damage.
5. Apply direct damage and healing, then effect ticks, to both sides.
6. Run death prevention.
7. Check for a terminal state and fold the turn into the battle stats.

resolve() never mutates its input session; it returns the next session and
a TurnResult describing what happened.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.config import settings
from ..core.constants import BASIC_ATTACK_DAMAGE
from ..core.exceptions import DataNotFoundError, ExhaustedResourceError, InvalidStateError
from ..core.floor_scaling import weapon_damage_scaling
from ..data.catalog import GameCatalog, default_catalog
from ..data.models import WeaponType
from .actions import Action, ActionType
from .combatant import Combatant
from .session import BattleOutcome, BattleSession
from .special_abilities import SpecialAbilityRegistry, SpecialEvent, default_registry
from .status_effects import ActiveEffect, StatusEffectSystem, TickSummary

logger = logging.getLogger(__name__)


@dataclass
class Strike:
    """Direct damage one action sends at the other side."""

    amount: int
    source: ActionType
    weapon_type: Optional[str] = None
    ignore_armor: bool = False
    critical: bool = False
    negated_by: Optional[str] = None


@dataclass
class ActionOutcome:
    """
    What one side's committed action produces before the sides interact.

    Interaction rules adjust reflect_damage, bonus_heal and the other
    side's strike in place.
    """

    actor_id: str
    actor_name: str
    requested: Action
    action: Action
    label: str = ""
    blocked_by: Optional[str] = None
    fallback: bool = False
    strike: Optional[Strike] = None
    self_heal: int = 0
    bonus_heal: int = 0
    reflect_damage: int = 0
    self_damage: int = 0
    mana_cost: int = 0
    mana_restore: int = 0
    # (effect id, duration override)
    target_effects: List[Tuple[str, Optional[int]]] = field(default_factory=list)
    self_effects: List[Tuple[str, Optional[int]]] = field(default_factory=list)


@dataclass
class SideResult:
    """Per-combatant summary of a resolved turn."""

    combatant_id: str
    requested_action: Action
    performed_action: Action
    blocked_by: Optional[str] = None
    fallback_used: bool = False
    critical_hit: bool = False
    damage_dealt: int = 0
    damage_taken: int = 0
    healing: int = 0
    mana_spent: int = 0
    mana_restored: int = 0
    effect_damage: int = 0
    effect_healing: int = 0
    health: int = 0
    mana: int = 0
    applied_effects: List[str] = field(default_factory=list)
    effects: List[ActiveEffect] = field(default_factory=list)


@dataclass
class TurnResult:
    """Everything a caller needs to present one resolved turn."""

    session_id: str
    turn_number: int
    player: SideResult
    opponent: SideResult
    critical_hits: List[str] = field(default_factory=list)
    events: List[SpecialEvent] = field(default_factory=list)
    overrides: List[str] = field(default_factory=list)
    outcome: BattleOutcome = BattleOutcome.ONGOING

    @property
    def damage_to_player(self) -> int:
        return self.player.damage_taken

    @property
    def damage_to_opponent(self) -> int:
        return self.opponent.damage_taken

    @property
    def messages(self) -> List[str]:
        return [event.message for event in self.events]

    @property
    def is_terminal(self) -> bool:
        return self.outcome != BattleOutcome.ONGOING


class TurnResolver:
    """
    Resolves turns for battle sessions.

    Usage:
        resolver = TurnResolver(rng=random.Random(42))
        session, result = resolver.resolve(session, Action.weapon("sword"), Action.weapon("claw"))
    """

    def __init__(
        self,
        catalog: Optional[GameCatalog] = None,
        registry: Optional[SpecialAbilityRegistry] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog or default_catalog()
        self.registry = registry or default_registry()
        self.rng = rng or random.Random()
        self.effects = StatusEffectSystem(self.catalog, self.rng)

    def resolve(
        self,
        session: BattleSession,
        player_action: Action,
        opponent_action: Action,
        rng: Optional[random.Random] = None,
    ) -> Tuple[BattleSession, TurnResult]:
        """
        Resolve one turn.

        Args:
            session: Current (non-terminal) session; not modified.
            player_action: Action committed by the player.
            opponent_action: Action committed by the opponent.
            rng: Random source for this turn (defaults to the resolver's).

        Returns:
            (next session, turn result)

        Raises:
            InvalidStateError: The session is terminal or an action is not in
                its combatant's loadout.
        """
        if session.is_terminal:
            raise InvalidStateError(
                f"battle already ended ({session.outcome.value})", session.session_id
            )
        for combatant, action in ((session.player, player_action), (session.opponent, opponent_action)):
            if not combatant.can_use(action):
                raise InvalidStateError(
                    f"{combatant.name} cannot use {action}", session.session_id
                )

        rng = rng or self.rng
        state = session.copy()
        state.turn_number += 1
        player, opponent = state.player, state.opponent

        # 1-3: look up, control overrides, crits
        player_out = self._prepare(state, player, player_action, rng)
        opponent_out = self._prepare(state, opponent, opponent_action, rng)

        result = TurnResult(
            session_id=state.session_id,
            turn_number=state.turn_number,
            player=SideResult(player.id, player_action, player_out.action),
            opponent=SideResult(opponent.id, opponent_action, opponent_out.action),
        )
        for out, side in ((player_out, result.player), (opponent_out, result.opponent)):
            side.blocked_by = out.blocked_by
            side.fallback_used = out.fallback
            if out.blocked_by:
                result.overrides.append(
                    f"{out.actor_name} is {out.blocked_by} and cannot use {out.requested.id}!"
                )
            if out.strike and out.strike.critical:
                side.critical_hit = True
                result.critical_hits.append(
                    f"{out.actor_name} scored a critical hit with {out.label}!"
                )

        # 4: special interactions
        result.events.extend(self.registry.resolve_interactions(player_out, opponent_out))

        # 5a: direct damage and healing, simultaneously
        self._apply_direct(state, player, opponent, player_out, opponent_out, result.player, result.opponent, result)
        self._apply_direct(state, opponent, player, opponent_out, player_out, result.opponent, result.player, result)
        self._commit_direct(player, result.player)
        self._commit_direct(opponent, result.opponent)

        # 5b: effect ticks on effects active before this turn's actions
        player_tick, player.effects = self.effects.tick(player.effects)
        opponent_tick, opponent.effects = self.effects.tick(opponent.effects)
        self._apply_ticks(player, opponent, player_tick, result.player, result.opponent)
        self._apply_ticks(opponent, player, opponent_tick, result.opponent, result.player)

        # Effects applied this turn start ticking next turn
        self._attach_effects(player, opponent, player_out, result.player, result.opponent)
        self._attach_effects(opponent, player, opponent_out, result.opponent, result.player)

        # 6: death prevention
        for combatant in (player, opponent):
            event = self.registry.prevent_death(combatant)
            if event is not None:
                result.events.append(event)

        # 7: terminal check and stats
        state.stats.turns += 1
        self._record_stats(state, player, player_out, result.player)
        self._record_stats(state, opponent, opponent_out, result.opponent)

        for combatant, side in ((player, result.player), (opponent, result.opponent)):
            side.health = combatant.health
            side.mana = combatant.mana
            side.effects = list(combatant.effects)

        result.outcome = state.update_outcome()

        logger.debug(
            "[session=%s floor=%d turn=%d] %s vs %s -> dmg %d/%d, outcome=%s",
            state.session_id, state.floor, state.turn_number,
            player_out.action, opponent_out.action,
            result.player.damage_dealt, result.opponent.damage_dealt,
            result.outcome.value,
        )
        return state, result

    # ------------------------------------------------------------------
    # Action preparation
    # ------------------------------------------------------------------

    def _prepare(
        self,
        session: BattleSession,
        actor: Combatant,
        action: Action,
        rng: random.Random,
    ) -> ActionOutcome:
        outcome = ActionOutcome(
            actor_id=actor.id,
            actor_name=actor.name,
            requested=action,
            action=action,
        )

        if action.is_no_op:
            return outcome

        blocker = self.effects.blocking_effect(actor, action)
        if blocker:
            outcome.action = Action.no_op()
            outcome.blocked_by = blocker
            logger.debug(
                "[session=%s floor=%d] %s blocked by %s",
                session.session_id, session.floor, action, blocker,
            )
            return outcome

        try:
            if action.type == ActionType.WEAPON:
                self._prepare_weapon(session, actor, action, outcome, rng)
            elif action.type == ActionType.ABILITY:
                self._prepare_ability(session, actor, action, outcome)
            elif action.type == ActionType.SPELL:
                self._prepare_spell(session, actor, action, outcome, rng)
        except DataNotFoundError as exc:
            if not action.is_basic_attack:
                logger.warning(
                    "[session=%s floor=%d] %s for %s (action %s); using basic attack",
                    session.session_id, session.floor, exc, actor.id, action,
                )
            outcome = self._basic_attack(actor, action)
            outcome.fallback = not action.is_basic_attack

        if outcome.strike is not None and outcome.strike.amount > 0:
            self._finish_strike(actor, outcome, rng)
        return outcome

    def _basic_attack(self, actor: Combatant, requested: Action) -> ActionOutcome:
        return ActionOutcome(
            actor_id=actor.id,
            actor_name=actor.name,
            requested=requested,
            action=Action.basic_attack(),
            label="a basic attack",
            strike=Strike(
                amount=BASIC_ATTACK_DAMAGE,
                source=ActionType.WEAPON,
                weapon_type=WeaponType.MELEE,
            ),
        )

    def _prepare_weapon(
        self,
        session: BattleSession,
        actor: Combatant,
        action: Action,
        outcome: ActionOutcome,
        rng: random.Random,
    ) -> None:
        weapon = self.catalog.weapon(action.id)
        outcome.label = weapon.name
        outcome.strike = Strike(
            amount=weapon_damage_scaling(weapon.damage, session.floor),
            source=ActionType.WEAPON,
            weapon_type=weapon.weapon_type,
        )
        outcome.mana_cost = self._clamp_mana(session, actor, action, weapon.mana_cost)
        outcome.self_damage = self._clamp_health(session, actor, action, weapon.health_cost)
        for chance in weapon.effects:
            if not self.effects.roll_chance(chance, rng):
                continue
            if chance.applies_to_self:
                outcome.self_effects.append((chance.type, None))
            else:
                outcome.target_effects.append((chance.type, None))

    def _prepare_ability(
        self,
        session: BattleSession,
        actor: Combatant,
        action: Action,
        outcome: ActionOutcome,
    ) -> None:
        ability = self.catalog.ability(action.id)
        outcome.label = ability.name
        outcome.mana_cost = self._clamp_mana(session, actor, action, ability.mana_cost)
        outcome.self_damage = self._clamp_health(session, actor, action, ability.health_cost)

        # Interaction and death-prevention abilities act through the registry
        if self.registry.is_interaction(ability.id) or self.registry.is_death_prevention(ability.id):
            return

        if ability.damage > 0:
            outcome.strike = Strike(
                amount=ability.damage,
                source=ActionType.ABILITY,
                ignore_armor=ability.ignore_armor,
            )
        outcome.self_heal = ability.heal_amount
        outcome.mana_restore = ability.mana_restore
        for applied in ability.applies:
            entry = (applied.effect, applied.duration)
            if applied.target == "self":
                outcome.self_effects.append(entry)
            else:
                outcome.target_effects.append(entry)

    def _prepare_spell(
        self,
        session: BattleSession,
        actor: Combatant,
        action: Action,
        outcome: ActionOutcome,
        rng: random.Random,
    ) -> None:
        spell = self.catalog.spell(action.id)
        outcome.label = spell.name
        outcome.mana_cost = self._clamp_mana(session, actor, action, spell.mana_cost)
        outcome.self_damage = self._clamp_health(session, actor, action, spell.health_cost)
        if spell.damage > 0:
            outcome.strike = Strike(amount=spell.damage, source=ActionType.SPELL)
        outcome.self_heal = spell.healing
        for chance in spell.effects:
            if not self.effects.roll_chance(chance, rng):
                continue
            if chance.applies_to_self:
                outcome.self_effects.append((chance.type, None))
            else:
                outcome.target_effects.append((chance.type, None))

    def _finish_strike(self, actor: Combatant, outcome: ActionOutcome, rng: random.Random) -> None:
        """Apply the attacker's damage modifiers and roll for a critical hit."""
        strike = outcome.strike
        bonus, multiplier = self.effects.damage_modifiers(actor)
        strike.amount = max(0, math.floor((strike.amount + bonus) * multiplier))
        if self.effects.ignores_armor(actor):
            strike.ignore_armor = True

        crit_chance = actor.crit_chance + self.effects.crit_bonus(actor)
        if strike.amount > 0 and rng.random() * 100 < crit_chance:
            strike.amount *= settings.CRIT_MULTIPLIER
            strike.critical = True

    def _clamp_mana(self, session: BattleSession, actor: Combatant, action: Action, cost: int) -> int:
        if cost <= actor.mana:
            return cost
        logger.warning(
            "[session=%s floor=%d] %s for %s (action %s); cost clamped",
            session.session_id, session.floor,
            ExhaustedResourceError("mana", cost, actor.mana), actor.id, action,
        )
        return actor.mana

    def _clamp_health(self, session: BattleSession, actor: Combatant, action: Action, cost: int) -> int:
        available = max(0, actor.health - 1)
        if cost <= available:
            return cost
        logger.warning(
            "[session=%s floor=%d] %s for %s (action %s); cost clamped",
            session.session_id, session.floor,
            ExhaustedResourceError("health", cost, available), actor.id, action,
        )
        return available

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def _apply_direct(
        self,
        session: BattleSession,
        attacker: Combatant,
        defender: Combatant,
        attack: ActionOutcome,
        defense: ActionOutcome,
        attacker_side: SideResult,
        defender_side: SideResult,
        result: TurnResult,
    ) -> None:
        """Accumulate everything the attacker's action does this turn."""
        strike = attack.strike
        if strike is not None and not strike.negated_by:
            if self.effects.is_untargetable(defender):
                strike.negated_by = "invisible"
                result.events.append(SpecialEvent(
                    kind="invisible",
                    combatant_id=defender.id,
                    message=f"{defender.name} is invisible and avoided the attack!",
                ))
            else:
                landed = self._landed_damage(attacker, defender, strike)
                defender_side.damage_taken += landed
                attacker_side.damage_dealt += landed

        if attack.reflect_damage:
            defender_side.damage_taken += attack.reflect_damage
            attacker_side.damage_dealt += attack.reflect_damage

        attacker_side.damage_taken += attack.self_damage
        attacker_side.healing += attack.self_heal + attack.bonus_heal
        attacker_side.mana_spent += attack.mana_cost
        attacker_side.mana_restored += attack.mana_restore

    def _landed_damage(self, attacker: Combatant, defender: Combatant, strike: Strike) -> int:
        damage = math.floor(strike.amount * self.effects.incoming_multiplier(defender))
        if not strike.ignore_armor:
            damage -= self.effects.effective_armor(defender)
        return max(0, damage)

    def _commit_direct(self, combatant: Combatant, side: SideResult) -> None:
        combatant.change_health(side.healing - side.damage_taken)
        combatant.change_mana(side.mana_restored - side.mana_spent)

    def _apply_ticks(
        self,
        holder: Combatant,
        other: Combatant,
        tick: TickSummary,
        holder_side: SideResult,
        other_side: SideResult,
    ) -> None:
        holder.change_health(tick.healing - tick.damage)
        holder.change_mana(tick.mana)
        holder_side.effect_damage += tick.damage
        holder_side.effect_healing += tick.healing
        holder_side.damage_taken += tick.damage
        holder_side.healing += tick.healing
        holder_side.mana_restored += tick.mana

        drained = tick.drained.get(other.id, 0)
        if drained:
            other.change_health(drained)
            other_side.effect_healing += drained
            other_side.healing += drained

    def _attach_effects(
        self,
        actor: Combatant,
        target: Combatant,
        outcome: ActionOutcome,
        actor_side: SideResult,
        target_side: SideResult,
    ) -> None:
        strike_landed = outcome.strike is None or not outcome.strike.negated_by
        if strike_landed:
            for effect_id, duration in outcome.target_effects:
                if self.effects.apply_effect(target, effect_id, source_id=actor.id, duration=duration):
                    target_side.applied_effects.append(effect_id)
        for effect_id, duration in outcome.self_effects:
            if self.effects.apply_effect(actor, effect_id, source_id=actor.id, duration=duration):
                actor_side.applied_effects.append(effect_id)

    def _record_stats(
        self,
        session: BattleSession,
        combatant: Combatant,
        outcome: ActionOutcome,
        side: SideResult,
    ) -> None:
        action = outcome.action
        performed = not outcome.blocked_by and not outcome.fallback
        session.stats.side(combatant.id).record(
            damage_dealt=side.damage_dealt,
            damage_received=side.damage_taken,
            mana_used=side.mana_spent,
            healing_done=side.healing,
            critical_hits=1 if side.critical_hit else 0,
            ability=action.id if performed and action.type == ActionType.ABILITY else None,
            spell=action.id if performed and action.type == ActionType.SPELL else None,
        )
