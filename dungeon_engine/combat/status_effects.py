"""Status Effect Engine.

Handles timed effects on combatants:
- Damage over time (bleeding, poison, burning, decay)
- Control (stunned, paralyzed, frozen, petrified, silenced)
- Damage and armor modifiers (enraged, empowered, weakened, broken_armor)
- Recovery over time (regenerating, healing_rain, mana_rain, health_drain)

Durations count whole turns. An effect contributes its tick on the turn its
duration reaches zero and is removed right after; a duration of -1 never
expires.
"""

import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..data.models import EffectChance, EffectDefinition, WeaponType
from .actions import Action, ActionType

if TYPE_CHECKING:
    from ..data.catalog import GameCatalog
    from .combatant import Combatant

logger = logging.getLogger(__name__)

# Heal-over-time kinds that refresh their duration instead of stacking
REFRESHING_EFFECTS = frozenset({"regenerating", "mana_regenerating"})


class EffectKind(Enum):
    """Behavioural class of an effect."""

    DAMAGE_OVER_TIME = auto()
    CONTROL = auto()
    RECOVERY = auto()
    MODIFIER = auto()  # Damage, armor and crit modifiers
    SPECIAL = auto()


def classify(definition: EffectDefinition) -> EffectKind:
    if definition.is_control:
        return EffectKind.CONTROL
    if definition.damage_per_turn > 0:
        return EffectKind.DAMAGE_OVER_TIME
    if definition.health_per_turn > 0 or definition.mana_per_turn > 0 or definition.drain_amount > 0:
        return EffectKind.RECOVERY
    if (
        definition.damage_bonus
        or definition.damage_multiplier != 1.0
        or definition.damage_vulnerability != 1.0
        or definition.damage_reduction
        or definition.armor_reduction
        or definition.crit_bonus
    ):
        return EffectKind.MODIFIER
    return EffectKind.SPECIAL


@dataclass
class ActiveEffect:
    """
    An effect instance attached to a combatant.

    Attributes:
        effect_id: Catalog id of the effect.
        remaining: Turns left; -1 for permanent effects.
        definition: Catalog definition (magnitudes and flags).
        source_id: Combatant that applied it (drain target).
    """

    effect_id: str
    remaining: int
    definition: EffectDefinition
    source_id: Optional[str] = None

    @property
    def is_permanent(self) -> bool:
        return self.remaining < 0

    @property
    def kind(self) -> EffectKind:
        return classify(self.definition)


@dataclass
class TickSummary:
    """One combatant's effect contribution for a turn."""

    damage: int = 0
    healing: int = 0
    mana: int = 0
    # source combatant id -> health drained towards it
    drained: Dict[str, int] = field(default_factory=dict)
    expired: List[str] = field(default_factory=list)
    events: List[Dict[str, Any]] = field(default_factory=list)


class StatusEffectSystem:
    """
    Applies, ticks and queries effects on combatants.

    Effect lists live on the combatants themselves; the system is stateless
    apart from its catalog and random source.

    Usage:
        effects = StatusEffectSystem(catalog, rng)
        effects.apply_effect(target, "poisoned", source_id=attacker.id)
        summary, target.effects = effects.tick(target.effects)
    """

    def __init__(self, catalog: "GameCatalog", rng: Optional[random.Random] = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------

    def create_effect(
        self,
        effect_id: str,
        source_id: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Optional[ActiveEffect]:
        """Instantiate an effect from the catalog; None if the id is unknown."""
        definition = self.catalog.find_effect(effect_id)
        if definition is None:
            logger.warning("Unknown effect %r ignored", effect_id)
            return None
        remaining = definition.duration if duration is None else duration
        if remaining == 0:
            return None
        return ActiveEffect(
            effect_id=effect_id,
            remaining=remaining,
            definition=definition,
            source_id=source_id,
        )

    def apply_effect(
        self,
        target: "Combatant",
        effect_id: str,
        source_id: Optional[str] = None,
        duration: Optional[int] = None,
    ) -> Optional[ActiveEffect]:
        """
        Attach an effect to a combatant.

        Duplicates stack as separate instances, except refreshing
        heal-over-time effects which reset the existing instance's duration.
        Shielded combatants ignore new negative effects.

        Args:
            target: Combatant receiving the effect.
            effect_id: Catalog id.
            source_id: Applying combatant.
            duration: Optional duration override.

        Returns:
            The new or refreshed effect, or None if nothing was applied.
        """
        effect = self.create_effect(effect_id, source_id, duration)
        if effect is None:
            return None

        if effect.definition.type == "negative" and self.is_immune(target):
            logger.debug("%s is immune to %s", target.name, effect_id)
            return None

        if effect_id in REFRESHING_EFFECTS:
            for existing in target.effects:
                if existing.effect_id == effect_id:
                    if not existing.is_permanent:
                        existing.remaining = max(existing.remaining, effect.remaining)
                    return existing

        target.effects.append(effect)
        return effect

    def roll_chance(self, chance: EffectChance, rng: Optional[random.Random] = None) -> bool:
        """Roll an effect's percent chance once. Passive entries always apply."""
        if chance.passive or chance.chance is None:
            return True
        return (rng or self.rng).random() * 100 < chance.chance

    # ------------------------------------------------------------------
    # Turn boundary
    # ------------------------------------------------------------------

    def tick(self, effects: List[ActiveEffect]) -> Tuple[TickSummary, List[ActiveEffect]]:
        """
        Compute one turn of effect contributions.

        Every effect contributes its per-turn magnitude, then its duration
        is decremented; effects reaching zero are dropped from the returned
        list after contributing.

        Args:
            effects: Effects active at the start of the turn.

        Returns:
            (summary of deltas, next effect list)
        """
        summary = TickSummary()
        next_effects: List[ActiveEffect] = []

        for effect in effects:
            definition = effect.definition

            if definition.damage_per_turn:
                summary.damage += definition.damage_per_turn
                summary.events.append({
                    "type": "dot_damage",
                    "effect": effect.effect_id,
                    "damage": definition.damage_per_turn,
                })
            if definition.health_per_turn:
                summary.healing += definition.health_per_turn
                summary.events.append({
                    "type": "hot_healing",
                    "effect": effect.effect_id,
                    "healing": definition.health_per_turn,
                })
            if definition.mana_per_turn:
                summary.mana += definition.mana_per_turn
                summary.events.append({
                    "type": "mana_regen",
                    "effect": effect.effect_id,
                    "mana": definition.mana_per_turn,
                })
            if definition.drain_amount:
                summary.damage += definition.drain_amount
                if effect.source_id:
                    summary.drained[effect.source_id] = (
                        summary.drained.get(effect.source_id, 0) + definition.drain_amount
                    )
                summary.events.append({
                    "type": "drain",
                    "effect": effect.effect_id,
                    "damage": definition.drain_amount,
                    "source_id": effect.source_id,
                })

            if effect.is_permanent:
                next_effects.append(effect)
                continue

            remaining = effect.remaining - 1
            if remaining <= 0:
                summary.expired.append(effect.effect_id)
                summary.events.append({"type": "effect_expired", "effect": effect.effect_id})
            else:
                next_effects.append(
                    ActiveEffect(
                        effect_id=effect.effect_id,
                        remaining=remaining,
                        definition=definition,
                        source_id=effect.source_id,
                    )
                )

        return summary, next_effects

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_effect(self, combatant: "Combatant", effect_id: str) -> bool:
        return combatant.has_effect(effect_id)

    def blocking_effect(self, combatant: "Combatant", action: Action) -> Optional[str]:
        """
        Find an active control effect that forbids this action.

        Returns:
            The blocking effect id, or None if the action may proceed.
        """
        for effect in combatant.effects:
            definition = effect.definition
            if definition.disable_all_actions:
                return effect.effect_id
            if action.type == ActionType.WEAPON:
                if definition.disable_weapons:
                    return effect.effect_id
                if definition.disable_primary_weapon and (
                    action.id == combatant.primary_weapon or action.is_basic_attack
                ):
                    return effect.effect_id
                if definition.disable_magic and self._is_magic_weapon(action.id):
                    return effect.effect_id
            elif action.type == ActionType.SPELL and definition.disable_magic:
                return effect.effect_id
        return None

    def can_act(self, combatant: "Combatant") -> bool:
        return not any(e.definition.disable_all_actions for e in combatant.effects)

    def damage_modifiers(self, attacker: "Combatant") -> Tuple[int, float]:
        """Flat bonus and multiplier applied to outgoing direct damage."""
        bonus = 0
        multiplier = 1.0
        for effect in attacker.effects:
            bonus += effect.definition.damage_bonus
            multiplier *= effect.definition.damage_multiplier
        return bonus, multiplier

    def incoming_multiplier(self, target: "Combatant") -> float:
        """Multiplier on direct damage taken (vulnerability and reduction)."""
        multiplier = 1.0
        for effect in target.effects:
            multiplier *= effect.definition.damage_vulnerability
            multiplier *= 1.0 - effect.definition.damage_reduction
        return multiplier

    def crit_bonus(self, attacker: "Combatant") -> int:
        return sum(e.definition.crit_bonus for e in attacker.effects)

    def ignores_armor(self, attacker: "Combatant") -> bool:
        return any(e.definition.ignore_armor for e in attacker.effects)

    def effective_armor(self, target: "Combatant") -> int:
        """Armor after armor-break effects."""
        reduction = sum(e.definition.armor_reduction for e in target.effects)
        return max(0, round(target.armor * (1.0 - min(reduction, 1.0))))

    def is_untargetable(self, combatant: "Combatant") -> bool:
        return any(e.definition.untargetable for e in combatant.effects)

    def is_immune(self, combatant: "Combatant") -> bool:
        return any(e.definition.effect_immunity for e in combatant.effects)

    def _is_magic_weapon(self, weapon_id: str) -> bool:
        weapon = self.catalog.weapons.get(weapon_id)
        return weapon is not None and weapon.weapon_type == WeaponType.MAGIC
