"""Special ability registry.

Special mechanics are keyed by ability id and run as an ordered pipeline of
override rules instead of a conditional chain inside the resolver:

- Interaction rules run before generic damage. Each rule fires for a side
  whose committed action is that ability and inspects the other side's
  incoming strike (counter, dodge, silence).
- Death-prevention rules run after damage, healing and effect ticks for a
  combatant at or below zero health that still has an unused ability of
  that id in its loadout.

Adding a mechanic means registering a handler; the resolver is unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.constants import ACCEPTING_FATE_MANA, COUNTER_DAMAGE, DODGE_HEAL, SILENCE_DAMAGE
from ..data.models import WeaponType
from .actions import ActionType

if TYPE_CHECKING:
    from .combatant import Combatant
    from .turn_resolver import ActionOutcome

logger = logging.getLogger(__name__)


@dataclass
class SpecialEvent:
    """A special interaction worth reporting (counter, dodge, death prevention...)."""

    kind: str
    combatant_id: str
    message: str
    amount: int = 0


# (own outcome, incoming outcome) -> event if the rule fired
InteractionHandler = Callable[["ActionOutcome", "ActionOutcome"], Optional[SpecialEvent]]
# combatant saved at 1 health -> extra message fragment
DeathPreventionHandler = Callable[["Combatant"], str]


class SpecialAbilityRegistry:
    """
    Ordered id -> handler tables for interaction and death-prevention rules.

    Usage:
        registry = SpecialAbilityRegistry()
        registry.register_interaction("counter", handle_counter)
        events = registry.resolve_interactions(player_outcome, opponent_outcome)
    """

    def __init__(self):
        self._interactions: Dict[str, InteractionHandler] = {}
        self._death_prevention: Dict[str, DeathPreventionHandler] = {}

    def register_interaction(self, ability_id: str, handler: InteractionHandler) -> None:
        self._interactions[ability_id] = handler

    def register_death_prevention(self, ability_id: str, handler: DeathPreventionHandler) -> None:
        self._death_prevention[ability_id] = handler

    def unregister(self, ability_id: str) -> None:
        self._interactions.pop(ability_id, None)
        self._death_prevention.pop(ability_id, None)

    def is_interaction(self, ability_id: str) -> bool:
        return ability_id in self._interactions

    def is_death_prevention(self, ability_id: str) -> bool:
        return ability_id in self._death_prevention

    @property
    def interaction_ids(self) -> List[str]:
        return list(self._interactions)

    @property
    def death_prevention_ids(self) -> List[str]:
        return list(self._death_prevention)

    def resolve_interactions(
        self, player: "ActionOutcome", opponent: "ActionOutcome"
    ) -> List[SpecialEvent]:
        """
        Run every interaction rule in registration order, checking both
        sides independently against the other side's incoming action.
        """
        events: List[SpecialEvent] = []
        pairs: Tuple[Tuple["ActionOutcome", "ActionOutcome"], ...] = (
            (player, opponent),
            (opponent, player),
        )
        for ability_id, handler in self._interactions.items():
            for own, incoming in pairs:
                action = own.action
                if action.type != ActionType.ABILITY or action.id != ability_id:
                    continue
                event = handler(own, incoming)
                if event is not None:
                    events.append(event)
        return events

    def prevent_death(self, combatant: "Combatant") -> Optional[SpecialEvent]:
        """
        Save a combatant at or below zero health with an unused prevention ability.

        The combatant ends at exactly 1 health and the ability is consumed
        for the rest of the session.
        """
        if combatant.health > 0:
            return None
        for ability_id, handler in self._death_prevention.items():
            if ability_id not in combatant.abilities or ability_id in combatant.consumed_abilities:
                continue
            combatant.health = 1
            combatant.consumed_abilities.add(ability_id)
            extra = handler(combatant)
            logger.info("Death prevented for %s by %s", combatant.id, ability_id)
            message = f"{combatant.name} was about to die, but {_title(ability_id)} activated!"
            if extra:
                message = f"{message} {extra}"
            return SpecialEvent(kind="death_prevention", combatant_id=combatant.id, message=message)
        return None


def _title(ability_id: str) -> str:
    return ability_id.replace("_", " ").title()


class SpecialAbilityHandlers:
    """Built-in special mechanics."""

    def register_all_handlers(self, registry: SpecialAbilityRegistry) -> SpecialAbilityRegistry:
        """Register all built-in handlers (evaluation order matters)."""
        interactions = {
            "counter": self.handle_counter,
            "dodge": self.handle_dodge,
            "silence": self.handle_silence,
        }
        for ability_id, handler in interactions.items():
            registry.register_interaction(ability_id, handler)

        death_prevention = {
            "accepting_fate": self.handle_accepting_fate,
            "immortal": self.handle_immortal,
        }
        for ability_id, handler in death_prevention.items():
            registry.register_death_prevention(ability_id, handler)

        return registry

    # ----- Interaction rules -----

    def handle_counter(self, own: "ActionOutcome", incoming: "ActionOutcome") -> Optional[SpecialEvent]:
        """Negate a melee weapon hit and deal fixed damage back."""
        strike = incoming.strike
        if strike is None or strike.negated_by or strike.source != ActionType.WEAPON:
            return None
        if strike.weapon_type != WeaponType.MELEE:
            return None
        strike.negated_by = "counter"
        own.reflect_damage += COUNTER_DAMAGE
        return SpecialEvent(
            kind="counter",
            combatant_id=own.actor_id,
            message=f"{own.actor_name} used Counter and dealt {COUNTER_DAMAGE} damage!",
            amount=COUNTER_DAMAGE,
        )

    def handle_dodge(self, own: "ActionOutcome", incoming: "ActionOutcome") -> Optional[SpecialEvent]:
        """Avoid a physical weapon hit and heal a little (more against ranged)."""
        strike = incoming.strike
        if strike is None or strike.negated_by or strike.source != ActionType.WEAPON:
            return None
        heal = DODGE_HEAL.get(strike.weapon_type)
        if heal is None:
            return None
        strike.negated_by = "dodge"
        own.bonus_heal += heal
        return SpecialEvent(
            kind="dodge",
            combatant_id=own.actor_id,
            message=f"{own.actor_name} used Dodge and healed {heal} health!",
            amount=heal,
        )

    def handle_silence(self, own: "ActionOutcome", incoming: "ActionOutcome") -> Optional[SpecialEvent]:
        """Negate magic damage and hurt the caster."""
        strike = incoming.strike
        if strike is None or strike.negated_by:
            return None
        is_magic = strike.source == ActionType.SPELL or strike.weapon_type == WeaponType.MAGIC
        if not is_magic:
            return None
        strike.negated_by = "silence"
        own.reflect_damage += SILENCE_DAMAGE
        return SpecialEvent(
            kind="silence",
            combatant_id=own.actor_id,
            message=(
                f"{own.actor_name} used Silence; {incoming.actor_name} "
                f"took {SILENCE_DAMAGE} damage!"
            ),
            amount=SILENCE_DAMAGE,
        )

    # ----- Death prevention rules -----

    def handle_accepting_fate(self, combatant: "Combatant") -> str:
        restored = combatant.change_mana(ACCEPTING_FATE_MANA)
        return f"{combatant.name} cheated death and restored {restored} mana."

    def handle_immortal(self, combatant: "Combatant") -> str:
        return f"{combatant.name} refuses to fall."


def default_registry() -> SpecialAbilityRegistry:
    """A registry with every built-in special mechanic."""
    return SpecialAbilityHandlers().register_all_handlers(SpecialAbilityRegistry())
