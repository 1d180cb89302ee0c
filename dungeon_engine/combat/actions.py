"""Combat actions and the opponent action selector."""

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Optional, TYPE_CHECKING

from ..core.constants import BASIC_ATTACK_ID

if TYPE_CHECKING:
    from .combatant import Combatant


class ActionType(StrEnum):
    """Kind of action a combatant commits to for a turn."""

    WEAPON = "weapon"
    ABILITY = "ability"
    SPELL = "spell"
    NONE = "none"  # Replaced by a control effect


@dataclass(frozen=True)
class Action:
    """A tagged action: {type, id}."""

    type: ActionType
    id: str

    @classmethod
    def weapon(cls, weapon_id: str) -> "Action":
        return cls(ActionType.WEAPON, weapon_id)

    @classmethod
    def ability(cls, ability_id: str) -> "Action":
        return cls(ActionType.ABILITY, ability_id)

    @classmethod
    def spell(cls, spell_id: str) -> "Action":
        return cls(ActionType.SPELL, spell_id)

    @classmethod
    def basic_attack(cls) -> "Action":
        return cls(ActionType.WEAPON, BASIC_ATTACK_ID)

    @classmethod
    def no_op(cls) -> "Action":
        return cls(ActionType.NONE, "")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Action":
        """Build from {"type": ..., "id": ...} (also accepts "value" for the id)."""
        action_id = data.get("id", data.get("value"))
        return cls(ActionType(data["type"]), str(action_id))

    @property
    def is_basic_attack(self) -> bool:
        return self.type == ActionType.WEAPON and self.id == BASIC_ATTACK_ID

    @property
    def is_no_op(self) -> bool:
        return self.type == ActionType.NONE

    def __str__(self) -> str:
        if self.is_no_op:
            return "no-op"
        return f"{self.type.value}:{self.id}"


def select_opponent_action(
    combatant: "Combatant", rng: Optional[random.Random] = None
) -> Action:
    """
    Pick an action uniformly among everything the combatant can use.

    Args:
        combatant: The acting combatant (usually the monster).
        rng: Random source.

    Returns:
        A weapon, ability or spell action; a basic attack if the loadout is empty.
    """
    rng = rng or random.Random()
    actions = combatant.available_actions()
    if not actions:
        return Action.basic_attack()
    return rng.choice(actions)
