"""Combatant state.

A Combatant is the transient, per-encounter view of a hero or monster:
current resources, armor, loadout and active effects. It is owned by a
BattleSession and only mutated by the turn resolver.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Set, TYPE_CHECKING

from ..core.config import settings
from ..core.floor_scaling import monster_scaling_factor
from .actions import Action, ActionType

if TYPE_CHECKING:
    from ..data.models import Hero, Monster
    from .status_effects import ActiveEffect


@dataclass
class Combatant:
    """
    A participant in one battle.

    Health and mana are integers clamped to [0, max].
    """

    id: str
    name: str
    max_health: int
    health: int
    max_mana: int
    mana: int
    armor: int = 0
    crit_chance: int = field(default_factory=lambda: settings.BASE_CRIT_CHANCE)  # Percent

    # Loadout
    weapons: List[str] = field(default_factory=list)
    abilities: List[str] = field(default_factory=list)
    spells: List[str] = field(default_factory=list)

    effects: List["ActiveEffect"] = field(default_factory=list)

    # Single-use abilities already consumed this session
    consumed_abilities: Set[str] = field(default_factory=set)

    is_player: bool = False
    source_id: Optional[str] = None  # Hero or monster catalog id

    @classmethod
    def from_hero(cls, hero: "Hero", combatant_id: Optional[str] = None) -> "Combatant":
        """
        Create a full-health combatant from a hero definition.

        Args:
            hero: Hero catalog entry.
            combatant_id: Override the id (needed when both sides use the same hero).

        Returns:
            New Combatant flagged as a player.
        """
        return cls(
            id=combatant_id or hero.id,
            name=hero.name,
            max_health=hero.health,
            health=hero.health,
            max_mana=hero.mana,
            mana=hero.mana,
            armor=hero.armor,
            crit_chance=hero.crit_chance,
            weapons=list(hero.weapons),
            abilities=list(hero.abilities),
            spells=list(hero.spells),
            is_player=True,
            source_id=hero.id,
        )

    @classmethod
    def from_monster(
        cls, monster: "Monster", floor: int = 1, combatant_id: Optional[str] = None
    ) -> "Combatant":
        """
        Create a monster combatant with stats scaled for the floor.

        Health, mana and armor are multiplied by the monster scaling factor
        and rounded up.
        """
        factor = monster_scaling_factor(floor)
        health = math.ceil(monster.health * factor)
        mana = math.ceil(monster.mana * factor)
        return cls(
            id=combatant_id or monster.id,
            name=monster.name,
            max_health=health,
            health=health,
            max_mana=mana,
            mana=mana,
            armor=math.ceil(monster.armor * factor),
            crit_chance=monster.crit_chance,
            weapons=list(monster.weapons),
            abilities=list(monster.abilities),
            spells=list(monster.spells),
            source_id=monster.id,
        )

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def health_fraction(self) -> float:
        if self.max_health <= 0:
            return 0.0
        return self.health / self.max_health

    @property
    def primary_weapon(self) -> Optional[str]:
        return self.weapons[0] if self.weapons else None

    def available_actions(self) -> List[Action]:
        """Every action in the loadout, weapons first."""
        return (
            [Action.weapon(w) for w in self.weapons]
            + [Action.ability(a) for a in self.abilities]
            + [Action.spell(s) for s in self.spells]
        )

    def can_use(self, action: Action) -> bool:
        """Whether the action is in this combatant's loadout."""
        if action.is_basic_attack or action.is_no_op:
            return True
        if action.type == ActionType.WEAPON:
            return action.id in self.weapons
        if action.type == ActionType.ABILITY:
            return action.id in self.abilities
        if action.type == ActionType.SPELL:
            return action.id in self.spells
        return False

    def change_health(self, delta: int) -> int:
        """Apply a health delta, clamped to [0, max]. Returns the applied delta."""
        before = self.health
        self.health = max(0, min(self.max_health, self.health + delta))
        return self.health - before

    def change_mana(self, delta: int) -> int:
        before = self.mana
        self.mana = max(0, min(self.max_mana, self.mana + delta))
        return self.mana - before

    def has_effect(self, effect_id: str) -> bool:
        return any(e.effect_id == effect_id for e in self.effects)

    def __repr__(self) -> str:
        return f"Combatant({self.name}, hp={self.health}/{self.max_health}, mp={self.mana}/{self.max_mana})"
